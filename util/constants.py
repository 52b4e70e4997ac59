class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    HEALTH = "/healthz"
    DOCUMENTS = V1 + "/documents"
    QUERY = V1 + "/query"
    STATUS = V1 + "/status"
    PAGE_PREVIEW = V1 + "/pages/{page}/preview"


PNG_MEDIA_TYPE = "image/png"
