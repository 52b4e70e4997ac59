# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class EngineState(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"
    QUERYING = "querying"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    NO_TEXT = ErrorInfo(
        "No extractable text found in document", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    LOAD_FAILED = ErrorInfo("Unable to index document", status.HTTP_502_BAD_GATEWAY)
    LOAD_SUPERSEDED = ErrorInfo(
        "Document load superseded by a newer upload", status.HTTP_409_CONFLICT
    )
    QUERY_FAILED = ErrorInfo(
        "Unable to search the document right now", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    NO_DOCUMENT = ErrorInfo("No document loaded", status.HTTP_404_NOT_FOUND)
    PAGE_NOT_FOUND = ErrorInfo("Page not found", status.HTTP_404_NOT_FOUND)
