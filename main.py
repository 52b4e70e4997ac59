# main.py
import asyncio
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from core.embedding_service import get_embedding_service
from util.constants import InternalURIs
from util.errors import EmbeddingFailure
from util.logger import init_logger


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    logger = init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    if settings.WARM_MODEL_ON_STARTUP:
        try:
            # Pay the model download/load before the first upload does
            await asyncio.to_thread(get_embedding_service().initialize)
        except EmbeddingFailure:
            logger.error("startup.model.warm.error", exc_info=True)
            raise
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,  # Allow cookies and other credentials
    allow_methods=["GET", "POST"],  # Allowed HTTP Methods
    allow_headers=["Authorization", "Content-Type", "Accept"],  # Allowed HTTP Headers
)


@app.get(InternalURIs.HEALTH)
async def healthz():
    return {"ok": True, "modelLoaded": get_embedding_service().is_initialized}


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
