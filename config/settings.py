# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(
        default="http://localhost:3000", validation_alias="ALLOWED_ORIGIN"
    )
    MAX_FILE_MB: int = Field(default=25, validation_alias="MAX_FILE_MB")

    # Embedding Engine
    EMBEDDING_MODEL_NAME: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        validation_alias="EMBEDDING_MODEL_NAME",
    )
    EMBEDDING_DEVICE: str = Field(default="cpu", validation_alias="EMBEDDING_DEVICE")
    # Hub identifiers only; filesystem paths are refused unless this is set.
    ALLOW_LOCAL_MODELS: bool = Field(default=False, validation_alias="ALLOW_LOCAL_MODELS")
    WARM_MODEL_ON_STARTUP: bool = Field(
        default=False, validation_alias="WARM_MODEL_ON_STARTUP"
    )

    # Retrieval
    CHUNK_SIZE: int = Field(default=700, gt=0, validation_alias="CHUNK_SIZE")
    CHUNK_OVERLAP: int = Field(default=150, ge=0, validation_alias="CHUNK_OVERLAP")
    TOP_K: int = Field(default=5, gt=0, validation_alias="TOP_K")

    # Preview
    PREVIEW_ZOOM: float = Field(default=0.9, gt=0, validation_alias="PREVIEW_ZOOM")

    # Logging knobs
    LOGGER_NAME: str = "pdf-query-assistant"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
    if settings.CHUNK_OVERLAP >= settings.CHUNK_SIZE:
        raise ValueError("CHUNK_OVERLAP must be smaller than CHUNK_SIZE")
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
