import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from examprep import __version__
from examprep.api.routes import router as study_router
from examprep.config import get_settings
from examprep.logging_config import configure_logging

_settings = get_settings()
configure_logging(log_dir=_settings.log_dir, level=_settings.log_level)

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Exam Prep API", version=__version__)
app.include_router(study_router)


@app.on_event("startup")
async def _log_startup() -> None:
    LOGGER.info(
        "Exam prep API starting (provider=%s, upload limit=%s bytes)",
        _settings.llm_provider,
        _settings.max_upload_bytes,
    )


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"


@app.get("/healthz", response_class=PlainTextResponse)
def healthcheck() -> str:
    """Liveness probe used by container orchestrators."""
    return "ok"
