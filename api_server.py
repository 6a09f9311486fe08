from __future__ import annotations  # FastAPI server for the student interview assistant

import datetime as dt
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agents.bindings import bind_default_models
from api.admin import router as admin_router
from api.routes import router as interview_router
from config.settings import settings
from storage.migrate import migrate


logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent


def _config_path() -> Path:
    path = Path(settings.LLM_CONFIG_PATH)
    return path if path.is_absolute() else ROOT / path


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # Prepare storage and model bindings
    migrate(settings.DB_PATH)
    try:
        routes = bind_default_models(_config_path())
        logger.info("LLM routes bound: %s", ", ".join(f"{k}->{v.name}" for k, v in routes.items()))
    except (OSError, KeyError, ValueError) as exc:
        logger.warning("Failed to load LLM config: %s", exc)
    yield


app = FastAPI(title="Student Profile Assistant API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(interview_router)
app.include_router(admin_router)


@app.get("/health")
def health() -> Dict[str, str]:  # Liveness probe
    return {"status": "ok", "timestamp": dt.datetime.now(dt.timezone.utc).isoformat()}
