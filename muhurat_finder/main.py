import logging

from fastapi import FastAPI

from muhurat_finder.api.routes.muhurat import router as muhurat_router
from muhurat_finder.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)

app = FastAPI(title="Muhurat Finder API")

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.APP_ENV, "ephemeris": settings.EPHEMERIS_BACKEND}

app.include_router(muhurat_router, prefix="/api/v1")
