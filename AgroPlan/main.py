import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from config.logging_config import configure_logging
from api.router import api_router
from utils.errors import install_error_handlers

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AgroPlan API",
    description="Planificación de actividades agrícolas por lote, cultivo y trabajador",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)
app.include_router(api_router)
logger.info("AgroPlan API lista (zona horaria %s)", settings.APP_TIMEZONE)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok", "timezone": settings.APP_TIMEZONE}
