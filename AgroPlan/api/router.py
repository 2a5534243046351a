from fastapi import APIRouter
from .planificacion import router as planificacion_router
from .trabajadores import router as trabajadores_router
from .lotes import router as lotes_router, cultivos_router

api_router = APIRouter()
api_router.include_router(planificacion_router)
api_router.include_router(trabajadores_router)
api_router.include_router(lotes_router)
api_router.include_router(cultivos_router)
