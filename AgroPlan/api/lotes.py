# api/lotes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user

from models.usuario import Usuario

from schemas.lote import LoteCreate, LoteOut, CultivoOut
from services.lotes_service import list_lotes, get_lote, create_lote, list_cultivos

router = APIRouter(prefix="/lotes", tags=["Lotes"])
cultivos_router = APIRouter(prefix="/cultivos", tags=["Cultivos"])


@router.get("/", response_model=list[LoteOut], summary="Listar lotes")
def list_lotes_endpoint(
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return list_lotes(db)


@router.get("/{lote_id}", response_model=LoteOut, summary="Obtener lote")
def get_lote_endpoint(
        lote_id: int = Path(..., description="ID del lote"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_lote(db, lote_id)


@router.post(
    "/",
    response_model=LoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear lote",
    description="`codigo` único, `area_hectareas` > 0 y `cultivo_id` existente (si se envía).",
)
def create_lote_endpoint(
        data: LoteCreate,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return create_lote(db, data)


@cultivos_router.get("/", response_model=list[CultivoOut], summary="Listar cultivos activos")
def list_cultivos_endpoint(
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return list_cultivos(db)
