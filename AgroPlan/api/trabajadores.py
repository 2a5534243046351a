# api/trabajadores.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user

from models.usuario import Usuario

from schemas.trabajador import TrabajadorCreate, TrabajadorUpdate, TrabajadorOut
from services.trabajadores_service import (
    list_trabajadores, get_trabajador, create_trabajador, update_trabajador
)

router = APIRouter(prefix="/trabajadores", tags=["Trabajadores"])


@router.get(
    "/",
    response_model=list[TrabajadorOut],
    summary="Listar trabajadores",
)
def list_trabajadores_endpoint(
        q: str | None = Query(None, description="Busca en nombres, apellidos y documento"),
        solo_activos: bool = Query(False),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return list_trabajadores(db, q=q, solo_activos=solo_activos)


@router.get("/{trabajador_id}", response_model=TrabajadorOut, summary="Obtener trabajador")
def get_trabajador_endpoint(
        trabajador_id: int = Path(..., description="ID del trabajador"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_trabajador(db, trabajador_id)


@router.post(
    "/",
    response_model=TrabajadorOut,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar trabajador",
    description=(
            "**Validaciones:**\n"
            "- `nombres` y `apellidos` de al menos 2 caracteres, `cargo` de al menos 3\n"
            "- `documento` de al menos 5 caracteres y único\n"
            "- `email`, si se envía, con formato válido y único"
    )
)
def create_trabajador_endpoint(
        data: TrabajadorCreate,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return create_trabajador(db, data)


@router.put("/{trabajador_id}", response_model=TrabajadorOut, summary="Actualizar trabajador")
def update_trabajador_endpoint(
        trabajador_id: int = Path(..., description="ID del trabajador"),
        data: TrabajadorUpdate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return update_trabajador(db, trabajador_id, data)
