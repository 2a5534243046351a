from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field


class TrabajadorCreate(BaseModel):
    nombres: str
    apellidos: str
    documento: str
    cargo: str
    telefono: str | None = Field(None, max_length=20)
    email: str | None = None


class TrabajadorUpdate(BaseModel):
    """Solo se aplican los campos enviados"""
    nombres: str | None = None
    apellidos: str | None = None
    documento: str | None = None
    cargo: str | None = None
    telefono: str | None = Field(None, max_length=20)
    email: str | None = None
    activo: bool | None = None


class TrabajadorOut(BaseModel):
    id: int
    nombres: str
    apellidos: str
    nombre_completo: str
    documento: str
    cargo: str
    telefono: str | None = None
    email: str | None = None
    activo: bool
    fecha_creacion: datetime

    model_config = {"from_attributes": True}
