from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from enums.enums import TipoCultivoEnum


class CultivoOut(BaseModel):
    id: int
    nombre: str
    nombre_cientifico: str | None = None
    tipo: TipoCultivoEnum
    ciclo_dias: int
    descripcion: str | None = None
    activo: bool

    model_config = {"from_attributes": True}


class LoteCreate(BaseModel):
    codigo: str = Field(..., max_length=50)
    nombre: str = Field(..., max_length=255)
    area_hectareas: float = Field(..., allow_inf_nan=False)
    cultivo_id: int | None = None
    descripcion: str | None = None
    notas: str | None = None

    @field_validator("cultivo_id")
    @classmethod
    def convert_zero_to_none(cls, v: int | None) -> int | None:
        if v == 0:
            return None
        return v


class LoteOut(BaseModel):
    id: int
    codigo: str
    nombre: str
    area_hectareas: float
    cultivo_id: int | None = None
    cultivo_nombre: str | None = None
    descripcion: str | None = None
    notas: str | None = None
    fecha_creacion: datetime

    @classmethod
    def from_lote(cls, lote) -> "LoteOut":
        return cls(
            id=lote.id,
            codigo=lote.codigo,
            nombre=lote.nombre,
            area_hectareas=float(lote.area_hectareas),
            cultivo_id=lote.cultivo_id,
            cultivo_nombre=lote.cultivo.nombre if lote.cultivo else None,
            descripcion=lote.descripcion,
            notas=lote.notas,
            fecha_creacion=lote.fecha_creacion,
        )
