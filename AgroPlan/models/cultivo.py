# models/cultivo.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, Integer, Text, DateTime, Boolean, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from utils.db import Base
from utils.datetime_utils import now_local
from enums.enums import TipoCultivoEnum


class Cultivo(Base):
    __tablename__ = "cultivos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    nombre_cientifico: Mapped[str | None] = mapped_column(String(255))
    tipo: Mapped[TipoCultivoEnum] = mapped_column(
        SAEnum(TipoCultivoEnum, native_enum=False, length=20, name="tipo_cultivo_enum",
               values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    ciclo_dias: Mapped[int] = mapped_column(Integer, nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    fecha_creacion: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
