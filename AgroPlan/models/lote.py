# models/lote.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, Integer, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base
from utils.datetime_utils import now_local


class Lote(Base):
    """Parcela de la finca. El módulo de planificación solo necesita su nombre."""
    __tablename__ = "lotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codigo: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    area_hectareas: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    cultivo_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("cultivos.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    notas: Mapped[str | None] = mapped_column(Text)
    fecha_creacion: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    fecha_ultima_modificacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, onupdate=now_local, nullable=False
    )

    cultivo: Mapped["Cultivo | None"] = relationship("Cultivo", foreign_keys=[cultivo_id])
