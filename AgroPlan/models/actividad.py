# models/actividad.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import (
    Integer, DateTime, ForeignKey, String, Text, Numeric, Boolean, Enum as SAEnum, and_
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base
from utils.datetime_utils import now_local
from enums.enums import (
    TipoActividadEnum, NivelPrioridadEnum, EstadoActividadEnum, PeriodoTiempoEnum,
    TipoAlertaEnum, SeveridadAlertaEnum,
)


def _enum_column(enum_cls, name: str, length: int = 20) -> SAEnum:
    return SAEnum(enum_cls, native_enum=False, length=length, name=name)


class ActividadPlanificada(Base):
    """
    Actividad agrícola planificada (siembra, riego, fumigación, ...).

    Características:
    - El estado se deriva de fechas y progreso en cada lectura (ver
      services/planificacion_service.py); lo almacenado puede ir un paso atrás
    - Trabajadores asignados vía actividad_trabajadores, con las horas
      estimadas repartidas en partes iguales
    - Metas (1:N) y alertas (1:N) se eliminan en cascada con la actividad
    """
    __tablename__ = "actividades_planificadas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Información básica
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str] = mapped_column(Text, nullable=False)

    # Clasificación
    tipo: Mapped[TipoActividadEnum] = mapped_column(
        _enum_column(TipoActividadEnum, "tipo_actividad_enum"), nullable=False
    )
    prioridad: Mapped[NivelPrioridadEnum] = mapped_column(
        _enum_column(NivelPrioridadEnum, "nivel_prioridad_enum"),
        default=NivelPrioridadEnum.MEDIA,
        nullable=False,
        index=True
    )
    estado: Mapped[EstadoActividadEnum] = mapped_column(
        _enum_column(EstadoActividadEnum, "estado_actividad_enum"),
        default=EstadoActividadEnum.PENDIENTE,
        nullable=False,
        index=True
    )

    # Planificación
    fecha_inicio_planificada: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    fecha_fin_planificada: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    duracion_estimada_horas: Mapped[float] = mapped_column(Numeric(8, 2), nullable=False)
    periodo: Mapped[PeriodoTiempoEnum] = mapped_column(
        _enum_column(PeriodoTiempoEnum, "periodo_tiempo_enum"), nullable=False
    )

    # Ejecución real
    fecha_inicio_real: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    fecha_fin_real: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    duracion_real_horas: Mapped[float | None] = mapped_column(Numeric(8, 2))
    progreso_porcentaje: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Vínculos opcionales
    lote_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("lotes.id", ondelete="SET NULL"), nullable=True, index=True
    )
    cultivo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("cultivos.id", ondelete="SET NULL"), nullable=True
    )
    responsable_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True
    )

    # Seguimiento
    desviacion_tiempo_dias: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    requiere_atencion: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notas: Mapped[str | None] = mapped_column(Text)

    # Auditoría (creado_por puede ser NULL: creación sin sesión)
    creado_por: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True
    )
    fecha_creacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=now_local,
        nullable=False
    )
    ultima_actualizacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=now_local,
        onupdate=now_local,
        nullable=False
    )

    # Relationships
    lote: Mapped["Lote | None"] = relationship("Lote", foreign_keys=[lote_id])
    cultivo: Mapped["Cultivo | None"] = relationship("Cultivo", foreign_keys=[cultivo_id])
    responsable: Mapped["Usuario | None"] = relationship("Usuario", foreign_keys=[responsable_id])

    trabajadores: Mapped[list["ActividadTrabajador"]] = relationship(
        "ActividadTrabajador",
        back_populates="actividad",
        cascade="all, delete-orphan",
        order_by="ActividadTrabajador.id",
    )
    metas: Mapped[list["ActividadMeta"]] = relationship(
        "ActividadMeta",
        back_populates="actividad",
        cascade="all, delete-orphan",
        order_by="ActividadMeta.id",
    )
    alertas: Mapped[list["Alerta"]] = relationship(
        "Alerta",
        back_populates="actividad",
        cascade="all, delete-orphan",
    )
    alertas_activas: Mapped[list["Alerta"]] = relationship(
        "Alerta",
        primaryjoin=lambda: and_(
            Alerta.actividad_id == ActividadPlanificada.id,
            Alerta.resuelta == False,  # noqa: E712
        ),
        order_by=lambda: Alerta.fecha_generacion.desc(),
        viewonly=True,
    )


class ActividadTrabajador(Base):
    """
    Trabajador asignado a una actividad.

    horas_planificadas = duracion_estimada_horas / número de asignados; se
    recalcula cada vez que cambian los asignados o la duración.
    """
    __tablename__ = "actividad_trabajadores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actividad_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("actividades_planificadas.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    trabajador_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trabajadores.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    horas_planificadas: Mapped[float] = mapped_column(Numeric(8, 2), default=0, nullable=False)
    horas_reales: Mapped[float] = mapped_column(Numeric(8, 2), default=0, nullable=False)

    actividad: Mapped["ActividadPlanificada"] = relationship("ActividadPlanificada", back_populates="trabajadores")
    trabajador: Mapped["Trabajador"] = relationship("Trabajador")


class ActividadMeta(Base):
    __tablename__ = "actividad_metas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actividad_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("actividades_planificadas.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    descripcion: Mapped[str] = mapped_column(String(255), nullable=False)
    valor_objetivo: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    valor_actual: Mapped[float] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    unidad: Mapped[str] = mapped_column(String(50), nullable=False)
    # Columnas heredadas del esquema; el servicio las recalcula al leer
    cumplida: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    porcentaje_cumplimiento: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    fecha_cumplimiento: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))

    actividad: Mapped["ActividadPlanificada"] = relationship("ActividadPlanificada", back_populates="metas")


class Alerta(Base):
    __tablename__ = "alertas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actividad_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("actividades_planificadas.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    tipo: Mapped[TipoAlertaEnum] = mapped_column(_enum_column(TipoAlertaEnum, "tipo_alerta_enum"), nullable=False)
    severidad: Mapped[SeveridadAlertaEnum] = mapped_column(
        _enum_column(SeveridadAlertaEnum, "severidad_alerta_enum", length=10),
        default=SeveridadAlertaEnum.INFO,
        nullable=False
    )
    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    mensaje: Mapped[str] = mapped_column(Text, nullable=False)
    fecha_generacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), default=now_local, nullable=False, index=True
    )
    leida: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    resuelta: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    fecha_resolucion: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))

    actividad: Mapped["ActividadPlanificada"] = relationship("ActividadPlanificada", back_populates="alertas")
