# schemas/actividad.py
from __future__ import annotations

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from enums.enums import (
    TipoActividadEnum, NivelPrioridadEnum, EstadoActividadEnum, PeriodoTiempoEnum,
    TipoAlertaEnum, SeveridadAlertaEnum,
)


def _to_float(value) -> float | None:
    return float(value) if value is not None else None


# ============================================================================
# DTOs de Entrada (Create/Update)
# ============================================================================

class MetaIn(BaseModel):
    """Meta cuantificable de una actividad (p. ej. 50 bultos fertilizados)"""
    descripcion: str = Field(..., min_length=1, max_length=255)
    valor_objetivo: float = Field(..., allow_inf_nan=False)
    valor_actual: float = Field(0, allow_inf_nan=False)
    unidad: str = Field(..., min_length=1, max_length=50)


class ActividadCreate(BaseModel):
    """
    Crear nueva actividad planificada.

    NOTA: nombre, descripcion, fechas y duración son opcionales a nivel de
    esquema; las reglas de negocio (requeridos, orden de fechas, duración > 0)
    las valida el servicio para responder 400 con un mensaje claro.
    """
    nombre: str | None = Field(None, max_length=255)
    descripcion: str | None = None
    tipo: TipoActividadEnum
    prioridad: NivelPrioridadEnum = NivelPrioridadEnum.MEDIA
    fecha_inicio_planificada: datetime | None = None
    fecha_fin_planificada: datetime | None = None
    duracion_estimada_horas: float | None = None
    periodo: PeriodoTiempoEnum
    lote_id: int | None = None
    cultivo_id: int | None = None
    responsable_id: int | None = None
    notas: str | None = None
    trabajadores_asignados: list[int] = Field(default_factory=list)
    metas: list[MetaIn] = Field(default_factory=list)

    @field_validator("lote_id", "cultivo_id", "responsable_id")
    @classmethod
    def convert_zero_to_none(cls, v: int | None) -> int | None:
        """Convertir 0 a None (para IDs opcionales)"""
        if v == 0:
            return None
        return v

    @field_validator("trabajadores_asignados")
    @classmethod
    def validate_trabajadores(cls, v: list[int]) -> list[int]:
        """Filtrar ceros y rechazar duplicados"""
        v = [t for t in v if t != 0]
        if len(v) != len(set(v)):
            raise ValueError("No puede haber trabajadores duplicados en trabajadores_asignados")
        return v


class ActividadUpdate(BaseModel):
    """
    Actualización parcial. Solo se aplican los campos enviados.
    trabajadores_asignados y metas, si vienen, REEMPLAZAN la colección completa.
    """
    nombre: str | None = Field(None, max_length=255)
    descripcion: str | None = None
    tipo: TipoActividadEnum | None = None
    prioridad: NivelPrioridadEnum | None = None
    estado: EstadoActividadEnum | None = None
    fecha_inicio_planificada: datetime | None = None
    fecha_fin_planificada: datetime | None = None
    duracion_estimada_horas: float | None = None
    periodo: PeriodoTiempoEnum | None = None
    fecha_inicio_real: datetime | None = None
    fecha_fin_real: datetime | None = None
    duracion_real_horas: float | None = Field(None, allow_inf_nan=False)
    progreso_porcentaje: int | None = None
    lote_id: int | None = None
    cultivo_id: int | None = None
    responsable_id: int | None = None
    notas: str | None = None
    trabajadores_asignados: list[int] | None = None
    metas: list[MetaIn] | None = None

    @field_validator("lote_id", "cultivo_id", "responsable_id")
    @classmethod
    def convert_zero_to_none(cls, v: int | None) -> int | None:
        """0 desvincula el lote/cultivo/responsable"""
        if v == 0:
            return None
        return v

    @field_validator("trabajadores_asignados")
    @classmethod
    def validate_trabajadores(cls, v: list[int] | None) -> list[int] | None:
        """Validar que no haya duplicados en trabajadores_asignados"""
        if v is not None and len(v) != len(set(v)):
            raise ValueError("No puede haber trabajadores duplicados en trabajadores_asignados")
        return v


class ProgresoUpdate(BaseModel):
    """Registrar avance real de la actividad (operación rápida)"""
    progreso_porcentaje: int | None = None
    fecha_inicio_real: datetime | None = None
    fecha_fin_real: datetime | None = None
    duracion_real_horas: float | None = Field(None, allow_inf_nan=False)


# ============================================================================
# DTOs de Salida (Response)
# ============================================================================

class MetaOut(BaseModel):
    id: int
    actividad_id: int
    descripcion: str
    valor_objetivo: float
    valor_actual: float
    unidad: str
    cumplida: bool
    porcentaje_cumplimiento: int
    fecha_cumplimiento: datetime | None = None

    model_config = {"from_attributes": True}


class AlertaOut(BaseModel):
    id: int
    actividad_id: int
    tipo: TipoAlertaEnum
    severidad: SeveridadAlertaEnum
    titulo: str
    mensaje: str
    fecha_generacion: datetime
    leida: bool
    resuelta: bool
    fecha_resolucion: datetime | None = None

    model_config = {"from_attributes": True}


class AsignacionOut(BaseModel):
    trabajador_id: int
    nombre: str
    horas_planificadas: float
    horas_reales: float


class ActividadOut(BaseModel):
    """
    Actividad con relaciones resueltas.

    Es una vista desacoplada de la sesión: el servicio ajusta estado,
    desviación, requiere_atencion y metas sobre este objeto sin que el ORM
    lo persista.
    """
    id: int
    nombre: str
    descripcion: str
    tipo: TipoActividadEnum
    prioridad: NivelPrioridadEnum
    estado: EstadoActividadEnum
    fecha_inicio_planificada: datetime
    fecha_fin_planificada: datetime
    duracion_estimada_horas: float
    periodo: PeriodoTiempoEnum
    fecha_inicio_real: datetime | None = None
    fecha_fin_real: datetime | None = None
    duracion_real_horas: float | None = None
    progreso_porcentaje: int = 0
    lote_id: int | None = None
    lote_nombre: str | None = None
    cultivo_id: int | None = None
    cultivo_nombre: str | None = None
    responsable_id: int | None = None
    responsable_nombre: str | None = None
    desviacion_tiempo_dias: int = 0
    requiere_atencion: bool = False
    notas: str | None = None
    creado_por: int | None = None
    fecha_creacion: datetime
    ultima_actualizacion: datetime
    trabajadores_asignados: list[int] = Field(default_factory=list)
    trabajadores_nombres: list[str] = Field(default_factory=list)
    asignaciones: list[AsignacionOut] = Field(default_factory=list)
    metas: list[MetaOut] = Field(default_factory=list)
    alertas_activas: list[AlertaOut] = Field(default_factory=list)

    @classmethod
    def from_actividad(cls, actividad) -> "ActividadOut":
        """Constructor personalizado desde el modelo ActividadPlanificada"""
        asignaciones = [
            AsignacionOut(
                trabajador_id=a.trabajador_id,
                nombre=a.trabajador.nombre_completo if a.trabajador else "",
                horas_planificadas=float(a.horas_planificadas or 0),
                horas_reales=float(a.horas_reales or 0),
            )
            for a in actividad.trabajadores
        ]

        return cls(
            id=actividad.id,
            nombre=actividad.nombre,
            descripcion=actividad.descripcion,
            tipo=actividad.tipo,
            prioridad=actividad.prioridad,
            estado=actividad.estado,
            fecha_inicio_planificada=actividad.fecha_inicio_planificada,
            fecha_fin_planificada=actividad.fecha_fin_planificada,
            duracion_estimada_horas=float(actividad.duracion_estimada_horas),
            periodo=actividad.periodo,
            fecha_inicio_real=actividad.fecha_inicio_real,
            fecha_fin_real=actividad.fecha_fin_real,
            duracion_real_horas=_to_float(actividad.duracion_real_horas),
            progreso_porcentaje=actividad.progreso_porcentaje,
            lote_id=actividad.lote_id,
            lote_nombre=actividad.lote.nombre if actividad.lote else None,
            cultivo_id=actividad.cultivo_id,
            cultivo_nombre=actividad.cultivo.nombre if actividad.cultivo else None,
            responsable_id=actividad.responsable_id,
            responsable_nombre=actividad.responsable.nombre if actividad.responsable else None,
            desviacion_tiempo_dias=actividad.desviacion_tiempo_dias,
            requiere_atencion=actividad.requiere_atencion,
            notas=actividad.notas,
            creado_por=actividad.creado_por,
            fecha_creacion=actividad.fecha_creacion,
            ultima_actualizacion=actividad.ultima_actualizacion,
            trabajadores_asignados=[a.trabajador_id for a in asignaciones],
            trabajadores_nombres=[a.nombre for a in asignaciones],
            asignaciones=asignaciones,
            metas=[MetaOut.model_validate(m) for m in actividad.metas],
            alertas_activas=[AlertaOut.model_validate(a) for a in actividad.alertas_activas],
        )


class EstadisticasOut(BaseModel):
    total_actividades: int
    pendientes: int
    en_progreso: int
    completadas: int
    atrasadas: int
    canceladas: int
    progreso_promedio: float | None
    requieren_atencion: int
