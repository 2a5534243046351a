# services/planificacion_service.py
"""
Servicio de planificación de actividades agrícolas.
Consumido por api/planificacion.py

Responsabilidades:
- Validar entradas (nombre, fechas, duración, progreso, trabajadores)
- Orquestar escrituras en services/actividad_store.py
- Derivar el estado de cada actividad a partir de fechas y progreso

El estado almacenado NO es la fuente de verdad: en cada lectura se recalcula
con `calcular_estado` y, si difiere, `reconciliar_actividad` lo escribe de
vuelta. Así el campo persistido sirve para filtros y estadísticas y se corrige
en la siguiente lectura.

Todas las operaciones aceptan `now` (naive en hora local o aware) para poder
evaluar la derivación de forma determinista; por defecto se usa el reloj.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, NamedTuple

from sqlalchemy.orm import Session

from enums.enums import EstadoActividadEnum
from schemas.actividad import ActividadCreate, ActividadOut, ActividadUpdate, MetaOut, ProgresoUpdate
from services import actividad_store
from utils.datetime_utils import ceil_days, now_local, to_local_naive
from utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CAMPOS_FECHA = ("fecha_inicio_planificada", "fecha_fin_planificada", "fecha_inicio_real", "fecha_fin_real")

# Columnas NOT NULL que una actualización parcial no puede dejar en null
CAMPOS_NO_NULOS = ("descripcion", "tipo", "prioridad", "estado", "periodo")


class EstadoDerivado(NamedTuple):
    estado: EstadoActividadEnum
    requiere_atencion: bool
    desviacion_tiempo_dias: int


# ============================================================================
# Derivación de estado
# ============================================================================

def _redondear(valor: float) -> int:
    """Redondeo half-up (12.5 -> 13), no el redondeo bancario de round()"""
    return int(math.floor(valor + 0.5))


def _resolver_now(now: datetime | None) -> datetime:
    return to_local_naive(now) if now is not None else now_local()


def calcular_desviacion_dias(actividad: ActividadOut, now: datetime) -> int | None:
    """
    Días entre el fin real (o `now` si sigue abierta) y el fin planificado.
    None si la actividad no ha iniciado realmente.
    """
    if actividad.fecha_inicio_real is None:
        return None
    fin_referencia = actividad.fecha_fin_real or now
    return ceil_days(fin_referencia - actividad.fecha_fin_planificada)


def calcular_estado(actividad: ActividadOut, now: datetime) -> EstadoDerivado:
    """
    Estado que le corresponde a la actividad en `now`. Función pura.

    Reglas (gana la primera):
    1. progreso == 100                                  -> COMPLETADA
    2. now > fin y progreso < 100                       -> ATRASADA (+ requiere_atencion)
    3. inicio <= now <= fin y progreso > 0              -> EN_PROGRESO
    4. now < inicio                                     -> PENDIENTE
    5. ninguna                                          -> se conserva el estado actual

    Con now == fin exacto y progreso < 100 no aplica la regla 2 (comparación
    estricta): cae en la 3 si hay progreso, o conserva el estado.
    """
    inicio = actividad.fecha_inicio_planificada
    fin = actividad.fecha_fin_planificada
    progreso = actividad.progreso_porcentaje
    requiere_atencion = actividad.requiere_atencion

    if progreso == 100:
        estado = EstadoActividadEnum.COMPLETADA
    elif now > fin and progreso < 100:
        estado = EstadoActividadEnum.ATRASADA
        requiere_atencion = True
    elif inicio <= now <= fin and progreso > 0:
        estado = EstadoActividadEnum.EN_PROGRESO
    elif now < inicio:
        estado = EstadoActividadEnum.PENDIENTE
    else:
        estado = actividad.estado

    desviacion = calcular_desviacion_dias(actividad, now)
    if desviacion is None:
        desviacion = actividad.desviacion_tiempo_dias

    return EstadoDerivado(estado, requiere_atencion, desviacion)


def recalcular_meta(meta: MetaOut) -> None:
    """porcentaje = min(100, round(actual / objetivo * 100)); cumplida = actual >= objetivo"""
    if meta.valor_objetivo > 0:
        meta.porcentaje_cumplimiento = min(100, _redondear(meta.valor_actual / meta.valor_objetivo * 100))
        meta.cumplida = meta.valor_actual >= meta.valor_objetivo


def reconciliar_actividad(db: Session, actividad: ActividadOut, now: datetime | None = None) -> bool:
    """
    Aplica la derivación sobre `actividad` y escribe de vuelta el estado si cambió.

    La bandera requiere_atencion solo se persiste cuando la derivación la
    levanta; nunca se limpia aquí. Las metas y la desviación se recalculan
    solo en memoria.

    Retorna True si hubo escritura en la base de datos.
    """
    now = _resolver_now(now)
    derivado = calcular_estado(actividad, now)

    actividad.desviacion_tiempo_dias = derivado.desviacion_tiempo_dias

    levanta_atencion = derivado.requiere_atencion and not actividad.requiere_atencion
    escrito = False
    if derivado.estado != actividad.estado or levanta_atencion:
        actividad_store.update_estado(
            db,
            actividad.id,
            derivado.estado,
            requiere_atencion=True if levanta_atencion else None,
        )
        logger.info(
            "Actividad %s: estado %s -> %s",
            actividad.id, actividad.estado.value, derivado.estado.value,
        )
        actividad.estado = derivado.estado
        actividad.requiere_atencion = derivado.requiere_atencion
        escrito = True

    for meta in actividad.metas:
        recalcular_meta(meta)

    return escrito


# ============================================================================
# Validaciones
# ============================================================================

def _es_vacio(valor: str | None) -> bool:
    return valor is None or not valor.strip()


def _validar_orden_fechas(inicio: datetime, fin: datetime) -> None:
    if to_local_naive(fin) <= to_local_naive(inicio):
        raise ValidationError("La fecha de fin debe ser posterior a la fecha de inicio")


def _validar_progreso(progreso: int | None) -> None:
    if progreso is None or progreso < 0 or progreso > 100:
        raise ValidationError("El progreso debe estar entre 0 y 100")


def _validar_duracion(duracion: float | None) -> None:
    if duracion is None or not math.isfinite(duracion) or duracion <= 0:
        raise ValidationError("La duración estimada debe ser mayor a 0")


def _validar_trabajadores(db: Session, trabajador_ids: list[int] | None) -> None:
    faltantes = actividad_store.trabajadores_inexistentes(db, trabajador_ids or [])
    if faltantes:
        raise ValidationError(f"Trabajadores no encontrados: {faltantes}")


def _normalizar_fechas(payload: dict[str, Any]) -> dict[str, Any]:
    for campo in CAMPOS_FECHA:
        if payload.get(campo) is not None:
            payload[campo] = to_local_naive(payload[campo])
    return payload


# ============================================================================
# Lecturas
# ============================================================================

def get_all_actividades(db: Session, now: datetime | None = None) -> list[ActividadOut]:
    now = _resolver_now(now)
    actividades = actividad_store.find_all(db)
    for actividad in actividades:
        reconciliar_actividad(db, actividad, now)
    return actividades


def get_actividad_by_id(db: Session, actividad_id: int, now: datetime | None = None) -> ActividadOut:
    actividad = actividad_store.find_by_id(db, actividad_id)
    if actividad is None:
        raise NotFoundError("Actividad no encontrada")

    reconciliar_actividad(db, actividad, now)
    return actividad


def get_actividades_por_lote(db: Session, lote_id: int, now: datetime | None = None) -> list[ActividadOut]:
    now = _resolver_now(now)
    actividades = actividad_store.find_by_lote(db, lote_id)
    for actividad in actividades:
        reconciliar_actividad(db, actividad, now)
    return actividades


def get_estadisticas(db: Session) -> dict[str, Any]:
    return actividad_store.get_estadisticas(db)


# ============================================================================
# Escrituras
# ============================================================================

def create_actividad(
        db: Session,
        data: ActividadCreate,
        usuario_id: int | None,
        now: datetime | None = None,
) -> ActividadOut:
    """
    Crear nueva actividad planificada.

    Pasos:
    1. Validar nombre/descripcion no vacíos, fechas presentes y ordenadas, duración > 0
    2. Validar que los trabajadores asignados existan
    3. Insertar actividad + asignaciones + metas (una transacción)
    4. Retornar la actividad ya derivada
    """
    if _es_vacio(data.nombre):
        raise ValidationError("El nombre de la actividad es requerido")
    if _es_vacio(data.descripcion):
        raise ValidationError("La descripción es requerida")
    if data.fecha_inicio_planificada is None or data.fecha_fin_planificada is None:
        raise ValidationError("Las fechas de inicio y fin son requeridas")
    _validar_orden_fechas(data.fecha_inicio_planificada, data.fecha_fin_planificada)
    _validar_duracion(data.duracion_estimada_horas)
    _validar_trabajadores(db, data.trabajadores_asignados)

    payload = _normalizar_fechas(data.model_dump())
    payload["nombre"] = payload["nombre"].strip()

    actividad_id = actividad_store.create(db, payload, usuario_id)
    logger.info("Actividad %s creada por usuario %s", actividad_id, usuario_id)

    return get_actividad_by_id(db, actividad_id, now)


def update_actividad(
        db: Session,
        actividad_id: int,
        data: ActividadUpdate,
        now: datetime | None = None,
) -> ActividadOut:
    """
    Actualizar actividad (solo los campos enviados).

    - trabajadores_asignados / metas enviados reemplazan la colección completa
    - Si solo llega una de las fechas planificadas, se valida contra la almacenada
    """
    actual = actividad_store.find_by_id(db, actividad_id)
    if actual is None:
        raise NotFoundError("Actividad no encontrada")

    payload = data.model_dump(exclude_unset=True)
    for coleccion in ("trabajadores_asignados", "metas"):
        if coleccion in payload and payload[coleccion] is None:
            payload.pop(coleccion)

    if "nombre" in payload:
        if _es_vacio(payload["nombre"]):
            raise ValidationError("El nombre no puede estar vacío")
        payload["nombre"] = payload["nombre"].strip()

    for campo in CAMPOS_NO_NULOS:
        if campo in payload and payload[campo] is None:
            raise ValidationError(f"El campo {campo} no puede ser nulo")

    if "fecha_inicio_planificada" in payload or "fecha_fin_planificada" in payload:
        inicio = payload.get("fecha_inicio_planificada", actual.fecha_inicio_planificada)
        fin = payload.get("fecha_fin_planificada", actual.fecha_fin_planificada)
        if inicio is None or fin is None:
            raise ValidationError("Las fechas de inicio y fin son requeridas")
        _validar_orden_fechas(inicio, fin)

    if "duracion_estimada_horas" in payload:
        _validar_duracion(payload["duracion_estimada_horas"])

    if "progreso_porcentaje" in payload:
        _validar_progreso(payload["progreso_porcentaje"])

    if "trabajadores_asignados" in payload:
        _validar_trabajadores(db, payload["trabajadores_asignados"])

    _normalizar_fechas(payload)

    if not actividad_store.update(db, actividad_id, payload):
        raise NotFoundError("Actividad no encontrada")
    logger.info("Actividad %s actualizada (%s)", actividad_id, ", ".join(sorted(payload)) or "sin cambios")

    return get_actividad_by_id(db, actividad_id, now)


def update_progreso(
        db: Session,
        actividad_id: int,
        data: ProgresoUpdate,
        now: datetime | None = None,
) -> ActividadOut:
    """
    Registrar avance real: progreso, fechas reales y horas reales.

    Lógica automática (pista previa a la derivación):
    - progreso == 100 -> estado COMPLETADA
    - progreso > 0    -> estado EN_PROGRESO
    La lectura posterior vuelve a derivar el estado.
    """
    if not actividad_store.exists(db, actividad_id):
        raise NotFoundError("Actividad no encontrada")

    payload = data.model_dump(exclude_unset=True)

    if "progreso_porcentaje" in payload:
        _validar_progreso(payload["progreso_porcentaje"])
        progreso = payload["progreso_porcentaje"]
        if progreso == 100:
            payload["estado"] = EstadoActividadEnum.COMPLETADA
        elif progreso > 0:
            payload["estado"] = EstadoActividadEnum.EN_PROGRESO

    _normalizar_fechas(payload)

    if not actividad_store.update(db, actividad_id, payload):
        raise NotFoundError("Actividad no encontrada")
    logger.info("Actividad %s: progreso registrado %s", actividad_id, payload.get("progreso_porcentaje"))

    return get_actividad_by_id(db, actividad_id, now)


def delete_actividad(db: Session, actividad_id: int) -> None:
    """Eliminar actividad. CASCADE elimina asignaciones, metas y alertas."""
    if not actividad_store.exists(db, actividad_id):
        raise NotFoundError("Actividad no encontrada")

    actividad_store.delete(db, actividad_id)
    logger.info("Actividad %s eliminada", actividad_id)
