# services/actividad_store.py
"""
Acceso a datos de actividades planificadas.

Sin lógica de negocio: el servicio de planificación valida y deriva estados;
aquí solo se lee y escribe. Las lecturas devuelven ActividadOut (vista
desacoplada de la sesión) para que los cálculos en memoria del servicio no
terminen persistidos por el unit of work.

Las escrituras multi-tabla (create/update) corren en una sola transacción
vía utils.transactions.uow: si falla cualquier INSERT, se revierte todo.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload

from enums.enums import EstadoActividadEnum
from models.actividad import ActividadPlanificada, ActividadTrabajador, ActividadMeta
from models.trabajador import Trabajador
from schemas.actividad import ActividadOut
from utils.transactions import uow

# Columnas escalares que acepta update(); el resto de claves se ignora
CAMPOS_ACTUALIZABLES = (
    "nombre", "descripcion", "tipo", "prioridad", "estado",
    "fecha_inicio_planificada", "fecha_fin_planificada", "duracion_estimada_horas", "periodo",
    "fecha_inicio_real", "fecha_fin_real", "duracion_real_horas", "progreso_porcentaje",
    "lote_id", "cultivo_id", "responsable_id", "notas",
)


# ============================================================================
# Helpers Privados
# ============================================================================

def _query_con_relaciones(db: Session):
    """Actividades con lote, cultivo, responsable, trabajadores, metas y alertas (evita N+1)"""
    return db.query(ActividadPlanificada).options(
        joinedload(ActividadPlanificada.lote),
        joinedload(ActividadPlanificada.cultivo),
        joinedload(ActividadPlanificada.responsable),
        selectinload(ActividadPlanificada.trabajadores).joinedload(ActividadTrabajador.trabajador),
        selectinload(ActividadPlanificada.metas),
        selectinload(ActividadPlanificada.alertas_activas),
    )


def _horas_por_trabajador(duracion_horas, cantidad: int) -> float:
    return float(duracion_horas or 0) / cantidad


def _asignar_trabajadores(actividad: ActividadPlanificada, trabajador_ids: list[int]) -> None:
    """Reemplaza las asignaciones repartiendo la duración estimada en partes iguales"""
    if not trabajador_ids:
        actividad.trabajadores = []
        return

    horas = _horas_por_trabajador(actividad.duracion_estimada_horas, len(trabajador_ids))
    actividad.trabajadores = [
        ActividadTrabajador(trabajador_id=trabajador_id, horas_planificadas=horas)
        for trabajador_id in trabajador_ids
    ]


def _redistribuir_horas(actividad: ActividadPlanificada) -> None:
    """Recalcula horas_planificadas de las asignaciones existentes (cambió la duración)"""
    if not actividad.trabajadores:
        return
    horas = _horas_por_trabajador(actividad.duracion_estimada_horas, len(actividad.trabajadores))
    for asignacion in actividad.trabajadores:
        asignacion.horas_planificadas = horas


def _reemplazar_metas(actividad: ActividadPlanificada, metas: list[dict[str, Any]]) -> None:
    actividad.metas = [
        ActividadMeta(
            descripcion=meta["descripcion"],
            valor_objetivo=meta["valor_objetivo"],
            valor_actual=meta.get("valor_actual") or 0,
            unidad=meta["unidad"],
        )
        for meta in metas
    ]


# ============================================================================
# Lecturas
# ============================================================================

def find_all(db: Session) -> list[ActividadOut]:
    actividades = (
        _query_con_relaciones(db)
        .order_by(ActividadPlanificada.fecha_inicio_planificada.desc())
        .all()
    )
    return [ActividadOut.from_actividad(a) for a in actividades]


def find_by_id(db: Session, actividad_id: int) -> ActividadOut | None:
    actividad = (
        _query_con_relaciones(db)
        .filter(ActividadPlanificada.id == actividad_id)
        .first()
    )
    if actividad is None:
        return None
    return ActividadOut.from_actividad(actividad)


def find_by_lote(db: Session, lote_id: int) -> list[ActividadOut]:
    actividades = (
        _query_con_relaciones(db)
        .filter(ActividadPlanificada.lote_id == lote_id)
        .order_by(ActividadPlanificada.fecha_inicio_planificada.desc())
        .all()
    )
    return [ActividadOut.from_actividad(a) for a in actividades]


def exists(db: Session, actividad_id: int) -> bool:
    return (
        db.query(ActividadPlanificada.id)
        .filter(ActividadPlanificada.id == actividad_id)
        .first()
    ) is not None


def get_estadisticas(db: Session) -> dict[str, Any]:
    """Conteos por estado, progreso promedio y actividades que requieren atención"""
    estado = ActividadPlanificada.estado

    def _contar(condicion):
        return func.count(case((condicion, 1)))

    row = db.query(
        func.count(ActividadPlanificada.id).label("total_actividades"),
        _contar(estado == EstadoActividadEnum.PENDIENTE).label("pendientes"),
        _contar(estado == EstadoActividadEnum.EN_PROGRESO).label("en_progreso"),
        _contar(estado == EstadoActividadEnum.COMPLETADA).label("completadas"),
        _contar(estado == EstadoActividadEnum.ATRASADA).label("atrasadas"),
        _contar(estado == EstadoActividadEnum.CANCELADA).label("canceladas"),
        func.avg(ActividadPlanificada.progreso_porcentaje).label("progreso_promedio"),
        _contar(ActividadPlanificada.requiere_atencion == True).label("requieren_atencion"),  # noqa: E712
    ).one()

    stats = dict(row._mapping)
    if stats["progreso_promedio"] is not None:
        stats["progreso_promedio"] = round(float(stats["progreso_promedio"]), 2)
    return stats


# ============================================================================
# Escrituras
# ============================================================================

def create(db: Session, data: dict[str, Any], creado_por: int | None) -> int:
    """
    Insertar actividad + asignaciones + metas en una sola transacción.
    Retorna el id generado.
    """
    campos = {k: v for k, v in data.items() if k in CAMPOS_ACTUALIZABLES}
    campos.pop("estado", None)

    with uow(db):
        actividad = ActividadPlanificada(**campos, creado_por=creado_por)
        db.add(actividad)
        db.flush()

        _asignar_trabajadores(actividad, data.get("trabajadores_asignados") or [])
        _reemplazar_metas(actividad, data.get("metas") or [])
        db.flush()
        actividad_id = actividad.id

    return actividad_id


def update(db: Session, actividad_id: int, data: dict[str, Any]) -> bool:
    """
    Actualización parcial en una sola transacción.

    - Solo se escriben las claves presentes en `data`
    - trabajadores_asignados / metas presentes => se borran y se reinsertan completas
    - Retorna False si la actividad no existe
    """
    with uow(db):
        actividad = db.get(ActividadPlanificada, actividad_id)
        if actividad is None:
            return False

        duracion_anterior = actividad.duracion_estimada_horas
        for field, value in data.items():
            if field in CAMPOS_ACTUALIZABLES:
                setattr(actividad, field, value)

        if "trabajadores_asignados" in data:
            _asignar_trabajadores(actividad, data["trabajadores_asignados"] or [])
        elif "duracion_estimada_horas" in data and float(duracion_anterior) != float(actividad.duracion_estimada_horas):
            _redistribuir_horas(actividad)

        if "metas" in data:
            _reemplazar_metas(actividad, data["metas"] or [])

        db.flush()

    return True


def update_estado(
        db: Session,
        actividad_id: int,
        estado: EstadoActividadEnum,
        requiere_atencion: bool | None = None,
) -> bool:
    """Escritura puntual del estado derivado (y de la bandera de atención, si aplica)"""
    with uow(db):
        actividad = db.get(ActividadPlanificada, actividad_id)
        if actividad is None:
            return False
        actividad.estado = estado
        if requiere_atencion is not None:
            actividad.requiere_atencion = requiere_atencion
    return True


def delete(db: Session, actividad_id: int) -> bool:
    """Eliminar actividad. CASCADE elimina asignaciones, metas y alertas."""
    with uow(db):
        actividad = db.get(ActividadPlanificada, actividad_id)
        if actividad is None:
            return False
        db.delete(actividad)
    return True


def trabajadores_inexistentes(db: Session, trabajador_ids: list[int]) -> list[int]:
    """IDs de la lista que no existen en la tabla trabajadores"""
    if not trabajador_ids:
        return []
    encontrados = {
        row.id for row in db.query(Trabajador.id).filter(Trabajador.id.in_(trabajador_ids)).all()
    }
    return sorted(set(trabajador_ids) - encontrados)
