# api/planificacion.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user, get_current_user_optional

from models.usuario import Usuario

from schemas.actividad import (
    ActividadCreate, ActividadUpdate, ProgresoUpdate,
    ActividadOut, EstadisticasOut
)
from services.planificacion_service import (
    get_all_actividades, get_actividad_by_id, get_actividades_por_lote, get_estadisticas,
    create_actividad, update_actividad, update_progreso, delete_actividad
)

router = APIRouter(prefix="/planificacion", tags=["Planificación"])


# ============================================================================
# Consultas (rutas fijas antes de /{actividad_id})
# ============================================================================

@router.get(
    "/estadisticas",
    response_model=EstadisticasOut,
    summary="Estadísticas de planificación",
    description=(
            "Conteo de actividades por estado, progreso promedio y cantidad "
            "de actividades que requieren atención."
    )
)
def get_estadisticas_endpoint(
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_estadisticas(db)


@router.get(
    "/lote/{lote_id}",
    response_model=list[ActividadOut],
    summary="Actividades de un lote",
)
def list_by_lote_endpoint(
        lote_id: int = Path(..., description="ID del lote"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_actividades_por_lote(db, lote_id)


@router.get(
    "/",
    response_model=list[ActividadOut],
    summary="Listar actividades",
    description=(
            "Lista todas las actividades planificadas, más recientes primero.\n\n"
            "**Estado automático:**\n"
            "- El estado se recalcula en cada consulta a partir de fechas y progreso\n"
            "- Si difiere del almacenado, se actualiza en la base de datos"
    )
)
def list_actividades_endpoint(
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_all_actividades(db)


@router.get(
    "/{actividad_id}",
    response_model=ActividadOut,
    summary="Obtener detalle de actividad",
)
def get_actividad_endpoint(
        actividad_id: int = Path(..., description="ID de la actividad"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return get_actividad_by_id(db, actividad_id)


# ============================================================================
# Escrituras
# ============================================================================

@router.post(
    "/",
    response_model=ActividadOut,
    status_code=status.HTTP_201_CREATED,
    summary="Crear actividad",
    description=(
            "Crea una actividad planificada.\n\n"
            "**Validaciones:**\n"
            "- `nombre` y `descripcion` requeridos\n"
            "- `fecha_fin_planificada` posterior a `fecha_inicio_planificada`\n"
            "- `duracion_estimada_horas` > 0\n\n"
            "**Trabajadores:**\n"
            "- `duracion_estimada_horas` se reparte en partes iguales entre `trabajadores_asignados`\n\n"
            "Sin sesión, la actividad queda con `creado_por = null`."
    )
)
def create_actividad_endpoint(
        data: ActividadCreate,
        db: Session = Depends(get_db),
        current_user: Usuario | None = Depends(get_current_user_optional)
):
    usuario_id = current_user.id if current_user else None
    return create_actividad(db, data, usuario_id)


@router.put(
    "/{actividad_id}",
    response_model=ActividadOut,
    summary="Actualizar actividad",
    description=(
            "Actualización parcial.\n\n"
            "- `trabajadores_asignados` y `metas`, si se envían, reemplazan la colección completa\n"
            "- `progreso_porcentaje` entre 0 y 100"
    )
)
def update_actividad_endpoint(
        actividad_id: int = Path(..., description="ID de la actividad"),
        data: ActividadUpdate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return update_actividad(db, actividad_id, data)


@router.put(
    "/{actividad_id}/progreso",
    response_model=ActividadOut,
    summary="Registrar progreso",
    description=(
            "Actualiza progreso, fechas reales y horas reales.\n\n"
            "**Lógica automática:**\n"
            "- `progreso_porcentaje=100` → `COMPLETADA`\n"
            "- `progreso_porcentaje>0` → `EN_PROGRESO`"
    )
)
def update_progreso_endpoint(
        actividad_id: int = Path(..., description="ID de la actividad"),
        data: ProgresoUpdate = ...,
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    return update_progreso(db, actividad_id, data)


@router.delete(
    "/{actividad_id}",
    summary="Eliminar actividad",
    description="Elimina la actividad junto con sus asignaciones, metas y alertas."
)
def delete_actividad_endpoint(
        actividad_id: int = Path(..., description="ID de la actividad"),
        db: Session = Depends(get_db),
        current_user: Usuario = Depends(get_current_user)
):
    delete_actividad(db, actividad_id)
    return {"message": "Actividad eliminada correctamente"}
