# services/lotes_service.py
"""
Catálogo de lotes y cultivos.

Los cultivos se cargan con scripts/setup_database.py y aquí solo se listan.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session, joinedload

from models.cultivo import Cultivo
from models.lote import Lote
from schemas.lote import LoteCreate, LoteOut
from utils.errors import NotFoundError, ValidationError
from utils.transactions import uow

logger = logging.getLogger(__name__)


def list_cultivos(db: Session) -> list[Cultivo]:
    return (
        db.query(Cultivo)
        .filter(Cultivo.activo.is_(True))
        .order_by(Cultivo.nombre.asc())
        .all()
    )


def list_lotes(db: Session) -> list[LoteOut]:
    lotes = (
        db.query(Lote)
        .options(joinedload(Lote.cultivo))
        .order_by(Lote.codigo.asc())
        .all()
    )
    return [LoteOut.from_lote(lote) for lote in lotes]


def get_lote(db: Session, lote_id: int) -> LoteOut:
    lote = (
        db.query(Lote)
        .options(joinedload(Lote.cultivo))
        .filter(Lote.id == lote_id)
        .first()
    )
    if lote is None:
        raise NotFoundError("Lote no encontrado")
    return LoteOut.from_lote(lote)


def create_lote(db: Session, data: LoteCreate) -> LoteOut:
    """
    Crear lote.

    - codigo y nombre requeridos; codigo único
    - area_hectareas > 0
    - cultivo_id, si viene, debe existir
    """
    payload = data.model_dump()
    for campo, mensaje in (("codigo", "El código del lote es requerido"),
                           ("nombre", "El nombre del lote es requerido")):
        if not payload[campo] or not payload[campo].strip():
            raise ValidationError(mensaje)
        payload[campo] = payload[campo].strip()

    if payload["area_hectareas"] <= 0:
        raise ValidationError("El área del lote debe ser mayor a 0")

    if db.query(Lote.id).filter(Lote.codigo == payload["codigo"]).first() is not None:
        raise ValidationError("Ya existe un lote con ese código")

    if payload["cultivo_id"] is not None and db.get(Cultivo, payload["cultivo_id"]) is None:
        raise ValidationError("Cultivo no encontrado")

    with uow(db):
        lote = Lote(**payload)
        db.add(lote)
        db.flush()
        lote_id = lote.id

    logger.info("Lote %s (%s) creado", lote_id, payload["codigo"])
    return get_lote(db, lote_id)
