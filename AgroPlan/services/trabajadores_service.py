# services/trabajadores_service.py
"""
Catálogo de trabajadores: los ids que se asignan a las actividades
planificadas deben existir aquí.
"""
from __future__ import annotations

import logging
import re

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.trabajador import Trabajador
from schemas.trabajador import TrabajadorCreate, TrabajadorUpdate
from utils.errors import NotFoundError, ValidationError
from utils.transactions import uow

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# campo -> (longitud mínima, mensaje)
LONGITUDES_MINIMAS = {
    "nombres": (2, "Los nombres deben tener al menos 2 caracteres"),
    "apellidos": (2, "Los apellidos deben tener al menos 2 caracteres"),
    "documento": (5, "El documento debe tener al menos 5 caracteres"),
    "cargo": (3, "El cargo debe tener al menos 3 caracteres"),
}


def _validar_campos(payload: dict) -> None:
    for campo, (minimo, mensaje) in LONGITUDES_MINIMAS.items():
        if campo in payload and (payload[campo] is None or len(payload[campo].strip()) < minimo):
            raise ValidationError(mensaje)
        if payload.get(campo) is not None:
            payload[campo] = payload[campo].strip()

    if payload.get("email") is not None and not EMAIL_RE.match(payload["email"]):
        raise ValidationError("El formato del email es inválido")


def _validar_unicidad(db: Session, payload: dict, excluir_id: int | None = None) -> None:
    for campo, mensaje in (("email", "El email ya está registrado"), ("documento", "El documento ya está registrado")):
        valor = payload.get(campo)
        if valor is None:
            continue
        q = db.query(Trabajador.id).filter(getattr(Trabajador, campo) == valor)
        if excluir_id is not None:
            q = q.filter(Trabajador.id != excluir_id)
        if q.first() is not None:
            raise ValidationError(mensaje)


def list_trabajadores(db: Session, q: str | None = None, solo_activos: bool = False) -> list[Trabajador]:
    """Listar trabajadores por apellidos; `q` busca en nombres, apellidos y documento."""
    query = db.query(Trabajador)
    if solo_activos:
        query = query.filter(Trabajador.activo.is_(True))
    if q and q.strip():
        patron = f"%{q.strip()}%"
        query = query.filter(or_(
            Trabajador.nombres.ilike(patron),
            Trabajador.apellidos.ilike(patron),
            Trabajador.documento.ilike(patron),
        ))
    return query.order_by(Trabajador.apellidos.asc(), Trabajador.nombres.asc()).all()


def get_trabajador(db: Session, trabajador_id: int) -> Trabajador:
    trabajador = db.get(Trabajador, trabajador_id)
    if trabajador is None:
        raise NotFoundError("Trabajador no encontrado")
    return trabajador


def create_trabajador(db: Session, data: TrabajadorCreate) -> Trabajador:
    payload = data.model_dump()
    _validar_campos(payload)
    _validar_unicidad(db, payload)

    with uow(db):
        trabajador = Trabajador(**payload)
        db.add(trabajador)
        db.flush()
        trabajador_id = trabajador.id

    logger.info("Trabajador %s creado", trabajador_id)
    return get_trabajador(db, trabajador_id)


def update_trabajador(db: Session, trabajador_id: int, data: TrabajadorUpdate) -> Trabajador:
    trabajador = get_trabajador(db, trabajador_id)

    payload = data.model_dump(exclude_unset=True)
    if "activo" in payload and payload["activo"] is None:
        raise ValidationError("El campo activo no puede ser nulo")
    _validar_campos(payload)
    _validar_unicidad(db, payload, excluir_id=trabajador_id)

    with uow(db):
        for field, value in payload.items():
            setattr(trabajador, field, value)

    logger.info("Trabajador %s actualizado (%s)", trabajador_id, ", ".join(sorted(payload)) or "sin cambios")
    return get_trabajador(db, trabajador_id)
