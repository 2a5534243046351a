import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from utils.db import SessionLocal

logger = logging.getLogger(__name__)


@contextmanager
def uow(session: Session | None = None) -> Iterator[Session]:
    """
    Unidad de trabajo: commit al salir, rollback si algo falla.

        with uow(db):
            db.add(actividad)
            db.flush()
            actividad.trabajadores = [...]

    Con la sesión de get_db() se reutiliza y NO se cierra; sin sesión abre
    una propia (scripts) y la cierra al final.
    """
    owns_session = session is None
    db = session or SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.warning("Transacción revertida: %s", exc.__class__.__name__)
        raise
    finally:
        if owns_session:
            db.close()
