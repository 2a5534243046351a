from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.security import oauth2_scheme, oauth2_scheme_optional, decode_access_token
from models.usuario import Usuario


def _resolve_user(db: Session, token: str) -> Usuario:
    payload = decode_access_token(token)
    if not payload or "sub" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido o expirado")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido o expirado")
    user = db.get(Usuario, user_id)
    if not user or not user.activo:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuario no encontrado o inactivo")
    return user


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> Usuario:
    return _resolve_user(db, token)


def get_current_user_optional(
        db: Session = Depends(get_db),
        token: str | None = Depends(oauth2_scheme_optional),
) -> Usuario | None:
    """Igual que get_current_user, pero sin token devuelve None en vez de 401."""
    if not token:
        return None
    return _resolve_user(db, token)
