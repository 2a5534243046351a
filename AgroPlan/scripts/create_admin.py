# Ejecuta desde la carpeta AgroPlan (después de scripts.setup_database):
#   python -m scripts.create_admin
#   python -m scripts.create_admin --email jefe@finca.co --nombre "Jefe de campo" --minutos 60
#
# Crea el usuario administrador si no existe e imprime un token de acceso
# (Bearer) para consumir la API.

from argparse import ArgumentParser
from sqlalchemy.orm import Session

from models import Usuario
from utils.db import SessionLocal
from utils.security import create_access_token

ADMIN_EMAIL = "admin@sistema.com"
ADMIN_NOMBRE = "Administrador"
ADMIN_ROL = "admin"


def ensure_admin(db: Session, email: str = ADMIN_EMAIL, nombre: str = ADMIN_NOMBRE) -> tuple[Usuario, bool]:
    """Retorna (usuario, creado). Si ya existe con ese email lo reactiva."""
    usuario = db.query(Usuario).filter(Usuario.email == email).first()
    if usuario is not None:
        if not usuario.activo:
            usuario.activo = True
            db.commit()
        return usuario, False

    usuario = Usuario(nombre=nombre, email=email, rol=ADMIN_ROL, activo=True)
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario, True


def main():
    ap = ArgumentParser(description="Crea el usuario administrador de AgroPlan y emite un token")
    ap.add_argument("--email", default=ADMIN_EMAIL)
    ap.add_argument("--nombre", default=ADMIN_NOMBRE)
    ap.add_argument("--minutos", type=int, default=None, help="Vigencia del token (default: settings)")
    args = ap.parse_args()

    db = SessionLocal()
    try:
        usuario, creado = ensure_admin(db, args.email, args.nombre)
        print(f"[OK] Administrador {'creado' if creado else 'ya existía'}: {usuario.email} (id={usuario.id})")
        print(f"[OK] Token: {create_access_token(usuario.id, args.minutos)}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
