# Ejecuta desde la carpeta AgroPlan:
#   python -m scripts.setup_database            # crea tablas + cultivos de ejemplo
#   python -m scripts.setup_database --sin-datos # solo tablas
#
# Requiere que tu .env tenga DATABASE_URL y SECRET_KEY.

from argparse import ArgumentParser
from sqlalchemy.orm import Session

from enums.enums import TipoCultivoEnum
from models import Base, Cultivo
from utils.db import engine, SessionLocal

CULTIVOS_EJEMPLO = [
    dict(id=1, nombre="Café", nombre_cientifico="Coffea arabica", tipo=TipoCultivoEnum.OTRO, ciclo_dias=1825,
         descripcion="Café arábigo de alta calidad para exportación"),
    dict(id=2, nombre="Banano", nombre_cientifico="Musa paradisiaca", tipo=TipoCultivoEnum.FRUTA, ciclo_dias=365,
         descripcion="Banano tipo exportación"),
    dict(id=3, nombre="Maíz", nombre_cientifico="Zea mays", tipo=TipoCultivoEnum.CEREAL, ciclo_dias=120,
         descripcion="Maíz amarillo para consumo"),
    dict(id=4, nombre="Papa", nombre_cientifico="Solanum tuberosum", tipo=TipoCultivoEnum.TUBERCULO, ciclo_dias=150,
         descripcion="Papa criolla"),
    dict(id=5, nombre="Tomate", nombre_cientifico="Solanum lycopersicum", tipo=TipoCultivoEnum.HORTALIZA,
         ciclo_dias=90, descripcion="Tomate chonto para mesa"),
]


def create_tables(bind=engine) -> None:
    Base.metadata.create_all(bind=bind)


def seed_cultivos(db: Session) -> int:
    """Inserta los cultivos de ejemplo que falten (por id). Retorna cuántos insertó."""
    insertados = 0
    for data in CULTIVOS_EJEMPLO:
        if db.get(Cultivo, data["id"]) is None:
            db.add(Cultivo(**data))
            insertados += 1
    db.commit()
    return insertados


def main():
    ap = ArgumentParser(description="Crea las tablas de AgroPlan y carga datos de ejemplo")
    ap.add_argument("--sin-datos", action="store_true", help="Solo crear tablas, sin cultivos de ejemplo")
    args = ap.parse_args()

    create_tables()
    print("[OK] Tablas creadas/verificadas")

    if args.sin_datos:
        return

    db = SessionLocal()
    try:
        n = seed_cultivos(db)
        print(f"[OK] Cultivos de ejemplo insertados: {n}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
