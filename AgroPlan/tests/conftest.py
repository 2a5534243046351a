import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from enums.enums import TipoActividadEnum, PeriodoTiempoEnum, TipoCultivoEnum
from models import Base, Usuario, Cultivo, Lote, Trabajador
from schemas.actividad import ActividadCreate
from utils.db import get_db
from utils.security import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalogo(db):
    """Usuario, cultivo, lote y cuatro trabajadores de referencia."""
    usuario = Usuario(nombre="Ana Torres", email="ana@finca.test", rol="ADMIN")
    cultivo = Cultivo(nombre="Café", tipo=TipoCultivoEnum.OTRO, ciclo_dias=1825)
    db.add_all([usuario, cultivo])
    db.flush()

    lote = Lote(codigo="L-01", nombre="Lote La Loma", area_hectareas=2.5, cultivo_id=cultivo.id)
    trabajadores = [
        Trabajador(nombres=f"Trabajador{i}", apellidos="Gómez", documento=f"100{i}", cargo="Operario")
        for i in range(1, 5)
    ]
    db.add(lote)
    db.add_all(trabajadores)
    db.commit()

    return {
        "usuario_id": usuario.id,
        "cultivo_id": cultivo.id,
        "lote_id": lote.id,
        "trabajador_ids": [t.id for t in trabajadores],
    }


@pytest.fixture
def nueva_actividad():
    """Fábrica de ActividadCreate válidos; los kwargs sobrescriben los defaults."""
    def _build(**overrides):
        data = dict(
            nombre="Fertilización lote 1",
            descripcion="Aplicación de NPK 15-15-15",
            tipo=TipoActividadEnum.FERTILIZACION,
            fecha_inicio_planificada=datetime(2025, 1, 1),
            fecha_fin_planificada=datetime(2025, 1, 10),
            duracion_estimada_horas=10,
            periodo=PeriodoTiempoEnum.SEMANA,
        )
        data.update(overrides)
        return ActividadCreate(**data)

    return _build


@pytest.fixture
def client(db):
    from main import app

    def _get_test_db():
        yield db

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(catalogo):
    token = create_access_token(catalogo["usuario_id"])
    return {"Authorization": f"Bearer {token}"}
