from datetime import datetime, timedelta, timezone

import pytest

from scripts.setup_database import CULTIVOS_EJEMPLO, seed_cultivos
from models import Cultivo
from utils.datetime_utils import ceil_days, to_local_naive


@pytest.mark.parametrize("delta, dias", [
    (timedelta(hours=1), 1),
    (timedelta(days=2), 2),
    (timedelta(days=2, seconds=1), 3),
    (timedelta(hours=-36), -1),
    (timedelta(0), 0),
])
def test_ceil_days(delta, dias):
    assert ceil_days(delta) == dias


def test_to_local_naive_convierte_aware():
    assert to_local_naive(datetime(2025, 6, 1, 12, tzinfo=timezone.utc)) == datetime(2025, 6, 1, 7)


def test_to_local_naive_respeta_naive():
    assert to_local_naive(datetime(2025, 6, 1, 12, 30, 15, 999)) == datetime(2025, 6, 1, 12, 30, 15)


def test_seed_cultivos_es_idempotente(db):
    assert seed_cultivos(db) == len(CULTIVOS_EJEMPLO)
    assert seed_cultivos(db) == 0
    assert {c.nombre for c in db.query(Cultivo).all()} == {"Café", "Banano", "Maíz", "Papa", "Tomate"}
