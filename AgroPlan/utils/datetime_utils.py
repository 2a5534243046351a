"""
Utilidades centralizadas para manejo de fechas y timestamps.
Todas las operaciones usan la zona horaria de settings.APP_TIMEZONE
(America/Bogota por defecto) como referencia.

Convención del sistema:
- Si un datetime llega **naive** (sin tzinfo), se interpreta como **hora local**.
- Si un datetime llega **aware** (con tzinfo), se convierte a **hora local** y se
  persiste como naive (sin tzinfo).
"""
import math
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from config.settings import settings

LOCAL_TZ = ZoneInfo(settings.APP_TIMEZONE)

SECONDS_PER_DAY = 24 * 60 * 60


def now_local() -> datetime:
    """
    Retorna el datetime actual en la zona horaria local (naive, sin microsegundos).
    """
    return datetime.now(LOCAL_TZ).replace(tzinfo=None, microsecond=0)


def to_local_naive(dt: datetime) -> datetime:
    """
    Normaliza un datetime a hora local SIN tzinfo (naive) para persistencia
    y comparaciones.

    Regla:
    - Si dt es NAIVE => se devuelve tal cual (limpiando microsegundos).
    - Si dt es AWARE => se convierte a la zona local y se devuelve sin tzinfo.
    """
    if dt.tzinfo is None:
        return dt.replace(microsecond=0)
    return dt.astimezone(LOCAL_TZ).replace(tzinfo=None, microsecond=0)


def ceil_days(delta: timedelta) -> int:
    """
    Días de diferencia redondeados hacia arriba (un retraso de 1 hora cuenta
    como 1 día; un adelanto de 36 horas cuenta como -1).
    """
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)
