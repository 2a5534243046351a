# config/logging_config.py
import logging

from config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configura el logger raíz con el nivel definido en settings.LOG_LEVEL."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # El engine ya controla su propio eco con SQL_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
