# models/__init__.py
from utils.db import Base  # re-export
from .usuario import Usuario
from .cultivo import Cultivo
from .lote import Lote
from .trabajador import Trabajador
from .actividad import ActividadPlanificada, ActividadTrabajador, ActividadMeta, Alerta
