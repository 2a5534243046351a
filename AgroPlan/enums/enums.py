from enum import Enum

# =====================================================
# 📋 ACTIVIDADES PLANIFICADAS
# =====================================================
class TipoActividadEnum(str, Enum):
    SIEMBRA = "SIEMBRA"
    RIEGO = "RIEGO"
    FUMIGACION = "FUMIGACION"
    FERTILIZACION = "FERTILIZACION"
    COSECHA = "COSECHA"
    MANTENIMIENTO = "MANTENIMIENTO"
    PODA = "PODA"
    CONTROL_PLAGAS = "CONTROL_PLAGAS"
    OTRO = "OTRO"


class NivelPrioridadEnum(str, Enum):
    BAJA = "BAJA"
    MEDIA = "MEDIA"
    ALTA = "ALTA"
    URGENTE = "URGENTE"


class EstadoActividadEnum(str, Enum):
    PENDIENTE = "PENDIENTE"
    EN_PROGRESO = "EN_PROGRESO"
    COMPLETADA = "COMPLETADA"
    ATRASADA = "ATRASADA"
    CANCELADA = "CANCELADA"


class PeriodoTiempoEnum(str, Enum):
    DIA = "DIA"
    SEMANA = "SEMANA"
    QUINCENAL = "QUINCENAL"
    MES = "MES"


# =====================================================
# 🚨 ALERTAS
# =====================================================
class TipoAlertaEnum(str, Enum):
    RETRASO = "RETRASO"
    BAJO_RENDIMIENTO = "BAJO_RENDIMIENTO"
    ACTIVIDAD_VENCIDA = "ACTIVIDAD_VENCIDA"
    DESVIACION_TIEMPO = "DESVIACION_TIEMPO"
    DESVIACION_RECURSOS = "DESVIACION_RECURSOS"
    CLIMA_ADVERSO = "CLIMA_ADVERSO"
    FALTA_RECURSOS = "FALTA_RECURSOS"


class SeveridadAlertaEnum(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =====================================================
# 🌱 CULTIVOS
# =====================================================
class TipoCultivoEnum(str, Enum):
    HORTALIZA = "Hortaliza"
    FRUTA = "Fruta"
    CEREAL = "Cereal"
    LEGUMINOSA = "Leguminosa"
    TUBERCULO = "Tubérculo"
    FLOR = "Flor"
    OTRO = "Otro"
