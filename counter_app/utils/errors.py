class CounterAppError(Exception):
    """Base de los errores propios de la app."""


class ChartError(CounterAppError):
    """Tabla de efectividad mal formada (se detecta al cargar)."""


class AbilityTableError(CounterAppError):
    """Tabla de habilidades con un campo inválido (clima, tipo, multiplicador...)."""


class PoolFormatError(CounterAppError):
    """El documento del índice no tiene la forma esperada."""
