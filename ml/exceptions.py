"""
Exceções do Previsor Financeiro
"""


class PredictionError(Exception):
    """Erro base das heurísticas de previsão"""


class InvalidRecordError(PredictionError, ValueError):
    """Registro de entrada malformado (valor, data ou campo obrigatório)"""

    def __init__(self, message: str, field: str = None, value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class InsufficientDataError(PredictionError):
    """Histórico pequeno demais para gerar o relatório completo"""

    def __init__(self, available: int, required: int):
        super().__init__(
            f"Dados insuficientes para análise: {available}/{required} transações"
        )
        self.available = available
        self.required = required
