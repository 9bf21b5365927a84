"""
Sistema de logging estruturado para o Previsor Financeiro
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from config import LOG_LEVEL, LOG_FILE


class ColoredFormatter(logging.Formatter):
    """Formatter com cores para output no console"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Cria e retorna um logger configurado

    Args:
        name: Nome do logger (geralmente __name__)
        log_file: Arquivo de log opcional (usa padrão se não especificado)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)

    # Evitar duplicação de handlers
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

    # Handler para console (com cores)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ColoredFormatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    # Handler para arquivo
    file_path = Path(log_file or LOG_FILE)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(file_handler)

    return logger


def log_prediction(logger: logging.Logger, kind: str, count: int, **details) -> None:
    """
    Loga o resultado de uma heurística de forma estruturada

    Args:
        logger: Logger a ser usado
        kind: Tipo da previsão (expense_forecast, anomaly_detection, ...)
        count: Quantidade de resultados gerados
        **details: Campos extras (ex.: inputs=120)
    """
    extra = "".join(f" | {key}={value}" for key, value in details.items())
    logger.info(f"PREDICTION | kind={kind} | results={count}{extra}")


def log_alert(logger: logging.Logger, alert_type: str, message: str, risk_score: float = 0) -> None:
    """
    Loga alertas do sistema

    Args:
        logger: Logger a ser usado
        alert_type: Tipo do alerta (budget, anomaly, investment)
        message: Mensagem do alerta
        risk_score: Score associado (percentual usado, z-score, ...)
    """
    logger.warning(
        f"ALERT | type={alert_type} | risk_score={risk_score:.2f} | message={message}"
    )
