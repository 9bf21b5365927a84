"""
Tipos de registro do Previsor Financeiro

Entradas (transações, categorias, orçamentos, contas e investimentos) chegam
da API REST como dicionários em camelCase. Aqui elas são convertidas em
registros explícitos e validadas uma única vez, antes de qualquer heurística.
As saídas são construídas a cada chamada e guardam apenas valores escalares.
"""
import math
import re
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from ml.exceptions import InvalidRecordError
from utils.logger import get_logger

logger = get_logger(__name__)

CANONICAL_INT = re.compile(r"-?(?:0|[1-9][0-9]*)")


# === Enums ===

class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class SuggestionType(str, Enum):
    EMERGENCY_FUND = "emergency_fund"
    DIVERSIFICATION = "diversification"
    REBALANCING = "rebalancing"
    NEW_OPPORTUNITY = "new_opportunity"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PredictionType(str, Enum):
    EXPENSE_FORECAST = "expense_forecast"
    ANOMALY_DETECTION = "anomaly_detection"
    BUDGET_ALERT = "budget_alert"
    INVESTMENT_SUGGESTION = "investment_suggestion"


# === Conversões de campo ===

def parse_amount(value: Any, field: str = "amount") -> float:
    """
    Converte um valor monetário (número ou string decimal) para float.

    Args:
        value: Valor bruto vindo da API
        field: Nome do campo (para a mensagem de erro)

    Returns:
        Valor finito

    Raises:
        InvalidRecordError: valor ausente, não numérico, NaN ou infinito
    """
    if value is None or isinstance(value, bool):
        raise InvalidRecordError(f"Valor inválido em '{field}': {value!r}", field, value)

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(Decimal(value.strip()))
        except (InvalidOperation, ValueError):
            raise InvalidRecordError(f"Valor não numérico em '{field}': {value!r}", field, value)
    else:
        raise InvalidRecordError(f"Tipo inválido em '{field}': {type(value).__name__}", field, value)

    if not math.isfinite(number):
        raise InvalidRecordError(f"Valor não finito em '{field}': {value!r}", field, value)

    return number


def parse_date(value: Any, field: str = "date") -> date:
    """Converte date, datetime ou string ISO para date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            timestamp = pd.Timestamp(value.strip())
        except (ValueError, TypeError):
            raise InvalidRecordError(f"Data inválida em '{field}': {value!r}", field, value)
        if not pd.isna(timestamp):
            return timestamp.date()
    raise InvalidRecordError(f"Data inválida em '{field}': {value!r}", field, value)


def _parse_enum(enum_cls, value: Any, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidRecordError(f"Valor inesperado em '{field}': {value!r}", field, value)


def _pick(row: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Primeira chave presente (camelCase da API ou snake_case)"""
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def _require(row: Mapping[str, Any], *keys: str) -> Any:
    value = _pick(row, *keys)
    if value is None:
        raise InvalidRecordError(f"Campo obrigatório ausente: '{keys[0]}'", keys[0])
    return value


def _normalize_id(value: Any) -> Any:
    """
    Ids chegam como número ou string ("1" e 1 são o mesmo registro).

    Strings na forma decimal canônica viram int; o resto fica como veio.
    """
    if isinstance(value, str):
        text = value.strip()
        if CANONICAL_INT.fullmatch(text):
            return int(text)
        return text
    return value


def _parse_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ('true', '1'):
            return True
        if text in ('false', '0'):
            return False
    raise InvalidRecordError(f"Booleano inválido em '{field}': {value!r}", field, value)


# === Registros de entrada ===

@dataclass(frozen=True)
class Transaction:
    id: Any
    amount: float
    type: TransactionType
    category_id: Any
    date: date
    category_name: Optional[str] = None

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Transaction':
        category = row.get('category')
        category_name = category.get('name') if isinstance(category, Mapping) else None
        return cls(
            id=_normalize_id(_pick(row, 'id')),
            amount=parse_amount(_require(row, 'amount')),
            type=_parse_enum(TransactionType, _require(row, 'type'), 'type'),
            category_id=_normalize_id(_require(row, 'categoryId', 'category_id')),
            date=parse_date(_require(row, 'date')),
            category_name=category_name or _pick(row, 'categoryName', 'category_name'),
        )


@dataclass(frozen=True)
class Category:
    id: Any
    name: str
    type: CategoryType

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Category':
        return cls(
            id=_normalize_id(_require(row, 'id')),
            name=str(_require(row, 'name')),
            type=_parse_enum(CategoryType, _require(row, 'type'), 'type'),
        )


@dataclass(frozen=True)
class Budget:
    category_id: Any
    amount: float
    name: str
    is_active: bool = True
    id: Any = None

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Budget':
        return cls(
            category_id=_normalize_id(_require(row, 'categoryId', 'category_id')),
            amount=parse_amount(_require(row, 'amount')),
            name=str(_pick(row, 'name', default='')),
            is_active=_parse_bool(_pick(row, 'isActive', 'is_active', default=True), 'isActive'),
            id=_normalize_id(_pick(row, 'id')),
        )


@dataclass(frozen=True)
class Account:
    type: str
    balance: float
    name: Optional[str] = None
    id: Any = None

    @property
    def is_credit_card(self) -> bool:
        return self.type == "credit_card"

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Account':
        return cls(
            type=str(_require(row, 'type')),
            balance=parse_amount(_pick(row, 'balance', default=0), 'balance'),
            name=_pick(row, 'name'),
            id=_normalize_id(_pick(row, 'id')),
        )


@dataclass(frozen=True)
class Investment:
    initial_amount: float
    current_amount: Optional[float] = None
    name: Optional[str] = None
    id: Any = None

    @property
    def value(self) -> float:
        """Valor atual, ou o aporte inicial quando não há cotação"""
        return self.current_amount if self.current_amount is not None else self.initial_amount

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Investment':
        current = _pick(row, 'currentAmount', 'current_amount')
        if current == "":
            current = None
        return cls(
            initial_amount=parse_amount(_require(row, 'initialAmount', 'initial_amount'), 'initialAmount'),
            current_amount=parse_amount(current, 'currentAmount') if current is not None else None,
            name=_pick(row, 'name'),
            id=_normalize_id(_pick(row, 'id')),
        )


def parse_records(rows: Optional[Iterable[Any]], record_type, strict: bool = False) -> List[Any]:
    """
    Converte uma coleção da API em registros tipados.

    Args:
        rows: Registros já tipados ou dicionários
        record_type: Classe de destino (Transaction, Category, ...)
        strict: Se True, propaga o primeiro registro inválido

    Returns:
        Lista de registros válidos (inválidos são descartados com aviso)
    """
    records = []
    for index, row in enumerate(rows or []):
        if isinstance(row, record_type):
            records.append(row)
            continue
        try:
            if not isinstance(row, Mapping):
                raise InvalidRecordError(f"Registro não é um objeto: {type(row).__name__}")
            records.append(record_type.from_dict(row))
        except InvalidRecordError as e:
            if strict:
                raise
            logger.warning(f"{record_type.__name__} #{index} descartado: {e}")
    return records


# === Registros de saída ===

class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, date):
                data[key] = value.isoformat()
        return data


@dataclass
class ExpenseForecast(_Serializable):
    category: str
    current_month: float
    predicted_next_month: float
    confidence: float
    trend: Trend


@dataclass
class AnomalyDetection(_Serializable):
    transaction_id: Any
    amount: float
    category: str
    date: date
    anomaly_score: float
    reason: str


@dataclass
class BudgetAlert(_Serializable):
    category_id: Any
    category_name: str
    budget_amount: float
    current_spending: float
    percentage_used: float
    days_until_month_end: int
    predicted_overage: float


@dataclass
class InvestmentSuggestion(_Serializable):
    type: SuggestionType
    description: str
    recommended_amount: float
    expected_return: float
    risk_level: RiskLevel


@dataclass
class PredictionInsight(_Serializable):
    type: PredictionType
    confidence: float
    description: str
    recommendation: str
    severity: Severity
    category_id: Any = None
    estimated_impact: Optional[float] = None
