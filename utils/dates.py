"""
Utilitários de calendário usados pelas heurísticas mensais
"""
import math
from datetime import date, datetime, timedelta
from typing import Union

import pandas as pd

DateLike = Union[date, datetime]


def as_datetime(value: DateLike = None) -> datetime:
    """Normaliza date/datetime/None (agora) para datetime"""
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def month_key(value: DateLike) -> pd.Period:
    """Chave mensal ordenável (ano + mês)"""
    return pd.Period(year=value.year, month=value.month, freq='M')


def days_in_month(value: DateLike) -> int:
    """Quantidade de dias do mês de `value`"""
    return month_key(value).days_in_month


def end_of_month(value: DateLike) -> datetime:
    """Meia-noite do último dia do mês de `value`"""
    return datetime(value.year, value.month, days_in_month(value))


def is_same_month(value: DateLike, reference: DateLike) -> bool:
    return value.year == reference.year and value.month == reference.month


def days_until_month_end(now: DateLike = None) -> int:
    """
    Dias (arredondados para cima) até o último dia do mês.

    No próprio último dia retorna 0.
    """
    now = as_datetime(now)
    remaining = end_of_month(now) - now
    return max(0, math.ceil(remaining / timedelta(days=1)))


def trailing_months_cutoff(now: DateLike = None, months: int = 3) -> date:
    """Data de corte de uma janela móvel de `months` meses"""
    cutoff = pd.Timestamp(as_datetime(now)) - pd.DateOffset(months=months)
    return cutoff.date()
