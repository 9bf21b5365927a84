"""
Previsão de gastos mensais por categoria
Extrapola a variação entre os dois últimos meses de cada categoria de despesa
"""
from typing import Any, Dict, Iterable, List, Sequence

import numpy as np
import pandas as pd

from config import MIN_FORECAST_MONTHS, MIN_CONFIDENCE, DEFAULT_CONFIDENCE
from ml.records import (
    Category,
    CategoryType,
    ExpenseForecast,
    Transaction,
    TransactionType,
    Trend,
    parse_records,
)
from utils.dates import month_key
from utils.logger import get_logger, log_prediction

logger = get_logger(__name__)


def monthly_expenses_by_category(transactions: Iterable[Transaction]) -> Dict[Any, List[float]]:
    """
    Soma as despesas de cada categoria por mês.

    Args:
        transactions: Transações já validadas

    Returns:
        {category_id: [total_mes_1, total_mes_2, ...]} em ordem cronológica,
        apenas com os meses que tiveram despesa
    """
    rows = [
        {'category_id': t.category_id, 'month': month_key(t.date), 'amount': t.amount}
        for t in transactions
        if t.type == TransactionType.EXPENSE
    ]
    if not rows:
        return {}

    # Ordenar por mês antes de agrupar mantém cada série cronológica
    # sem exigir que os ids de categoria sejam comparáveis entre si
    df = pd.DataFrame(rows).sort_values('month', kind='stable')
    monthly = df.groupby(['category_id', 'month'], sort=False)['amount'].sum()

    return {
        category_id: series.tolist()
        for category_id, series in monthly.groupby(level='category_id', sort=False)
    }


def consistency_score(values: Sequence[float]) -> float:
    """
    Confiança da previsão a partir do coeficiente de variação da série.

    Série constante -> 1.0; quanto mais dispersa, menor (mínimo 0.1).
    """
    if len(values) < 2:
        return DEFAULT_CONFIDENCE

    series = np.asarray(values, dtype=float)
    mean = series.mean()
    std = series.std()  # Desvio padrão populacional

    coefficient = std / abs(mean) if mean != 0 else 0.0
    return float(max(MIN_CONFIDENCE, 1 - min(coefficient, 1.0)))


def _trend(current: float, previous: float) -> Trend:
    if current > previous:
        return Trend.INCREASING
    if current < previous:
        return Trend.DECREASING
    return Trend.STABLE


class ExpenseForecaster:
    """Gera uma previsão por categoria de despesa com histórico suficiente"""

    def __init__(self, min_months: int = MIN_FORECAST_MONTHS):
        self.min_months = max(2, min_months)

    def forecast(self, transactions: Iterable[Any], categories: Iterable[Any]) -> List[ExpenseForecast]:
        """
        Prevê o gasto do próximo mês para cada categoria de despesa.

        Args:
            transactions: Transações (registros ou dicionários da API)
            categories: Categorias (registros ou dicionários da API)

        Returns:
            Lista de ExpenseForecast, na ordem das categorias recebidas
        """
        transactions = parse_records(transactions, Transaction)
        categories = parse_records(categories, Category)

        monthly = monthly_expenses_by_category(transactions)
        forecasts = []

        for category in categories:
            if category.type != CategoryType.EXPENSE:
                continue

            history = monthly.get(category.id, [])
            if len(history) < self.min_months:
                logger.debug(f"Categoria '{category.name}' ignorada: {len(history)} mês(es) de histórico")
                continue

            current, previous = history[-1], history[-2]
            change_rate = (current - previous) / previous if previous > 0 else 0.0
            predicted = max(0.0, current * (1 + change_rate))

            forecasts.append(ExpenseForecast(
                category=category.name,
                current_month=float(current),
                predicted_next_month=float(predicted),
                confidence=consistency_score(history),
                trend=_trend(current, previous),
            ))

        log_prediction(logger, "expense_forecast", len(forecasts), categories=len(categories))
        return forecasts


def predict_expenses(transactions: Iterable[Any], categories: Iterable[Any]) -> List[ExpenseForecast]:
    """Prevê gastos do próximo mês (função de conveniência)"""
    return ExpenseForecaster().forecast(transactions, categories)
