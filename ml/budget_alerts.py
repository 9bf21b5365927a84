"""
Alertas de orçamento
Projeta o gasto do mês corrente a partir do ritmo diário de cada categoria
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional

from config import BUDGET_ALERT_PERCENTAGE
from ml.records import (
    Budget,
    BudgetAlert,
    Transaction,
    TransactionType,
    parse_records,
)
from utils.dates import as_datetime, days_in_month, days_until_month_end, is_same_month
from utils.logger import get_logger, log_alert, log_prediction

logger = get_logger(__name__)


class BudgetAlertGenerator:
    """Gera alertas para orçamentos quase esgotados ou com estouro previsto"""

    def __init__(self, alert_percentage: float = BUDGET_ALERT_PERCENTAGE):
        self.alert_percentage = alert_percentage

    def _percentage_used(self, spending: float, budget_amount: float) -> float:
        if budget_amount > 0:
            return spending / budget_amount * 100
        # Orçamento zerado: qualquer gasto consome o orçamento inteiro
        return 100.0 if spending > 0 else 0.0

    def generate(
        self,
        budgets: Iterable[Any],
        transactions: Iterable[Any],
        now: Optional[datetime] = None
    ) -> List[BudgetAlert]:
        """
        Avalia cada orçamento ativo no mês corrente.

        Args:
            budgets: Orçamentos (registros ou dicionários da API)
            transactions: Transações (registros ou dicionários da API)
            now: Momento de referência (padrão: agora)

        Returns:
            Alertas ordenados do maior para o menor percentual usado
        """
        now = as_datetime(now)
        budgets = parse_records(budgets, Budget)
        month_expenses = [
            t for t in parse_records(transactions, Transaction)
            if t.type == TransactionType.EXPENSE and is_same_month(t.date, now)
        ]

        total_days = days_in_month(now)
        days_elapsed = max(1, now.day)
        days_left = days_until_month_end(now)

        alerts = []
        for budget in budgets:
            if not budget.is_active:
                continue

            current_spending = sum(
                t.amount for t in month_expenses if t.category_id == budget.category_id
            )
            percentage_used = self._percentage_used(current_spending, budget.amount)

            daily_rate = current_spending / days_elapsed
            predicted_spending = daily_rate * total_days
            predicted_overage = max(0.0, predicted_spending - budget.amount)

            if percentage_used > self.alert_percentage or predicted_overage > 0:
                alerts.append(BudgetAlert(
                    category_id=budget.category_id,
                    category_name=budget.name,
                    budget_amount=budget.amount,
                    current_spending=float(current_spending),
                    percentage_used=float(percentage_used),
                    days_until_month_end=days_left,
                    predicted_overage=float(predicted_overage)
                ))
                if percentage_used > 100:
                    log_alert(logger, "budget", f"Orçamento '{budget.name}' excedido", percentage_used)

        alerts.sort(key=lambda a: a.percentage_used, reverse=True)

        log_prediction(logger, "budget_alert", len(alerts), budgets=len(budgets))
        return alerts


def generate_budget_alerts(
    budgets: Iterable[Any],
    transactions: Iterable[Any],
    now: Optional[datetime] = None
) -> List[BudgetAlert]:
    """Gera alertas de orçamento (função de conveniência)"""
    return BudgetAlertGenerator().generate(budgets, transactions, now)
