"""
Sugestões de investimento baseadas em regras
Reserva de emergência, diversificação e aplicação do excedente mensal
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional

from config import (
    DIVERSIFICATION_MIN_ASSETS,
    DIVERSIFICATION_SHARE,
    EMERGENCY_FUND_MONTHS,
    EXPECTED_RETURNS,
    INCOME_LOOKBACK_MONTHS,
    SURPLUS_INCOME_SHARE,
)
from ml.records import (
    Account,
    Investment,
    InvestmentSuggestion,
    RiskLevel,
    SuggestionType,
    Transaction,
    TransactionType,
    parse_records,
)
from utils.dates import as_datetime, is_same_month, trailing_months_cutoff
from utils.logger import get_logger, log_prediction

logger = get_logger(__name__)


def liquid_assets(accounts: Iterable[Account]) -> float:
    """Soma dos saldos de todas as contas exceto cartões de crédito"""
    return sum(a.balance for a in accounts if not a.is_credit_card)


def average_monthly_income(
    transactions: Iterable[Transaction],
    now: Optional[datetime] = None,
    months: int = INCOME_LOOKBACK_MONTHS
) -> float:
    """Renda média mensal na janela móvel dos últimos `months` meses"""
    cutoff = trailing_months_cutoff(now, months)
    total = sum(
        t.amount for t in transactions
        if t.type == TransactionType.INCOME and t.date > cutoff
    )
    return total / months


def monthly_surplus(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> float:
    """Receitas menos despesas do mês corrente"""
    now = as_datetime(now)
    income = expenses = 0.0
    for t in transactions:
        if not is_same_month(t.date, now):
            continue
        if t.type == TransactionType.INCOME:
            income += t.amount
        elif t.type == TransactionType.EXPENSE:
            expenses += t.amount
    return income - expenses


class InvestmentAdvisor:
    """
    Avalia três regras independentes; todas podem disparar ao mesmo tempo.

    - Reserva de emergência: liquidez abaixo de N meses de renda
    - Diversificação: carteira com poucos ativos
    - Excedente: sobra do mês acima de uma fração da renda média
    """

    def __init__(self, expected_returns: Optional[dict] = None):
        self.expected_returns = dict(EXPECTED_RETURNS, **(expected_returns or {}))

    def _emergency_fund(self, liquid: float, income: float) -> Optional[InvestmentSuggestion]:
        target = income * EMERGENCY_FUND_MONTHS
        if liquid >= target:
            return None
        return InvestmentSuggestion(
            type=SuggestionType.EMERGENCY_FUND,
            description='Reserva de emergência insuficiente',
            recommended_amount=float(target - liquid),
            expected_return=self.expected_returns['emergency_fund'],
            risk_level=RiskLevel.LOW
        )

    def _diversification(self, investments: List[Investment]) -> Optional[InvestmentSuggestion]:
        total = sum(i.value for i in investments)
        if total <= 0 or len(investments) >= DIVERSIFICATION_MIN_ASSETS:
            return None
        return InvestmentSuggestion(
            type=SuggestionType.DIVERSIFICATION,
            description='Diversificar portfólio de investimentos',
            recommended_amount=float(total * DIVERSIFICATION_SHARE),
            expected_return=self.expected_returns['diversification'],
            risk_level=RiskLevel.MEDIUM
        )

    def _surplus(self, surplus: float, income: float) -> Optional[InvestmentSuggestion]:
        if surplus <= income * SURPLUS_INCOME_SHARE:
            return None
        return InvestmentSuggestion(
            type=SuggestionType.NEW_OPPORTUNITY,
            description='Aplicar excedente mensal',
            recommended_amount=float(surplus),
            expected_return=self.expected_returns['new_opportunity'],
            risk_level=RiskLevel.MEDIUM
        )

    def suggest(
        self,
        accounts: Iterable[Any],
        transactions: Iterable[Any],
        investments: Iterable[Any],
        now: Optional[datetime] = None
    ) -> List[InvestmentSuggestion]:
        """
        Gera de 0 a 3 sugestões de investimento.

        Args:
            accounts: Contas (registros ou dicionários da API)
            transactions: Transações (registros ou dicionários da API)
            investments: Investimentos (registros ou dicionários da API)
            now: Momento de referência (padrão: agora)

        Returns:
            Sugestões na ordem: reserva, diversificação, excedente
        """
        now = as_datetime(now)
        accounts = parse_records(accounts, Account)
        transactions = parse_records(transactions, Transaction)
        investments = parse_records(investments, Investment)

        income = average_monthly_income(transactions, now)

        candidates = [
            self._emergency_fund(liquid_assets(accounts), income),
            self._diversification(investments),
            self._surplus(monthly_surplus(transactions, now), income),
        ]
        suggestions = [s for s in candidates if s is not None]

        log_prediction(logger, "investment_suggestion", len(suggestions), monthly_income=round(income, 2))
        return suggestions


def generate_investment_suggestions(
    accounts: Iterable[Any],
    transactions: Iterable[Any],
    investments: Iterable[Any],
    now: Optional[datetime] = None
) -> List[InvestmentSuggestion]:
    """Gera sugestões de investimento (função de conveniência)"""
    return InvestmentAdvisor().suggest(accounts, transactions, investments, now)
