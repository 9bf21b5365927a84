"""
Previsor financeiro
Reúne as quatro heurísticas (gastos, anomalias, orçamentos e investimentos)
em um relatório único para a tela de análises.
"""
import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from config import MIN_TRANSACTIONS_FOR_ANALYSIS
from ml.anomaly_detector import AnomalyDetector
from ml.budget_alerts import BudgetAlertGenerator
from ml.exceptions import InsufficientDataError
from ml.expense_forecaster import ExpenseForecaster
from ml.investment_advisor import InvestmentAdvisor
from ml.records import (
    Account,
    AnomalyDetection,
    Budget,
    BudgetAlert,
    Category,
    ExpenseForecast,
    Investment,
    InvestmentSuggestion,
    Transaction,
    parse_records,
)
from utils.cache import TTLCache
from utils.dates import as_datetime
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PredictionReport:
    """Resultado completo de uma rodada de análises"""
    expense_forecasts: List[ExpenseForecast] = field(default_factory=list)
    anomalies: List[AnomalyDetection] = field(default_factory=list)
    budget_alerts: List[BudgetAlert] = field(default_factory=list)
    investment_suggestions: List[InvestmentSuggestion] = field(default_factory=list)
    last_updated: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'expense_forecasts': [f.to_dict() for f in self.expense_forecasts],
            'anomalies': [a.to_dict() for a in self.anomalies],
            'budget_alerts': [b.to_dict() for b in self.budget_alerts],
            'investment_suggestions': [s.to_dict() for s in self.investment_suggestions],
            'last_updated': self.last_updated.isoformat()
        }


class FinancialPredictor:
    """
    Fachada das heurísticas de previsão.

    Não guarda estado entre chamadas. Se um `TTLCache` for injetado,
    relatórios gerados com `cache_key` são reaproveitados até expirar;
    cada chamada recebe uma cópia própria do relatório.
    """

    def __init__(
        self,
        forecaster: Optional[ExpenseForecaster] = None,
        anomaly_detector: Optional[AnomalyDetector] = None,
        budget_alerts: Optional[BudgetAlertGenerator] = None,
        advisor: Optional[InvestmentAdvisor] = None,
        cache: Optional[TTLCache] = None,
        min_transactions: int = MIN_TRANSACTIONS_FOR_ANALYSIS
    ):
        self.forecaster = forecaster or ExpenseForecaster()
        self.anomaly_detector = anomaly_detector or AnomalyDetector()
        self.budget_alert_generator = budget_alerts or BudgetAlertGenerator()
        self.advisor = advisor or InvestmentAdvisor()
        self.cache = cache
        self.min_transactions = min_transactions

    def predict_expenses(self, transactions: Iterable[Any], categories: Iterable[Any]) -> List[ExpenseForecast]:
        return self.forecaster.forecast(transactions, categories)

    def detect_anomalies(
        self,
        transactions: Iterable[Any],
        categories: Optional[Iterable[Any]] = None
    ) -> List[AnomalyDetection]:
        return self.anomaly_detector.detect(transactions, categories)

    def generate_budget_alerts(
        self,
        budgets: Iterable[Any],
        transactions: Iterable[Any],
        now: Optional[datetime] = None
    ) -> List[BudgetAlert]:
        return self.budget_alert_generator.generate(budgets, transactions, now)

    def generate_investment_suggestions(
        self,
        accounts: Iterable[Any],
        transactions: Iterable[Any],
        investments: Iterable[Any],
        now: Optional[datetime] = None
    ) -> List[InvestmentSuggestion]:
        return self.advisor.suggest(accounts, transactions, investments, now)

    def generate_report(
        self,
        transactions: Iterable[Any],
        categories: Iterable[Any],
        budgets: Iterable[Any] = (),
        accounts: Iterable[Any] = (),
        investments: Iterable[Any] = (),
        now: Optional[datetime] = None,
        cache_key: Optional[str] = None
    ) -> PredictionReport:
        """
        Executa todas as heurísticas sobre os dados atuais do usuário.

        Args:
            transactions: Transações
            categories: Categorias
            budgets: Orçamentos
            accounts: Contas
            investments: Investimentos
            now: Momento de referência (padrão: agora)
            cache_key: Chave para reaproveitar o relatório no cache injetado

        Returns:
            PredictionReport

        Raises:
            InsufficientDataError: menos transações válidas que o mínimo
        """
        if self.cache is not None and cache_key is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Relatório '{cache_key}' servido do cache")
                return copy.deepcopy(cached)

        now = as_datetime(now)
        transactions = parse_records(transactions, Transaction)
        if len(transactions) < self.min_transactions:
            logger.warning(
                f"Análise abortada: {len(transactions)}/{self.min_transactions} transações"
            )
            raise InsufficientDataError(len(transactions), self.min_transactions)

        categories = parse_records(categories, Category)

        report = PredictionReport(
            expense_forecasts=self.predict_expenses(transactions, categories),
            anomalies=self.detect_anomalies(transactions, categories),
            budget_alerts=self.generate_budget_alerts(parse_records(budgets, Budget), transactions, now),
            investment_suggestions=self.generate_investment_suggestions(
                parse_records(accounts, Account),
                transactions,
                parse_records(investments, Investment),
                now
            ),
            last_updated=now
        )

        logger.info(
            f"Relatório gerado: {len(report.expense_forecasts)} previsões, "
            f"{len(report.anomalies)} anomalias, {len(report.budget_alerts)} alertas, "
            f"{len(report.investment_suggestions)} sugestões"
        )

        if self.cache is not None and cache_key is not None:
            self.cache.set(cache_key, copy.deepcopy(report))

        return report


# === Funções de conveniência ===

_predictor = None


def get_predictor() -> FinancialPredictor:
    """Retorna instância padrão do previsor (sem cache)"""
    global _predictor
    if _predictor is None:
        _predictor = FinancialPredictor()
    return _predictor


def generate_report(
    transactions: Iterable[Any],
    categories: Iterable[Any],
    budgets: Iterable[Any] = (),
    accounts: Iterable[Any] = (),
    investments: Iterable[Any] = (),
    now: Optional[datetime] = None
) -> PredictionReport:
    """Gera o relatório completo de análises"""
    return get_predictor().generate_report(
        transactions, categories, budgets, accounts, investments, now=now
    )
