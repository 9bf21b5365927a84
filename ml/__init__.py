"""
Heurísticas de previsão do Previsor Financeiro

- ExpenseForecaster: previsão do gasto do próximo mês por categoria
- AnomalyDetector: despesas atípicas por z-score dentro da categoria
- BudgetAlertGenerator: orçamentos quase esgotados ou com estouro previsto
- InvestmentAdvisor: sugestões de investimento baseadas em regras
- FinancialPredictor: relatório completo com as quatro análises
"""
from ml.exceptions import PredictionError, InvalidRecordError, InsufficientDataError
from ml.records import (
    Account,
    AnomalyDetection,
    Budget,
    BudgetAlert,
    Category,
    ExpenseForecast,
    Investment,
    InvestmentSuggestion,
    PredictionInsight,
    Transaction,
    parse_records,
)
from ml.expense_forecaster import ExpenseForecaster, predict_expenses
from ml.anomaly_detector import AnomalyDetector, detect_anomalies, get_anomaly_report
from ml.budget_alerts import BudgetAlertGenerator, generate_budget_alerts
from ml.investment_advisor import InvestmentAdvisor, generate_investment_suggestions
from ml.predictor import FinancialPredictor, PredictionReport, generate_report, get_predictor
from ml.insights import build_insights

__all__ = [
    # Erros
    "PredictionError",
    "InvalidRecordError",
    "InsufficientDataError",
    # Registros
    "Transaction",
    "Category",
    "Budget",
    "Account",
    "Investment",
    "ExpenseForecast",
    "AnomalyDetection",
    "BudgetAlert",
    "InvestmentSuggestion",
    "PredictionInsight",
    "parse_records",
    # Heurísticas
    "ExpenseForecaster",
    "predict_expenses",
    "AnomalyDetector",
    "detect_anomalies",
    "get_anomaly_report",
    "BudgetAlertGenerator",
    "generate_budget_alerts",
    "InvestmentAdvisor",
    "generate_investment_suggestions",
    # Relatório
    "FinancialPredictor",
    "PredictionReport",
    "generate_report",
    "get_predictor",
    "build_insights"
]
