"""
Resumo das previsões em insights com severidade e impacto estimado
"""
from typing import List

from ml.predictor import PredictionReport
from ml.records import (
    AnomalyDetection,
    BudgetAlert,
    ExpenseForecast,
    InvestmentSuggestion,
    PredictionInsight,
    PredictionType,
    RiskLevel,
    Severity,
    Trend,
)

SEVERITY_ORDER = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}

RISK_TO_SEVERITY = {
    RiskLevel.LOW: Severity.LOW,
    RiskLevel.MEDIUM: Severity.MEDIUM,
    RiskLevel.HIGH: Severity.HIGH,
}

SUGGESTION_CONFIDENCE = 0.6


def forecast_insight(forecast: ExpenseForecast) -> PredictionInsight:
    if forecast.current_month > 0:
        growth = (forecast.predicted_next_month - forecast.current_month) / forecast.current_month
    else:
        growth = 0.0

    if growth >= 0.5:
        severity = Severity.HIGH
    elif growth >= 0.2:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW

    return PredictionInsight(
        type=PredictionType.EXPENSE_FORECAST,
        confidence=forecast.confidence,
        description=(
            f"Gastos com {forecast.category} devem chegar a "
            f"R$ {forecast.predicted_next_month:.2f} no próximo mês ({growth * 100:+.1f}%)"
        ),
        recommendation=f"Revise os gastos com {forecast.category} antes do fechamento do mês",
        severity=severity,
        estimated_impact=forecast.predicted_next_month - forecast.current_month
    )


def anomaly_insight(anomaly: AnomalyDetection) -> PredictionInsight:
    return PredictionInsight(
        type=PredictionType.ANOMALY_DETECTION,
        confidence=min(1.0, anomaly.anomaly_score / 4),
        description=f"Gasto atípico de R$ {anomaly.amount:.2f} em {anomaly.category}: {anomaly.reason}",
        recommendation="Confirme se a transação foi reconhecida e planejada",
        severity=Severity.HIGH if anomaly.anomaly_score >= 3 else Severity.MEDIUM,
        estimated_impact=anomaly.amount
    )


def budget_insight(alert: BudgetAlert) -> PredictionInsight:
    if alert.percentage_used > 100:
        severity = Severity.HIGH
        description = f"Orçamento '{alert.category_name}' excedido ({alert.percentage_used:.0f}%)"
    elif alert.percentage_used > 80:
        severity = Severity.MEDIUM
        description = f"Orçamento '{alert.category_name}' em {alert.percentage_used:.0f}% do limite"
    else:
        severity = Severity.LOW
        description = (
            f"No ritmo atual, '{alert.category_name}' deve estourar "
            f"em R$ {alert.predicted_overage:.2f}"
        )

    return PredictionInsight(
        type=PredictionType.BUDGET_ALERT,
        category_id=alert.category_id,
        confidence=1.0 if alert.percentage_used > 100 else 0.8,
        description=description,
        recommendation=f"Reduza os gastos nos {alert.days_until_month_end} dias restantes do mês",
        severity=severity,
        estimated_impact=alert.predicted_overage
    )


def suggestion_insight(suggestion: InvestmentSuggestion) -> PredictionInsight:
    return PredictionInsight(
        type=PredictionType.INVESTMENT_SUGGESTION,
        confidence=SUGGESTION_CONFIDENCE,
        description=suggestion.description,
        recommendation=(
            f"Aplique R$ {suggestion.recommended_amount:.2f} "
            f"(retorno esperado de {suggestion.expected_return * 100:.0f}% a.a.)"
        ),
        severity=RISK_TO_SEVERITY[suggestion.risk_level],
        estimated_impact=suggestion.recommended_amount * suggestion.expected_return
    )


def build_insights(report: PredictionReport) -> List[PredictionInsight]:
    """
    Converte um relatório em insights, dos mais severos para os menos.

    Previsões só viram insight quando a tendência é de alta.
    """
    insights = [
        forecast_insight(f) for f in report.expense_forecasts if f.trend == Trend.INCREASING
    ]
    insights += [anomaly_insight(a) for a in report.anomalies]
    insights += [budget_insight(b) for b in report.budget_alerts]
    insights += [suggestion_insight(s) for s in report.investment_suggestions]

    insights.sort(key=lambda i: SEVERITY_ORDER[i.severity])
    return insights
