"""
Testes para o módulo de previsão de gastos
"""
import pytest
import sys
from pathlib import Path
from datetime import date

sys.path.insert(0, str(Path(__file__).parent.parent))

from ml.expense_forecaster import (
    ExpenseForecaster,
    consistency_score,
    monthly_expenses_by_category,
    predict_expenses,
)
from ml.records import Transaction, TransactionType, Trend


CATEGORIES = [
    {'id': 1, 'name': 'Alimentação', 'type': 'expense'},
    {'id': 2, 'name': 'Transporte', 'type': 'expense'},
    {'id': 3, 'name': 'Salário', 'type': 'income'},
]


def _tx(amount, day, category_id=1, kind='expense', tid=None):
    return {
        'id': tid,
        'amount': amount,
        'type': kind,
        'categoryId': category_id,
        'date': day
    }


class TestExpenseForecaster:
    """Testes para a classe ExpenseForecaster"""

    def test_increasing_trend_scenario(self):
        """Testa Jan=100, Fev=150 -> crescente, previsão 225"""
        transactions = [
            _tx('100.00', '2024-01-10'),
            _tx('150.00', '2024-02-10'),
        ]

        forecasts = ExpenseForecaster().forecast(transactions, CATEGORIES)

        assert len(forecasts) == 1
        forecast = forecasts[0]
        assert forecast.category == 'Alimentação'
        assert forecast.trend == Trend.INCREASING
        assert forecast.current_month == pytest.approx(150)
        assert forecast.predicted_next_month == pytest.approx(225)
        # cv = 25 / 125 = 0.2
        assert forecast.confidence == pytest.approx(0.8)

    def test_constant_spending_is_stable(self):
        """Testa que gastos constantes geram tendência estável"""
        transactions = [
            _tx(200, '2024-01-05'),
            _tx(200, '2024-02-05'),
            _tx(120, '2024-03-05'),
            _tx(80, '2024-03-20'),
        ]

        forecast = ExpenseForecaster().forecast(transactions, CATEGORIES)[0]

        assert forecast.trend == Trend.STABLE
        assert forecast.predicted_next_month == pytest.approx(forecast.current_month)
        assert forecast.confidence == pytest.approx(1.0)

    def test_decreasing_trend_across_years(self):
        """Testa virada de ano: Dez=300, Jan=150 -> decrescente, previsão 75"""
        transactions = [
            _tx(150, '2024-01-15'),
            _tx(300, '2023-12-15'),
        ]

        forecast = ExpenseForecaster().forecast(transactions, CATEGORIES)[0]

        assert forecast.trend == Trend.DECREASING
        assert forecast.current_month == pytest.approx(150)
        assert forecast.predicted_next_month == pytest.approx(75)

    def test_prediction_is_never_negative(self):
        """Testa que quedas fortes são limitadas a zero"""
        transactions = [
            _tx(1000, '2024-01-15'),
            _tx(10, '2024-02-15'),
        ]

        forecast = ExpenseForecaster().forecast(transactions, CATEGORIES)[0]

        assert forecast.predicted_next_month >= 0

    def test_zero_previous_month(self):
        """Testa mês anterior zerado: taxa de variação 0"""
        transactions = [
            _tx(0, '2024-01-15'),
            _tx(50, '2024-02-15'),
        ]

        forecast = ExpenseForecaster().forecast(transactions, CATEGORIES)[0]

        assert forecast.trend == Trend.INCREASING
        assert forecast.predicted_next_month == pytest.approx(50)
        assert forecast.confidence == pytest.approx(0.1)

    def test_single_month_is_skipped(self):
        """Testa que categorias com menos de 2 meses não geram previsão"""
        transactions = [
            _tx(100, '2024-01-05'),
            _tx(300, '2024-01-25'),
            _tx(40, '2024-01-10', category_id=2),
            _tx(60, '2024-02-10', category_id=2),
        ]

        forecasts = ExpenseForecaster().forecast(transactions, CATEGORIES)

        assert [f.category for f in forecasts] == ['Transporte']

    def test_income_categories_are_ignored(self):
        """Testa que categorias de receita não recebem previsão"""
        transactions = [
            _tx(5000, '2024-01-05', category_id=3, kind='income'),
            _tx(5200, '2024-02-05', category_id=3, kind='income'),
        ]

        assert ExpenseForecaster().forecast(transactions, CATEGORIES) == []

    def test_malformed_rows_are_dropped(self):
        """Testa que registros inválidos não derrubam a previsão"""
        transactions = [
            _tx('100', '2024-01-10'),
            _tx('abc', '2024-01-11'),
            _tx('150', 'não é data'),
            _tx('150', '2024-02-10'),
        ]

        forecast = ExpenseForecaster().forecast(transactions, CATEGORIES)[0]

        assert forecast.current_month == pytest.approx(150)

    def test_string_category_id_matches_numeric(self):
        """Testa que categoryId em string casa com o id numérico da categoria"""
        transactions = [
            _tx('100.00', '2024-01-10', category_id='1'),
            _tx('150.00', '2024-02-10', category_id='1'),
        ]

        forecasts = predict_expenses(transactions, CATEGORIES)

        assert len(forecasts) == 1
        assert forecasts[0].category == 'Alimentação'
        assert forecasts[0].predicted_next_month == pytest.approx(225)

    def test_mixed_id_types_sum_in_same_month(self):
        """Testa que "2" e 2 somam na mesma série mensal"""
        transactions = [
            _tx(40, '2024-01-10', category_id='2'),
            _tx(60, '2024-01-20', category_id=2),
            _tx(100, '2024-02-10', category_id=' 2 '),
        ]

        forecast = predict_expenses(transactions, CATEGORIES)[0]

        assert forecast.category == 'Transporte'
        assert forecast.trend == Trend.STABLE
        assert forecast.current_month == pytest.approx(100)

    def test_convenience_function(self):
        """Testa função de conveniência"""
        transactions = [_tx(100, '2024-01-10'), _tx(150, '2024-02-10')]
        assert len(predict_expenses(transactions, CATEGORIES)) == 1


class TestMonthlyAggregation:
    """Testes para a agregação mensal"""

    def test_monthly_totals_are_chronological(self):
        """Testa soma por mês em ordem cronológica, independente da entrada"""
        transactions = [
            Transaction(1, 30.0, TransactionType.EXPENSE, 1, date(2024, 3, 2)),
            Transaction(2, 10.0, TransactionType.EXPENSE, 1, date(2024, 1, 2)),
            Transaction(3, 15.0, TransactionType.EXPENSE, 1, date(2024, 1, 20)),
            Transaction(4, 99.0, TransactionType.INCOME, 1, date(2024, 2, 1)),
            Transaction(5, 7.0, TransactionType.EXPENSE, 2, date(2024, 2, 1)),
        ]

        monthly = monthly_expenses_by_category(transactions)

        assert monthly[1] == [25.0, 30.0]
        assert monthly[2] == [7.0]

    def test_no_expenses(self):
        """Testa agregação vazia"""
        assert monthly_expenses_by_category([]) == {}


class TestConsistencyScore:
    """Testes para a confiança baseada no coeficiente de variação"""

    def test_single_value_defaults(self):
        assert consistency_score([100]) == 0.5

    def test_zero_mean(self):
        """Testa série zerada sem divisão por zero"""
        assert consistency_score([0, 0, 0]) == 1.0

    def test_bounds(self):
        """Testa que a confiança fica entre 0.1 e 1"""
        for values in ([1, 1000], [5, 5], [10, 20, 30], [0, 100, 0, 100]):
            score = consistency_score(values)
            assert 0.1 <= score <= 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
