"""
Testes para os registros de entrada e saída
"""
import pytest
import sys
from pathlib import Path
from datetime import date, datetime
from decimal import Decimal

sys.path.insert(0, str(Path(__file__).parent.parent))

from ml.exceptions import InvalidRecordError
from ml.records import (
    AnomalyDetection,
    Budget,
    Category,
    Investment,
    Transaction,
    TransactionType,
    parse_amount,
    parse_date,
    parse_records,
)


class TestParseAmount:
    """Testes para conversão de valores monetários"""

    @pytest.mark.parametrize("raw, expected", [
        ('12.50', 12.5),
        (' 100 ', 100.0),
        (7, 7.0),
        (3.25, 3.25),
        (Decimal('0.10'), 0.1),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, True, 'abc', '', 'NaN', 'Infinity', [1]])
    def test_invalid_amounts(self, raw):
        with pytest.raises(InvalidRecordError):
            parse_amount(raw)

    def test_error_carries_field(self):
        """Testa que o erro informa campo e valor"""
        with pytest.raises(InvalidRecordError) as exc_info:
            parse_amount('dez reais', 'balance')

        assert exc_info.value.field == 'balance'
        assert exc_info.value.value == 'dez reais'
        assert isinstance(exc_info.value, ValueError)


class TestParseDate:
    """Testes para conversão de datas"""

    def test_iso_string(self):
        assert parse_date('2024-03-01') == date(2024, 3, 1)

    def test_iso_timestamp(self):
        assert parse_date('2024-03-01T10:30:00Z') == date(2024, 3, 1)

    def test_date_and_datetime(self):
        assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
        assert parse_date(datetime(2024, 1, 2, 23, 59)) == date(2024, 1, 2)

    @pytest.mark.parametrize("raw", [None, '', 'não é data', 'NaT', 20240101])
    def test_invalid_dates(self, raw):
        with pytest.raises(InvalidRecordError):
            parse_date(raw)


class TestFromDict:
    """Testes para conversão dos objetos da API"""

    def test_transaction_camel_case_with_nested_category(self):
        row = {
            'id': 42,
            'amount': '89.90',
            'type': 'expense',
            'categoryId': 3,
            'date': '2024-05-10',
            'category': {'id': 3, 'name': 'Lazer'}
        }

        transaction = Transaction.from_dict(row)

        assert transaction.id == 42
        assert transaction.amount == pytest.approx(89.90)
        assert transaction.type == TransactionType.EXPENSE
        assert transaction.category_id == 3
        assert transaction.date == date(2024, 5, 10)
        assert transaction.category_name == 'Lazer'

    def test_transaction_snake_case(self):
        row = {'amount': 10, 'type': 'income', 'category_id': 1, 'date': '2024-05-10'}

        transaction = Transaction.from_dict(row)

        assert transaction.category_id == 1
        assert transaction.id is None
        assert transaction.category_name is None

    def test_transaction_unknown_type(self):
        row = {'amount': 10, 'type': 'refund', 'categoryId': 1, 'date': '2024-05-10'}

        with pytest.raises(InvalidRecordError):
            Transaction.from_dict(row)

    def test_transaction_missing_field(self):
        with pytest.raises(InvalidRecordError) as exc_info:
            Transaction.from_dict({'amount': 10, 'type': 'expense', 'date': '2024-05-10'})

        assert exc_info.value.field == 'categoryId'

    def test_budget_defaults_to_active(self):
        budget = Budget.from_dict({'categoryId': 1, 'amount': '500', 'name': 'Mercado'})
        assert budget.is_active is True

        inactive = Budget.from_dict({'categoryId': 1, 'amount': '500', 'isActive': False})
        assert inactive.is_active is False

    @pytest.mark.parametrize("raw, expected", [
        ('false', False),
        ('False', False),
        ('0', False),
        (0, False),
        ('true', True),
        (1, True),
    ])
    def test_budget_string_booleans(self, raw, expected):
        """Testa isActive em string ou número"""
        budget = Budget.from_dict({'categoryId': 1, 'amount': '500', 'isActive': raw})
        assert budget.is_active is expected

    @pytest.mark.parametrize("raw", ['talvez', 2, 1.5, []])
    def test_budget_invalid_boolean(self, raw):
        with pytest.raises(InvalidRecordError):
            Budget.from_dict({'categoryId': 1, 'amount': '500', 'isActive': raw})

    @pytest.mark.parametrize("raw, expected", [
        ('1', 1),
        (' 42 ', 42),
        ('-3', -3),
        (7, 7),
        ('01', '01'),
        ('abc-123', 'abc-123'),
    ])
    def test_ids_are_normalized(self, raw, expected):
        """Testa ids numéricos em string convertidos para int"""
        row = {'id': raw, 'amount': 10, 'type': 'expense', 'categoryId': raw, 'date': '2024-05-10'}

        transaction = Transaction.from_dict(row)
        category = Category.from_dict({'id': raw, 'name': 'X', 'type': 'expense'})

        assert transaction.id == expected
        assert transaction.category_id == expected
        assert category.id == transaction.category_id

    def test_investment_value(self):
        """Testa valor atual com fallback para o aporte inicial"""
        quoted = Investment.from_dict({'initialAmount': '1000', 'currentAmount': '1200'})
        unquoted = Investment.from_dict({'initialAmount': '1000', 'currentAmount': None})

        assert quoted.value == pytest.approx(1200)
        assert unquoted.value == pytest.approx(1000)


class TestParseRecords:
    """Testes para conversão de coleções"""

    ROWS = [
        {'amount': '10', 'type': 'expense', 'categoryId': 1, 'date': '2024-01-01'},
        {'amount': 'xx', 'type': 'expense', 'categoryId': 1, 'date': '2024-01-01'},
        'não é um objeto',
        {'amount': '20', 'type': 'expense', 'categoryId': 1, 'date': '2024-01-02'},
    ]

    def test_lenient_drops_invalid_rows(self):
        records = parse_records(self.ROWS, Transaction)
        assert [r.amount for r in records] == [10.0, 20.0]

    def test_strict_raises(self):
        with pytest.raises(InvalidRecordError):
            parse_records(self.ROWS, Transaction, strict=True)

    def test_typed_records_pass_through(self):
        transaction = Transaction(1, 5.0, TransactionType.EXPENSE, 1, date(2024, 1, 1))
        assert parse_records([transaction], Transaction) == [transaction]

    def test_none_is_empty(self):
        assert parse_records(None, Transaction) == []


class TestSerialization:
    def test_to_dict_uses_plain_values(self):
        anomaly = AnomalyDetection(
            transaction_id=1,
            amount=1000.0,
            category='Mercado',
            date=date(2024, 3, 1),
            anomaly_score=2.5,
            reason='Valor 125% acima da média para esta categoria'
        )

        data = anomaly.to_dict()

        assert data['date'] == '2024-03-01'
        assert data['anomaly_score'] == 2.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
