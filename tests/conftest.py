"""
Fixtures compartilhadas: um histórico de usuário com dados suficientes para o relatório
"""
import pytest
from datetime import datetime


@pytest.fixture
def now():
    return datetime(2024, 3, 20)


@pytest.fixture
def categories():
    return [
        {'id': 1, 'name': 'Alimentação', 'type': 'expense'},
        {'id': 2, 'name': 'Lazer', 'type': 'expense'},
        {'id': 3, 'name': 'Salário', 'type': 'income'},
    ]


@pytest.fixture
def transactions():
    """
    Dez transações:
    - Alimentação: 100 em janeiro, 150 em fevereiro (alta)
    - Lazer: cinco de 100 e uma de 1000 em março (anomalia)
    - Salário: 5000 em fevereiro e março
    """
    rows = [
        {'id': 1, 'amount': '100.00', 'type': 'expense', 'categoryId': 1, 'date': '2024-01-10'},
        {'id': 2, 'amount': '150.00', 'type': 'expense', 'categoryId': 1, 'date': '2024-02-10'},
    ]
    for tid in range(3, 8):
        rows.append({'id': tid, 'amount': '100.00', 'type': 'expense', 'categoryId': 2, 'date': '2024-03-05'})
    rows.append({'id': 8, 'amount': '1000.00', 'type': 'expense', 'categoryId': 2, 'date': '2024-03-15'})
    rows.append({'id': 9, 'amount': '5000.00', 'type': 'income', 'categoryId': 3, 'date': '2024-02-01'})
    rows.append({'id': 10, 'amount': '5000.00', 'type': 'income', 'categoryId': 3, 'date': '2024-03-01'})
    return rows


@pytest.fixture
def budgets():
    return [{'id': 1, 'categoryId': 2, 'amount': '1000.00', 'name': 'Lazer', 'isActive': True}]


@pytest.fixture
def accounts():
    return [
        {'type': 'savings', 'balance': '1000.00'},
        {'type': 'credit_card', 'balance': '-300.00'},
    ]
