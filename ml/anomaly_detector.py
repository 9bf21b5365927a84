"""
Detector de anomalias em transações financeiras
Usa z-score por categoria para identificar despesas fora do padrão
"""
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from config import (
    ANOMALY_Z_THRESHOLD,
    ANOMALY_MEAN_MULTIPLIER,
    ANOMALY_REASON_FACTOR,
    MAX_ANOMALIES,
)
from ml.records import (
    AnomalyDetection,
    Category,
    Transaction,
    TransactionType,
    parse_records,
)
from utils.logger import get_logger, log_prediction

logger = get_logger(__name__)

UNKNOWN_CATEGORY = "Desconhecida"


class AnomalyDetector:
    """
    Detector de despesas atípicas por categoria.

    Uma despesa é anômala quando, dentro da própria categoria:
    - está acima da média e a mais de `z_threshold` desvios padrão dela; e
    - supera a média em `mean_multiplier` vezes.

    Categorias sem variação (desvio padrão zero) não têm outliers.
    """

    def __init__(
        self,
        z_threshold: float = ANOMALY_Z_THRESHOLD,
        mean_multiplier: float = ANOMALY_MEAN_MULTIPLIER,
        max_results: int = MAX_ANOMALIES
    ):
        """
        Inicializa o detector de anomalias.

        Args:
            z_threshold: z-score mínimo para considerar um valor atípico
            mean_multiplier: Quantas vezes a média o valor precisa superar
            max_results: Limite de anomalias retornadas
        """
        self.z_threshold = z_threshold
        self.mean_multiplier = mean_multiplier
        self.max_results = max_results

    def _group_by_category(self, transactions: List[Transaction]) -> Dict[Any, List[Transaction]]:
        """Agrupa despesas por categoria, na ordem em que aparecem"""
        groups = OrderedDict()
        for transaction in transactions:
            if transaction.type != TransactionType.EXPENSE:
                continue
            groups.setdefault(transaction.category_id, []).append(transaction)
        return groups

    def _reason(self, z_score: float) -> str:
        # z * 50 exibido como percentual; não é um percentil de verdade
        return f"Valor {z_score * ANOMALY_REASON_FACTOR:.0f}% acima da média para esta categoria"

    def detect(
        self,
        transactions: Iterable[Any],
        categories: Optional[Iterable[Any]] = None
    ) -> List[AnomalyDetection]:
        """
        Detecta despesas anômalas.

        Args:
            transactions: Transações (registros ou dicionários da API)
            categories: Categorias opcionais, usadas para nomear a categoria
                quando a transação não traz o nome embutido

        Returns:
            Até `max_results` anomalias, da mais severa para a menos severa
        """
        transactions = parse_records(transactions, Transaction)
        names = {c.id: c.name for c in parse_records(categories, Category)}

        anomalies = []
        for category_id, group in self._group_by_category(transactions).items():
            amounts = np.array([t.amount for t in group], dtype=float)
            mean = amounts.mean()
            std = amounts.std()  # Desvio padrão populacional

            if std == 0 or not np.isfinite(std):
                logger.debug(f"Categoria {category_id} sem variação, ignorada")
                continue

            for transaction, amount in zip(group, amounts):
                z_score = float(abs(amount - mean) / std)

                if (
                    z_score > self.z_threshold
                    and amount > mean
                    and amount > mean * self.mean_multiplier
                ):
                    anomalies.append(AnomalyDetection(
                        transaction_id=transaction.id,
                        amount=float(amount),
                        category=transaction.category_name or names.get(category_id, UNKNOWN_CATEGORY),
                        date=transaction.date,
                        anomaly_score=z_score,
                        reason=self._reason(z_score)
                    ))

        # Ordenação estável: empates mantêm a ordem de descoberta
        anomalies.sort(key=lambda a: a.anomaly_score, reverse=True)
        result = anomalies[:self.max_results]

        log_prediction(logger, "anomaly_detection", len(result), flagged=len(anomalies))
        return result

    def get_anomaly_summary(self, anomalies: List[AnomalyDetection]) -> Dict[str, Any]:
        """
        Gera resumo das anomalias detectadas.

        Args:
            anomalies: Resultado de `detect`

        Returns:
            Dicionário com totais por categoria
        """
        if not anomalies:
            return {
                'total_anomalies': 0,
                'total_value': 0.0,
                'average_score': 0.0,
                'categories': {}
            }

        categories = {}
        for a in anomalies:
            entry = categories.setdefault(a.category, {'count': 0, 'total': 0.0})
            entry['count'] += 1
            entry['total'] += a.amount

        return {
            'total_anomalies': len(anomalies),
            'total_value': sum(a.amount for a in anomalies),
            'average_score': float(np.mean([a.anomaly_score for a in anomalies])),
            'categories': categories
        }


def detect_anomalies(
    transactions: Iterable[Any],
    categories: Optional[Iterable[Any]] = None
) -> List[AnomalyDetection]:
    """Detecta anomalias em transações (função de conveniência)"""
    return AnomalyDetector().detect(transactions, categories)


def get_anomaly_report(
    transactions: Iterable[Any],
    categories: Optional[Iterable[Any]] = None
) -> Dict[str, Any]:
    """
    Gera relatório de anomalias.

    Args:
        transactions: Lista de transações
        categories: Categorias opcionais para nomear os grupos

    Returns:
        Relatório resumido
    """
    detector = AnomalyDetector()
    return detector.get_anomaly_summary(detector.detect(transactions, categories))
