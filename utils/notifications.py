"""
Sistema de Notificações e Alertas
Transforma o relatório de previsões em notificações in-app
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationType(Enum):
    """Tipos de notificação"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class NotificationPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Notification:
    """Representa uma notificação"""

    def __init__(
        self,
        notification_id: str,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        category: str = "system",
        data: Optional[Dict[str, Any]] = None
    ):
        self.id = notification_id
        self.title = title
        self.message = message
        self.type = notification_type
        self.priority = priority
        self.category = category
        self.data = data or {}
        self.created_at = datetime.now()
        self.read = False
        self.read_at = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'message': self.message,
            'type': self.type.value,
            'priority': self.priority.value,
            'category': self.category,
            'data': self.data,
            'created_at': self.created_at.isoformat(),
            'read': self.read,
            'read_at': self.read_at.isoformat() if self.read_at else None
        }

    def mark_as_read(self):
        self.read = True
        self.read_at = datetime.now()


class NotificationManager:
    """
    Gerenciador de notificações geradas pelas análises.

    Ids são determinísticos (ex.: budget-exceeded-<categoria>): gerar o
    mesmo relatório duas vezes atualiza a notificação em vez de duplicá-la,
    e notificações dispensadas não voltam.
    """

    # Templates: (título, mensagem, tipo, prioridade, categoria)
    TEMPLATES = {
        'budget_exceeded': (
            'Orçamento Excedido',
            'O orçamento "{name}" foi excedido em {excess:.1f}%',
            NotificationType.ERROR, NotificationPriority.HIGH, 'budget'
        ),
        'budget_warning': (
            'Orçamento Próximo do Limite',
            'O orçamento "{name}" atingiu {percent:.1f}% do limite',
            NotificationType.WARNING, NotificationPriority.MEDIUM, 'budget'
        ),
        'budget_projection': (
            'Estouro de Orçamento Previsto',
            'No ritmo atual, o orçamento "{name}" deve estourar em R$ {overage:.2f}',
            NotificationType.WARNING, NotificationPriority.LOW, 'budget'
        ),
        'anomaly_detected': (
            'Gasto Atípico',
            'Detectamos um gasto incomum: R$ {amount:.2f} em {category}. {reason}',
            NotificationType.WARNING, NotificationPriority.MEDIUM, 'transaction'
        ),
        'forecast_increase': (
            'Gastos em Alta',
            'Gastos com {category} devem subir para R$ {predicted:.2f} no próximo mês',
            NotificationType.INFO, NotificationPriority.LOW, 'transaction'
        ),
        'investment_tip': (
            'Dica de Investimento',
            '{description}: R$ {amount:.2f} com retorno esperado de {expected_return:.0f}% a.a.',
            NotificationType.INFO, NotificationPriority.LOW, 'investment'
        ),
    }

    LEVEL_MAP = {
        NotificationType.INFO: 'info',
        NotificationType.SUCCESS: 'info',
        NotificationType.WARNING: 'warning',
        NotificationType.ERROR: 'error'
    }

    def __init__(self):
        self._notifications: Dict[str, Notification] = {}
        self._dismissed = set()

    def create_from_template(
        self,
        template_name: str,
        notification_id: str,
        template_data: Dict[str, Any]
    ) -> Optional[Notification]:
        """
        Cria (ou atualiza) uma notificação a partir de template.

        Args:
            template_name: Nome do template
            notification_id: Id determinístico da notificação
            template_data: Dados para preencher o template

        Returns:
            Notificação criada, ou None se dispensada/template inválido
        """
        if template_name not in self.TEMPLATES:
            logger.warning(f"Template não encontrado: {template_name}")
            return None

        if notification_id in self._dismissed:
            return None

        title, message, notification_type, priority, category = self.TEMPLATES[template_name]

        try:
            message = message.format(**template_data)
        except KeyError as e:
            logger.error(f"Dados faltando no template {template_name}: {e}")
            return None

        existing = self._notifications.get(notification_id)
        notification = Notification(
            notification_id=notification_id,
            title=title,
            message=message,
            notification_type=notification_type,
            priority=priority,
            category=category,
            data=template_data
        )
        if existing is not None:
            notification.read = existing.read
            notification.read_at = existing.read_at
        else:
            self._send_to_console(notification)

        self._notifications[notification_id] = notification
        return notification

    def _send_to_console(self, notification: Notification):
        """Envia para console/log"""
        log_func = getattr(logger, self.LEVEL_MAP.get(notification.type, 'info'))
        log_func(f"[{notification.title}] {notification.message}")

    def notify_from_report(self, report) -> List[Notification]:
        """
        Gera notificações para alertas, anomalias, altas de gasto e sugestões.

        Args:
            report: PredictionReport

        Returns:
            Notificações criadas ou atualizadas nesta chamada
        """
        created = []

        for alert in report.budget_alerts:
            if alert.percentage_used >= 100:
                created.append(self.create_from_template(
                    'budget_exceeded', f"budget-exceeded-{alert.category_id}",
                    {'name': alert.category_name, 'excess': alert.percentage_used - 100,
                     'category_id': alert.category_id}
                ))
            elif alert.percentage_used >= 80:
                created.append(self.create_from_template(
                    'budget_warning', f"budget-warning-{alert.category_id}",
                    {'name': alert.category_name, 'percent': alert.percentage_used,
                     'category_id': alert.category_id}
                ))
            else:
                created.append(self.create_from_template(
                    'budget_projection', f"budget-projection-{alert.category_id}",
                    {'name': alert.category_name, 'overage': alert.predicted_overage,
                     'category_id': alert.category_id}
                ))

        for anomaly in report.anomalies:
            created.append(self.create_from_template(
                'anomaly_detected', f"anomaly-{anomaly.transaction_id}",
                {'amount': anomaly.amount, 'category': anomaly.category,
                 'reason': anomaly.reason, 'transaction_id': anomaly.transaction_id}
            ))

        for forecast in report.expense_forecasts:
            if forecast.predicted_next_month > forecast.current_month:
                created.append(self.create_from_template(
                    'forecast_increase', f"forecast-{forecast.category}",
                    {'category': forecast.category, 'predicted': forecast.predicted_next_month}
                ))

        for suggestion in report.investment_suggestions:
            created.append(self.create_from_template(
                'investment_tip', f"investment-{suggestion.type.value}",
                {'description': suggestion.description, 'amount': suggestion.recommended_amount,
                 'expected_return': suggestion.expected_return * 100}
            ))

        return [n for n in created if n is not None]

    def get_notifications(
        self,
        unread_only: bool = False,
        category: Optional[str] = None,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """
        Busca notificações com filtros.

        Args:
            unread_only: Apenas não lidas
            category: Filtrar por categoria (budget, transaction, investment)
            limit: Limite de resultados

        Returns:
            Lista de notificações, mais recentes primeiro
        """
        result = []

        for n in reversed(list(self._notifications.values())):
            if unread_only and n.read:
                continue
            if category and n.category != category:
                continue

            result.append(n.to_dict())

            if len(result) >= limit:
                break

        return result

    def mark_as_read(self, notification_id: str) -> bool:
        """Marca notificação como lida"""
        notification = self._notifications.get(notification_id)
        if notification is None:
            return False
        notification.mark_as_read()
        return True

    def mark_all_as_read(self):
        """Marca todas notificações como lidas"""
        for n in self._notifications.values():
            if not n.read:
                n.mark_as_read()

    def dismiss(self, notification_id: str) -> bool:
        """Remove a notificação e impede que ela seja recriada"""
        self._dismissed.add(notification_id)
        return self._notifications.pop(notification_id, None) is not None

    def get_unread_count(self) -> int:
        """Retorna contagem de não lidas"""
        return sum(1 for n in self._notifications.values() if not n.read)
