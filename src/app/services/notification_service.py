"""Notification Service Interface

Defines the contract for sending pre-generation reminders.
"""

from abc import ABC, abstractmethod
from src.domain.recurring_invoice import RecurringInvoice


class NotificationService(ABC):
    """
    Abstract notification service for recurring invoice reminders

    Implementations can send notifications via:
    - Webhook (HTTP POST)
    - Logging
    - Email / WhatsApp gateways behind a webhook
    """

    @abstractmethod
    async def send_reminder(self, series: RecurringInvoice) -> bool:
        """
        Send a reminder that series will generate an invoice soon

        Args:
            series: RecurringInvoice about to generate

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
