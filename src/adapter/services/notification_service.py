"""Notification Service Implementations

Provides concrete implementations for sending recurring invoice reminders.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.recurring_invoice import RecurringInvoice, RecurrenceFrequency
from src.domain.schedule import reminder_key

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs reminders

    Useful for development and testing, or as a fallback.
    """

    async def send_reminder(self, series: RecurringInvoice) -> bool:
        """
        Log reminder

        Args:
            series: RecurringInvoice about to generate

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[RECURRING INVOICE REMINDER] Series: {series.id}, "
            f"Client: {series.client_id}, "
            f"Next generation: {series.next_generation_date.isoformat()}, "
            f"Days before: {series.notification_days_before}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends reminders via HTTP webhook

    Sends JSON payload to configured webhook URL. The payload carries an
    idempotency key so the receiver can drop duplicates.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST reminders to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_reminder(self, series: RecurringInvoice) -> bool:
        """
        Send reminder via webhook

        Args:
            series: RecurringInvoice about to generate

        Returns:
            True if webhook call succeeded, False otherwise
        """
        key = reminder_key(series)
        payload = {
            "type": "recurring_invoice_reminder",
            "idempotency_key": key,
            "series_id": series.id,
            "workspace_id": series.workspace_id,
            "client_id": series.client_id,
            "name": series.name,
            "frequency": RecurrenceFrequency(series.frequency).value,
            "next_generation_date": series.next_generation_date.isoformat(),
            "notification_days_before": series.notification_days_before,
            "recipient_email": series.recipient_email,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json", "Idempotency-Key": key},
                )
                response.raise_for_status()
                logger.info(f"Webhook reminder {key} sent to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook reminder {key}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_reminder(self, series: RecurringInvoice) -> bool:
        """
        Send reminder to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_reminder(series):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
