from notifiers.base import DeliveryResult, Notifier
from notifiers.slack import SlackWebhookNotifier

__all__ = ["DeliveryResult", "Notifier", "SlackWebhookNotifier"]
