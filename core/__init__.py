from core.composer import NotificationComposer
from core.debounce import Debouncer, debounce
from core.dispatch import DeliveryDispatcher
from core.errors import ConfigurationError, OutageRelayError
from core.flush import FlushHandler
from core.reconciliation import Drained, ReconciliationStore
from core.router import EventRouter
from core.session import ReconciliationSession

__all__ = [
    "ConfigurationError",
    "Debouncer",
    "DeliveryDispatcher",
    "Drained",
    "EventRouter",
    "FlushHandler",
    "NotificationComposer",
    "OutageRelayError",
    "ReconciliationSession",
    "ReconciliationStore",
    "debounce",
]
