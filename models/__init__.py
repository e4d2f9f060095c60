from models.event import Entry, EventKind, Service

__all__ = ["Entry", "EventKind", "Service"]
