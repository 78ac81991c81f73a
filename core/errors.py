"""Domain errors carrying a tracking id, timestamp and context."""

import uuid

from utils.timestamp import format_timestamp


class LifeError(Exception):
    """Base error with a short unique id and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = uuid.uuid4().hex[:12]
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"


class EmptyDomainError(LifeError):
    """World construction attempted without any coordinates."""


class DomainShapeError(LifeError):
    """Initial table is not rectangular."""

    def __init__(self, message, row=None, length=None, expected=None, **kwargs):
        context = kwargs.pop("context", {})
        if row is not None:
            context.update(row=row, length=length, expected=expected)
        super().__init__(message, context=context, **kwargs)


class PatternError(LifeError):
    """Unknown seed pattern or a board too small to hold it."""

    def __init__(self, message, pattern=None, **kwargs):
        context = kwargs.pop("context", {})
        if pattern:
            context["pattern"] = pattern
        super().__init__(message, context=context, **kwargs)


class BusError(LifeError):
    """Event bus errors (subscribe/publish failures)."""

    def __init__(self, message, subscriber_name=None, **kwargs):
        context = kwargs.pop("context", {})
        if subscriber_name:
            context["subscriber_name"] = subscriber_name
        super().__init__(message, context=context, **kwargs)

