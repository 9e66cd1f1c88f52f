"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so outer layers can catch them uniformly.  Each subclass carries a stable
``kind`` so a presentation layer can pick a response without parsing
message text.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    VALIDATION = "validation"
    PAYMENT_SERVICE = "payment_service"
    PERSISTENCE = "persistence"


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = ErrorKind.VALIDATION


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or has expired)."""

    kind = ErrorKind.NOT_FOUND


class InsufficientStockError(DomainException):
    """Fulfilling a request would drive product stock below zero."""

    kind = ErrorKind.INSUFFICIENT_STOCK


class PaymentServiceError(DomainException):
    """The external payment service errored or timed out."""

    kind = ErrorKind.PAYMENT_SERVICE


class PersistenceError(DomainException):
    """A unit-of-work commit failed; nothing was written."""

    kind = ErrorKind.PERSISTENCE


class ConcurrencyConflictError(PersistenceError):
    """A record changed underneath us since it was read."""
