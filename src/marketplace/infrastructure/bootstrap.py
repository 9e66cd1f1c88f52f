"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from marketplace.domain.repository.cart_store import CartStore
from marketplace.infrastructure.cache.json_cart_store import JsonCartStore
from marketplace.infrastructure.cache.memory_cart_store import InMemoryCartStore
from marketplace.infrastructure.config import Settings
from marketplace.infrastructure.payments.fake_gateway import FakePaymentGateway
from marketplace.infrastructure.persistence.json_document_store import JsonDocumentStore
from marketplace.infrastructure.persistence.unit_of_work import DocumentUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def document_store() -> JsonDocumentStore:
    return JsonDocumentStore(settings().store_file)


def unit_of_work() -> DocumentUnitOfWork:
    """A fresh unit of work; one per operation."""
    return DocumentUnitOfWork(document_store())


@lru_cache(maxsize=1)
def cart_store() -> CartStore:
    """The configured cart store; ``memory`` carts live only as long as the process."""
    if settings().cart_store == "memory":
        return InMemoryCartStore(ttl=settings().cart_ttl)
    return JsonCartStore(settings().carts_file, ttl=settings().cart_ttl)


@lru_cache(maxsize=1)
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway(webhook_secret=settings().webhook_secret)
