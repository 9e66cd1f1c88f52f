"""Payment gateway port (abstract interface).

Defines the contract for the external payment-intent service.  Adapters
raise PaymentServiceError when the service errors or times out; callers
must not assume anything changed on the gateway side in that case.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentIntent:
    """The gateway's handle for an amount to be collected."""

    id: str
    client_secret: str
    amount: int  # minor units
    currency: str


class PaymentGateway(ABC):

    @abstractmethod
    def create_intent(self, amount: int, currency: str) -> PaymentIntent:
        """Create a new payment intent for *amount* minor units."""

    @abstractmethod
    def update_intent(self, intent_id: str, amount: int) -> PaymentIntent:
        """Change the amount of an existing intent."""

    @abstractmethod
    def verify_signature(self, payload: str, signature: str) -> bool:
        """Check that a notification payload really came from the gateway."""
