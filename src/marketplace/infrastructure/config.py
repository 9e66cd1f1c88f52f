"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from marketplace.domain.exceptions import ValidationError

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

CART_STORES = ("json", "memory")


@dataclass(frozen=True)
class Settings:
    """Settings for one process.

    ``currency`` is the currency payment intents are requested in.  It
    must name the currency the catalog is priced in (the sample catalog
    is USD); the payment intent use case refuses carts priced otherwise.
    """

    data_dir: Path = _DEFAULT_DATA_DIR
    cart_ttl: timedelta = timedelta(hours=48)
    cart_store: str = "json"
    currency: str = "usd"
    webhook_secret: str = "whsec_test"
    env: str = "development"

    @property
    def store_file(self) -> Path:
        return self.data_dir / "store.json"

    @property
    def carts_file(self) -> Path:
        return self.data_dir / "carts.json"

    @staticmethod
    def from_env() -> Settings:
        raw_ttl = os.getenv("MARKETPLACE_CART_TTL_HOURS", "48")
        try:
            ttl_hours = float(raw_ttl)
        except ValueError as exc:
            raise ValidationError(f"Invalid MARKETPLACE_CART_TTL_HOURS: {raw_ttl!r}") from exc
        if ttl_hours <= 0:
            raise ValidationError("MARKETPLACE_CART_TTL_HOURS must be positive")

        cart_store = os.getenv("MARKETPLACE_CART_STORE", "json").lower()
        if cart_store not in CART_STORES:
            raise ValidationError(
                f"MARKETPLACE_CART_STORE must be one of {', '.join(CART_STORES)}, "
                f"got {cart_store!r}"
            )

        return Settings(
            data_dir=Path(os.getenv("MARKETPLACE_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            cart_ttl=timedelta(hours=ttl_hours),
            cart_store=cart_store,
            currency=os.getenv("MARKETPLACE_CURRENCY", "usd").lower(),
            webhook_secret=os.getenv("MARKETPLACE_WEBHOOK_SECRET", "whsec_test"),
            env=(os.getenv("MARKETPLACE_ENV") or os.getenv("ENVIRONMENT") or "development").lower(),
        )
