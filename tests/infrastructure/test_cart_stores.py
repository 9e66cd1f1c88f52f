"""Tests shared by every CartStore implementation."""

from datetime import timedelta

import pytest

from marketplace.domain.exceptions import PersistenceError
from marketplace.domain.model.cart import Cart, CartItem
from marketplace.domain.model.value_objects import Money, Quantity
from marketplace.infrastructure.cache.cart_records import cart_from_raw, cart_to_raw
from marketplace.infrastructure.cache.json_cart_store import JsonCartStore
from marketplace.infrastructure.cache.memory_cart_store import InMemoryCartStore
from marketplace.infrastructure.persistence import json_files
from tests.fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "json"])
def carts(request, clock, tmp_path):
    ttl = timedelta(hours=48)
    if request.param == "memory":
        return InMemoryCartStore(ttl=ttl, clock=clock)
    return JsonCartStore(tmp_path / "carts.json", ttl=ttl, clock=clock)


def _cart(cart_id: str = "basket-1") -> Cart:
    cart = Cart(cart_id)
    cart.add_item(
        CartItem(1, "Product A", Money.of("10.00"), Quantity(2), "images/1.png", "Angular", "Boards")
    )
    cart.choose_delivery_method(1, Money.of("3.00"))
    cart.attach_payment_intent("pi_1", "pi_1_secret")
    return cart


class TestCartStore:

    def test_get_missing(self, carts):
        assert carts.get("basket-1") is None

    def test_put_then_get(self, carts):
        carts.put(_cart())
        stored = carts.get("basket-1")
        assert stored == _cart()

    def test_returned_cart_is_a_copy(self, carts):
        carts.put(_cart())
        carts.get("basket-1").remove_item(1)
        assert not carts.get("basket-1").is_empty

    def test_put_replaces(self, carts):
        carts.put(_cart())
        carts.put(Cart("basket-1"))
        assert carts.get("basket-1").is_empty

    def test_carts_are_independent(self, carts):
        carts.put(_cart("basket-1"))
        carts.put(Cart("basket-2"))
        assert not carts.get("basket-1").is_empty
        assert carts.get("basket-2").is_empty

    def test_entry_expires(self, carts, clock):
        carts.put(_cart())
        clock.advance(hours=47)
        assert carts.get("basket-1") is not None
        clock.advance(hours=1)
        assert carts.get("basket-1") is None

    def test_put_refreshes_expiry(self, carts, clock):
        carts.put(_cart())
        clock.advance(hours=40)
        carts.put(carts.get("basket-1"))
        clock.advance(hours=40)
        assert carts.get("basket-1") is not None

    def test_delete(self, carts):
        carts.put(_cart())
        assert carts.delete("basket-1") is True
        assert carts.get("basket-1") is None
        assert carts.delete("basket-1") is False

    def test_delete_expired_reports_missing(self, carts, clock):
        carts.put(_cart())
        clock.advance(hours=49)
        assert carts.delete("basket-1") is False


class TestJsonCartStore:

    def test_carts_survive_reopen(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        JsonCartStore(path, clock=clock).put(_cart())
        assert JsonCartStore(path, clock=clock).get("basket-1") == _cart()

    def test_expired_entries_pruned_on_write(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        carts = JsonCartStore(path, ttl=timedelta(hours=1), clock=clock)
        carts.put(_cart("old"))
        clock.advance(hours=2)
        carts.put(_cart("new"))
        assert '"old"' not in path.read_text()

    def test_corrupt_file_raises_persistence_error(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        carts = JsonCartStore(path, clock=clock)
        path.write_text('{"a": ')
        with pytest.raises(PersistenceError, match="Cannot read"):
            carts.get("a")

    def test_non_object_file_rejected(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        path.write_text("[]")
        carts = JsonCartStore(path, clock=clock)
        with pytest.raises(PersistenceError, match="expected a JSON object"):
            carts.put(_cart())

    def test_malformed_entry_rejected(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        path.write_text('{"a": {"expires_at": "2999-01-01T00:00:00+00:00", "cart": {}}}')
        with pytest.raises(PersistenceError, match="malformed"):
            JsonCartStore(path, clock=clock).get("a")

    def test_entry_without_expiry_rejected(self, tmp_path, clock):
        path = tmp_path / "carts.json"
        path.write_text('{"a": {"cart": {}}}')
        with pytest.raises(PersistenceError, match="no valid expiry"):
            JsonCartStore(path, clock=clock).get("a")

    def test_write_leaves_no_temp_files(self, tmp_path, clock):
        carts = JsonCartStore(tmp_path / "carts.json", clock=clock)
        carts.put(_cart())
        carts.delete("basket-1")
        assert [p.name for p in tmp_path.iterdir()] == ["carts.json"]

    def test_failed_write_keeps_previous_file(self, tmp_path, clock, monkeypatch):
        path = tmp_path / "carts.json"
        carts = JsonCartStore(path, clock=clock)
        carts.put(_cart("kept"))
        before = path.read_text()

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(json_files.os, "replace", fail_replace)
        with pytest.raises(PersistenceError, match="Cannot write"):
            carts.put(_cart("lost"))
        monkeypatch.undo()

        assert path.read_text() == before
        assert [p.name for p in tmp_path.iterdir()] == ["carts.json"]


class TestInMemoryCartStore:

    def test_expired_entries_swept_on_put(self, clock):
        carts = InMemoryCartStore(ttl=timedelta(hours=1), clock=clock)
        for n in range(100):
            carts.put(_cart(f"basket-{n}"))
        assert len(carts) == 100

        clock.advance(hours=2)
        carts.put(_cart("fresh"))

        assert len(carts) == 1
        assert carts.get("fresh") is not None

    def test_live_entries_survive_sweep(self, clock):
        carts = InMemoryCartStore(ttl=timedelta(hours=1), clock=clock)
        carts.put(_cart("old"))
        clock.advance(minutes=30)
        carts.put(_cart("new"))
        assert len(carts) == 2


class TestCartRecords:

    def test_shipping_currency_kept(self):
        cart = Cart("basket-1")
        cart.choose_delivery_method(1, Money.of("3.00", "EUR"))
        restored = cart_from_raw(cart_to_raw(cart))
        assert restored.shipping_price == Money.of("3.00", "EUR")

    def test_records_without_shipping_currency_default_to_usd(self):
        raw = cart_to_raw(_cart())
        del raw["shipping_currency"]
        assert cart_from_raw(raw).shipping_price == Money.of("3.00")
