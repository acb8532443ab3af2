"""
Tests for the cart store
"""

import pytest

from storefront.cart import CartStore, ItemKey, LineItem
from storefront.catalog import Size


class TestLineItem:
    """Tests for LineItem dataclass."""

    def test_from_product(self, beast_mode):
        item = LineItem.from_product(beast_mode, Size.M, "Charcoal")

        assert item.product_id == 1
        assert item.name == "Beast Mode Tee"
        assert item.unit_price == 899
        assert item.image_ref == "/images/beastmode.jpg"
        assert item.quantity == 1
        assert item.key == ItemKey(1, Size.M, "Charcoal")

    def test_size_string_is_coerced(self):
        item = LineItem(product_id=1, name="Tee", unit_price=100, image_ref="", size="XL", color="Black")
        assert item.size is Size.XL

    def test_rejects_bad_values(self):
        with pytest.raises(ValueError):
            LineItem(product_id=1, name="Tee", unit_price=0, image_ref="", size="L", color="Black")
        with pytest.raises(ValueError):
            LineItem(product_id=1, name="Tee", unit_price=100, image_ref="", size="XS", color="Black")
        with pytest.raises(ValueError):
            LineItem(product_id=1, name="Tee", unit_price=100, image_ref="", size="L", color="Black", quantity=0)

    def test_to_dict_uses_snapshot_field_names(self, beast_mode):
        item = LineItem.from_product(beast_mode, Size.L, "Black")
        item.quantity = 3

        assert item.to_dict() == {
            "productId": 1,
            "name": "Beast Mode Tee",
            "unitPrice": 899,
            "imageRef": "/images/beastmode.jpg",
            "size": "L",
            "color": "Black",
            "quantity": 3,
        }
        assert item.line_total == 2697


class TestCartStore:
    """Tests for CartStore mutations."""

    @pytest.mark.asyncio
    async def test_add_new_item(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1

    @pytest.mark.asyncio
    async def test_add_same_key_twice_merges(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(beast_mode, Size.L, "Black")

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_different_size_or_color_is_separate_line(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(beast_mode, Size.XL, "Black")
        await cart.add_item(beast_mode, Size.L, "Charcoal")

        assert [item.key for item in cart.items] == [
            ItemKey(1, Size.L, "Black"),
            ItemKey(1, Size.XL, "Black"),
            ItemKey(1, Size.L, "Charcoal"),
        ]

    @pytest.mark.asyncio
    async def test_add_defaults_to_size_l_and_first_color(self, cart, no_pain):
        item = await cart.add_item(no_pain)

        assert item.size is Size.L
        assert item.color == "White"

    @pytest.mark.asyncio
    async def test_update_quantity(self, cart, beast_mode):
        item = await cart.add_item(beast_mode, Size.L, "Black")

        await cart.update_quantity(item.key, 4)
        assert cart.items[0].quantity == 5

        await cart.update_quantity(item.key, -2)
        assert cart.items[0].quantity == 3

    @pytest.mark.asyncio
    async def test_update_quantity_clamps_at_one(self, cart, beast_mode):
        item = await cart.add_item(beast_mode, Size.L, "Black")
        await cart.update_quantity(item.key, 2)

        await cart.update_quantity(item.key, -10)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1

    @pytest.mark.asyncio
    async def test_update_unknown_key_is_noop(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")

        result = await cart.update_quantity(ItemKey(1, Size.S, "Black"), 1)

        assert result is None
        assert cart.items[0].quantity == 1

    @pytest.mark.asyncio
    async def test_remove_item_only_removes_matching_key(self, cart, beast_mode, no_pain):
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(beast_mode, Size.M, "Black")
        await cart.add_item(no_pain, Size.L, "Navy")

        removed = await cart.remove_item(ItemKey(1, Size.M, "Black"))

        assert removed is True
        assert len(cart.items) == 2
        assert ItemKey(1, Size.M, "Black") not in [item.key for item in cart.items]

    @pytest.mark.asyncio
    async def test_remove_absent_key_is_noop(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")

        assert await cart.remove_item(ItemKey(42, Size.L, "Black")) is False
        assert len(cart.items) == 1

    @pytest.mark.asyncio
    async def test_clear_resets_items_and_coupon(self, cart, beast_mode):
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.set_coupon("REPX10")

        await cart.clear()

        assert cart.is_empty
        assert cart.coupon is None

    @pytest.mark.asyncio
    async def test_blank_coupon_clears(self, cart):
        await cart.set_coupon("REPX10")
        await cart.set_coupon("   ")
        assert cart.coupon is None

    @pytest.mark.asyncio
    async def test_total_items(self, cart, beast_mode, no_pain):
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(beast_mode, Size.L, "Black")
        await cart.add_item(no_pain, Size.L, "White")

        assert cart.total_items == 3


class TestCartPersistence:
    """Every mutation writes a snapshot."""

    @pytest.mark.asyncio
    async def test_each_mutation_saves(self, cart, snapshot, beast_mode, no_pain):
        await cart.add_item(beast_mode, Size.L, "Black")
        assert snapshot()[0]["quantity"] == 1

        await cart.add_item(no_pain, Size.M, "Navy")
        assert len(snapshot()) == 2

        await cart.update_quantity(ItemKey(1, Size.L, "Black"), 2)
        assert snapshot()[0]["quantity"] == 3

        await cart.remove_item(ItemKey(2, Size.M, "Navy"))
        assert len(snapshot()) == 1

        await cart.clear()
        assert snapshot() == []

    @pytest.mark.asyncio
    async def test_restore_from_snapshot(self, cart, persistence, beast_mode):
        await cart.add_item(beast_mode, Size.XL, "Charcoal")
        await cart.add_item(beast_mode, Size.XL, "Charcoal")

        restored = CartStore(persistence)
        result = await restored.restore()

        assert result.degraded is False
        assert len(restored.items) == 1
        assert restored.items[0].key == ItemKey(1, Size.XL, "Charcoal")
        assert restored.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_cart_works_without_persistence(self, beast_mode):
        cart = CartStore()

        await cart.add_item(beast_mode, Size.L, "Black")

        assert cart.degraded is True
        assert cart.items[0].quantity == 1
