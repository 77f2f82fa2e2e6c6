"""
Tests for the cart store.

Covers the merge-on-conflict semantics of add_or_merge, absolute
quantity updates and the all-or-nothing replace_all transaction.
"""
import pytest
from sqlmodel import select

from storefront.core.errors import InvalidArgument, StoreError, ValidationError
from storefront.models.cart import CartItem
from storefront.repositories.utils import MAX_INT64

USER = 1
EMAIL = "ann@x.com"


def _item(product_id, quantity=1, title="T", price=9.99, image="img.png"):
    return {"id": product_id, "quantity": quantity, "title": title, "price": price, "image": image}


class TestAddOrMerge:
    def test_first_add_inserts_row(self, session, cart_repo):
        row_id = cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))

        items = cart_repo.list_by_user(session, USER)
        assert row_id > 0
        assert [i.model_dump() for i in items] == [
            {"id": 7, "email": EMAIL, "title": "T", "price": 9.99, "image": "img.png", "quantity": 2}
        ]

    def test_same_product_twice_merges_quantity(self, session, cart_repo):
        first = cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))
        second = cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=3))

        items = cart_repo.list_by_user(session, USER)
        assert first == second
        assert len(items) == 1
        assert items[0].quantity == 5

    def test_merge_overwrites_descriptive_fields(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, title="Old", price=1.0, image="a"))
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, title="New", price=2.5, image="b"))

        (item,) = cart_repo.list_by_user(session, USER)
        assert (item.title, item.price, item.image, item.quantity) == ("New", 2.5, "b", 2)

    @pytest.mark.parametrize("quantity", [None, 0, -3, "2", 1.5, 2**63])
    def test_missing_or_invalid_quantity_defaults_to_one(self, session, cart_repo, quantity):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=quantity))

        (item,) = cart_repo.list_by_user(session, USER)
        assert item.quantity == 1

    def test_missing_descriptive_fields_get_defaults(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, {"id": 3})

        (item,) = cart_repo.list_by_user(session, USER)
        assert (item.title, item.price, item.image, item.quantity) == ("", 0.0, "", 1)

    def test_carts_are_per_user(self, session, cart_repo):
        cart_repo.add_or_merge(session, 1, "a@x.com", _item(7))
        cart_repo.add_or_merge(session, 2, "b@x.com", _item(7, quantity=4))

        assert cart_repo.list_by_user(session, 1)[0].quantity == 1
        assert cart_repo.list_by_user(session, 2)[0].quantity == 4

    def test_email_is_a_snapshot_of_the_first_add(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, "old@x.com", _item(7))
        cart_repo.add_or_merge(session, USER, "new@x.com", _item(7))

        (item,) = cart_repo.list_by_user(session, USER)
        assert item.email == "old@x.com"

    def test_missing_product_id_is_rejected(self, session, cart_repo):
        with pytest.raises(InvalidArgument):
            cart_repo.add_or_merge(session, USER, EMAIL, {"title": "no id"})

    def test_negative_price_is_rejected(self, session, cart_repo):
        with pytest.raises(ValidationError):
            cart_repo.add_or_merge(session, USER, EMAIL, _item(7, price=-1))


class TestSetQuantity:
    def test_sets_absolute_quantity(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))

        assert cart_repo.set_quantity(session, USER, 7, 10) is True
        assert cart_repo.list_by_user(session, USER)[0].quantity == 10

    @pytest.mark.parametrize("quantity", [0, -1, 2**63])
    def test_out_of_range_is_rejected(self, session, cart_repo, quantity):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))

        with pytest.raises(ValidationError):
            cart_repo.set_quantity(session, USER, 7, quantity)
        assert cart_repo.list_by_user(session, USER)[0].quantity == 2

    def test_largest_sqlite_integer_is_accepted(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7))

        assert cart_repo.set_quantity(session, USER, 7, MAX_INT64) is True
        assert cart_repo.list_by_user(session, USER)[0].quantity == MAX_INT64

    def test_missing_pair_is_not_changed(self, session, cart_repo):
        assert cart_repo.set_quantity(session, USER, 99, 3) is False


class TestRemoveAndClear:
    def test_remove(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7))
        cart_repo.add_or_merge(session, USER, EMAIL, _item(8))

        assert cart_repo.remove(session, USER, 7) is True
        assert cart_repo.remove(session, USER, 7) is False
        assert [i.id for i in cart_repo.list_by_user(session, USER)] == [8]

    def test_clear(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7))
        cart_repo.add_or_merge(session, 2, "b@x.com", _item(7))

        assert cart_repo.clear(session, USER) is True
        assert cart_repo.clear(session, USER) is False
        assert cart_repo.list_by_user(session, USER) == []
        assert len(cart_repo.list_by_user(session, 2)) == 1


class TestReplaceAll:
    def test_replaces_whole_cart(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))

        cart_repo.replace_all(session, USER, EMAIL, [_item(1, quantity=3), _item(2)])

        items = cart_repo.list_by_user(session, USER)
        assert [(i.id, i.quantity) for i in items] == [(1, 3), (2, 1)]

    def test_item_without_id_leaves_cart_untouched(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))
        before = cart_repo.list_by_user(session, USER)

        with pytest.raises(ValidationError):
            cart_repo.replace_all(session, USER, EMAIL, [_item(1), {"title": "no id"}])

        assert cart_repo.list_by_user(session, USER) == before

    def test_failed_insert_rolls_back_delete(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7, quantity=2))
        before = cart_repo.list_by_user(session, USER)

        # Same product twice violates UNIQUE(user_id, product_id) on insert.
        with pytest.raises(StoreError):
            cart_repo.replace_all(session, USER, EMAIL, [_item(1), _item(1)])

        assert cart_repo.list_by_user(session, USER) == before
        rows = session.exec(select(CartItem).where(CartItem.user_id == USER)).all()
        assert len(rows) == 1

    def test_empty_list_empties_cart(self, session, cart_repo):
        cart_repo.add_or_merge(session, USER, EMAIL, _item(7))

        cart_repo.replace_all(session, USER, EMAIL, [])

        assert cart_repo.list_by_user(session, USER) == []
