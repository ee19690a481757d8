"""
Name: In-memory repository Tests

Responsibilities:
  - Same observable contract as the PostgreSQL repositories:
    uniqueness, lookups, cascade on delete, revenue, pagination, sessions
"""

from decimal import Decimal

import pytest

from pizza_service.crosscutting.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
)
from pizza_service.domain.entities import (
    NewFranchise,
    NewMenuItem,
    NewOrder,
    NewOrderItem,
    NewStore,
)
from pizza_service.identity.users import NewUser, Role, RoleBinding, RoleRequest

pytestmark = pytest.mark.unit


def _order(store_id: int, *prices: str) -> NewOrder:
    return NewOrder(
        franchise_id=1,
        store_id=store_id,
        items=tuple(NewOrderItem(1, "Veggie", Decimal(p)) for p in prices),
    )


class TestUsers:
    def test_duplicate_email_conflicts(self, user_repo, diner_user):
        with pytest.raises(ConflictError):
            user_repo.add_user(NewUser("Other", "diner@jwt.com", "x"))

    def test_wrong_password_is_unauthorized(self, user_repo, diner_user):
        with pytest.raises(UnauthorizedError, match="unknown user"):
            user_repo.get_user("diner@jwt.com", "nope")

    def test_franchisee_resolved_by_franchise_name(self, user_repo, franchise_repo):
        franchise = franchise_repo.create_franchise(NewFranchise("pizzaPocket"))

        user = user_repo.add_user(
            NewUser(
                "F",
                "f@jwt.com",
                "f",
                roles=(RoleRequest.franchisee("pizzaPocket"),),
            )
        )

        assert user.roles == (RoleBinding.franchisee(franchise.id),)

    def test_unknown_franchise_writes_nothing(self, user_repo):
        with pytest.raises(NotFoundError):
            user_repo.add_user(
                NewUser("F", "f@jwt.com", "f", roles=(RoleRequest.franchisee("nope"),))
            )
        assert user_repo.count_users() == 0

    def test_update_changes_credentials(self, user_repo, diner_user):
        user_repo.update_user(diner_user.id, email="new@jwt.com", password="secret")

        user = user_repo.get_user("new@jwt.com", "secret")
        assert user.id == diner_user.id
        assert user.name == "Diner"

    def test_update_to_taken_email_conflicts(self, user_repo, diner_user, admin_user):
        with pytest.raises(ConflictError):
            user_repo.update_user(diner_user.id, email="admin@jwt.com")

    def test_update_unknown_user(self, user_repo):
        with pytest.raises(NotFoundError):
            user_repo.update_user(99, name="ghost")


class TestSessions:
    def test_login_then_logout(self, session_repo):
        session_repo.login_user(1, "a.b.sig")
        assert session_repo.is_logged_in("a.b.sig")

        session_repo.logout_user("a.b.sig")
        assert not session_repo.is_logged_in("a.b.sig")

    def test_repeated_login_is_idempotent(self, session_repo):
        session_repo.login_user(1, "a.b.sig")
        session_repo.login_user(1, "a.b.sig")
        assert session_repo.is_logged_in("a.b.sig")

    def test_unknown_and_malformed_tokens(self, session_repo):
        assert not session_repo.is_logged_in("a.b.other")
        assert not session_repo.is_logged_in("garbage")
        session_repo.logout_user("garbage")


class TestFranchises:
    def test_duplicate_name_conflicts(self, franchise_repo):
        franchise_repo.create_franchise(NewFranchise("pizzaPocket"))
        with pytest.raises(ConflictError):
            franchise_repo.create_franchise(NewFranchise("pizzaPocket"))

    def test_unknown_admin_email(self, franchise_repo):
        with pytest.raises(NotFoundError, match="ghost@jwt.com"):
            franchise_repo.create_franchise(
                NewFranchise("pizzaPocket", admin_emails=("ghost@jwt.com",))
            )
        assert franchise_repo.get_franchises() == []

    def test_admin_gets_franchisee_binding(self, franchise_repo, user_repo, diner_user):
        franchise = franchise_repo.create_franchise(
            NewFranchise("pizzaPocket", admin_emails=("diner@jwt.com",))
        )

        reloaded = user_repo.get_user_by_id(diner_user.id)
        assert reloaded.franchise_ids() == {franchise.id}
        assert [f.id for f in franchise_repo.get_user_franchises(diner_user.id)] == [
            franchise.id
        ]

    def test_delete_cascades_but_keeps_orders(
        self, franchise_repo, order_repo, user_repo, diner_user
    ):
        franchise = franchise_repo.create_franchise(
            NewFranchise("pizzaPocket", admin_emails=("diner@jwt.com",))
        )
        store = franchise_repo.create_store(franchise.id, NewStore("SLC"))
        order_repo.add_diner_order(diner_user, _order(store.id, "0.05"))

        franchise_repo.delete_franchise(franchise.id)

        assert franchise_repo.get_franchises() == []
        assert not user_repo.get_user_by_id(diner_user.id).is_role(Role.FRANCHISEE)
        assert len(order_repo.get_orders(diner_user).orders) == 1

    def test_public_and_admin_views(
        self, franchise_repo, order_repo, diner_user, admin_user
    ):
        franchise = franchise_repo.create_franchise(
            NewFranchise("pizzaPocket", admin_emails=("diner@jwt.com",))
        )
        slc = franchise_repo.create_store(franchise.id, NewStore("SLC"))
        franchise_repo.create_store(franchise.id, NewStore("Provo"))
        order_repo.add_diner_order(diner_user, _order(slc.id, "0.05", "0.0042"))

        public = franchise_repo.get_franchises(diner_user)[0]
        detailed = franchise_repo.get_franchises(admin_user)[0]

        assert public.admins is None
        assert all(s.total_revenue is None for s in public.stores)
        assert [a.email for a in detailed.admins] == ["diner@jwt.com"]
        assert [s.total_revenue for s in detailed.stores] == [
            Decimal("0.0542"),
            Decimal(0),
        ]

    def test_store_for_unknown_franchise(self, franchise_repo):
        with pytest.raises(NotFoundError):
            franchise_repo.create_store(42, NewStore("SLC"))

    def test_delete_store_scoped_and_idempotent(self, franchise_repo):
        a = franchise_repo.create_franchise(NewFranchise("a"))
        b = franchise_repo.create_franchise(NewFranchise("b"))
        store = franchise_repo.create_store(a.id, NewStore("SLC"))

        franchise_repo.delete_store(b.id, store.id)
        assert len(franchise_repo.get_franchises()[0].stores) == 1

        franchise_repo.delete_store(a.id, store.id)
        franchise_repo.delete_store(a.id, store.id)
        assert franchise_repo.get_franchises()[0].stores == ()


class TestOrders:
    def test_menu_is_append_only_and_ordered(self, order_repo):
        order_repo.add_menu_item(NewMenuItem("Veggie", "garden", "pizza1.png", Decimal("0.0038")))
        order_repo.add_menu_item(NewMenuItem("Pepperoni", "spicy", "pizza2.png", Decimal("0.0042")))

        assert [m.title for m in order_repo.get_menu()] == ["Veggie", "Pepperoni"]
        assert [m.id for m in order_repo.get_menu()] == [1, 2]

    def test_orders_paginate_by_fixed_page_size(self, order_repo, diner_user):
        for _ in range(4):
            order_repo.add_diner_order(diner_user, _order(1, "0.01"))

        first = order_repo.get_orders(diner_user)
        second = order_repo.get_orders(diner_user, "2")
        third = order_repo.get_orders(diner_user, 3)

        assert [o.id for o in first.orders] == [1, 2, 3]
        assert [o.id for o in second.orders] == [4]
        assert second.page == 2
        assert third.orders == ()

    def test_orders_are_private_to_the_diner(self, order_repo, diner_user, admin_user):
        order_repo.add_diner_order(diner_user, _order(1, "0.01"))

        assert order_repo.get_orders(admin_user).orders == ()

    def test_order_items_keep_snapshot(self, order_repo, diner_user):
        order = order_repo.add_diner_order(diner_user, _order(1, "0.05", "0.0042"))

        assert [i.price for i in order.items] == [Decimal("0.05"), Decimal("0.0042")]
        assert order.date.tzinfo is not None

    def test_prices_are_rounded_to_four_places(self, order_repo, diner_user):
        order = order_repo.add_diner_order(diner_user, _order(1, "0.00005", "0.00004"))
        item = order_repo.add_menu_item(
            NewMenuItem("Veggie", "garden", "pizza1.png", Decimal("1.23456"))
        )

        assert [i.price for i in order.items] == [Decimal("0.0001"), Decimal("0.0000")]
        history = order_repo.get_orders(diner_user).orders[0].items
        assert [i.price for i in history] == [Decimal("0.0001"), Decimal("0.0000")]
        assert item.price == Decimal("1.2346")
        assert order_repo.get_menu()[0].price == Decimal("1.2346")

    def test_price_overflow_writes_nothing(self, order_repo, diner_user):
        with pytest.raises(DatabaseError):
            order_repo.add_diner_order(diner_user, _order(1, "0.01", "123456789012"))
        with pytest.raises(DatabaseError):
            order_repo.add_menu_item(
                NewMenuItem("Huge", "", "", Decimal("99999999.99995"))
            )

        assert order_repo.get_orders(diner_user).orders == ()
        assert order_repo.get_menu() == []

    def test_huge_page_is_empty(self, order_repo, diner_user):
        order_repo.add_diner_order(diner_user, _order(1, "0.01"))

        page = order_repo.get_orders(diner_user, "99999999999999999999")

        assert page.orders == ()
