"""
Name: Authorization Policy Tests

Responsibilities:
  - Admin override
  - Self-service and franchise-scoped grants
  - Default deny
"""

import pytest

from pizza_service.crosscutting.exceptions import ForbiddenError
from pizza_service.identity.policy import (
    Action,
    Resource,
    ensure_authorized,
    is_authorized,
)
from pizza_service.identity.users import RoleBinding, User

pytestmark = pytest.mark.unit

ADMIN = User(id=1, name="a", email="a@jwt.com", roles=(RoleBinding.admin(),))
DINER = User(id=2, name="d", email="d@jwt.com", roles=(RoleBinding.diner(),))
FRANCHISEE = User(
    id=3,
    name="f",
    email="f@jwt.com",
    roles=(RoleBinding.diner(), RoleBinding.franchisee(10)),
)


@pytest.mark.parametrize("action", list(Action))
def test_admin_is_always_authorized(action):
    assert is_authorized(ADMIN, action, Resource(user_id=99, franchise_id=99))


@pytest.mark.parametrize("action", list(Action))
def test_anonymous_is_never_authorized(action):
    assert not is_authorized(None, action, Resource(user_id=2, franchise_id=10))


class TestSelfService:
    def test_user_may_update_self(self):
        assert is_authorized(DINER, Action.UPDATE_USER, Resource(user_id=2))

    def test_user_may_not_update_others(self):
        assert not is_authorized(DINER, Action.UPDATE_USER, Resource(user_id=3))

    def test_user_lists_own_franchises(self):
        assert is_authorized(
            FRANCHISEE, Action.LIST_USER_FRANCHISES, Resource(user_id=3)
        )

    def test_missing_target_is_denied(self):
        assert not is_authorized(DINER, Action.UPDATE_USER)


class TestFranchiseScoped:
    @pytest.mark.parametrize(
        "action",
        [Action.CREATE_STORE, Action.DELETE_STORE, Action.VIEW_FRANCHISE_ORDERS],
    )
    def test_franchisee_of_franchise_is_authorized(self, action):
        assert is_authorized(FRANCHISEE, action, Resource(franchise_id=10))

    def test_franchisee_of_other_franchise_is_denied(self):
        assert not is_authorized(
            FRANCHISEE, Action.CREATE_STORE, Resource(franchise_id=11)
        )

    def test_diner_is_denied(self):
        assert not is_authorized(DINER, Action.CREATE_STORE, Resource(franchise_id=10))


@pytest.mark.parametrize(
    "action",
    [Action.CREATE_FRANCHISE, Action.DELETE_FRANCHISE, Action.ADD_MENU_ITEM],
)
def test_admin_only_actions_deny_franchisee(action):
    assert not is_authorized(FRANCHISEE, action, Resource(franchise_id=10))


def test_ensure_authorized_raises_forbidden_with_message():
    with pytest.raises(ForbiddenError, match="unable to add menu item"):
        ensure_authorized(DINER, Action.ADD_MENU_ITEM, message="unable to add menu item")


def test_ensure_authorized_passes_for_admin():
    ensure_authorized(ADMIN, Action.ADD_MENU_ITEM)
