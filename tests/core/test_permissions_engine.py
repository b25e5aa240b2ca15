from __future__ import annotations

import pytest

from core.commands.rejection import ReasonCode
from core.permissions import (
    PERMISSION_CATALOG_MANAGE,
    PERMISSION_POS_SELL,
    ROLE_ADMIN,
    ROLE_CASHIER,
    InMemoryPermissionProvider,
    PermissionEvaluator,
    Role,
    resolve_required_permission,
)


ADMIN_ONLY_ACTIONS = (
    "catalog.upsert",
    "catalog.remove",
    "catalog.set_price",
    "catalog.set_stock",
    "catalog.set_expiry",
)

SELLING_ACTIONS = (
    "cart.add",
    "cart.scan",
    "cart.update_quantity",
    "cart.remove",
    "cart.clear",
    "sale.checkout",
)


@pytest.fixture
def provider():
    return InMemoryPermissionProvider.with_default_roles()


class TestRole:
    def test_permissions_are_normalized(self):
        role = Role(
            role_id="lead",
            permissions=(PERMISSION_POS_SELL, PERMISSION_POS_SELL),
        )
        assert role.permissions == (PERMISSION_POS_SELL,)
        assert role.allows(PERMISSION_POS_SELL)
        assert not role.allows(PERMISSION_CATALOG_MANAGE)

    def test_unknown_permission_rejected(self):
        with pytest.raises(ValueError, match="not valid"):
            Role(role_id="lead", permissions=("pos.refund",))

    def test_empty_permissions_rejected(self):
        with pytest.raises(ValueError, match="at least one"):
            Role(role_id="lead", permissions=())


class TestProvider:
    def test_role_lookup_is_case_insensitive(self, provider):
        assert provider.get_role("Admin").role_id == ROLE_ADMIN
        assert provider.get_role(" CASHIER ").role_id == ROLE_CASHIER

    def test_unknown_role(self, provider):
        assert provider.get_role("manager") is None
        assert provider.get_role(None) is None

    def test_duplicate_role_rejected(self):
        role = Role(role_id="admin", permissions=(PERMISSION_POS_SELL,))
        with pytest.raises(ValueError, match="Duplicate"):
            InMemoryPermissionProvider([role, role])


class TestRegistry:
    def test_admin_actions_need_catalog_manage(self):
        for action in ADMIN_ONLY_ACTIONS:
            assert resolve_required_permission(action) == PERMISSION_CATALOG_MANAGE

    def test_unmapped_action(self):
        assert resolve_required_permission("sale.refund") is None


class TestPermissionEvaluator:
    @pytest.mark.parametrize("action", ADMIN_ONLY_ACTIONS + SELLING_ACTIONS)
    def test_admin_allowed_everything(self, provider, action):
        assert PermissionEvaluator.evaluate(action, ROLE_ADMIN, provider).allowed

    @pytest.mark.parametrize("action", SELLING_ACTIONS + ("settings.update",))
    def test_cashier_allowed_to_sell(self, provider, action):
        assert PermissionEvaluator.evaluate(action, ROLE_CASHIER, provider).allowed

    @pytest.mark.parametrize("action", ADMIN_ONLY_ACTIONS)
    def test_cashier_denied_catalog_edits(self, provider, action):
        result = PermissionEvaluator.evaluate(action, ROLE_CASHIER, provider)
        assert not result.allowed
        assert result.rejection_code == ReasonCode.PERMISSION_DENIED
        assert PERMISSION_CATALOG_MANAGE in result.message

    def test_unknown_role_denied(self, provider):
        result = PermissionEvaluator.evaluate("cart.add", "guest", provider)
        assert result.rejection_code == ReasonCode.PERMISSION_DENIED

    def test_missing_role_denied(self, provider):
        result = PermissionEvaluator.evaluate("cart.add", "", provider)
        assert result.rejection_code == ReasonCode.PERMISSION_DENIED

    def test_missing_provider_denied(self):
        result = PermissionEvaluator.evaluate("cart.add", ROLE_ADMIN, None)
        assert result.rejection_code == ReasonCode.PERMISSION_DENIED

    def test_unmapped_action_denied(self, provider):
        result = PermissionEvaluator.evaluate("sale.refund", ROLE_ADMIN, provider)
        assert result.rejection_code == ReasonCode.PERMISSION_MAPPING_MISSING
