"""Tests for the role grant table"""

import pytest

from app.models.user import UserRole
from app.permissions import (
    Action,
    Resource,
    can_manage_role,
    get_assignable_roles,
    get_role_level,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)


@pytest.mark.parametrize("resource", list(Resource))
@pytest.mark.parametrize("action", list(Action))
def test_superadmin_holds_every_grant(resource, action):
    assert has_permission(UserRole.SUPERADMIN, resource, action)


def test_manage_grant_expands_to_every_action():
    for action in Action:
        assert has_permission(UserRole.OWNER, Resource.MENU, action)


def test_owner_cannot_manage_domains():
    assert not has_permission(UserRole.OWNER, Resource.DOMAINS, Action.READ)
    assert not has_permission(UserRole.OWNER, Resource.BACKUP, Action.MANAGE)
    assert has_permission(UserRole.OWNER, Resource.AUDIT, Action.READ)
    assert not has_permission(UserRole.OWNER, Resource.AUDIT, Action.DELETE)


def test_manager_grants():
    assert has_permission(UserRole.MANAGER, Resource.EVENTS, Action.PUBLISH)
    assert has_permission(UserRole.MANAGER, Resource.MENU, Action.DELETE)
    assert not has_permission(UserRole.MANAGER, Resource.MENU, Action.PUBLISH)
    assert has_permission(UserRole.MANAGER, Resource.HOURS, Action.UPDATE)
    assert not has_permission(UserRole.MANAGER, Resource.HOURS, Action.CREATE)
    assert not has_permission(UserRole.MANAGER, Resource.USERS, Action.READ)
    assert not has_permission(UserRole.MANAGER, Resource.AUDIT, Action.READ)


def test_staff_is_read_only():
    for resource in (Resource.EVENTS, Resource.SPECIALS, Resource.MENU, Resource.HOURS, Resource.PROFILE):
        assert has_permission(UserRole.STAFF, resource, Action.READ)
        assert not has_permission(UserRole.STAFF, resource, Action.UPDATE)
    assert not has_permission(UserRole.STAFF, Resource.SITE, Action.READ)


def test_string_values_are_accepted():
    assert has_permission("MANAGER", "menu", "create")
    assert not has_permission("STAFF", "menu", "create")


def test_unknown_values_are_denied():
    assert not has_permission("CHEF", "menu", "read")
    assert not has_permission(UserRole.OWNER, "kitchen", "read")
    assert not has_permission(UserRole.OWNER, "menu", "cook")
    assert not has_permission(None, None, None)


def test_all_and_any():
    required = [("menu", "read"), ("menu", "create")]
    assert has_all_permissions(UserRole.MANAGER, required)
    assert not has_all_permissions(UserRole.STAFF, required)
    assert has_any_permission(UserRole.STAFF, required)
    assert not has_any_permission(UserRole.STAFF, [("users", "read"), ("site", "update")])


def test_role_permissions_are_immutable():
    grants = get_role_permissions(UserRole.STAFF)
    assert (Resource.MENU, Action.READ) in grants
    with pytest.raises(AttributeError):
        grants.add((Resource.MENU, Action.DELETE))
    assert get_role_permissions("nobody") == frozenset()


def test_role_levels_and_management():
    assert get_role_level(UserRole.SUPERADMIN) > get_role_level(UserRole.OWNER)
    assert get_role_level(UserRole.OWNER) > get_role_level(UserRole.MANAGER)
    assert get_role_level(UserRole.MANAGER) > get_role_level(UserRole.STAFF)
    assert get_role_level("nobody") == 0

    assert can_manage_role(UserRole.OWNER, UserRole.MANAGER)
    assert not can_manage_role(UserRole.OWNER, UserRole.OWNER)
    assert not can_manage_role(UserRole.STAFF, UserRole.STAFF)


def test_assignable_roles():
    assert get_assignable_roles(UserRole.OWNER) == [UserRole.MANAGER, UserRole.STAFF]
    assert get_assignable_roles(UserRole.STAFF) == []
    assert UserRole.SUPERADMIN not in get_assignable_roles(UserRole.SUPERADMIN)
