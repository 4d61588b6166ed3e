"""
Role-based access control.

The grant table is plain data: each role maps to a frozenset of
(resource, action) pairs, and every check is a single membership test.
Anything not listed is denied.
"""

import enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, FrozenSet, Tuple

from app.models.user import UserRole


class Resource(str, enum.Enum):
    SITE = "site"
    EVENTS = "events"
    SPECIALS = "specials"
    MENU = "menu"
    HOURS = "hours"
    PROFILE = "profile"
    USERS = "users"
    DOMAINS = "domains"
    ANALYTICS = "analytics"
    SETTINGS = "settings"
    AUDIT = "audit"
    BACKUP = "backup"


class Action(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    MANAGE = "manage"


Grant = Tuple[Resource, Action]

ROLE_LEVELS = MappingProxyType({
    UserRole.SUPERADMIN: 4,
    UserRole.OWNER: 3,
    UserRole.MANAGER: 2,
    UserRole.STAFF: 1,
})

ROLE_DESCRIPTIONS = MappingProxyType({
    UserRole.SUPERADMIN: "Full system access across all sites and features",
    UserRole.OWNER: "Full access to own restaurant site and management",
    UserRole.MANAGER: "Content management and operational permissions",
    UserRole.STAFF: "Read-only access to restaurant information",
})

_CRUD = (Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE)

_GRANTS = {
    UserRole.SUPERADMIN: [(resource, Action.MANAGE) for resource in Resource],
    UserRole.OWNER: [
        (Resource.SITE, Action.MANAGE),
        (Resource.EVENTS, Action.MANAGE),
        (Resource.SPECIALS, Action.MANAGE),
        (Resource.MENU, Action.MANAGE),
        (Resource.HOURS, Action.MANAGE),
        (Resource.PROFILE, Action.MANAGE),
        (Resource.USERS, Action.MANAGE),
        (Resource.ANALYTICS, Action.READ),
        (Resource.SETTINGS, Action.MANAGE),
        (Resource.AUDIT, Action.READ),
    ],
    UserRole.MANAGER: [
        *[(Resource.EVENTS, action) for action in _CRUD + (Action.PUBLISH,)],
        *[(Resource.SPECIALS, action) for action in _CRUD + (Action.PUBLISH,)],
        *[(Resource.MENU, action) for action in _CRUD],
        (Resource.HOURS, Action.READ),
        (Resource.HOURS, Action.UPDATE),
        (Resource.PROFILE, Action.READ),
        (Resource.ANALYTICS, Action.READ),
    ],
    UserRole.STAFF: [
        (Resource.EVENTS, Action.READ),
        (Resource.SPECIALS, Action.READ),
        (Resource.MENU, Action.READ),
        (Resource.HOURS, Action.READ),
        (Resource.PROFILE, Action.READ),
    ],
}


def _expand(grants: Iterable[Grant]) -> FrozenSet[Grant]:
    """A manage grant covers every action on its resource"""
    expanded = set()
    for resource, action in grants:
        if action == Action.MANAGE:
            expanded.update((resource, a) for a in Action)
        else:
            expanded.add((resource, action))
    return frozenset(expanded)


ROLE_PERMISSIONS: Mapping[UserRole, FrozenSet[Grant]] = MappingProxyType(
    {role: _expand(grants) for role, grants in _GRANTS.items()}
)


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def has_permission(role, resource, action) -> bool:
    """Check a grant. Unknown roles, resources or actions are denied."""
    role = _coerce(UserRole, role)
    resource = _coerce(Resource, resource)
    action = _coerce(Action, action)
    if role is None or resource is None or action is None:
        return False
    return (resource, action) in ROLE_PERMISSIONS.get(role, frozenset())


def has_all_permissions(role, required: Iterable[Tuple[str, str]]) -> bool:
    return all(has_permission(role, resource, action) for resource, action in required)


def has_any_permission(role, required: Iterable[Tuple[str, str]]) -> bool:
    return any(has_permission(role, resource, action) for resource, action in required)


def get_role_permissions(role) -> FrozenSet[Grant]:
    role = _coerce(UserRole, role)
    if role is None:
        return frozenset()
    return ROLE_PERMISSIONS.get(role, frozenset())


def get_role_level(role) -> int:
    """Higher number means more privilege; unknown roles are 0"""
    role = _coerce(UserRole, role)
    if role is None:
        return 0
    return ROLE_LEVELS.get(role, 0)


def can_manage_role(manager_role, target_role) -> bool:
    """Only strictly lower roles can be managed"""
    return get_role_level(manager_role) > get_role_level(target_role)


def get_assignable_roles(role) -> List[UserRole]:
    level = get_role_level(role)
    return [r for r in UserRole if ROLE_LEVELS[r] < level]
