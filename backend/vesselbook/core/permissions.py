"""
Vessel role permissions

A user's role on a vessel is the display name of the active
VesselRoleAccess assigned through VesselUserRole. Each role maps to a
fixed permission table below.
"""

from typing import Dict, List

RESOURCES = [
    "vessels",
    "crew",
    "crew-roles",
    "suppliers",
    "bank-accounts",
    "movimentations",
    "mareas",
    "maintenances",
    "distribution-profiles",
]

ACTIONS = ["create", "edit", "delete", "view"]

EXTRA_PERMISSIONS = [
    "mareas.manage-status",
    "reports.access",
    "settings.access",
    "users.manage",
    "audit-logs.view",
    "recycle_bin.view",
    "recycle_bin.restore",
    "recycle_bin.delete",
]

ALL_PERMISSIONS: List[str] = [
    f"{resource}.{action}" for resource in RESOURCES for action in ACTIONS
] + EXTRA_PERMISSIONS

ROLE_ADMINISTRATOR = "Administrator"
ROLE_SUPERVISOR = "Supervisor"
ROLE_MODERATOR = "Moderator"
ROLE_NORMAL_USER = "Normal User"

# name -> display name, in ascending order of privilege
ROLE_NAMES = {
    "normal": ROLE_NORMAL_USER,
    "moderator": ROLE_MODERATOR,
    "supervisor": ROLE_SUPERVISOR,
    "administrator": ROLE_ADMINISTRATOR,
}


def _grant(allowed: List[str]) -> Dict[str, bool]:
    return {perm: perm in allowed for perm in ALL_PERMISSIONS}


def _all_except(denied: List[str]) -> Dict[str, bool]:
    return {perm: perm not in denied for perm in ALL_PERMISSIONS}


PERMISSIONS: Dict[str, Dict[str, bool]] = {
    "default": _grant([]),
    ROLE_ADMINISTRATOR: _grant(ALL_PERMISSIONS),
    ROLE_SUPERVISOR: _all_except([
        "vessels.create",
        "vessels.delete",
        "suppliers.delete",
        "bank-accounts.delete",
        "movimentations.delete",
        "mareas.delete",
        "maintenances.delete",
        "distribution-profiles.delete",
        "users.manage",
        "recycle_bin.delete",
    ]),
    ROLE_MODERATOR: _grant([
        "vessels.edit", "vessels.view",
        "crew.edit", "crew.view",
        "crew-roles.edit", "crew-roles.view",
        "suppliers.edit", "suppliers.view",
        "bank-accounts.edit", "bank-accounts.view",
        "movimentations.edit", "movimentations.view",
        "mareas.edit", "mareas.view",
        "maintenances.edit", "maintenances.view",
        "distribution-profiles.view",
        "reports.access",
    ]),
    ROLE_NORMAL_USER: _grant([
        "vessels.view",
        "crew.view",
        "movimentations.view",
        "mareas.view",
        "maintenances.view",
    ]),
}


def permissions_for(role: str) -> Dict[str, bool]:
    """Permission table for a role display name, falling back to default"""
    return dict(PERMISSIONS.get(role or "default", PERMISSIONS["default"]))


def can(role: str, permission: str) -> bool:
    return permissions_for(role).get(permission, False)


def granted(role: str) -> List[str]:
    """Only the permissions a role holds"""
    return [perm for perm, allowed in permissions_for(role).items() if allowed]
