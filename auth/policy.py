"""
auth/policy.py -- Access control predicates.

Pure functions, no I/O. Every protected operation in auth/management.py calls
exactly one of these before it touches the store.
"""

from __future__ import annotations

from auth.models import Role


def can_list_all(requester_role: Role) -> bool:
    return requester_role == Role.admin


def can_access_user(requester_role: Role, requester_id: str, target_id: str) -> bool:
    """Admins may access anyone; everybody else only themselves."""
    return requester_role == Role.admin or requester_id == target_id


def can_block_user(requester_role: Role, requester_id: str, target_id: str) -> bool:
    """Same self-or-admin rule as can_access_user()."""
    return can_access_user(requester_role, requester_id, target_id)
