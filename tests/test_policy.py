"""Unit tests for auth/policy.py -- the three access predicates."""

import pytest

from auth.models import Role
from auth.policy import can_access_user, can_block_user, can_list_all


def test_only_admin_can_list_all():
    assert can_list_all(Role.admin) is True
    assert can_list_all(Role.user) is False


@pytest.mark.parametrize("predicate", [can_access_user, can_block_user])
class TestSelfOrAdmin:
    def test_user_on_self(self, predicate):
        assert predicate(Role.user, "a", "a") is True

    def test_user_on_other(self, predicate):
        assert predicate(Role.user, "a", "b") is False

    def test_admin_on_other(self, predicate):
        assert predicate(Role.admin, "a", "b") is True

    def test_admin_on_self(self, predicate):
        assert predicate(Role.admin, "a", "a") is True
