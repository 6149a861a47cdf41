"""
RBAC table, rate limiter and security helpers.
"""

import pytest

from kalkyla.core.errors import PermissionDeniedError
from kalkyla.core.permissions import (
    Permission,
    can_access_org,
    get_permissions_for_role,
    has_permission,
    require_permission,
)
from kalkyla.core.rate_limit import LOGIN, SHARE_PASSWORD, SWEEP_INTERVAL_SECONDS, RateLimiter, RateLimitRule
from kalkyla.core.security import (
    SHARE_CODE_ALPHABET,
    decode_access_token,
    create_access_token,
    generate_reset_token,
    generate_share_code,
    hash_ip,
    validate_password_strength,
)
from kalkyla.db.models.enums import UserRole


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_super_admin_has_everything():
    assert set(get_permissions_for_role(UserRole.SUPER_ADMIN)) == set(Permission)


@pytest.mark.parametrize(
    "role,permission,expected",
    [
        (UserRole.ORG_ADMIN, Permission.USER_CREATE_CLOSER, True),
        (UserRole.ORG_ADMIN, Permission.USER_CREATE_ORG_ADMIN, False),
        (UserRole.ORG_ADMIN, Permission.CALCULATION_VIEW_ORG, True),
        (UserRole.ORG_ADMIN, Permission.ELPRICES_MANAGE, False),
        (UserRole.CLOSER, Permission.CALCULATION_FINALIZE, True),
        (UserRole.CLOSER, Permission.CALCULATION_VIEW_ORG, False),
        (UserRole.CLOSER, Permission.BATTERY_CREATE, False),
    ],
)
def test_role_table(role, permission, expected):
    assert has_permission(role, permission) is expected


def test_require_permission_raises():
    require_permission(UserRole.CLOSER, Permission.BATTERY_VIEW)
    with pytest.raises(PermissionDeniedError):
        require_permission(UserRole.CLOSER, Permission.ORG_CREATE)


def test_can_access_org():
    assert can_access_org(UserRole.SUPER_ADMIN, None, 7)
    assert can_access_org(UserRole.ORG_ADMIN, 7, 7)
    assert not can_access_org(UserRole.ORG_ADMIN, 7, 8)
    assert not can_access_org(UserRole.CLOSER, None, None)


def test_rate_limiter_window():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    results = [limiter.check("login", "Carl@Test.se", LOGIN) for _ in range(6)]
    assert [r.success for r in results] == [True] * 5 + [False]
    assert results[0].remaining == 4
    # identifiers are case-insensitive
    assert limiter.check("login", "carl@test.se", LOGIN).success is False

    clock.now += LOGIN.window_seconds + 1
    assert limiter.check("login", "carl@test.se", LOGIN).success is True


def test_rate_limiter_reset_and_cleanup():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    rule = RateLimitRule(limit=1, window_seconds=60)
    limiter.check("a", "x", rule)
    limiter.check("b", "y", rule)
    assert limiter.check("a", "x", rule).success is False

    limiter.reset("a", "X")
    assert limiter.check("a", "x", rule).success is True

    clock.now += 61
    assert limiter.cleanup() == 2


def test_check_purges_expired_windows():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    for i in range(1000):
        limiter.check("share-password", f"ip-{i}", SHARE_PASSWORD)
    assert limiter.size() == 1000

    clock.now += 3600
    limiter.check("share-password", "ip-new", SHARE_PASSWORD)
    assert limiter.size() == 1


def test_sweep_runs_at_most_once_per_interval():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    rule = RateLimitRule(limit=5, window_seconds=10)
    limiter.check("login", "a", rule)

    # expired, but the previous sweep is too recent
    clock.now += 11
    limiter.check("login", "b", rule)
    assert limiter.size() == 2

    clock.now += SWEEP_INTERVAL_SECONDS
    limiter.check("login", "c", rule)
    assert limiter.size() == 1


def test_namespaces_are_separate():
    limiter = RateLimiter(clock=FakeClock())
    rule = RateLimitRule(limit=1, window_seconds=60)
    limiter.check("login", "x", rule)
    assert limiter.check("share-password", "x", rule).success is True


def test_password_strength_rules():
    assert validate_password_strength("Langt-Losenord-42") == []
    assert len(validate_password_strength("alllowercaseletters")) == 2


def test_share_code_shape():
    codes = {generate_share_code() for _ in range(50)}
    assert len(codes) == 50
    assert all(len(c) == 21 and set(c) <= set(SHARE_CODE_ALPHABET) for c in codes)


def test_reset_token_and_ip_hash():
    token = generate_reset_token()
    assert len(token) == 64
    int(token, 16)
    assert hash_ip("10.0.0.1") == hash_ip("10.0.0.1")
    assert len(hash_ip("10.0.0.1")) == 16
    assert hash_ip("10.0.0.1") != hash_ip("10.0.0.2")


def test_access_token_roundtrip():
    payload = decode_access_token(create_access_token(42, {"role": "CLOSER"}))
    assert payload["sub"] == "42"
    assert payload["role"] == "CLOSER"
    assert decode_access_token("garbage") is None
