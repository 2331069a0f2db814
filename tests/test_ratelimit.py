import pytest

from hospital_personnel.ratelimit import (
    RateLimitExceeded,
    admin_rate_limiter,
    auth_rate_limiter,
    general_rate_limiter,
    login_rate_limiter,
)


@pytest.mark.parametrize(
    "factory, limit, window",
    [
        (auth_rate_limiter, 5, 60),
        (login_rate_limiter, 3, 300),
        (general_rate_limiter, 100, 60),
        (admin_rate_limiter, 20, 60),
    ],
)
def test_limit_allows_max_then_rejects(factory, limit, window):
    limiter = factory()
    remaining = [limiter.check("10.0.0.1", now=0.0) for _ in range(limit)]
    assert remaining == list(range(limit - 1, -1, -1))
    with pytest.raises(RateLimitExceeded) as info:
        limiter.check("10.0.0.1", now=1.0)
    assert info.value.retry_after == window - 1.0
    assert info.value.status_code == 429


def test_login_message_and_name():
    limiter = login_rate_limiter()
    for _ in range(3):
        limiter.check("10.0.0.2", now=0.0)
    with pytest.raises(RateLimitExceeded) as info:
        limiter.check("10.0.0.2", now=0.0)
    assert info.value.to_dict() == {
        "error": "Too many login attempts. Please try again in 5 minutes."
    }
    assert info.value.limiter == "login"


def test_window_expiry_restores_quota():
    limiter = login_rate_limiter()
    for _ in range(3):
        limiter.check("10.0.0.3", now=0.0)
    with pytest.raises(RateLimitExceeded):
        limiter.check("10.0.0.3", now=10.0)
    assert limiter.check("10.0.0.3", now=300.0) == 2


def test_addresses_are_counted_separately():
    limiter = login_rate_limiter()
    for _ in range(3):
        limiter.check("10.0.0.4", now=0.0)
    assert limiter.check("10.0.0.5", now=0.0) == 2


def test_key_suffixes():
    assert login_rate_limiter().key_for("1.2.3.4") == "1.2.3.4:login"
    assert admin_rate_limiter().key_for("1.2.3.4") == "1.2.3.4:admin"
    assert general_rate_limiter().key_for("1.2.3.4") == "1.2.3.4"


def test_exceeded_counter_and_reset():
    limiter = auth_rate_limiter()
    for _ in range(5):
        limiter.check("10.0.0.6", now=0.0)
    for _ in range(2):
        with pytest.raises(RateLimitExceeded):
            limiter.check("10.0.0.6", now=0.0)
    assert limiter.exceeded["10.0.0.6"] == 2
    limiter.reset()
    assert limiter.exceeded["10.0.0.6"] == 0
    assert limiter.check("10.0.0.6", now=0.0) == 4