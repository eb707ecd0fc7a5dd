"""Unit tests for the login cooldown store."""

import pytest

from shopcore.domain.exceptions import RateLimitedError
from shopcore.domain.services import LoginThrottle


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def throttle(clock):
    return LoginThrottle(cooldown_seconds=5.0, max_entries=3, clock=clock)


class TestHit:
    def test_first_attempt_is_allowed(self, throttle):
        assert throttle.hit("a@example.com") is None

    def test_second_attempt_within_cooldown_is_rejected(self, throttle, clock):
        throttle.hit("a@example.com")
        clock.now = 1.5

        remaining = throttle.hit("a@example.com")

        assert remaining == pytest.approx(3.5)

    def test_attempt_after_cooldown_is_allowed(self, throttle, clock):
        throttle.hit("a@example.com")
        clock.now = 5.0

        assert throttle.hit("a@example.com") is None

    def test_rejected_attempt_does_not_extend_window(self, throttle, clock):
        throttle.hit("a@example.com")
        clock.now = 4.0
        assert throttle.hit("a@example.com") is not None

        clock.now = 5.0
        assert throttle.hit("a@example.com") is None

    def test_identifiers_are_independent(self, throttle):
        throttle.hit("a@example.com")

        assert throttle.hit("b@example.com") is None

    def test_identifier_is_case_insensitive(self, throttle):
        throttle.hit("A@Example.com")

        assert throttle.hit("a@example.com") is not None


class TestEnforce:
    def test_raises_with_positive_whole_retry_after(self, throttle, clock):
        throttle.enforce("a@example.com")
        clock.now = 0.2

        with pytest.raises(RateLimitedError) as exc_info:
            throttle.enforce("a@example.com")

        assert exc_info.value.retry_after == 5
        assert exc_info.value.status_code == 429
        assert exc_info.value.headers == {"Retry-After": "5"}

    def test_retry_after_never_zero(self, throttle, clock):
        throttle.enforce("a@example.com")
        clock.now = 4.999

        with pytest.raises(RateLimitedError) as exc_info:
            throttle.enforce("a@example.com")

        assert exc_info.value.retry_after == 1

    def test_message_names_wait_time(self, throttle):
        throttle.enforce("a@example.com")

        with pytest.raises(RateLimitedError) as exc_info:
            throttle.enforce("a@example.com")

        assert exc_info.value.public_message == (
            "Too many login attempts. Please wait 5s before retry"
        )


class TestBounds:
    def test_expired_entries_are_evicted(self, throttle, clock):
        throttle.hit("a@example.com")
        throttle.hit("b@example.com")
        clock.now = 10.0

        throttle.hit("c@example.com")

        assert len(throttle) == 1

    def test_size_is_capped_oldest_first(self, throttle, clock):
        for i, email in enumerate(["a@x.io", "b@x.io", "c@x.io", "d@x.io"]):
            clock.now = i * 0.1
            throttle.hit(email)

        assert len(throttle) == 3
        # the oldest entry was dropped, so it is no longer throttled
        assert throttle.hit("a@x.io") is None

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            LoginThrottle(max_entries=0)

    def test_zero_cooldown_never_throttles(self, clock):
        throttle = LoginThrottle(cooldown_seconds=0, clock=clock)

        throttle.enforce("a@example.com")
        throttle.enforce("a@example.com")
