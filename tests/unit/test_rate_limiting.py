"""
Unit tests for the header-driven rate limiter
"""
import pytest

from etsy_client.utils.rate_limiting import RateLimitConfig, RateLimiter


class TestComputeDelay:
    """Test delay computation"""

    @pytest.fixture
    def limiter(self):
        return RateLimiter(sleep=lambda delay: None)

    @pytest.mark.parametrize("remaining,expected", [
        (10, 0.0),
        (9, 0.0),
        (8, 0.0),
        (7, 0.1),
        (4, 0.4),
        (0, 0.8),
    ])
    def test_delay_values(self, limiter, remaining, expected):
        assert limiter.compute_delay(remaining) == pytest.approx(expected)

    def test_delay_non_increasing_as_remaining_grows(self, limiter):
        delays = [limiter.compute_delay(remaining) for remaining in range(0, 25)]
        assert all(a >= b for a, b in zip(delays, delays[1:]))

    def test_custom_config(self):
        limiter = RateLimiter(RateLimitConfig(threshold=4, step=0.5))
        assert limiter.compute_delay(0) == pytest.approx(2.0)
        assert limiter.compute_delay(5) == 0


class TestRemainingFromHeaders:
    """Test header parsing"""

    @pytest.fixture
    def limiter(self):
        return RateLimiter(sleep=lambda delay: None)

    def test_missing_header_uses_default(self, limiter):
        assert limiter.remaining_from_headers({}) == 10
        assert limiter.remaining_from_headers(None) == 10
        assert limiter.delay_for({"Content-Type": "application/json"}) == 0

    def test_header_lookup_is_case_insensitive(self, limiter):
        assert limiter.remaining_from_headers({"x-remaining-this-second": "3"}) == 3
        assert limiter.delay_for({"X-REMAINING-THIS-SECOND": "3"}) == pytest.approx(0.5)

    def test_list_header_value(self, limiter):
        assert limiter.remaining_from_headers({"X-Remaining-This-Second": ["2"]}) == 2

    def test_invalid_header_uses_default(self, limiter):
        assert limiter.remaining_from_headers({"X-Remaining-This-Second": "many"}) == 10


class TestThrottle:
    """Test blocking throttle"""

    def test_sleeps_for_delay(self, rate_limiter, sleeps):
        delay = rate_limiter.throttle({"X-Remaining-This-Second": "0"})

        assert delay == pytest.approx(0.8)
        assert sleeps == [pytest.approx(0.8)]

    def test_no_sleep_with_headroom(self, rate_limiter, sleeps):
        assert rate_limiter.throttle({"X-Remaining-This-Second": "10"}) == 0
        assert sleeps == []

    def test_statistics(self, rate_limiter):
        rate_limiter.throttle({"X-Remaining-This-Second": "10"})
        rate_limiter.throttle({"X-Remaining-This-Second": "6"})

        status = rate_limiter.get_status()
        assert status["statistics"]["total_responses"] == 2
        assert status["statistics"]["throttled_responses"] == 1
        assert status["statistics"]["total_delay"] == pytest.approx(0.2)
        assert status["statistics"]["last_remaining"] == 6
        assert status["config"]["header_name"] == "X-Remaining-This-Second"
