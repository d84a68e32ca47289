"""Unit tests for the guardrail policies; pure functions, no fixtures."""
import os
import sys

import pytest

current_dir = os.path.dirname(__file__)
project_root = os.path.abspath(os.path.join(current_dir, ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from metering import policies  # noqa: E402
from metering.counters import (  # noqa: E402
    BYTES_BLOCKED,
    DANGEROUS_URLS_BLOCKED,
    DELAYS_BLOCKED,
    REDIRECTS_BLOCKED,
)


@pytest.mark.parametrize(
    "check, limit, counter",
    [
        (policies.check_redirect_depth, 10, REDIRECTS_BLOCKED),
        (policies.check_delay, 10, DELAYS_BLOCKED),
        (policies.check_byte_count, 100_000, BYTES_BLOCKED),
        (policies.check_stream_lines, 100, None),
    ],
)
def test_numeric_bounds_are_inclusive(check, limit, counter):
    assert check(0).allowed
    assert check(limit).allowed

    verdict = check(limit + 1)
    assert verdict.rejected
    assert verdict.limit == limit
    assert verdict.requested == limit + 1
    assert verdict.block_counter == counter


def test_redirect_rejection_body():
    body = policies.check_redirect_depth(11).to_body()
    assert body == {
        "error": "Too many redirects",
        "code": "redirect_depth_exceeded",
        "max_allowed": 10,
        "requested": 11,
        "message": "Maximum 10 redirects allowed",
    }


def test_delay_and_bytes_bodies_name_their_limit():
    assert policies.check_delay(60).to_body()["max_delay"] == 10
    assert policies.check_byte_count(10**9).to_body()["max_bytes"] == 100_000
    assert policies.check_stream_lines(101).to_body()["max_lines"] == 100


def test_allowed_verdict_has_no_body():
    with pytest.raises(ValueError):
        policies.check_delay(1).to_body()


@pytest.mark.parametrize(
    "url",
    [
        "javascript:alert(1)",
        "JavaScript:alert(1)",
        "JAVASCRIPT:alert(1)",
        "  javascript:alert(1)  ",
        "data:text/html,<script>alert(1)</script>",
        "file:///etc/passwd",
        "VBScript:msgbox",
    ],
)
def test_dangerous_schemes_rejected(url):
    verdict = policies.check_redirect_target(url)
    assert verdict.rejected
    assert verdict.reason == "Invalid protocol"
    assert verdict.block_counter == DANGEROUS_URLS_BLOCKED


def test_dangerous_scheme_wins_over_length():
    verdict = policies.check_redirect_target("javascript:" + "a" * 5000)
    assert verdict.code == "dangerous_scheme"


def test_url_length_bound():
    at_limit = "http://example.com/" + "a" * (2048 - len("http://example.com/"))
    assert len(at_limit) == 2048
    assert policies.check_redirect_target(at_limit).allowed

    verdict = policies.check_redirect_target(at_limit + "a")
    assert verdict.rejected
    assert verdict.reason == "URL too long"
    assert verdict.requested == 2049
    assert verdict.block_counter is None


def test_surrounding_whitespace_does_not_count_towards_length():
    url = "  " + "h" * 2048 + "  "
    assert policies.check_redirect_target(url).allowed


@pytest.mark.parametrize(
    "url, expected",
    [
        ("example.com", "http://example.com"),
        ("  example.com/path ", "http://example.com/path"),
        ("http://example.com", "http://example.com"),
        ("https://example.com", "https://example.com"),
        ("HTTPS://example.com", "HTTPS://example.com"),
    ],
)
def test_normalize_redirect_target(url, expected):
    assert policies.check_redirect_target(url).allowed
    assert policies.normalize_redirect_target(url) == expected


def test_next_redirect_hop():
    assert policies.next_redirect_hop(10) == 9
    assert policies.next_redirect_hop(2) == 1
    assert policies.next_redirect_hop(1) is None
    assert policies.next_redirect_hop(0) is None


def test_verdicts_are_deterministic():
    assert policies.check_redirect_depth(50) == policies.check_redirect_depth(50)
    assert policies.check_redirect_target("data:x") == policies.check_redirect_target("data:x")
    assert policies.check_delay(3) is policies.ALLOWED


def test_endpoint_key_collapses_only_rejected_values():
    key = policies.endpoint_key
    assert key("/bytes/{n}", 512, policies.check_byte_count(512)) == "/bytes/512"
    assert key("/bytes/{n}", 10**6, policies.check_byte_count(10**6)) == "/bytes/{n}"
    assert key("/delay/{seconds}", 0, policies.check_delay(0)) == "/delay/0"
