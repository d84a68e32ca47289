"""
Guardrail policies for endpoints whose cost is driven by user input.

Every check is a pure function of the requested value: it returns a
``Verdict`` and touches no shared state.  Coupling a rejection to the
counters is the recorder's job (see ``metering.recorder``), which keeps
these functions testable without any fixtures.

Checks are meant to run before the handler sleeps, allocates or emits a
redirect.  The same input always yields the same verdict.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .counters import (
    BYTES_BLOCKED,
    DANGEROUS_URLS_BLOCKED,
    DELAYS_BLOCKED,
    REDIRECTS_BLOCKED,
)

MAX_REDIRECTS = 10
MAX_DELAY_SECONDS = 10
MAX_BYTES = 100_000
MAX_STREAM_LINES = 100
MAX_URL_LENGTH = 2048

DANGEROUS_SCHEMES = ("javascript:", "data:", "file:", "vbscript:")

# Where a redirect chain ends up once it runs out of hops
REDIRECT_BASE_PATH = "/get"

Requested = Union[int, str]


@dataclass(frozen=True)
class Verdict:
    """Outcome of a single guardrail check.

    ``limit_field`` is the key under which ``limit`` appears in the error
    body (``max_delay``, ``max_bytes`` ...), so each endpoint keeps a body
    shape that names its own bound.
    """

    allowed: bool
    code: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    limit: Optional[Any] = None
    limit_field: str = "limit"
    requested: Optional[Requested] = None
    block_counter: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return not self.allowed

    def to_body(self) -> Dict[str, Any]:
        """JSON error body surfaced to the caller on rejection."""
        if self.allowed:
            raise ValueError("allowed verdicts have no error body")
        return {
            "error": self.reason,
            "code": self.code,
            self.limit_field: self.limit,
            "requested": self.requested,
            "message": self.message,
        }


ALLOWED = Verdict(allowed=True)


def _reject(
    code: str,
    reason: str,
    message: str,
    limit: Any,
    limit_field: str,
    requested: Requested,
    block_counter: Optional[str] = None,
) -> Verdict:
    return Verdict(
        allowed=False,
        code=code,
        reason=reason,
        message=message,
        limit=limit,
        limit_field=limit_field,
        requested=requested,
        block_counter=block_counter,
    )


def check_redirect_depth(n: int) -> Verdict:
    if n > MAX_REDIRECTS:
        return _reject(
            "redirect_depth_exceeded",
            "Too many redirects",
            f"Maximum {MAX_REDIRECTS} redirects allowed",
            MAX_REDIRECTS,
            "max_allowed",
            n,
            REDIRECTS_BLOCKED,
        )
    return ALLOWED


def check_delay(seconds: int) -> Verdict:
    if seconds > MAX_DELAY_SECONDS:
        return _reject(
            "delay_exceeded",
            "Delay too long",
            f"Maximum delay is {MAX_DELAY_SECONDS} seconds",
            MAX_DELAY_SECONDS,
            "max_delay",
            seconds,
            DELAYS_BLOCKED,
        )
    return ALLOWED


def check_byte_count(n: int) -> Verdict:
    if n > MAX_BYTES:
        return _reject(
            "byte_count_exceeded",
            "Too many bytes requested",
            f"Maximum {MAX_BYTES} bytes allowed",
            MAX_BYTES,
            "max_bytes",
            n,
            BYTES_BLOCKED,
        )
    return ALLOWED


def check_stream_lines(n: int) -> Verdict:
    # No dedicated block counter; only counted as a failed request
    if n > MAX_STREAM_LINES:
        return _reject(
            "stream_lines_exceeded",
            "Too many lines requested",
            f"Maximum {MAX_STREAM_LINES} lines allowed",
            MAX_STREAM_LINES,
            "max_lines",
            n,
        )
    return ALLOWED


def check_redirect_target(url: str) -> Verdict:
    """Vet a user-supplied redirect target.

    The URL is trimmed first.  A deny-listed scheme is reported before an
    over-long URL, so ``javascript:`` padded to 5000 characters still counts
    as a dangerous URL.  For the length rejection only the length is echoed
    back, never the URL itself.
    """
    target = url.strip()
    lowered = target.lower()
    for scheme in DANGEROUS_SCHEMES:
        if lowered.startswith(scheme):
            return _reject(
                "dangerous_scheme",
                "Invalid protocol",
                "Protocol not allowed for security reasons",
                DANGEROUS_SCHEMES,
                "blocked_protocols",
                scheme,
                DANGEROUS_URLS_BLOCKED,
            )
    if len(target) > MAX_URL_LENGTH:
        return _reject(
            "url_too_long",
            "URL too long",
            "URL exceeds maximum allowed length",
            MAX_URL_LENGTH,
            "max_length",
            len(target),
        )
    return ALLOWED


def normalize_redirect_target(url: str) -> str:
    """Trim ``url`` and default it to ``http://`` when it has no web scheme."""
    target = url.strip()
    if target.lower().startswith(("http://", "https://")):
        return target
    return f"http://{target}"


def next_redirect_hop(n: int) -> Optional[int]:
    """Depth of the next hop in a redirect chain, or None when ``n`` is terminal."""
    if n <= 1:
        return None
    return n - 1


def endpoint_key(template: str, value: int, verdict: Verdict) -> str:
    """Frequency-table key for a guarded route such as ``/bytes/{n}``.

    Allowed values keep the concrete parameter (``/bytes/512``) and are
    bounded by the policy itself.  Rejected values all collapse onto
    ``template``, so callers sweeping oversized inputs cannot grow the table.
    """
    if verdict.rejected:
        return template
    prefix = template.rsplit("/", 1)[0]
    return f"{prefix}/{value}"
