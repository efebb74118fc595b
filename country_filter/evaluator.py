"""Pure allow/deny evaluation of a country code against the configured policy.

No I/O, no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from country_filter.resolver import DEFAULT_IPV4_PROGRAM, DEFAULT_IPV6_PROGRAM


class Mode(str, Enum):
    ALLOW_LISTED = "ALLOW_LISTED"
    DENY_LISTED = "DENY_LISTED"


class Verdict(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


def normalize_codes(codes: str | Iterable[str] | None) -> frozenset[str]:
    if codes is None:
        return frozenset()
    if isinstance(codes, str):
        codes = codes.split()
    return frozenset(str(code).strip().upper() for code in codes if str(code).strip())


@dataclass(frozen=True)
class PolicyConfiguration:
    country_codes: frozenset[str] = frozenset()
    mode: Mode = Mode.DENY_LISTED
    service: str = "sshd"
    ipv4_program: str = DEFAULT_IPV4_PROGRAM
    ipv6_program: str = DEFAULT_IPV6_PROGRAM

    @classmethod
    def build(
        cls,
        codes: str | Iterable[str] | None = None,
        mode: Mode | str = Mode.DENY_LISTED,
        **kwargs,
    ) -> "PolicyConfiguration":
        return cls(country_codes=normalize_codes(codes), mode=Mode(mode), **kwargs)

    def matches(self, code: str) -> bool:
        return (code or "").strip().upper() in self.country_codes


def evaluate(code: str, config: PolicyConfiguration, resolver_available: bool) -> Verdict:
    # Unavailable lookup allows regardless of mode.
    if not resolver_available:
        return Verdict.ALLOW

    matched = config.matches(code)
    if config.mode == Mode.DENY_LISTED:
        return Verdict.DENY if matched else Verdict.ALLOW
    return Verdict.ALLOW if matched else Verdict.DENY
