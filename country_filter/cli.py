"""Connection filter entry point for TCP Wrappers.

/etc/hosts.allow:
    sshd: ALL: aclexec /usr/local/bin/country-filter %a

/etc/hosts.deny:
    sshd: ALL

Exit codes:
    0 - ALLOW (connection may proceed)
    1 - DENY  (connection refused)

An optional second argument marks the call as coming from an upstream
dispatcher; its value is not interpreted.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Sequence

from country_filter.classifier import classify_address
from country_filter.evaluator import PolicyConfiguration, Verdict, evaluate
from country_filter.logger import log_event
from country_filter.notifier import Notifier
from country_filter.policy_loader import PolicyLoadError, default_policy, load_policy, policy_path
from country_filter.resolver import CountryResolver, GeoipLookupResolver

EXIT_ALLOW = 0
EXIT_DENY = 1


@dataclass(frozen=True)
class InvocationContext:
    remote_address: str
    is_chained_call: bool = False

    @classmethod
    def from_args(cls, args: Sequence[str]) -> "InvocationContext":
        address = (args[0] or "").strip() if len(args) > 0 else ""
        chained = len(args) > 1 and bool(args[1])
        return cls(remote_address=address, is_chained_call=chained)


def load_configuration() -> PolicyConfiguration:
    path = policy_path()
    # No policy file means the filter is installed but not configured yet.
    if not os.path.exists(path):
        log_event("policy_loader", f"missing path={path} using_default")
        return default_policy()
    try:
        config, _ = load_policy(path)
    except PolicyLoadError:
        return default_policy()
    return config


def deny_message(service: str, address: str, code: str) -> str:
    return f"{Verdict.DENY.value} {service} connection from {address} ({code})"


def run(
    args: Sequence[str],
    *,
    config: PolicyConfiguration | None = None,
    resolver: CountryResolver | None = None,
    notifier: Notifier | None = None,
) -> int:
    context = InvocationContext.from_args(list(args))
    if notifier is None:
        notifier = Notifier(chained=context.is_chained_call)

    if not context.remote_address:
        notifier.notify("IP address not supplied - Aborting")
        return EXIT_ALLOW

    if config is None:
        config = load_configuration()
    if resolver is None:
        resolver = GeoipLookupResolver(config.ipv4_program, config.ipv6_program)

    family = classify_address(context.remote_address)
    resolution = resolver.resolve(context.remote_address, family)
    if not resolution.available:
        notifier.notify(
            f"{resolution.program} is not installed - Skipping",
            verdict=Verdict.ALLOW,
            address=context.remote_address,
        )

    verdict = evaluate(resolution.country_code, config, resolution.available)
    if verdict == Verdict.DENY:
        notifier.notify(
            deny_message(config.service, context.remote_address, resolution.country_code),
            verdict=verdict,
            service=config.service,
            address=context.remote_address,
            code=resolution.country_code,
        )
        return EXIT_DENY
    return EXIT_ALLOW


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    try:
        return run(argv)
    except Exception as exc:
        log_event("filter", f"internal_error args={list(argv)} error={exc!r}")
        return EXIT_ALLOW


if __name__ == "__main__":
    sys.exit(main())
