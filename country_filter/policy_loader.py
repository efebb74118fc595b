import hashlib
import os
import re
from pathlib import Path

import yaml

from country_filter.evaluator import Mode, PolicyConfiguration, normalize_codes
from country_filter.logger import log_event
from country_filter.resolver import DEFAULT_IPV4_PROGRAM, DEFAULT_IPV6_PROGRAM


class PolicyLoadError(Exception):
    pass


DEFAULT_POLICY_PATH = "/etc/country-filter/policy.yaml"

REQUIRED_KEYS = {
    "version",
    "mode",
    "countries",
}

MODE_ALIASES = {
    "ALLOW": Mode.ALLOW_LISTED,
    "ALLOW_LISTED": Mode.ALLOW_LISTED,
    "DENY": Mode.DENY_LISTED,
    "DENY_LISTED": Mode.DENY_LISTED,
}

_CODE_RE = re.compile(r"^[A-Z0-9]{2}$")


def policy_path():
    return os.environ.get("COUNTRY_FILTER_POLICY_PATH", DEFAULT_POLICY_PATH)


def default_policy():
    return PolicyConfiguration()


def _parse_mode(value):
    mode = MODE_ALIASES.get(str(value or "").strip().upper())
    if mode is None:
        raise PolicyLoadError(f"Invalid mode: {value!r} (expected ALLOW_LISTED or DENY_LISTED)")
    return mode


def _parse_countries(value):
    if value is None:
        return frozenset()
    if not isinstance(value, (str, list)):
        raise PolicyLoadError("countries must be a space-separated string or a list")
    codes = normalize_codes(value)
    invalid = sorted(code for code in codes if not _CODE_RE.match(code))
    if invalid:
        raise PolicyLoadError(f"Invalid country codes: {', '.join(invalid)}")
    return codes


def _parse_resolvers(value):
    if value is None:
        return DEFAULT_IPV4_PROGRAM, DEFAULT_IPV6_PROGRAM
    if not isinstance(value, dict):
        raise PolicyLoadError("resolvers must be a mapping")
    ipv4 = str(value.get("ipv4") or DEFAULT_IPV4_PROGRAM)
    ipv6 = str(value.get("ipv6") or DEFAULT_IPV6_PROGRAM)
    return ipv4, ipv6


def load_policy(path=None):
    path = Path(path or policy_path())
    try:
        raw = path.read_text(encoding="utf-8")
    except Exception as exc:
        log_event("policy_loader", f"load_failed path={path} error={exc}")
        raise PolicyLoadError(f"Failed to read policy: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except Exception as exc:
        log_event("policy_loader", f"parse_failed path={path} error={exc}")
        raise PolicyLoadError(f"Failed to parse policy YAML: {exc}") from exc

    if not isinstance(data, dict):
        log_event("policy_loader", f"invalid_mapping path={path}")
        raise PolicyLoadError("Policy YAML must be a mapping")

    missing = sorted(REQUIRED_KEYS - set(data.keys()))
    if missing:
        log_event("policy_loader", f"missing_keys path={path} missing={','.join(missing)}")
        raise PolicyLoadError(f"Policy missing required keys: {', '.join(missing)}")

    try:
        mode = _parse_mode(data["mode"])
        codes = _parse_countries(data["countries"])
        ipv4_program, ipv6_program = _parse_resolvers(data.get("resolvers"))
    except PolicyLoadError as exc:
        log_event("policy_loader", f"invalid_policy path={path} error={exc}")
        raise

    config = PolicyConfiguration(
        country_codes=codes,
        mode=mode,
        service=str(data.get("service") or "sshd"),
        ipv4_program=ipv4_program,
        ipv6_program=ipv6_program,
    )
    policy_hash = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return config, policy_hash
