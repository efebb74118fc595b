"""Country level connection filtering for TCP Wrappers."""

from country_filter.classifier import (
    AddressFamily,
    classify_address,
)
from country_filter.cli import (
    EXIT_ALLOW,
    EXIT_DENY,
    InvocationContext,
    main,
    run,
)
from country_filter.evaluator import (
    Mode,
    PolicyConfiguration,
    Verdict,
    evaluate,
)
from country_filter.notifier import (
    Notifier,
)
from country_filter.policy_loader import (
    PolicyLoadError,
    default_policy,
    load_policy,
)
from country_filter.resolver import (
    UNKNOWN_COUNTRY,
    CountryResolver,
    GeoipLookupResolver,
    Resolution,
    parse_lookup_output,
)

__version__ = "1.0.0"

__all__ = [
    "EXIT_ALLOW",
    "EXIT_DENY",
    "UNKNOWN_COUNTRY",
    "AddressFamily",
    "CountryResolver",
    "GeoipLookupResolver",
    "InvocationContext",
    "Mode",
    "Notifier",
    "PolicyConfiguration",
    "PolicyLoadError",
    "Resolution",
    "Verdict",
    "classify_address",
    "default_policy",
    "evaluate",
    "load_policy",
    "main",
    "parse_lookup_output",
    "run",
]
