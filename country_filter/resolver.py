"""Country lookup through the locally installed geoiplookup programs.

The lookup program for the classified address family is located on PATH
and run once with the address as its only argument. Its first output line
has the shape ``<label>: <code>, <name>``.

A missing program is reported as an unavailable resolution, which is
distinct from a resolved-but-unknown country (``XX``).
"""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

from country_filter.classifier import AddressFamily
from country_filter.logger import log_event

UNKNOWN_COUNTRY = "XX"
NOT_FOUND_MARKER = "IP Address not found"

DEFAULT_IPV4_PROGRAM = "geoiplookup"
DEFAULT_IPV6_PROGRAM = "geoiplookup6"

_COUNTRY_CODE = re.compile(r"^[A-Za-z0-9]{2}$")


@dataclass(frozen=True)
class Resolution:
    available: bool
    country_code: str
    program: str

    @classmethod
    def unavailable(cls, program: str) -> "Resolution":
        return cls(available=False, country_code=UNKNOWN_COUNTRY, program=program)

    @property
    def is_unknown(self) -> bool:
        return self.available and self.country_code == UNKNOWN_COUNTRY


class CountryResolver(Protocol):
    """Maps an address to a country code. Implementations must not raise."""

    def resolve(self, address: str, family: AddressFamily) -> Resolution: ...


def parse_lookup_output(text: str | None) -> str:
    """Extract the country code from geoiplookup output.

    Malformed output degrades to the unknown code rather than raising.
    """
    if not text:
        return UNKNOWN_COUNTRY
    if NOT_FOUND_MARKER.lower() in text.lower():
        return UNKNOWN_COUNTRY

    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    fields = first_line.split(": ")
    if len(fields) < 2:
        return UNKNOWN_COUNTRY

    code = fields[1].split(",", 1)[0].strip()
    if not _COUNTRY_CODE.match(code):
        return UNKNOWN_COUNTRY
    return code.upper()


class GeoipLookupResolver:
    def __init__(
        self,
        ipv4_program: str = DEFAULT_IPV4_PROGRAM,
        ipv6_program: str = DEFAULT_IPV6_PROGRAM,
    ):
        self.ipv4_program = ipv4_program
        self.ipv6_program = ipv6_program

    def program_for(self, family: AddressFamily) -> str:
        if family == AddressFamily.IPV6:
            return self.ipv6_program
        return self.ipv4_program

    def resolve(self, address: str, family: AddressFamily) -> Resolution:
        program = self.program_for(family)
        executable = shutil.which(program)
        if not executable:
            return Resolution.unavailable(program)

        try:
            proc = subprocess.run(
                [executable, address],
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as exc:
            log_event("resolver", f"exec_failed program={executable} error={exc}")
            return Resolution.unavailable(program)
        except UnicodeDecodeError as exc:
            log_event("resolver", f"undecodable_output program={executable} error={exc}")
            return Resolution(available=True, country_code=UNKNOWN_COUNTRY, program=program)

        code = parse_lookup_output(proc.stdout)
        return Resolution(available=True, country_code=code, program=program)
