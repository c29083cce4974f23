"""Static lookup tables for coded competitor fields.

Each table maps the code used by the Shoot 'n Score It API to the display
value PractiScore expects. Tables are built once per process and returned as
read-only mappings.
"""

from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from sns2ps.utils.country import country_names_by_alpha3

# Display value for codes that are not in a table.
UNKNOWN = "Unknown"

# Codes meaning "no category". PractiScore leaves the column blank.
NO_CATEGORY_CODES = frozenset({"", "-"})

_CATEGORIES: dict[str, str] = {
    "-": "",
    "L": "Lady",
    "J": "Junior",
    "SJ": "Super Junior",
    "S": "Senior",
    "SS": "Super Senior",
    "GS": "Grand Senior",
}

# IPSC handgun divisions, keyed by the numeric division id.
_DIVISIONS: dict[int, str] = {
    1: "Open",
    2: "Standard",
    3: "Production",
    4: "Revolver",
    5: "Classic",
    6: "Production Optics",
    7: "Production Optics Light",
    8: "Pistol Caliber Carbine",
    9: "Open Semi Auto",
    10: "Standard Manual",
}


@lru_cache(maxsize=1)
def categories() -> Mapping[str, str]:
    return MappingProxyType(dict(_CATEGORIES))


@lru_cache(maxsize=1)
def divisions() -> Mapping[int, str]:
    return MappingProxyType(dict(_DIVISIONS))


@lru_cache(maxsize=1)
def regions() -> Mapping[str, str]:
    """Region code (ISO 3166-1 alpha-3) to region name."""
    return MappingProxyType(dict(country_names_by_alpha3()))


def lookup(table: Mapping[Any, str], code: Any) -> str:
    """Exact-match lookup that falls back to UNKNOWN.

    Unhashable codes (e.g. a list from a malformed payload) are treated as
    unknown rather than raising.
    """
    try:
        return table.get(code, UNKNOWN)
    except TypeError:
        return UNKNOWN
