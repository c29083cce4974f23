import logging
from functools import lru_cache

import pycountry

logger = logging.getLogger(__name__)

# IPSC region names that differ from the ISO 3166 short name.
IPSC_REGION_NAMES: dict[str, str] = {
    "GBR": "Great Britain",
    "USA": "USA",
    "RUS": "Russia",
    "KOR": "South Korea",
    "CZE": "Czech Republic",
    "MDA": "Moldova",
    "VEN": "Venezuela",
    "BOL": "Bolivia",
    "TWN": "Chinese Taipei",
}


@lru_cache(maxsize=1)
def country_names_by_alpha3() -> dict[str, str]:
    """
    Build a mapping from ISO 3166-1 alpha-3 code to country name.

    IPSC region spellings from IPSC_REGION_NAMES take precedence over the
    pycountry names.

    Returns:
        Dict such as {"SWE": "Sweden", "GBR": "Great Britain", ...}.
    """
    names: dict[str, str] = {}
    for country in pycountry.countries:
        # mypy: pycountry types are dynamic
        code = getattr(country, "alpha_3", None)
        if not code:
            continue
        names[str(code)] = str(
            getattr(country, "common_name", None) or getattr(country, "name", code)
        )
    names.update(IPSC_REGION_NAMES)
    logger.debug(f"Loaded {len(names)} region names")
    return names
