from typing import Any

import structlog

from sns2ps.exceptions import ParseError
from sns2ps.scraper import Scraper
from sns2ps.sources.base_source import BaseSource, Resource

logger = structlog.get_logger(__name__)

# Upper bound on pages for one list resource. Going past it is an error.
MAX_PAGES = 200


class SnsSource(BaseSource):
    """Source implementation for the live Shoot 'n Score It API."""

    def __init__(self, scraper: Scraper | None = None):
        """Initializes the SnsSource.

        Args:
            scraper: An optional shared Scraper instance.
        """
        self.scraper = scraper or Scraper()

    def get_payload(
        self, url: str, resource: Resource, username: str, password: str
    ) -> Any:
        payload = self.scraper.get_json(url, username, password)
        if resource is Resource.MATCH or not isinstance(payload, dict):
            return payload

        # Paginated list: {"results": [...], "next": "<url>" | null}
        results = payload.get("results")
        next_url = payload.get("next")
        if not isinstance(results, list) or not next_url:
            return payload

        entries = list(results)
        pages = 1
        seen = {url}
        while next_url:
            if pages >= MAX_PAGES:
                logger.error("page_limit_reached", resource=resource.value, pages=pages)
                raise ParseError(
                    f"More than {MAX_PAGES} pages of {resource.value}",
                    resource=resource.value,
                    snippet=next_url,
                )
            if next_url in seen:
                logger.error("page_loop", resource=resource.value, url=next_url)
                raise ParseError(
                    f"Pages of {resource.value} link back to {next_url}",
                    resource=resource.value,
                    snippet=next_url,
                )
            seen.add(next_url)
            page = self.scraper.get_json(next_url, username, password)
            if not isinstance(page, dict) or not isinstance(page.get("results"), list):
                raise ParseError(
                    f"Malformed page of {resource.value}",
                    resource=resource.value,
                    snippet=repr(page),
                )
            entries.extend(page["results"])
            next_url = page.get("next")
            pages += 1

        logger.debug("pages_fetched", resource=resource.value, pages=pages)
        return entries
