from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any

import structlog

from sns2ps.exceptions import ParseError
from sns2ps.models import Match, ResolvedCompetitor, Squad
from sns2ps.resolver import resolve_competitors

logger = structlog.get_logger(__name__)


class Resource(Enum):
    """The remote resource collections of a match."""

    MATCH = "match"
    SQUADS = "squads"
    COMPETITORS = "competitors"


def as_list(payload: Any, resource: Resource) -> list[Any]:
    """Returns the entries of a list payload.

    Accepts a bare JSON array or an object with a ``results`` array.
    """
    if isinstance(payload, dict) and isinstance(payload.get("results"), list):
        return payload["results"]
    if isinstance(payload, list):
        return payload
    raise ParseError(
        f"Expected a list of {resource.value}",
        resource=resource.value,
        snippet=repr(payload),
    )


class BaseSource(ABC):
    """Abstract base class for registration sources."""

    @abstractmethod
    def get_payload(
        self, url: str, resource: Resource, username: str, password: str
    ) -> Any:
        """Fetches the decoded payload of one resource.

        Args:
            url: Resource URL.
            resource: Which resource the URL points at.
            username: Shoot 'n Score It username.
            password: Shoot 'n Score It password.

        Returns:
            The decoded payload.
        """
        pass

    def fetch_match(self, url: str, username: str, password: str) -> Match:
        """Fetches the match details.

        Raises:
            FetchError: If the remote request fails.
            ParseError: If the payload is not a match.
        """
        match = Match.from_dict(
            self.get_payload(url, Resource.MATCH, username, password)
        )
        logger.info("match_fetched", match_id=match.id, name=match.name)
        return match

    def fetch_squads(self, url: str, username: str, password: str) -> list[Squad]:
        """Fetches the squads of a match."""
        payload = self.get_payload(url, Resource.SQUADS, username, password)
        squads = []
        for index, entry in enumerate(as_list(payload, Resource.SQUADS)):
            try:
                squads.append(Squad.from_dict(entry))
            except ParseError as e:
                logger.warning("squad_entry_skipped", index=index, error=e.message)
        logger.info("squads_fetched", count=len(squads))
        return squads

    def fetch_competitors(
        self,
        url: str,
        categories: Mapping[str, str],
        divisions: Mapping[int, str],
        match: Match,
        regions: Mapping[str, str],
        squads: list[Squad],
        username: str,
        password: str,
    ) -> list[ResolvedCompetitor]:
        """Fetches the competitors of a match and resolves them.

        Args:
            url: Competitor list URL.
            categories: Category code table.
            divisions: Division code table.
            match: The match, already fetched.
            regions: Region code table.
            squads: The squads, already fetched.
            username: Shoot 'n Score It username.
            password: Shoot 'n Score It password.

        Returns:
            Resolved competitors in the order the remote returned them.
        """
        payload = self.get_payload(url, Resource.COMPETITORS, username, password)
        records = as_list(payload, Resource.COMPETITORS)
        logger.info("competitors_fetched", count=len(records), match_id=match.id)
        return resolve_competitors(
            records, squads, categories, divisions, regions, match
        )
