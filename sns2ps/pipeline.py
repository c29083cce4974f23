"""Registration export pipeline.

The export runs in three stages with typed outputs, so each stage can only
start once the data it depends on exists:

1. ``fetch_context``  -> MatchContext         (match and squads)
2. ``resolve``        -> ResolvedRegistration (competitors joined and resolved)
3. ``export``         -> RegistrationExport   (CSV bytes and file name)
"""

from dataclasses import dataclass, field
from urllib.parse import quote

import structlog

from sns2ps import lookups
from sns2ps.config import Settings
from sns2ps.exceptions import ValidationError
from sns2ps.exporter import csv_rows, export_filename, render_csv
from sns2ps.models import Match, ResolvedCompetitor, Squad
from sns2ps.scraper import Scraper
from sns2ps.sources.base_source import BaseSource
from sns2ps.sources.local_source import LocalSource
from sns2ps.sources.sns_source import SnsSource

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResourceUrls:
    match: str
    squads: str
    competitors: str

    @classmethod
    def for_match(cls, base_url: str, match_id: str) -> "ResourceUrls":
        match_url = f"{base_url.rstrip('/')}/{quote(match_id, safe='')}/"
        return cls(
            match=match_url,
            squads=f"{match_url}squads/",
            competitors=f"{match_url}competitors/",
        )


@dataclass(frozen=True)
class MatchRequest:
    """A validated request for one match."""

    match_id: str
    username: str
    password: str = field(repr=False)

    @classmethod
    def validated(
        cls, match_id: str | None, username: str | None, password: str | None
    ) -> "MatchRequest":
        """Builds a request, checking that every field is present.

        Raises:
            ValidationError: If any field is missing or blank.
        """
        values = {
            "matchid": (match_id or "").strip(),
            "username": (username or "").strip(),
            "password": password or "",
        }
        missing = [name for name, value in values.items() if not value]
        if missing:
            logger.warning("request_invalid", missing=missing)
            raise ValidationError(
                "You need to supply your Match ID, and your "
                "Shoot 'n Score It username and password",
                fields=missing,
            )
        return cls(values["matchid"], values["username"], values["password"])


@dataclass(frozen=True)
class MatchContext:
    request: MatchRequest
    urls: ResourceUrls
    match: Match
    squads: list[Squad]


@dataclass(frozen=True)
class ResolvedRegistration:
    match: Match
    competitors: list[ResolvedCompetitor]


@dataclass(frozen=True)
class RegistrationExport:
    match: Match
    filename: str
    content: bytes
    row_count: int  # competitor rows, header excluded


def make_source(settings: Settings) -> BaseSource:
    """Selects the live or local source once, from the settings."""
    if settings.live_mode:
        logger.info("source_selected", mode="live", base_url=settings.base_url)
        return SnsSource(Scraper(timeout=settings.timeout))
    logger.info("source_selected", mode="dummy")
    return LocalSource()


class RegistrationPipeline:
    """Fetches, resolves and exports the registration of a match."""

    def __init__(self, source: BaseSource, base_url: str):
        self.source = source
        self.base_url = base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "RegistrationPipeline":
        return cls(make_source(settings), settings.base_url)

    def fetch_match(self, request: MatchRequest) -> Match:
        urls = ResourceUrls.for_match(self.base_url, request.match_id)
        return self.source.fetch_match(urls.match, request.username, request.password)

    def fetch_context(self, request: MatchRequest) -> MatchContext:
        urls = ResourceUrls.for_match(self.base_url, request.match_id)
        match = self.source.fetch_match(urls.match, request.username, request.password)
        squads = self.source.fetch_squads(
            urls.squads, request.username, request.password
        )
        return MatchContext(request=request, urls=urls, match=match, squads=squads)

    def resolve(self, context: MatchContext) -> ResolvedRegistration:
        competitors = self.source.fetch_competitors(
            context.urls.competitors,
            lookups.categories(),
            lookups.divisions(),
            context.match,
            lookups.regions(),
            context.squads,
            context.request.username,
            context.request.password,
        )
        return ResolvedRegistration(match=context.match, competitors=competitors)

    def export(self, registration: ResolvedRegistration) -> RegistrationExport:
        content = render_csv(csv_rows(registration.competitors))
        filename = export_filename(registration.match.name)
        logger.info(
            "registration_exported",
            match_id=registration.match.id,
            filename=filename,
            rows=len(registration.competitors),
        )
        return RegistrationExport(
            match=registration.match,
            filename=filename,
            content=content,
            row_count=len(registration.competitors),
        )

    def run(self, request: MatchRequest) -> RegistrationExport:
        """Runs all three stages for one request."""
        return self.export(self.resolve(self.fetch_context(request)))
