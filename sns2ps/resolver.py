"""Entity resolution: competitors joined against squads and lookup tables.

Resolution never fails a batch. A missing squad, an unknown code or a
malformed record degrades to a placeholder value for the affected field and
the record is still emitted, so the output has exactly one resolved
competitor per input record, in input order.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from sns2ps.lookups import NO_CATEGORY_CODES, UNKNOWN, lookup
from sns2ps.models import Competitor, Match, ResolvedCompetitor, Squad

logger = structlog.get_logger(__name__)

# Squad name used when a competitor's squad cannot be found.
NO_SQUAD = ""


class SquadIndex:
    """Squad lookup by squad id and by member competitor id."""

    def __init__(self, squads: Iterable[Squad]) -> None:
        self.by_id: dict[Any, Squad] = {}
        self.by_member: dict[Any, Squad] = {}
        for squad in squads:
            if squad.id is None:
                continue
            try:
                self.by_id.setdefault(squad.id, squad)
            except TypeError:
                logger.warning("squad_id_unhashable", squad_id=repr(squad.id))
                continue
            for member in squad.competitors:
                try:
                    self.by_member.setdefault(member, squad)
                except TypeError:
                    logger.warning("squad_member_unhashable", squad_id=squad.id)

    def squad_for(self, competitor: Competitor) -> Squad | None:
        """Finds the squad for a competitor.

        The competitor's own squad reference wins. Membership lists on the
        squads are only consulted when the competitor has no reference.
        """
        try:
            if competitor.squad is not None:
                return self.by_id.get(competitor.squad)
            if competitor.id is not None:
                return self.by_member.get(competitor.id)
        except TypeError:
            pass
        return None


def resolve_category(categories: Mapping[str, str], code: Any) -> str:
    if code is None or (isinstance(code, str) and code in NO_CATEGORY_CODES):
        return categories.get("-", "")
    return lookup(categories, code)


def resolve_competitor(
    competitor: Competitor,
    squads: SquadIndex,
    categories: Mapping[str, str],
    divisions: Mapping[int, str],
    regions: Mapping[str, str],
    match: Match,
) -> ResolvedCompetitor:
    """Resolves a single competitor. Never raises for missing references."""
    squad = squads.squad_for(competitor)
    if squad is None:
        logger.warning(
            "squad_not_found", competitor_id=competitor.id, squad=competitor.squad
        )

    resolved = ResolvedCompetitor(
        id=competitor.id,
        first_name=competitor.first_name,
        last_name=competitor.last_name,
        email=competitor.email,
        member_number=competitor.member_number,
        power_factor=competitor.power_factor,
        classification=competitor.classification,
        category_name=resolve_category(categories, competitor.category),
        division_name=lookup(divisions, competitor.division),
        region_name=lookup(regions, competitor.region),
        squad_name=squad.name if squad else NO_SQUAD,
        match_id=match.id,
        match_name=match.name,
        extra=dict(competitor.extra),
    )

    for field_name, code in (
        ("category", competitor.category),
        ("division", competitor.division),
        ("region", competitor.region),
    ):
        if getattr(resolved, f"{field_name}_name") == UNKNOWN:
            logger.warning(
                "unknown_code",
                field=field_name,
                code=repr(code),
                competitor_id=competitor.id,
            )
    return resolved


def resolve_competitors(
    records: Sequence[Any],
    squads: Iterable[Squad],
    categories: Mapping[str, str],
    divisions: Mapping[int, str],
    regions: Mapping[str, str],
    match: Match,
) -> list[ResolvedCompetitor]:
    """Resolves raw competitor records into display-ready competitors.

    Args:
        records: Raw competitor records as decoded from the remote payload.
        squads: The squads of the match.
        categories: Category code table.
        divisions: Division code table.
        regions: Region code table.
        match: The match the competitors are registered for.

    Returns:
        One ResolvedCompetitor per record, in the same order.
    """
    index = SquadIndex(squads)
    resolved: list[ResolvedCompetitor] = []
    for position, record in enumerate(records):
        if isinstance(record, Competitor):
            competitor = record
        elif isinstance(record, dict):
            competitor = Competitor.from_dict(record)
        else:
            logger.warning(
                "malformed_competitor",
                position=position,
                record_type=type(record).__name__,
            )
            competitor = Competitor()
        resolved.append(
            resolve_competitor(
                competitor, index, categories, divisions, regions, match
            )
        )

    logger.info(
        "competitors_resolved", count=len(resolved), match_id=match.id
    )
    return resolved
