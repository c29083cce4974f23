from dataclasses import dataclass, field
from typing import Any

from sns2ps.exceptions import ParseError

# Keys of a raw competitor record that map onto Competitor attributes.
# Anything else in the payload is kept in Competitor.extra.
COMPETITOR_KEYS = frozenset(
    {
        "id",
        "first_name",
        "last_name",
        "email",
        "member_number",
        "category",
        "division",
        "region",
        "power_factor",
        "classification",
        "squad",
    }
)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class Match:
    """A single match as returned by the match detail endpoint.

    Date format: ISO 8601 (YYYY-MM-DD) when present.
    """

    id: str
    name: str
    starts: str | None = None
    ends: str | None = None
    venue: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Match":
        if not isinstance(data, dict):
            raise ParseError(
                "Match payload is not an object",
                resource="match",
                snippet=repr(data),
            )
        name = data.get("name")
        if not name:
            raise ParseError(
                "Match payload has no name", resource="match", field="name"
            )
        return cls(
            id=str(data.get("id", "")),
            name=str(name),
            starts=_optional_str(data.get("starts")),
            ends=_optional_str(data.get("ends")),
            venue=_optional_str(data.get("venue")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "starts": self.starts,
            "ends": self.ends,
            "venue": self.venue,
        }


@dataclass(frozen=True)
class Squad:
    """A squad (shooting group) within a match."""

    id: Any
    name: str
    number: int | None = None
    competitors: tuple[Any, ...] = ()  # member competitor ids, may be empty

    @classmethod
    def from_dict(cls, data: Any) -> "Squad":
        if not isinstance(data, dict):
            raise ParseError(
                "Squad entry is not an object", resource="squads", snippet=repr(data)
            )
        members = data.get("competitors") or ()
        if not isinstance(members, list | tuple):
            members = ()
        number = data.get("squad_number", data.get("number"))
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            number=int(number) if isinstance(number, int) else None,
            competitors=tuple(members),
        )


@dataclass
class Competitor:
    """A raw competitor record before resolution.

    ``category``, ``division`` and ``region`` hold the codes exactly as the
    remote API returns them.
    """

    id: Any = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    member_number: str = ""
    category: Any = None
    division: Any = None
    region: Any = None
    power_factor: str = ""
    classification: str = ""
    squad: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Competitor":
        return cls(
            id=data.get("id"),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            email=str(data.get("email") or ""),
            member_number=str(data.get("member_number") or ""),
            category=data.get("category"),
            division=data.get("division"),
            region=data.get("region"),
            power_factor=str(data.get("power_factor") or ""),
            classification=str(data.get("classification") or ""),
            squad=data.get("squad"),
            extra={k: v for k, v in data.items() if k not in COMPETITOR_KEYS},
        )


@dataclass(frozen=True)
class ResolvedCompetitor:
    """A competitor with every coded field resolved to its display value."""

    id: Any
    first_name: str
    last_name: str
    email: str
    member_number: str
    power_factor: str
    classification: str
    category_name: str
    division_name: str
    region_name: str
    squad_name: str
    match_id: str
    match_name: str
    extra: dict[str, Any] = field(default_factory=dict, compare=False)
