import pytest

from sns2ps.exceptions import ParseError
from sns2ps.models import Competitor, Match, Squad


def test_match_from_dict_full() -> None:
    match = Match.from_dict(
        {
            "id": 4242,
            "name": "Spring Classic",
            "starts": "2024-04-13",
            "ends": "2024-04-14",
            "venue": "Bisley",
        }
    )

    assert match.id == "4242"
    assert match.name == "Spring Classic"
    assert match.to_dict()["venue"] == "Bisley"


def test_match_from_dict_minimal() -> None:
    match = Match.from_dict({"name": "Club Night"})

    assert match.id == ""
    assert match.starts is None


@pytest.mark.parametrize("payload", [None, [], "Spring Classic", {"id": 1}])
def test_match_from_dict_invalid(payload: object) -> None:
    with pytest.raises(ParseError):
        Match.from_dict(payload)


def test_squad_from_dict() -> None:
    squad = Squad.from_dict(
        {"id": 7, "name": "Squad 7", "squad_number": 7, "competitors": [1, 2]}
    )

    assert squad == Squad(id=7, name="Squad 7", number=7, competitors=(1, 2))


def test_squad_from_dict_tolerates_bad_members() -> None:
    squad = Squad.from_dict({"id": 7, "name": None, "competitors": "1,2"})

    assert squad.name == ""
    assert squad.competitors == ()


def test_squad_from_dict_invalid() -> None:
    with pytest.raises(ParseError):
        Squad.from_dict("Squad 1")


def test_competitor_extra_fields() -> None:
    competitor = Competitor.from_dict(
        {"id": 1, "first_name": "Alice", "division": 3, "is_ro": True, "dq": False}
    )

    assert competitor.first_name == "Alice"
    assert competitor.last_name == ""
    assert competitor.division == 3
    assert competitor.extra == {"is_ro": True, "dq": False}
