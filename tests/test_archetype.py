import pytest

from prop_ses.archetype import infer_archetype


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        ("C", "Big"),
        ("PF", "Big"),
        ("PF-C", "Big"),
        ("F", "Big"),
        ("Center", "Big"),
        ("PG", "Guard"),
        ("SG", "Guard"),
        ("G", "Guard"),
        ("Point Guard", "Guard"),
        ("SF", "Wing"),
        ("G-F", "Wing"),
        ("Small Forward", "Wing"),
    ],
)
def test_infer_archetype_from_position(position: str, expected: str) -> None:
    assert infer_archetype(position, "points") == expected


def test_position_wins_over_stat_type() -> None:
    assert infer_archetype("PG", "rebounds") == "Guard"


def test_infer_archetype_from_stat_when_position_missing() -> None:
    assert infer_archetype(None, "rebounds") == "Big"
    assert infer_archetype(None, "pts+reb+ast") == "Big"
    assert infer_archetype("", "assists") == "Guard"
    assert infer_archetype(None, "points") == "Wing"
    assert infer_archetype(None, "threes") == "Wing"
