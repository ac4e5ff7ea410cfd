import json
from pathlib import Path

import pytest

from prop_ses.engine import evaluate
from prop_ses.errors import PicksStoreError
from prop_ses.models import Proposition
from prop_ses.storage import SCHEMA_VERSION, PicksStore, pick_key


def _props(median: float = 25.0) -> list[Proposition]:
    return [
        Proposition(
            player="Jalen Brunson",
            stat="points",
            line=22.5,
            side="over",
            avg_minutes=34.0,
            rolling_median=median,
        ),
        Proposition(
            player="Mitchell Robinson",
            stat="rebounds",
            line=8.0,
            side="under",
            avg_minutes=26.0,
            rolling_median=5.5,
            position="C",
        ),
    ]


def test_pick_key_normalizes_player_and_stat() -> None:
    assert pick_key("Jalen Brunson", "player_points", "2026-01-05") == pick_key(
        "jalen  brunson", "Points", "2026-01-05"
    )


def test_upsert_writes_day_document(tmp_path: Path) -> None:
    store = PicksStore(tmp_path)

    written = store.upsert(evaluate(_props()), game_date="2026-01-05")

    assert written == 2
    payload = json.loads(store.day_path("2026-01-05").read_text(encoding="utf-8"))
    assert payload["schema_version"] == SCHEMA_VERSION
    assert payload["game_date"] == "2026-01-05"
    assert len(payload["picks"]) == 2
    assert not list(tmp_path.glob(".tmp-*"))


def test_upsert_overwrites_same_key(tmp_path: Path) -> None:
    store = PicksStore(tmp_path)
    store.upsert(evaluate(_props()), game_date="2026-01-05")

    store.upsert(evaluate(_props(median=21.5))[:1], game_date="2026-01-05")

    picks = store.list_picks("2026-01-05")
    assert len(picks) == 2
    brunson = next(row for row in picks if row["player"] == "Jalen Brunson")
    assert brunson["rolling_median"] == 21.5
    assert brunson["decision"] == "reject"


def test_list_picks_sorted_by_score(tmp_path: Path) -> None:
    store = PicksStore(tmp_path)
    store.upsert(evaluate(_props()), game_date="2026-01-05")

    picks = store.list_picks("2026-01-05")

    assert [row["player"] for row in picks] == ["Mitchell Robinson", "Jalen Brunson"]
    assert store.list_picks("2026-01-06") == []


def test_list_dates(tmp_path: Path) -> None:
    store = PicksStore(tmp_path / "picks")
    assert store.list_dates() == []
    store.upsert(evaluate(_props()), game_date="2026-01-06")
    store.upsert(evaluate(_props()), game_date="2026-01-05")
    assert store.list_dates() == ["2026-01-05", "2026-01-06"]


def test_corrupt_day_file_raises(tmp_path: Path) -> None:
    store = PicksStore(tmp_path)
    store.day_path("2026-01-05").write_text("{not json", encoding="utf-8")
    with pytest.raises(PicksStoreError):
        store.list_picks("2026-01-05")


def test_non_latin_players_keep_separate_keys(tmp_path: Path) -> None:
    props = [
        Proposition(player=name, stat="points", line=22.5, side="over", rolling_median=25.0)
        for name in ("王哲林", "周琦")
    ]
    store = PicksStore(tmp_path)

    assert store.upsert(evaluate(props), game_date="2026-01-05") == 2

    assert {row["player"] for row in store.list_picks("2026-01-05")} == {"王哲林", "周琦"}
    assert pick_key("王哲林", "points", "2026-01-05") != pick_key("周琦", "points", "2026-01-05")
