import json
from pathlib import Path

import pytest

from draftboard.errors import ConversionError
from draftboard.ingest import (
    clean_player_name,
    convert_rankings_export,
    load_rankings,
    read_rankings_csv,
)


def _rankings_csv() -> str:
    return (
        '"RK",TIERS,"PLAYER NAME",TEAM,"POS","BYE WEEK"\n'
        '3,1,"Bijan Robinson",ATL,"RB2","5"\n'
        '1,1,"Ja\'Marr Chase",CIN,"WR1","10"\n'
        '2,1,"Marvin Harrison Jr.",ARI,"WR2","8"\n'
        '4,2,"Marquise Brown",KC,"WR3","10"\n'
        '5,9,"Denver Broncos",DEN,"DST1","12"\n'
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Marvin Harrison Jr.", "Marvin Harrison"),
        ("Kenneth Walker III", "Kenneth Walker"),
        ("Michael Pittman Jr. ", "Michael Pittman"),
        ("Marquise Brown", "Hollywood Brown"),
        ("Travis Kelce", "Travis Kelce"),
        ("Jr. Smith", "Jr. Smith"),
    ],
)
def test_clean_player_name(raw, expected):
    assert clean_player_name(raw) == expected


def test_read_rankings_csv_sorts_and_cleans(tmp_path: Path):
    path = tmp_path / "rankings.csv"
    path.write_text(_rankings_csv(), encoding="utf-8")

    players = read_rankings_csv(path)

    assert [player.rank for player in players] == [1, 2, 3, 4, 5]
    assert players[1].name == "Marvin Harrison"
    assert players[1].position == "WR"
    assert players[3].name == "Hollywood Brown"
    assert players[4].position == "DEF"
    assert players[4].tier == 9


def test_read_rankings_csv_missing_column(tmp_path: Path):
    path = tmp_path / "rankings.csv"
    path.write_text("RK,PLAYER NAME,POS\n1,Someone,RB1\n", encoding="utf-8")

    with pytest.raises(ConversionError, match="TIERS"):
        read_rankings_csv(path)


def test_read_rankings_csv_bad_rank(tmp_path: Path):
    path = tmp_path / "rankings.csv"
    path.write_text("RK,TIERS,PLAYER NAME,POS\nfirst,1,Someone,RB1\n", encoding="utf-8")

    with pytest.raises(ConversionError, match="line 2"):
        read_rankings_csv(path)


def test_convert_and_load_rankings(tmp_path: Path):
    source = tmp_path / "FantasyPros.csv"
    source.write_text(_rankings_csv(), encoding="utf-8")
    destination = tmp_path / "data" / "rankings.json"

    report = convert_rankings_export(source, destination)

    assert report.players == 5
    assert [player.rank for player in report.sample] == [1, 2, 3, 4, 5]
    payload = json.loads(destination.read_text(encoding="utf-8"))
    assert payload[0] == {"rank": 1, "tier": 1, "name": "Ja'Marr Chase", "position": "WR"}

    rankings = load_rankings(destination)
    assert [player.name for player in rankings][:2] == ["Ja'Marr Chase", "Marvin Harrison"]


def test_load_rankings_keeps_file_order(tmp_path: Path):
    path = tmp_path / "rankings.json"
    path.write_text(
        json.dumps(
            [
                {"rank": 2, "tier": 1, "name": "B", "position": "RB"},
                {"rank": 1, "tier": 1, "name": "A", "position": "WR"},
                {"rank": "x", "tier": 1, "name": "Broken", "position": "WR"},
            ]
        ),
        encoding="utf-8",
    )

    rankings = load_rankings(path)
    assert [player.name for player in rankings] == ["B", "A"]


def test_load_rankings_missing_file(tmp_path: Path):
    assert load_rankings(tmp_path / "missing.json") == []
    assert load_rankings(None) == []
