from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from dinnerlady.environment.levels import (
    LevelFormatError,
    load_level,
    load_level_index,
    load_levels,
    parse_level,
)

CANTEEN = {
    "name": "Canteen",
    "width": 6,
    "height": 4,
    "grid": ["111111", "1S0H01", "10D0E1", "111111"],
}


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_parse_level_finds_special_tiles() -> None:
    level = parse_level(CANTEEN, level_id=1)
    tiles = level.special_tiles

    assert level.level_id == 1
    assert level.name == "Canteen"
    assert (level.width, level.height) == (6, 4)
    assert tiles.start == (1, 1)
    assert tiles.exit == (2, 4)
    assert tiles.chaser_spawn == (2, 2)
    assert tiles.hiding_spots == [(1, 3)]


def test_special_tiles_are_walkable() -> None:
    level = parse_level(CANTEEN)
    tiles = level.special_tiles
    for row, col in [tiles.start, tiles.exit, tiles.chaser_spawn, *tiles.hiding_spots]:
        assert level.grid.is_walkable(row, col)


def test_parse_level_accepts_list_rows() -> None:
    level = parse_level({"grid": [["1", "1"], ["S", 0]]})
    assert level.grid.walkable.tolist() == [[False, False], [True, True]]
    assert level.special_tiles.start == (1, 0)


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"grid": []},
        {"grid": ["000", "00"]},
        {"grid": [5, 6]},
        {"width": 3, "height": 1, "grid": ["0000"]},
        {"width": 4, "height": 2, "grid": ["0000"]},
    ],
)
def test_malformed_levels_raise_format_error(data: dict) -> None:
    with pytest.raises(LevelFormatError):
        parse_level(data)


def test_format_error_is_a_value_error() -> None:
    assert issubclass(LevelFormatError, ValueError)


def test_load_level_from_file(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write_json(tmp_path / "canteen.json", CANTEEN)

    with caplog.at_level(logging.INFO):
        level = load_level(path)

    assert level.name == "Canteen"
    assert "Loaded level 'Canteen'" in caplog.text


def test_load_level_rejects_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(LevelFormatError, match="not valid JSON"):
        load_level(path)


def test_load_level_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"grid": ["1\xff"]}')

    with pytest.raises(LevelFormatError, match="not valid JSON"):
        load_level(path)


def test_non_utf8_index_raises_format_error(tmp_path: Path) -> None:
    index = tmp_path / "levels.json"
    index.write_bytes(b'{"levels": [\xff]}')

    with pytest.raises(LevelFormatError):
        load_level_index(index)


def test_load_level_missing_file_raises_os_error(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_level(tmp_path / "nowhere.json")


def test_load_level_index(tmp_path: Path) -> None:
    index = _write_json(
        tmp_path / "levels.json",
        {"levels": [{"id": 1, "name": "Canteen", "file": "canteen.json"}]},
    )

    entries = load_level_index(index)

    assert len(entries) == 1
    assert entries[0].level_id == 1
    assert entries[0].file == "canteen.json"


@pytest.mark.parametrize(
    "data", [[], {"levels": "nope"}, {"levels": [{"id": 1, "name": "No file"}]}]
)
def test_malformed_index_raises(tmp_path: Path, data: object) -> None:
    index = _write_json(tmp_path / "levels.json", data)
    with pytest.raises(LevelFormatError):
        load_level_index(index)


def test_load_levels_skips_broken_files(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write_json(tmp_path / "canteen.json", CANTEEN)
    (tmp_path / "broken.json").write_text("[", encoding="utf-8")
    (tmp_path / "latin1.json").write_bytes(b'{"grid": ["1\xff"]}')
    index = _write_json(
        tmp_path / "levels.json",
        {
            "levels": [
                {"id": 1, "name": "Lunch Hall", "file": "canteen.json"},
                {"id": 2, "name": "Broken", "file": "broken.json"},
                {"id": 3, "name": "Missing", "file": "missing.json"},
                {"id": 4, "name": "Latin-1", "file": "latin1.json"},
            ]
        },
    )

    with caplog.at_level(logging.WARNING):
        levels = load_levels(index)

    assert list(levels) == [1]
    # Index metadata wins over the name inside the level file.
    assert levels[1].name == "Lunch Hall"
    assert levels[1].level_id == 1
    assert "Skipping level 2" in caplog.text
    assert "Skipping level 3" in caplog.text
    assert "Skipping level 4" in caplog.text
