from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from dinnerlady import config
from dinnerlady.game.ai.settings import (
    AISettings,
    load_ai_settings,
    parse_ai_settings,
)
from dinnerlady.game.ai.tiers import BehaviorTier, TargetMode, TierBehavior


def _write_config(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "dinner_lady_ai.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_match_config_module() -> None:
    settings = AISettings.defaults()

    assert settings.thresholds.very_close == config.TIER_VERY_CLOSE_DISTANCE
    assert settings.thresholds.medium == config.TIER_MEDIUM_DISTANCE
    far = settings.behavior_for(BehaviorTier.FAR)
    assert far.target_mode is TargetMode.RANDOM_POINT
    assert far.update_interval == 12.0
    assert far.min_distance_from_target == 15.0
    for tier in (BehaviorTier.VERY_CLOSE, BehaviorTier.CLOSE, BehaviorTier.MEDIUM):
        assert settings.behavior_for(tier).target_mode is TargetMode.TRACK_TARGET
    assert settings.wall_avoidance.enabled
    assert settings.random_point_attempts == 50


def test_shipped_config_file_matches_defaults() -> None:
    assert load_ai_settings() == AISettings.defaults()


def test_none_path_skips_the_file() -> None:
    assert load_ai_settings(None) == AISettings.defaults()


def test_missing_file_falls_back_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        settings = load_ai_settings(tmp_path / "absent.json")

    assert settings == AISettings.defaults()
    assert "not found" in caplog.text


def test_bad_json_falls_back_with_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{distances: ", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        settings = load_ai_settings(path)

    assert settings == AISettings.defaults()
    assert "Failed to load AI config" in caplog.text


def test_non_utf8_file_falls_back_with_error(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"randomPointAttempts": 1\xff}')

    with caplog.at_level(logging.ERROR):
        settings = load_ai_settings(path)

    assert settings == AISettings.defaults()
    assert "Failed to load AI config" in caplog.text


@pytest.mark.parametrize(
    "data",
    [
        {"distances": {"veryClose": 30}},
        {"distances": {"close": "near"}},
        {"behavior": {"far": {"targetType": "teleport"}}},
        {"behavior": {"close": {"updateInterval": 0}}},
        {"behavior": {"close": "fast"}},
        {"wallAvoidance": {"checkRadius": 1.5}},
        {"wallAvoidance": {"cornerAvoidance": True}},
        {"randomPointAttempts": 0},
        {"distances": []},
        ["not", "an", "object"],
    ],
)
def test_invalid_values_fall_back_to_defaults(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, data: object
) -> None:
    with caplog.at_level(logging.ERROR):
        settings = load_ai_settings(_write_config(tmp_path, data))

    assert settings == AISettings.defaults()
    assert "Invalid AI config" in caplog.text


def test_partial_override_keeps_other_defaults(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {
            "distances": {"medium": 25},
            "behavior": {"close": {"updateInterval": 3}},
            "wallAvoidance": {"cornerAvoidance": {"enabled": True}},
        },
    )

    settings = load_ai_settings(path)

    assert settings.thresholds.medium == 25.0
    assert settings.thresholds.close == 10.0
    assert settings.behavior_for(BehaviorTier.CLOSE) == TierBehavior(
        TargetMode.TRACK_TARGET, 3.0
    )
    assert settings.behavior_for(BehaviorTier.FAR).update_interval == 12.0
    assert settings.wall_avoidance.corner_avoidance
    assert settings.wall_avoidance.corner_extra_cost == 3.0


def test_string_values_are_coerced() -> None:
    settings = parse_ai_settings(
        {
            "distances": {"veryClose": "4", "close": "8.5"},
            "behavior": {"medium": {"targetType": " Random ", "updateInterval": "6"}},
            "wallAvoidance": {"enabled": "false", "checkRadius": "2"},
        }
    )

    assert settings.thresholds.very_close == 4.0
    assert settings.thresholds.close == 8.5
    medium = settings.behavior_for(BehaviorTier.MEDIUM)
    assert medium.target_mode is TargetMode.RANDOM_POINT
    assert medium.update_interval == 6.0
    assert not settings.wall_avoidance.enabled
    assert settings.wall_avoidance.check_radius == 2


def test_legacy_far_distance_key_is_ignored() -> None:
    settings = parse_ai_settings({"distances": {"far": 30}, "updateIntervals": {}})
    assert settings.thresholds == AISettings.defaults().thresholds


def test_settings_require_every_tier() -> None:
    with pytest.raises(ValueError, match="missing behavior"):
        AISettings(behaviors={})
