"""Tests for the config module."""
import json

import pytest

from streak_freeze.config import (
    BASELINE_STREAK,
    DAYS_BETWEEN_FREEZES,
    DAYS_TO_FIRST_FREEZE,
    MAX_STREAK_FREEZES,
    FreezeConfig,
    get_setting,
    get_setting_or_default,
    load_config,
    load_freeze_config,
    save_config,
    set_setting,
)


class TestLoadConfig:
    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.json") == {}

    def test_invalid_json_returns_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_object_json_returns_empty(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_config(path) == {}

    def test_loads_valid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"key": "value"}', encoding="utf-8")
        assert load_config(path) == {"key": "value"}


class TestSaveConfig:
    def test_creates_file(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"hello": "world"}, path)
        assert json.loads(path.read_text()) == {"hello": "world"}

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "sub" / "dir" / "config.json"
        save_config({"nested": True}, path)
        assert path.exists()


class TestGetSetting:
    def test_absent_returns_none(self, tmp_path):
        assert get_setting(MAX_STREAK_FREEZES, tmp_path / "config.json") is None

    def test_valid_value(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({MAX_STREAK_FREEZES: 8}, path)
        assert get_setting(MAX_STREAK_FREEZES, path) == 8

    def test_numeric_string_accepted(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({MAX_STREAK_FREEZES: "4"}, path)
        assert get_setting(MAX_STREAK_FREEZES, path) == 4

    def test_zero_is_invalid_for_thresholds(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_TO_FIRST_FREEZE: 0}, path)
        assert get_setting(DAYS_TO_FIRST_FREEZE, path) is None

    def test_non_numeric_is_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_TO_FIRST_FREEZE: "soon"}, path)
        assert get_setting(DAYS_TO_FIRST_FREEZE, path) is None

    def test_fractional_is_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_TO_FIRST_FREEZE: 2.5}, path)
        assert get_setting(DAYS_TO_FIRST_FREEZE, path) is None

    def test_bool_is_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_TO_FIRST_FREEZE: True}, path)
        assert get_setting(DAYS_TO_FIRST_FREEZE, path) is None

    def test_baseline_may_be_zero(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({BASELINE_STREAK: 0}, path)
        assert get_setting(BASELINE_STREAK, path) == 0

    def test_invalid_falls_back_to_default(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_BETWEEN_FREEZES: -2}, path)
        assert get_setting_or_default(DAYS_BETWEEN_FREEZES, path) == 3


class TestSetSetting:
    def test_persists_value(self, tmp_path):
        path = tmp_path / "config.json"
        set_setting(MAX_STREAK_FREEZES, 7, path)
        assert get_setting(MAX_STREAK_FREEZES, path) == 7

    def test_preserves_other_keys(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"other_key": "keep_me"}, path)
        set_setting(MAX_STREAK_FREEZES, 7, path)
        assert load_config(path)["other_key"] == "keep_me"

    def test_rejects_unknown_setting(self, tmp_path):
        with pytest.raises(ValueError):
            set_setting("days-to-nowhere", 3, tmp_path / "config.json")

    def test_rejects_non_positive(self, tmp_path):
        with pytest.raises(ValueError):
            set_setting(MAX_STREAK_FREEZES, 0, tmp_path / "config.json")


class TestLoadFreezeConfig:
    def test_defaults(self, tmp_path):
        assert load_freeze_config(tmp_path / "config.json") == FreezeConfig(
            days_to_first_freeze=3,
            days_to_second_freeze=7,
            days_between_freezes=3,
            max_freezes=5,
        )

    def test_overrides(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({DAYS_TO_FIRST_FREEZE: 2, MAX_STREAK_FREEZES: 9}, path)
        config = load_freeze_config(path)
        assert config.days_to_first_freeze == 2
        assert config.days_to_second_freeze == 7
        assert config.max_freezes == 9
