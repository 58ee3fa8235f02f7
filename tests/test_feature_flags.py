from feature_flags import (
    coerce_bool,
    get_visual_feature,
    is_visual_mode_enabled,
    reload as reload_features,
)


def setup_function():
    reload_features()


def test_visual_mode_enabled_by_default():
    assert is_visual_mode_enabled({}) is True


def test_test_profile_starts_in_instant_mode():
    assert get_visual_feature("test") == {"enabled": False}
    assert is_visual_mode_enabled({}, profile="test") is False


def test_visual_mode_can_be_overridden_via_env():
    assert is_visual_mode_enabled({"SUDOKU_VISUAL": "off"}) is False
    assert is_visual_mode_enabled({"SUDOKU_VISUAL": "yes"}, profile="test") is True
    # The CLI variable wins over the generic one.
    assert is_visual_mode_enabled({"SUDOKU_VISUAL": "0", "CLI_SUDOKU_VISUAL": "true"}) is True


def test_unrecognised_values_are_ignored():
    assert coerce_bool("maybe") is None
    assert is_visual_mode_enabled({"SUDOKU_VISUAL": "maybe"}) is True
