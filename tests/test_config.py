import pytest

from kombat.config import DifficultyModifiers, available_presets, load_difficulty
from kombat.constants import ABILITY_METER_MAX, PIECE_TYPES, PLAYER_MAX_HEALTH


def test_default_preset_is_normal():
    modifiers = load_difficulty()
    assert modifiers.name == "normal"
    assert modifiers.opponent_health_multiplier == 1.0
    assert modifiers.player_max_health == PLAYER_MAX_HEALTH
    assert modifiers.ability_meter_max == ABILITY_METER_MAX
    assert modifiers.piece_pool == tuple(PIECE_TYPES)
    assert not modifiers.non_lethal


def test_embedded_presets():
    assert available_presets() == ["easy", "hard", "normal", "tutorial"]
    tutorial = load_difficulty("tutorial")
    assert tutorial.non_lethal
    assert tutorial.meter_counts_all_pieces
    assert load_difficulty("hard").moves_per_attack_delta == -1


def test_unknown_preset_raises():
    with pytest.raises(ValueError, match="Unknown difficulty 'nightmare'"):
        load_difficulty("nightmare")


def test_overrides_replace_preset_values():
    modifiers = load_difficulty("easy", non_lethal=True, piece_pool=["kano", "raiden", "reptile"])
    assert modifiers.name == "easy"
    assert modifiers.non_lethal
    assert modifiers.piece_pool == ("kano", "raiden", "reptile")
    with pytest.raises(ValueError):
        load_difficulty("easy", bogus=1)


def test_custom_yaml_file(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(
        "default: brutal\n"
        "presets:\n"
        "  brutal:\n"
        "    opponent_health_multiplier: 2.0\n"
        "    piece_pool: [kano, raiden, reptile, subzero]\n",
        encoding="utf-8",
    )
    modifiers = load_difficulty(path=str(path))
    assert modifiers.name == "brutal"
    assert modifiers.opponent_health_multiplier == 2.0
    assert modifiers.piece_pool == ("kano", "raiden", "reptile", "subzero")
    assert available_presets(str(path)) == ["brutal"]


def test_unknown_keys_in_yaml_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("presets:\n  normal:\n    lives: 3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Unknown difficulty keys"):
        load_difficulty(path=str(path))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"opponent_health_multiplier": 0},
        {"player_max_health": 0},
        {"ability_meter_max": -1},
        {"piece_pool": ("kano", "kano", "raiden")},
    ],
)
def test_invalid_modifiers_rejected(kwargs):
    with pytest.raises(ValueError):
        DifficultyModifiers(**kwargs)
