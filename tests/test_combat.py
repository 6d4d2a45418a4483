import pytest

from kombat.components.combat_state import AbilityPhase
from kombat.components.opponent import Opponent
from kombat.components.piece import Piece
from kombat.engine import CombatEngine
from kombat.events.bus import (
    EVENT_ABILITY_READY,
    EVENT_COMMAND_REJECTED,
    EVENT_COUNTDOWN_CHANGED,
    EVENT_ENCOUNTER_OUTCOME,
    EVENT_HEALTH_CHANGED,
    EVENT_OPPONENT_ATTACK,
)
from kombat.systems.combat import base_damage, compute_damage, round_half_up
from kombat.utils.world_state import get_combat_state, opponent_health, player_health

from tests.helpers import COMBO_CHAIN, COMBO_CHAIN_SWAP, FOUR_IN_ROW, FOUR_IN_ROW_SWAP, load_layout, record


def _pieces(*kinds):
    return [Piece(id=i, kind=kind, row=0, col=i) for i, kind in enumerate(kinds)]


def _engine(character="kano", **kwargs):
    engine = CombatEngine(seed=3)
    engine.start_encounter(character, **kwargs)
    return engine


def _matching_swap(engine):
    load_layout(engine.world, FOUR_IN_ROW)
    assert engine.submit_swap(*FOUR_IN_ROW_SWAP)
    engine.run_until_idle()


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(4.5) == 5
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_damage_formula():
    assert base_damage(_pieces('kano', 'kano', 'reptile'), 'kano') == 4.0
    assert compute_damage(_pieces('kano', 'kano', 'kano'), 'kano', 0, 1) == 5
    assert compute_damage(_pieces('reptile', 'reptile', 'reptile'), 'kano', 15, 2) == 36
    assert compute_damage(_pieces('kano', 'kano', 'kano'), 'kano', 0, 3) == 14


def test_damage_is_deterministic():
    cleared = _pieces('kano', 'raiden', 'kano', 'liukang')
    assert compute_damage(cleared, 'kano', 15, 2) == compute_damage(cleared, 'kano', 15, 2)


def test_cascade_damage_reduces_opponent_health_and_adds_score():
    engine = _engine()
    start = engine.snapshot()
    events = record(engine.event_bus, EVENT_HEALTH_CHANGED)

    _matching_swap(engine)

    snap = engine.snapshot()
    dealt = start.opponent_health - snap.opponent_health
    assert dealt >= 4
    assert snap.score == dealt
    cascades = [e for e in events[EVENT_HEALTH_CHANGED] if e["reason"] == "cascade"]
    assert cascades[0]["delta"] == -4


def test_countdown_decrements_after_matching_action():
    engine = _engine()
    before = engine.snapshot().moves_until_attack
    events = record(engine.event_bus, EVENT_COUNTDOWN_CHANGED)

    _matching_swap(engine)

    assert engine.snapshot().moves_until_attack == before - 1
    assert events[EVENT_COUNTDOWN_CHANGED] == [{"moves_until_attack": before - 1}]


def test_opponent_attacks_when_countdown_runs_out():
    engine = _engine()
    get_combat_state(engine.world).moves_until_attack = 1
    events = record(engine.event_bus, EVENT_OPPONENT_ATTACK)

    _matching_swap(engine)

    # First rung for kano is Reptile: attack 18, cadence 5.
    assert events[EVENT_OPPONENT_ATTACK] == [{"damage": 18, "new_player_health": 82}]
    snap = engine.snapshot()
    assert snap.player_health == 82
    assert snap.moves_until_attack == 5


def test_player_defeat_ends_in_loss():
    engine = _engine()
    get_combat_state(engine.world).moves_until_attack = 1
    player_health(engine.world).current = 5
    events = record(engine.event_bus, EVENT_ENCOUNTER_OUTCOME, EVENT_COMMAND_REJECTED)

    _matching_swap(engine)

    assert events[EVENT_ENCOUNTER_OUTCOME] == [{"outcome": "loss", "level": 0}]
    snap = engine.snapshot()
    assert snap.player_health == 0
    assert snap.mode == "lost"
    assert not engine.submit_swap((0, 0), (0, 1))
    assert events[EVENT_COMMAND_REJECTED][-1]["reason"] == "not_playing"


def test_non_lethal_floors_player_at_one():
    engine = _engine(difficulty="tutorial")
    get_combat_state(engine.world).moves_until_attack = 1
    player_health(engine.world).current = 5

    _matching_swap(engine)

    snap = engine.snapshot()
    assert snap.player_health == 1
    assert snap.mode == "playing"


def test_defeating_opponent_completes_level_then_advances():
    engine = _engine()
    opponent_health(engine.world).current = 1
    player_health(engine.world).current = 40
    events = record(engine.event_bus, EVENT_ENCOUNTER_OUTCOME)

    _matching_swap(engine)

    assert events[EVENT_ENCOUNTER_OUTCOME] == [{"outcome": "level_complete", "level": 0}]
    snap = engine.snapshot()
    assert snap.mode == "level_complete"
    assert snap.opponent_health == 0
    assert not engine.submit_swap((0, 0), (0, 1))

    advanced = engine.advance_level()
    assert advanced is not None
    assert advanced.level == 1
    assert advanced.opponent == "Liu Kang"
    assert advanced.opponent_health == advanced.opponent_max_health == 130
    assert advanced.player_health == advanced.player_max_health
    assert advanced.moves_until_attack == 4
    assert advanced.score == snap.score > 0
    assert advanced.max_combo_seen == 1
    assert advanced.mode == "playing"


def test_score_is_kept_across_rungs_and_reset_for_a_new_run():
    engine = _engine()
    opponent_health(engine.world).current = 1
    _matching_swap(engine)
    earned = engine.snapshot().score
    assert earned >= 4

    engine.advance_level()
    _matching_swap(engine)
    assert engine.snapshot().score > earned

    restarted = engine.start_encounter("kano")
    assert restarted.score == 0
    assert restarted.level == 0


def test_defeat_on_last_rung_is_a_win():
    ladder = [Opponent(name="Goro", max_health=10, attack_power=5, moves_per_attack=3, affinity="kano")]
    engine = _engine(ladder=ladder)
    opponent_health(engine.world).current = 1
    events = record(engine.event_bus, EVENT_ENCOUNTER_OUTCOME)

    _matching_swap(engine)

    assert events[EVENT_ENCOUNTER_OUTCOME] == [{"outcome": "win", "level": 0}]
    assert engine.snapshot().mode == "won"
    assert engine.advance_level() is None


def test_advance_level_requires_completed_level():
    engine = _engine()
    assert engine.advance_level() is None


def test_meter_charges_with_own_kind_and_flips_ready():
    engine = _engine("subzero")
    state = get_combat_state(engine.world)
    state.ability_meter = 16
    events = record(engine.event_bus, EVENT_ABILITY_READY)

    _matching_swap(engine)

    snap = engine.snapshot()
    assert snap.ability_meter == 18
    assert snap.ability_phase == "ready"
    assert events[EVENT_ABILITY_READY] == [{"meter": 18}]


def test_meter_ignores_other_kinds_by_default():
    engine = _engine("liukang")
    load_layout(engine.world, COMBO_CHAIN)
    state = get_combat_state(engine.world)
    assert engine.submit_swap(*COMBO_CHAIN_SWAP)
    # First cascade clears three subzero pieces only.
    engine.cascade_system.step()
    assert state.ability_meter == 0
    engine.run_until_idle()


def test_meter_counts_all_pieces_when_configured():
    engine = _engine("liukang", difficulty="tutorial")
    load_layout(engine.world, COMBO_CHAIN)
    state = get_combat_state(engine.world)
    engine.submit_swap(*COMBO_CHAIN_SWAP)
    engine.cascade_system.step()
    assert state.ability_meter == 3
    engine.run_until_idle()


def test_difficulty_scales_ladder():
    engine = _engine(difficulty="hard")
    snap = engine.snapshot()
    assert snap.opponent_max_health == round(115 * 1.25)
    assert snap.moves_until_attack == 4
    assert snap.player_max_health == 90


@pytest.mark.parametrize("ladder", [[], ["Kano"]])
def test_malformed_ladder_is_rejected(ladder):
    with pytest.raises(ValueError):
        CombatEngine(seed=1).start_encounter("kano", ladder=ladder)


def test_ability_clear_charges_meter():
    engine = _engine("kano", difficulty="tutorial")
    state = get_combat_state(engine.world)
    state.ability_meter = 12
    state.ability_phase = AbilityPhase.READY

    assert engine.activate_ability()
    assert state.ability_meter == 0
    # ability -> first clear of the destroyed row
    engine.cascade_system.step()

    assert state.ability_meter == 8
    engine.run_until_idle()
