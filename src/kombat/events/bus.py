from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references keep bound methods of unreferenced systems alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# COMMANDS
# ============================================================================
EVENT_SWAP_REQUEST = "swap_request"                        # payload: src=(r,c), dst=(r,c)
EVENT_ABILITY_ACTIVATE_REQUEST = "ability_activate_request"  # payload: target=(r,c)|None
EVENT_ABILITY_CANCEL_REQUEST = "ability_cancel_request"    # payload: None
EVENT_HINT_REQUEST = "hint_request"                        # payload: None
EVENT_COMMAND_REJECTED = "command_rejected"                # payload: command=str, reason=str


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_SWAP_ACCEPTED = "swap_accepted"              # payload: src=(r,c), dst=(r,c)
EVENT_SWAP_REVERTED = "swap_reverted"              # payload: src=(r,c), dst=(r,c)
EVENT_BOARD_SNAPSHOT = "board_snapshot"            # payload: phase=str, board=tuple[PieceView,...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: damage_dealt=int, combo_counter=int, cleared_count=int, specials_activated=list[dict], special_created=dict|None, positions=list[(r,c)]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, source=str
EVENT_COMBO_STREAK = "combo_streak"                # payload: combo_counter=int
EVENT_BOARD_REGENERATED = "board_regenerated"      # payload: reason=str
EVENT_HINT = "hint"                                # payload: ids=(int,int)|None, positions=((r,c),(r,c))|None


# ============================================================================
# ABILITIES
# ============================================================================
EVENT_ABILITY_READY = "ability_ready"                      # payload: meter=int
EVENT_ABILITY_TARGET_MODE = "ability_target_mode"          # payload: ability=str, targets_needed=int
EVENT_ABILITY_TARGET_SELECTED = "ability_target_selected"  # payload: ability=str, target=(r,c)
EVENT_ABILITY_TARGET_CANCELLED = "ability_target_cancelled"  # payload: ability=str, reason=str
EVENT_ABILITY_USED = "ability_used"                        # payload: character=str, ability=str, variant=str, targets=list[(r,c)], affected=list[(r,c)]


# ============================================================================
# HEALTH & COMBAT
# ============================================================================
EVENT_HEALTH_CHANGED = "health_changed"        # payload: entity=int, current=int, max_hp=int, delta=int, reason=str
EVENT_OPPONENT_ATTACK = "opponent_attack"      # payload: damage=int, new_player_health=int
EVENT_COUNTDOWN_CHANGED = "countdown_changed"  # payload: moves_until_attack=int


# ============================================================================
# ENCOUNTER FLOW
# ============================================================================
EVENT_ENCOUNTER_STARTED = "encounter_started"  # payload: character=str, opponent=str, level=int
EVENT_ENCOUNTER_OUTCOME = "encounter_outcome"  # payload: outcome=str ('win'|'loss'|'level_complete'), level=int
EVENT_GAME_MODE_CHANGED = "game_mode_changed"  # payload: previous_mode=GameMode|None, new_mode=GameMode
