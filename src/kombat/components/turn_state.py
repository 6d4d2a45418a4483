from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks the action currently being resolved."""

    action_source: Optional[str] = None
    busy: bool = False
    cascade_depth: int = 0
