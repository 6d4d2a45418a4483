from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class AbilityVariant(Enum):
    AREA_RANDOM = 'area_random'
    TARGETED_AREA = 'targeted_area'
    ROW_RANDOM = 'row_random'
    COLUMN_RANDOM = 'column_random'
    TYPE_ANNIHILATE = 'type_annihilate'
    CONVERSION = 'conversion'
    SCRAMBLE = 'scramble'
    PLUS_SHAPE = 'plus_shape'
    RANDOM_N = 'random_n'


@dataclass(frozen=True, slots=True)
class AbilitySpec:
    """Describes a character's ability.

    Fields:
      name: Display name.
      variant: Resolver key; either an AbilityVariant or the name of an
        externally registered resolver.
      description: Text for UI display.
      params: Variant configuration (e.g. ``count`` for random-N).
    """
    name: str
    variant: AbilityVariant | str
    description: str = ""
    params: Dict[str, Any] = field(default_factory=dict)
