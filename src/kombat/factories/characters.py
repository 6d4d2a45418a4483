from __future__ import annotations

from typing import Dict

from esper import World

from kombat.components.ability import AbilitySpec, AbilityVariant
from kombat.components.character import Character
from kombat.components.health import Health

ROSTER: Dict[str, Character] = {
    character.slug: character
    for character in (
        Character(
            slug="scorpion",
            name="Scorpion",
            piece_kind="scorpion",
            ability=AbilitySpec(
                name="Netherrealm Flame",
                variant=AbilityVariant.TYPE_ANNIHILATE,
                description="Destroys all pieces of a chosen type.",
            ),
        ),
        Character(
            slug="subzero",
            name="Sub-Zero",
            piece_kind="subzero",
            ability=AbilitySpec(
                name="Ice Shatter",
                variant=AbilityVariant.TARGETED_AREA,
                description="Destroys a 2x2 area of pieces.",
            ),
        ),
        Character(
            slug="raiden",
            name="Raiden",
            piece_kind="raiden",
            ability=AbilitySpec(
                name="Lightning Strike",
                variant=AbilityVariant.AREA_RANDOM,
                description="Randomly destroys a 2x2 block of pieces.",
            ),
        ),
        Character(
            slug="reptile",
            name="Reptile",
            piece_kind="reptile",
            ability=AbilitySpec(
                name="Acid Spit",
                variant=AbilityVariant.COLUMN_RANDOM,
                description="Destroys a random column.",
            ),
        ),
        Character(
            slug="kano",
            name="Kano",
            piece_kind="kano",
            ability=AbilitySpec(
                name="Kano Ball",
                variant=AbilityVariant.ROW_RANDOM,
                description="Destroys a random row.",
            ),
        ),
        Character(
            slug="liukang",
            name="Liu Kang",
            piece_kind="liukang",
            ability=AbilitySpec(
                name="Dragon Fire",
                variant=AbilityVariant.CONVERSION,
                description="Converts a random piece type to Liu Kang's piece.",
            ),
        ),
        Character(
            slug="kitana",
            name="Kitana",
            piece_kind="kitana",
            ability=AbilitySpec(
                name="Fan Lift",
                variant=AbilityVariant.SCRAMBLE,
                description="Scrambles a 3x3 area around a chosen piece.",
            ),
        ),
        Character(
            slug="jax",
            name="Jax",
            piece_kind="jax",
            ability=AbilitySpec(
                name="Ground Pound",
                variant=AbilityVariant.PLUS_SHAPE,
                description="Destroys a chosen piece and its four neighbours.",
            ),
        ),
        Character(
            slug="shangtsung",
            name="Shang Tsung",
            piece_kind="shangtsung",
            ability=AbilitySpec(
                name="Soul Steal",
                variant=AbilityVariant.RANDOM_N,
                description="Destroys six random pieces.",
                params={"count": 6},
            ),
        ),
    )
}


def get_character(slug: str) -> Character:
    character = ROSTER.get(slug)
    if character is None:
        raise ValueError(f"Unknown character '{slug}'")
    return character


def create_player(world: World, character: Character, *, max_health: int) -> int:
    """Create the player combatant entity."""
    return world.create_entity(
        character,
        Health(current=max_health, max_hp=max_health),
    )
