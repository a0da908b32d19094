"""
Data models for card templates, player hand state and analysis results.

Templates and hand state arrive from the storage and transport layers, so
they are pydantic models validated at construction. Concrete combinations
and results are produced in bulk by the core and are plain frozen
dataclasses.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from analysis.logic.enums import (
    MELD_TYPE_SIZE,
    MIN_JOKER_GROUP_SIZE,
    ClaimType,
    GroupSize,
    HandCategory,
    MeldType,
)
from analysis.logic.exceptions import InvalidTemplateError
from analysis.logic.tiles import TileCategory, decode_tile, is_joker

UNREACHABLE: float = math.inf

_MAX_VAR_NAME_LENGTH = 2

# ---------------------------------------------------------------------------
# Tile templates
# ---------------------------------------------------------------------------


class NumberConstraints(BaseModel):
    """Filters on the numbers a variable may take. All filters must pass."""

    model_config = ConfigDict(frozen=True)

    even_only: bool = False
    odd_only: bool = False
    value_range: tuple[int, int] | None = None
    exclude: tuple[int, ...] = ()
    specific_values: tuple[int, ...] | None = None

    @field_validator("value_range")
    @classmethod
    def _validate_range(cls, v: tuple[int, int] | None) -> tuple[int, int] | None:
        if v is not None and v[0] > v[1]:
            raise ValueError(f"value_range low must not exceed high, got {v}")
        return v

    def allows(self, value: int) -> bool:
        if self.specific_values is not None and value not in self.specific_values:
            return False
        if self.even_only and value % 2 != 0:
            return False
        if self.odd_only and value % 2 != 1:
            return False
        if self.value_range is not None and not (self.value_range[0] <= value <= self.value_range[1]):
            return False
        return value not in self.exclude

    def filter(self, values: Iterable[int]) -> tuple[int, ...]:
        return tuple(v for v in values if self.allows(v))


class _Template(BaseModel):
    model_config = ConfigDict(frozen=True)


class FixedTile(_Template):
    """One exact tile."""

    kind: Literal["fixed"] = "fixed"
    code: int

    @field_validator("code")
    @classmethod
    def _validate_code(cls, v: int) -> int:
        decode_tile(v)
        return v


class VariableTile(_Template):
    """
    A tile whose suit and/or number is bound during expansion.

    Either ``suit_var`` (same letter, same suit across the template) or a fixed
    ``category`` is given. ``number_var`` (same letter, same base number) is
    shifted by ``offset`` after binding. Without a number variable the group's
    own ``constraints`` list the values it may take.
    """

    kind: Literal["variable"] = "variable"
    suit_var: str | None = Field(default=None, min_length=1, max_length=_MAX_VAR_NAME_LENGTH)
    category: TileCategory | None = None
    number_var: str | None = Field(default=None, min_length=1, max_length=_MAX_VAR_NAME_LENGTH)
    offset: int = 0
    constraints: NumberConstraints | None = None

    @model_validator(mode="after")
    def _validate_shape(self) -> "VariableTile":
        if (self.suit_var is None) == (self.category is None):
            raise InvalidTemplateError("variable tile needs exactly one of suit_var or category")
        if self.category in (TileCategory.FLOWER, TileCategory.JOKER):
            raise InvalidTemplateError(f"variable tile cannot range over {self.category.name}")
        if self.offset and self.number_var is None:
            raise InvalidTemplateError("offset requires a number_var")
        return self


class MatchingDragonTile(_Template):
    """The dragon that goes with a suit variable: dots-white, bams-green, craks-red."""

    kind: Literal["matching_dragon"] = "matching_dragon"
    suit_var: str = Field(min_length=1, max_length=_MAX_VAR_NAME_LENGTH)


class AnyFlowerTile(_Template):
    kind: Literal["any_flower"] = "any_flower"


class AnyDragonTile(_Template):
    kind: Literal["any_dragon"] = "any_dragon"


class AnyWindTile(_Template):
    kind: Literal["any_wind"] = "any_wind"


class ZeroTile(_Template):
    """White dragon standing in for the digit 0 (year hands)."""

    kind: Literal["zero"] = "zero"


TileTemplate = Annotated[
    FixedTile | VariableTile | MatchingDragonTile | AnyFlowerTile | AnyDragonTile | AnyWindTile | ZeroTile,
    Field(discriminator="kind"),
]

# ---------------------------------------------------------------------------
# Groups and hand templates
# ---------------------------------------------------------------------------


class PatternGroup(BaseModel):
    """A required count of equivalent tiles within a template."""

    model_config = ConfigDict(frozen=True)

    size: GroupSize
    tile: TileTemplate
    must_be_concealed: bool = False
    # groups sharing an id form one unit that is exposed together (e.g. "2025")
    exposure_unit: str | None = None


class HandTemplate(BaseModel):
    """One hand on the card, as stored by the card editor."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(min_length=1)
    groups: tuple[PatternGroup, ...]
    is_concealed: bool = False
    points: int = Field(default=25, ge=0)
    category: HandCategory | None = None
    notes: str | None = None

    @field_validator("groups")
    @classmethod
    def _validate_groups(cls, v: tuple[PatternGroup, ...]) -> tuple[PatternGroup, ...]:
        if not v:
            raise InvalidTemplateError("template must have at least one group")
        return v

    @property
    def tile_count(self) -> int:
        return sum(group.size for group in self.groups)


# ---------------------------------------------------------------------------
# Player hand state
# ---------------------------------------------------------------------------


class ExposedMeld(BaseModel):
    """A meld already exposed on the player's rack."""

    model_config = ConfigDict(frozen=True)

    meld_type: MeldType
    tiles: tuple[int, ...]
    joker_count: int = Field(default=0, ge=0)

    @field_validator("tiles")
    @classmethod
    def _validate_tiles(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        for code in v:
            decode_tile(code)
        return v

    @model_validator(mode="after")
    def _validate_size(self) -> "ExposedMeld":
        expected = MELD_TYPE_SIZE[self.meld_type]
        if len(self.tiles) != expected:
            raise ValueError(f"{self.meld_type.value} meld must have {expected} tiles, got {len(self.tiles)}")
        if self.joker_count > len(self.tiles):
            raise ValueError(f"joker_count {self.joker_count} exceeds meld size {len(self.tiles)}")
        return self

    @property
    def natural_tile(self) -> int | None:
        """First non-joker tile, which tells what the meld stands for."""
        return next((tile for tile in self.tiles if not is_joker(tile)), None)


class PlayerHandState(BaseModel):
    """Tiles a player holds, fixed for the duration of one evaluation."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[int, ...] = ()
    drawn_tile: int | None = None
    exposed_melds: tuple[ExposedMeld, ...] = ()

    @field_validator("tiles")
    @classmethod
    def _validate_tiles(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        for code in v:
            decode_tile(code)
        return v

    @field_validator("drawn_tile")
    @classmethod
    def _validate_drawn_tile(cls, v: int | None) -> int | None:
        if v is not None:
            decode_tile(v)
        return v

    @property
    def concealed_tiles(self) -> tuple[int, ...]:
        """Rack tiles plus the drawn tile, if any."""
        if self.drawn_tile is None:
            return self.tiles
        return (*self.tiles, self.drawn_tile)


# ---------------------------------------------------------------------------
# Expansion and evaluation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ConcreteGroup:
    """A group with every variable bound to a specific tile."""

    tile: int
    size: GroupSize
    must_be_concealed: bool = False
    exposure_unit: str | None = None

    @property
    def count(self) -> int:
        return int(self.size)

    @property
    def can_use_joker(self) -> bool:
        return self.size >= MIN_JOKER_GROUP_SIZE


@dataclass(frozen=True, slots=True)
class ConcreteCombination:
    """One fully resolved way to complete a template."""

    groups: tuple[ConcreteGroup, ...]

    @property
    def total_tiles(self) -> int:
        return sum(group.count for group in self.groups)


@dataclass(frozen=True, slots=True)
class GroupMatch:
    """How much of one concrete group the hand already covers."""

    group_index: int
    tiles_matched: int  # natural tiles plus jokers
    tiles_needed: int
    jokers_used: int = 0
    from_meld: bool = False

    @property
    def shortfall(self) -> int:
        return self.tiles_needed - self.tiles_matched

    @property
    def is_complete(self) -> bool:
        return self.tiles_matched >= self.tiles_needed


@dataclass(frozen=True, slots=True)
class CombinationDistance:
    """Distance of one concrete combination from a hand."""

    distance: float
    group_matches: tuple[GroupMatch, ...] = ()
    jokers_used: int = 0
    meld_to_group: Mapping[int, int] = field(default_factory=dict)

    @property
    def is_reachable(self) -> bool:
        return self.distance != UNREACHABLE


@dataclass(frozen=True, slots=True)
class HandAnalysis:
    """Best evaluation of one template against a hand."""

    template: HandTemplate
    distance: float
    best_combination: ConcreteCombination | None = None
    group_matches: tuple[GroupMatch, ...] = ()
    needed_tiles: tuple[int, ...] = ()
    # jokers the best combination actually places, never more than the hand holds
    jokers_usable: int = 0
    is_viable: bool = False
    meld_to_group: Mapping[int, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CallAdvice:
    """A claim the player could make on a discard for one template."""

    template: HandTemplate
    claim_type: ClaimType
    new_distance: float
    group_index: int | None = None
