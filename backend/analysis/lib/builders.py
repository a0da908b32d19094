"""
Short helpers for writing card templates in code.

    pair(any_flower()), single(suit_fixed("A", 2), unit="year"), kong(any_dragon())

Tile helpers return tile templates; group helpers wrap one in a PatternGroup
of the matching size.
"""

from analysis.logic.enums import GroupSize
from analysis.logic.tiles import TileCategory
from analysis.logic.types import (
    AnyDragonTile,
    AnyFlowerTile,
    AnyWindTile,
    FixedTile,
    MatchingDragonTile,
    NumberConstraints,
    PatternGroup,
    TileTemplate,
    VariableTile,
    ZeroTile,
)


def fixed(code: int) -> FixedTile:
    return FixedTile(code=code)


def suit_num(suit_var: str, number_var: str, offset: int = 0) -> VariableTile:
    """Suit variable plus number variable, e.g. the X+1 of a consecutive run."""
    return VariableTile(suit_var=suit_var, number_var=number_var, offset=offset)


def suit_fixed(suit_var: str, value: int) -> VariableTile:
    """A fixed number in a variable suit, e.g. the 2 of "2025" in suit A."""
    return VariableTile(suit_var=suit_var, constraints=NumberConstraints(specific_values=(value,)))


def even_num(suit_var: str, number_var: str) -> VariableTile:
    return VariableTile(suit_var=suit_var, number_var=number_var, constraints=NumberConstraints(even_only=True))


def odd_num(suit_var: str, number_var: str) -> VariableTile:
    return VariableTile(suit_var=suit_var, number_var=number_var, constraints=NumberConstraints(odd_only=True))


def num_range(suit_var: str, number_var: str, low: int, high: int) -> VariableTile:
    return VariableTile(
        suit_var=suit_var,
        number_var=number_var,
        constraints=NumberConstraints(value_range=(low, high)),
    )


def honor(category: TileCategory, number_var: str) -> VariableTile:
    """Any wind or dragon bound through a number variable (same letter, same tile)."""
    return VariableTile(category=category, number_var=number_var)


def any_flower() -> AnyFlowerTile:
    return AnyFlowerTile()


def any_dragon() -> AnyDragonTile:
    return AnyDragonTile()


def any_wind() -> AnyWindTile:
    return AnyWindTile()


def zero() -> ZeroTile:
    return ZeroTile()


def matching_dragon(suit_var: str) -> MatchingDragonTile:
    return MatchingDragonTile(suit_var=suit_var)


def group(
    size: GroupSize,
    tile: TileTemplate,
    *,
    concealed: bool = False,
    unit: str | None = None,
) -> PatternGroup:
    return PatternGroup(size=size, tile=tile, must_be_concealed=concealed, exposure_unit=unit)


def single(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.SINGLE, tile, concealed=concealed, unit=unit)


def pair(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.PAIR, tile, concealed=concealed, unit=unit)


def pung(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.PUNG, tile, concealed=concealed, unit=unit)


def kong(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.KONG, tile, concealed=concealed, unit=unit)


def quint(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.QUINT, tile, concealed=concealed, unit=unit)


def sextet(tile: TileTemplate, *, concealed: bool = False, unit: str | None = None) -> PatternGroup:
    return group(GroupSize.SEXTET, tile, concealed=concealed, unit=unit)
