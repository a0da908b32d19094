"""Pattern expansion -- turn a template with free variables into concrete combinations.

Expansion runs in three steps:

1. scan the groups for suit variables, number variables (with the first
   constraint seen for each), groups that choose their own number, and
   "any dragon"/"any wind" markers;
2. enumerate each kind of binding independently as an immutable tuple
   (cartesian products, no shared accumulators);
3. combine every suit x number x free-number x marker binding and resolve
   each group. A binding in which any group fails to resolve is dropped.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from itertools import product
from types import MappingProxyType
from typing import assert_never

import structlog

from analysis.logic.tiles import (
    DRAGONS,
    FLOWER,
    SUIT_CATEGORIES,
    SUIT_VALUE_MAX,
    SUIT_VALUE_MIN,
    WINDS,
    ZERO,
    Dragon,
    TileCategory,
    encode_tile,
    is_valid_value,
    value_range,
)
from analysis.logic.types import (
    AnyDragonTile,
    AnyFlowerTile,
    AnyWindTile,
    ConcreteCombination,
    ConcreteGroup,
    FixedTile,
    HandTemplate,
    MatchingDragonTile,
    NumberConstraints,
    PatternGroup,
    VariableTile,
    ZeroTile,
)

logger = structlog.get_logger()

SUIT_NUMBERS: tuple[int, ...] = tuple(range(SUIT_VALUE_MIN, SUIT_VALUE_MAX + 1))

SUIT_TO_DRAGON: Mapping[TileCategory, int] = MappingProxyType(
    {
        TileCategory.DOT: encode_tile(TileCategory.DRAGON, Dragon.WHITE),
        TileCategory.BAM: encode_tile(TileCategory.DRAGON, Dragon.GREEN),
        TileCategory.CRAK: encode_tile(TileCategory.DRAGON, Dragon.RED),
    }
)

type SuitBinding = Mapping[str, TileCategory]
type NumberBinding = Mapping[str, int]
type GroupChoice = Mapping[int, int]  # group index -> chosen value or tile code

_EMPTY: Mapping = MappingProxyType({})


@dataclass(frozen=True)
class VariableScan:
    """Free variables and per-group choices found in a template."""

    suit_vars: tuple[str, ...]
    number_vars: tuple[str, ...]
    number_constraints: Mapping[str, NumberConstraints]
    free_number_groups: tuple[int, ...]
    free_number_tiles: tuple[VariableTile, ...]
    marker_groups: tuple[int, ...]


@dataclass(frozen=True)
class Binding:
    """One full assignment of every free variable and per-group choice."""

    suits: SuitBinding = _EMPTY
    numbers: NumberBinding = _EMPTY
    free_numbers: GroupChoice = _EMPTY
    markers: GroupChoice = _EMPTY


def scan_variables(groups: Sequence[PatternGroup]) -> VariableScan:
    """
    Collect variable names in first-seen order.

    When several groups constrain the same number variable, the first
    constraint wins; templates are expected to be consistent.
    """
    suit_vars: dict[str, None] = {}
    number_vars: dict[str, None] = {}
    constraints: dict[str, NumberConstraints] = {}
    free_number_groups: list[int] = []
    free_number_tiles: list[VariableTile] = []
    marker_groups: list[int] = []

    for index, group in enumerate(groups):
        tile = group.tile
        if isinstance(tile, VariableTile):
            if tile.suit_var is not None:
                suit_vars.setdefault(tile.suit_var)
            if tile.number_var is not None:
                number_vars.setdefault(tile.number_var)
                if tile.constraints is not None:
                    constraints.setdefault(tile.number_var, tile.constraints)
            else:
                free_number_groups.append(index)
                free_number_tiles.append(tile)
        elif isinstance(tile, MatchingDragonTile):
            suit_vars.setdefault(tile.suit_var)
        elif isinstance(tile, AnyDragonTile | AnyWindTile):
            marker_groups.append(index)

    return VariableScan(
        suit_vars=tuple(suit_vars),
        number_vars=tuple(number_vars),
        number_constraints=MappingProxyType(constraints),
        free_number_groups=tuple(free_number_groups),
        free_number_tiles=tuple(free_number_tiles),
        marker_groups=tuple(marker_groups),
    )


def suit_bindings(suit_vars: Sequence[str]) -> tuple[SuitBinding, ...]:
    """Every assignment of the three suits to the suit variables (repeats allowed)."""
    return tuple(
        MappingProxyType(dict(zip(suit_vars, suits, strict=True)))
        for suits in product(SUIT_CATEGORIES, repeat=len(suit_vars))
    )


def number_candidates(constraints: NumberConstraints | None) -> tuple[int, ...]:
    """Base values 1-9 a number variable may take under its constraint."""
    if constraints is None:
        return SUIT_NUMBERS
    return constraints.filter(SUIT_NUMBERS)


def offsets_in_range(groups: Sequence[PatternGroup], numbers: NumberBinding) -> bool:
    """Check that every offset group stays within 1-9 (runs never wrap past 9)."""
    for group in groups:
        tile = group.tile
        if not isinstance(tile, VariableTile) or tile.number_var is None or not tile.offset:
            continue
        base = numbers.get(tile.number_var)
        if base is not None and not (SUIT_VALUE_MIN <= base + tile.offset <= SUIT_VALUE_MAX):
            return False
    return True


def number_bindings(groups: Sequence[PatternGroup], scan: VariableScan) -> tuple[NumberBinding, ...]:
    """Every valid assignment of base numbers to the number variables."""
    candidates = [number_candidates(scan.number_constraints.get(name)) for name in scan.number_vars]
    bindings = (MappingProxyType(dict(zip(scan.number_vars, values, strict=True))) for values in product(*candidates))
    return tuple(binding for binding in bindings if offsets_in_range(groups, binding))


def free_number_candidates(tile: VariableTile) -> tuple[int, ...]:
    """
    Values a group without a number variable may take.

    The group's own constraints list them; a group with neither a number
    variable nor constraints has no candidates and cannot resolve.
    """
    if tile.constraints is None:
        return ()
    if tile.category is not None and tile.category not in SUIT_CATEGORIES:
        low, high = value_range(tile.category)
        return tile.constraints.filter(range(low, high + 1))
    return tile.constraints.filter(SUIT_NUMBERS)


def free_number_choices(scan: VariableScan) -> tuple[GroupChoice, ...]:
    candidates = [free_number_candidates(tile) for tile in scan.free_number_tiles]
    return tuple(
        MappingProxyType(dict(zip(scan.free_number_groups, values, strict=True))) for values in product(*candidates)
    )


def marker_choices(groups: Sequence[PatternGroup], scan: VariableScan) -> tuple[GroupChoice, ...]:
    """Each "any dragon" group picks one of 3 dragons, each "any wind" one of 4 winds."""
    options = [DRAGONS if isinstance(groups[index].tile, AnyDragonTile) else WINDS for index in scan.marker_groups]
    return tuple(
        MappingProxyType(dict(zip(scan.marker_groups, tiles, strict=True))) for tiles in product(*options)
    )


def _resolve_variable(tile: VariableTile, index: int, binding: Binding) -> int | None:
    if tile.suit_var is not None:
        category = binding.suits.get(tile.suit_var)
    else:
        category = tile.category
    if category is None:
        return None

    if tile.number_var is not None:
        base = binding.numbers.get(tile.number_var)
        value = None if base is None else base + tile.offset
    else:
        value = binding.free_numbers.get(index)
    if value is None or not is_valid_value(category, value):
        return None
    return encode_tile(category, value)


def resolve_tile(group: PatternGroup, index: int, binding: Binding) -> int | None:
    """Resolve one group's template to a tile code, or None if it cannot resolve."""
    tile = group.tile
    match tile:
        case FixedTile():
            return tile.code
        case VariableTile():
            return _resolve_variable(tile, index, binding)
        case MatchingDragonTile():
            suit = binding.suits.get(tile.suit_var)
            return None if suit is None else SUIT_TO_DRAGON[suit]
        case AnyFlowerTile():
            return FLOWER
        case ZeroTile():
            return ZERO
        case AnyDragonTile() | AnyWindTile():
            return binding.markers.get(index)
        case _:
            assert_never(tile)


def resolve_groups(groups: Sequence[PatternGroup], binding: Binding) -> ConcreteCombination | None:
    """Resolve every group under one binding; None if any group fails."""
    resolved: list[ConcreteGroup] = []
    for index, group in enumerate(groups):
        code = resolve_tile(group, index, binding)
        if code is None:
            return None
        resolved.append(
            ConcreteGroup(
                tile=code,
                size=group.size,
                must_be_concealed=group.must_be_concealed,
                exposure_unit=group.exposure_unit,
            )
        )
    return ConcreteCombination(groups=tuple(resolved))


def expand_groups(groups: Sequence[PatternGroup]) -> tuple[ConcreteCombination, ...]:
    """Enumerate every concrete combination a group sequence can denote."""
    scan = scan_variables(groups)
    bindings = product(
        suit_bindings(scan.suit_vars),
        number_bindings(groups, scan),
        free_number_choices(scan),
        marker_choices(groups, scan),
    )
    combinations = []
    for suits, numbers, free_numbers, markers in bindings:
        binding = Binding(suits=suits, numbers=numbers, free_numbers=free_numbers, markers=markers)
        combination = resolve_groups(groups, binding)
        if combination is not None:
            combinations.append(combination)
    return tuple(combinations)


def expand_template(template: HandTemplate) -> tuple[ConcreteCombination, ...]:
    combinations = expand_groups(template.groups)
    if not combinations:
        logger.info("template expands to no combinations", template_id=template.id, name=template.name)
    else:
        logger.debug("expanded template", template_id=template.id, combinations=len(combinations))
    return combinations
