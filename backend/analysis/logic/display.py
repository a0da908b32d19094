"""
Human-readable tile names, short codes and card patterns.

Display order and names only; nothing here takes part in matching.
"""

import re
from collections.abc import Sequence

from analysis.logic.exceptions import InvalidTileError
from analysis.logic.expander import SUIT_TO_DRAGON
from analysis.logic.tiles import (
    FLOWER,
    JOKER,
    ZERO,
    Dragon,
    TileCategory,
    Wind,
    decode_tile,
    encode_tile,
    tile_category,
    tile_value,
)
from analysis.logic.types import (
    AnyDragonTile,
    AnyFlowerTile,
    AnyWindTile,
    ConcreteCombination,
    FixedTile,
    MatchingDragonTile,
    PatternGroup,
    VariableTile,
    ZeroTile,
)

_CATEGORY_NAMES = {
    TileCategory.DOT: "Dot",
    TileCategory.BAM: "Bam",
    TileCategory.CRAK: "Crak",
}
_CATEGORY_SHORT = {
    TileCategory.DOT: "D",
    TileCategory.BAM: "B",
    TileCategory.CRAK: "C",
}
_SHORT_TO_CATEGORY = {short: category for category, short in _CATEGORY_SHORT.items()}

_WIND_LETTERS = {Wind.EAST: "E", Wind.SOUTH: "S", Wind.WEST: "W", Wind.NORTH: "N"}
_DRAGON_PATTERN_CHARS = {Dragon.RED: "R", Dragon.GREEN: "G", Dragon.WHITE: "0"}

_SUIT_SHORT_RE = re.compile(r"^([1-9])([DBC])$")

# suit variable letters used when building an example hand
_EXAMPLE_SUITS = {"A": TileCategory.DOT, "B": TileCategory.BAM, "C": TileCategory.CRAK}


def tile_display_name(code: int) -> str:
    """Full name, e.g. "5 Dot", "Red Dragon", "East Wind", "Flower", "Joker"."""
    category, value = decode_tile(code)
    match category:
        case TileCategory.DOT | TileCategory.BAM | TileCategory.CRAK:
            return f"{value} {_CATEGORY_NAMES[category]}"
        case TileCategory.WIND:
            return f"{Wind(value).name.title()} Wind"
        case TileCategory.DRAGON:
            return f"{Dragon(value).name.title()} Dragon"
        case TileCategory.FLOWER:
            return "Flower"
        case TileCategory.JOKER:
            return "Joker"


def tile_short_code(code: int) -> str:
    """Compact code, e.g. "5D", "RDr", "EW", "F", "J"."""
    category, value = decode_tile(code)
    match category:
        case TileCategory.DOT | TileCategory.BAM | TileCategory.CRAK:
            return f"{value}{_CATEGORY_SHORT[category]}"
        case TileCategory.WIND:
            return f"{_WIND_LETTERS[Wind(value)]}W"
        case TileCategory.DRAGON:
            return f"{Dragon(value).name[0]}Dr"
        case TileCategory.FLOWER:
            return "F"
        case TileCategory.JOKER:
            return "J"


def parse_tile_code(text: str) -> int | None:
    """
    Parse a short code or name back to a tile code.

    Accepts "5D", "RDr", "Red Dragon", "EW", "J", "Joker", "F", "Flower"
    in any case. Returns None for anything unrecognized.
    """
    normalized = text.strip().upper()
    if normalized in ("J", "JOKER"):
        return JOKER
    if normalized in ("F", "FLOWER"):
        return FLOWER

    if normalized.endswith("DR") or "DRAGON" in normalized:
        dragon = next((d for d in Dragon if d.name[0] == normalized[:1]), None)
        return None if dragon is None else encode_tile(TileCategory.DRAGON, dragon)

    if len(normalized) == 2 and normalized.endswith("W"):  # noqa: PLR2004
        wind = next((w for w, letter in _WIND_LETTERS.items() if letter == normalized[0]), None)
        return None if wind is None else encode_tile(TileCategory.WIND, wind)
    if normalized.endswith(" WIND"):
        wind = next((w for w in Wind if w.name == normalized.removesuffix(" WIND")), None)
        return None if wind is None else encode_tile(TileCategory.WIND, wind)

    match = _SUIT_SHORT_RE.match(normalized)
    if match:
        return encode_tile(_SHORT_TO_CATEGORY[match.group(2)], int(match.group(1)))
    return None


def parse_tiles(text: str) -> list[int]:
    """Parse whitespace-separated short codes, e.g. "2D 2D WDr J". Raises InvalidTileError on bad tokens."""
    tiles = []
    for token in text.split():
        code = parse_tile_code(token)
        if code is None:
            raise InvalidTileError(f"unrecognized tile {token!r}")
        tiles.append(code)
    return tiles


def _pattern_char(code: int) -> str:
    category = tile_category(code)
    value = tile_value(code)
    match category:
        case TileCategory.DOT | TileCategory.BAM | TileCategory.CRAK:
            return str(value)
        case TileCategory.WIND:
            return _WIND_LETTERS[Wind(value)]
        case TileCategory.DRAGON:
            return _DRAGON_PATTERN_CHARS[Dragon(value)]
        case TileCategory.FLOWER:
            return "F"
        case TileCategory.JOKER:
            return "J"


def combination_to_string(combination: ConcreteCombination) -> str:
    """Render a concrete combination, e.g. "FF 222 000 222 555"."""
    return " ".join(_pattern_char(group.tile) * group.count for group in combination.groups)


def _representative_number(tile: VariableTile) -> int:
    """Number shown on the card for a variable tile: 1 (or 2 for evens, 3 for 3-6-9) plus offset."""
    constraints = tile.constraints
    if constraints is not None and constraints.specific_values is not None:
        if len(constraints.specific_values) == 1:
            return constraints.specific_values[0]
        if set(constraints.specific_values) == {3, 6, 9}:
            return 3 + tile.offset
    if constraints is not None and constraints.even_only:
        return 2 + tile.offset
    return 1 + tile.offset


def _shows_two(group: PatternGroup | None) -> bool:
    if group is None:
        return False
    tile = group.tile
    if isinstance(tile, FixedTile):
        return tile_category(tile.code) in _CATEGORY_SHORT and tile_value(tile.code) == 2  # noqa: PLR2004
    return isinstance(tile, VariableTile) and _representative_number(tile) == 2  # noqa: PLR2004


def _group_char(groups: Sequence[PatternGroup], index: int) -> str:
    tile = groups[index].tile
    beside_two = _shows_two(groups[index - 1] if index > 0 else None) or _shows_two(
        groups[index + 1] if index + 1 < len(groups) else None
    )
    match tile:
        case AnyFlowerTile():
            return "F"
        case AnyWindTile():
            return "N"
        case AnyDragonTile() | MatchingDragonTile():
            return "D"
        case ZeroTile():
            return "0" if beside_two else "D"
        case FixedTile() if tile.code == ZERO:
            return "0" if beside_two else "D"
        case FixedTile() if tile_category(tile.code) == TileCategory.DRAGON:
            return "D"
        case FixedTile():
            return _pattern_char(tile.code)
        case VariableTile() if tile.category in (TileCategory.WIND, TileCategory.DRAGON):
            return "N" if tile.category == TileCategory.WIND else "D"
        case VariableTile():
            return str(_representative_number(tile))
        case _:
            return "?"


def template_display_pattern(groups: Sequence[PatternGroup]) -> str:
    """
    Render a template the way the card prints it, e.g. "FF 2025 DDDD DDDD".

    Groups of one exposure unit are joined without spaces. A white dragon next
    to a 2 reads as the digit 0.
    """
    parts: list[str] = []
    current_unit: str | None = None
    for index, group in enumerate(groups):
        text = _group_char(groups, index) * group.size
        if group.exposure_unit is not None and group.exposure_unit == current_unit:
            parts[-1] += text
        else:
            parts.append(text)
        current_unit = group.exposure_unit
    return " ".join(parts)


def _example_base_numbers(groups: Sequence[PatternGroup]) -> dict[str, int]:
    """Pick the lowest base number for each number variable that keeps offsets in range."""
    numbers: dict[str, int] = {}
    for group in groups:
        tile = group.tile
        if not isinstance(tile, VariableTile) or tile.number_var is None or tile.number_var in numbers:
            continue
        offsets = [
            g.tile.offset for g in groups if isinstance(g.tile, VariableTile) and g.tile.number_var == tile.number_var
        ]
        low, high = 1 - min(offsets), 9 - max(offsets)
        candidates = list(range(max(1, low), high + 1))
        if tile.constraints is not None:
            candidates = list(tile.constraints.filter(candidates))
        numbers[tile.number_var] = candidates[0] if candidates else 1
    return numbers


def generate_example_hand(groups: Sequence[PatternGroup]) -> list[int]:
    """
    Build one concrete example hand for a template.

    Suit variables A, B and C become dots, bams and craks; any other letter
    becomes dots. Any dragon shows red and any wind north.
    """
    numbers = _example_base_numbers(groups)
    tiles: list[int] = []
    for group in groups:
        tile = group.tile
        match tile:
            case FixedTile():
                code = tile.code
            case AnyFlowerTile():
                code = FLOWER
            case AnyDragonTile():
                code = encode_tile(TileCategory.DRAGON, Dragon.RED)
            case AnyWindTile():
                code = encode_tile(TileCategory.WIND, Wind.NORTH)
            case ZeroTile():
                code = ZERO
            case MatchingDragonTile():
                code = SUIT_TO_DRAGON[_EXAMPLE_SUITS.get(tile.suit_var, TileCategory.DOT)]
            case VariableTile():
                if tile.suit_var is not None:
                    category = _EXAMPLE_SUITS.get(tile.suit_var, TileCategory.DOT)
                else:
                    category = tile.category or TileCategory.DOT
                if tile.number_var is not None:
                    value = numbers[tile.number_var] + tile.offset
                elif tile.constraints is not None and tile.constraints.specific_values:
                    value = tile.constraints.specific_values[0]
                else:
                    value = _representative_number(tile)
                code = encode_tile(category, value)
        tiles.extend([code] * group.size)
    return tiles

