"""
Tile code utilities for American Mah Jongg hands.

A tile code packs the tile category into the upper 4 bits and the value
into the lower 4 bits:

    code = (category << 4) | value

Suits (dot, bam, crak) use values 1-9, winds 1-4, dragons 1-3.
Flowers and jokers use 1-8 only to keep the physical tiles distinct;
logically every flower is the same tile, and so is every joker.
"""

from collections import Counter
from collections.abc import Iterable
from enum import IntEnum

from analysis.logic.exceptions import InvalidTileError

_VALUE_BITS = 4
_VALUE_MASK = 0x0F


class TileCategory(IntEnum):
    """Upper 4 bits of a tile code."""

    DOT = 1
    BAM = 2
    CRAK = 3
    WIND = 4
    DRAGON = 5
    FLOWER = 6
    JOKER = 7


class Wind(IntEnum):
    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4


class Dragon(IntEnum):
    RED = 1  # paired with craks
    GREEN = 2  # paired with bams
    WHITE = 3  # paired with dots, also played as "0"


SUIT_CATEGORIES = (TileCategory.DOT, TileCategory.BAM, TileCategory.CRAK)

SUIT_VALUE_MIN = 1
SUIT_VALUE_MAX = 9

# inclusive value range per category
_VALUE_RANGES: dict[TileCategory, tuple[int, int]] = {
    TileCategory.DOT: (SUIT_VALUE_MIN, SUIT_VALUE_MAX),
    TileCategory.BAM: (SUIT_VALUE_MIN, SUIT_VALUE_MAX),
    TileCategory.CRAK: (SUIT_VALUE_MIN, SUIT_VALUE_MAX),
    TileCategory.WIND: (Wind.EAST, Wind.NORTH),
    TileCategory.DRAGON: (Dragon.RED, Dragon.WHITE),
    TileCategory.FLOWER: (1, 8),
    TileCategory.JOKER: (1, 8),
}

# copies of each suit, wind and dragon tile in a full set
TILE_COPIES = 4
FLOWERS_TOTAL = 8
JOKERS_TOTAL = 8
FULL_SET_SIZE = 152


def value_range(category: TileCategory) -> tuple[int, int]:
    """Return the inclusive (min, max) value range for a category."""
    return _VALUE_RANGES[category]


def is_valid_value(category: TileCategory, value: int) -> bool:
    low, high = _VALUE_RANGES[category]
    return low <= value <= high


def encode_tile(category: TileCategory | int, value: int) -> int:
    """
    Build a tile code from a category and value.

    Raises InvalidTileError when the value is out of range for the category.
    """
    try:
        category = TileCategory(category)
    except ValueError as e:
        raise InvalidTileError(f"unknown tile category: {category}") from e
    if not is_valid_value(category, value):
        low, high = _VALUE_RANGES[category]
        raise InvalidTileError(f"{category.name} value must be in [{low}, {high}], got {value}")
    return (category << _VALUE_BITS) | value


def decode_tile(code: int) -> tuple[TileCategory, int]:
    """
    Split a tile code into (category, value).

    Raises InvalidTileError for codes that do not name a real tile.
    """
    if code < 0:
        raise InvalidTileError(f"invalid tile code: {code}")
    try:
        category = TileCategory(code >> _VALUE_BITS)
    except ValueError as e:
        raise InvalidTileError(f"invalid tile code: {code}") from e
    value = code & _VALUE_MASK
    if not is_valid_value(category, value):
        raise InvalidTileError(f"invalid tile code: {code}")
    return category, value


def is_valid_tile(code: int) -> bool:
    try:
        decode_tile(code)
    except InvalidTileError:
        return False
    return True


def tile_category(code: int) -> TileCategory:
    return TileCategory(code >> _VALUE_BITS)


def tile_value(code: int) -> int:
    return code & _VALUE_MASK


def is_suit(code: int) -> bool:
    return TileCategory.DOT <= code >> _VALUE_BITS <= TileCategory.CRAK


def is_honor(code: int) -> bool:
    """Check if tile is a wind or a dragon."""
    return code >> _VALUE_BITS in (TileCategory.WIND, TileCategory.DRAGON)


def is_flower(code: int) -> bool:
    return code >> _VALUE_BITS == TileCategory.FLOWER


def is_joker(code: int) -> bool:
    return code >> _VALUE_BITS == TileCategory.JOKER


FLOWER = encode_tile(TileCategory.FLOWER, 1)
JOKER = encode_tile(TileCategory.JOKER, 1)
WHITE_DRAGON = encode_tile(TileCategory.DRAGON, Dragon.WHITE)
ZERO = WHITE_DRAGON

DRAGONS = tuple(encode_tile(TileCategory.DRAGON, d) for d in Dragon)
WINDS = tuple(encode_tile(TileCategory.WIND, w) for w in Wind)


def normalize_tile(code: int) -> int:
    """
    Collapse interchangeable tiles onto one canonical code.

    Every flower maps to FLOWER and every joker to JOKER; other tiles are
    returned unchanged. Used wherever tiles are counted.
    """
    if is_flower(code):
        return FLOWER
    if is_joker(code):
        return JOKER
    return code


def tiles_match(a: int, b: int) -> bool:
    """Check if two tiles are the same after normalization."""
    return normalize_tile(a) == normalize_tile(b)


def tile_sort_key(code: int) -> tuple[int, int]:
    return code >> _VALUE_BITS, code & _VALUE_MASK


def sort_tiles(tiles: Iterable[int]) -> list[int]:
    """Sort tiles for display: dots, bams, craks, winds, dragons, flowers, jokers."""
    return sorted(tiles, key=tile_sort_key)


def count_tiles(tiles: Iterable[int]) -> Counter[int]:
    """Count tiles by normalized code."""
    return Counter(normalize_tile(tile) for tile in tiles)


def generate_full_tile_set() -> list[int]:
    """Return all 152 tiles of a standard set."""
    tiles: list[int] = []
    for category in SUIT_CATEGORIES:
        for value in range(SUIT_VALUE_MIN, SUIT_VALUE_MAX + 1):
            tiles.extend([encode_tile(category, value)] * TILE_COPIES)
    for wind in WINDS:
        tiles.extend([wind] * TILE_COPIES)
    for dragon in DRAGONS:
        tiles.extend([dragon] * TILE_COPIES)
    tiles.extend(encode_tile(TileCategory.FLOWER, i) for i in range(1, FLOWERS_TOTAL + 1))
    tiles.extend(encode_tile(TileCategory.JOKER, i) for i in range(1, JOKERS_TOTAL + 1))
    return tiles


def max_tile_count(code: int) -> int:
    """Return how many copies of a (normalized) tile exist in a full set."""
    if is_flower(code):
        return FLOWERS_TOTAL
    if is_joker(code):
        return JOKERS_TOTAL
    return TILE_COPIES


def remaining_count(tile: int, seen_tiles: Iterable[int]) -> int:
    """Return how many copies of a tile have not been seen yet."""
    target = normalize_tile(tile)
    seen = sum(1 for t in seen_tiles if normalize_tile(t) == target)
    return max(0, max_tile_count(target) - seen)
