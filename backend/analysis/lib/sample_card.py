"""
A representative card of 14-tile hands, one or more per card section.

Used by tests and the profiler. Ids are stable so that cache behaviour can be
checked against them.
"""

from analysis.lib.builders import (
    any_dragon,
    any_flower,
    fixed,
    kong,
    matching_dragon,
    pair,
    pung,
    quint,
    single,
    suit_fixed,
    suit_num,
    zero,
)
from analysis.logic.enums import HandCategory
from analysis.logic.tiles import Dragon, TileCategory, Wind, encode_tile
from analysis.logic.types import HandTemplate, PatternGroup

NORTH = encode_tile(TileCategory.WIND, Wind.NORTH)
EAST = encode_tile(TileCategory.WIND, Wind.EAST)
WEST = encode_tile(TileCategory.WIND, Wind.WEST)
SOUTH = encode_tile(TileCategory.WIND, Wind.SOUTH)
RED_DRAGON = encode_tile(TileCategory.DRAGON, Dragon.RED)
GREEN_DRAGON = encode_tile(TileCategory.DRAGON, Dragon.GREEN)
WHITE_DRAGON = encode_tile(TileCategory.DRAGON, Dragon.WHITE)


def _year(suit_var: str, unit: str) -> list[PatternGroup]:
    """The four singles of "2025" in one suit, exposed together."""
    return [
        single(suit_fixed(suit_var, 2), unit=unit),
        single(zero(), unit=unit),
        single(suit_fixed(suit_var, 2), unit=unit),
        single(suit_fixed(suit_var, 5), unit=unit),
    ]


def _news(unit: str) -> list[PatternGroup]:
    return [single(fixed(wind), unit=unit) for wind in (NORTH, EAST, WEST, SOUTH)]


def build_sample_card() -> tuple[HandTemplate, ...]:
    return (
        # year
        HandTemplate(
            id=1,
            name="2025 #1",
            groups=(pair(any_flower()), *_year("A", "2025"), kong(any_dragon()), kong(any_dragon())),
            category=HandCategory.YEAR,
            notes="Any 1 suit, any 2 dragons",
        ),
        HandTemplate(
            id=2,
            name="2025 #2",
            groups=(
                pung(suit_fixed("A", 2)),
                kong(zero()),
                pung(suit_fixed("B", 2)),
                kong(suit_fixed("C", 5)),
            ),
            category=HandCategory.YEAR,
            notes="Any 3 suits",
        ),
        HandTemplate(
            id=3,
            name="2025 #3",
            groups=(pair(any_flower()), *_year("A", "y1"), *_year("B", "y2"), *_year("C", "y3")),
            is_concealed=True,
            points=30,
            category=HandCategory.YEAR,
            notes="Concealed, 3 suits",
        ),
        # 2468
        HandTemplate(
            id=10,
            name="2468 #1",
            groups=(
                pair(any_flower()),
                kong(suit_fixed("A", 2)),
                kong(suit_fixed("A", 4)),
                kong(matching_dragon("A")),
            ),
            category=HandCategory.TWOS_FOURS_SIXES_EIGHTS,
            notes="Any 1 suit, matching dragon",
        ),
        HandTemplate(
            id=11,
            name="2468 #2",
            groups=(
                pung(suit_fixed("A", 2)),
                kong(suit_fixed("A", 4)),
                pung(suit_fixed("A", 6)),
                kong(suit_fixed("A", 8)),
            ),
            category=HandCategory.TWOS_FOURS_SIXES_EIGHTS,
            notes="Any 1 suit",
        ),
        HandTemplate(
            id=12,
            name="2468 #3",
            groups=(
                *(single(suit_fixed(suit, n), unit=f"run-{suit}") for suit in "ABC" for n in (2, 4, 6, 8)),
                pair(any_dragon()),
            ),
            is_concealed=True,
            points=30,
            category=HandCategory.TWOS_FOURS_SIXES_EIGHTS,
            notes="Concealed, 3 suits",
        ),
        # 13579
        HandTemplate(
            id=20,
            name="13579 #1",
            groups=(
                pair(suit_fixed("A", 1)),
                pung(suit_fixed("A", 3)),
                kong(suit_fixed("A", 5)),
                pung(suit_fixed("A", 7)),
                pair(suit_fixed("A", 9)),
            ),
            category=HandCategory.ONES_THREES_FIVES_SEVENS_NINES,
            notes="Any 1 suit",
        ),
        HandTemplate(
            id=21,
            name="13579 #2",
            groups=(
                pung(suit_fixed("A", 1)),
                kong(suit_fixed("A", 3)),
                pung(suit_fixed("B", 5)),
                kong(suit_fixed("B", 7)),
            ),
            category=HandCategory.ONES_THREES_FIVES_SEVENS_NINES,
            notes="Any 2 suits",
        ),
        # 369
        HandTemplate(
            id=30,
            name="369 #1",
            groups=(
                pair(any_flower()),
                kong(suit_fixed("A", 3)),
                kong(suit_fixed("A", 6)),
                kong(suit_fixed("A", 9)),
            ),
            category=HandCategory.THREE_SIX_NINE,
            notes="Any 1 suit",
        ),
        HandTemplate(
            id=31,
            name="369 #2",
            groups=(
                kong(suit_fixed("A", 3)),
                pair(suit_fixed("A", 6)),
                kong(suit_fixed("A", 9)),
                kong(matching_dragon("A")),
            ),
            category=HandCategory.THREE_SIX_NINE,
            notes="Any 1 suit, matching dragon",
        ),
        # like numbers
        HandTemplate(
            id=40,
            name="Like Numbers #1",
            groups=(
                pair(any_flower()),
                kong(suit_num("A", "X")),
                kong(suit_num("B", "X")),
                kong(suit_num("C", "X")),
            ),
            category=HandCategory.ANY_LIKE_NUMBERS,
            notes="Any 3 suits, same number",
        ),
        HandTemplate(
            id=41,
            name="Like Numbers #2",
            groups=(
                kong(suit_num("A", "X")),
                kong(suit_num("B", "X")),
                pung(any_dragon()),
                pung(any_dragon()),
            ),
            category=HandCategory.ANY_LIKE_NUMBERS,
            notes="Any 2 suits same number, any 2 dragons",
        ),
        # consecutive run
        HandTemplate(
            id=50,
            name="Consec Run #1",
            groups=(
                pair(any_flower()),
                kong(suit_num("A", "X")),
                kong(suit_num("A", "X", 1)),
                kong(suit_num("A", "X", 2)),
            ),
            category=HandCategory.CONSECUTIVE_RUN,
            notes="Any 1 suit, any 3 consecutive numbers",
        ),
        HandTemplate(
            id=51,
            name="Consec Run #2",
            groups=(
                pung(suit_num("A", "X")),
                kong(suit_num("A", "X", 1)),
                pung(suit_num("A", "X", 2)),
                kong(suit_num("A", "X", 3)),
            ),
            category=HandCategory.CONSECUTIVE_RUN,
            notes="Any 1 suit, any 4 consecutive numbers",
        ),
        # quints
        HandTemplate(
            id=60,
            name="Quints #1",
            groups=(quint(suit_num("A", "X")), kong(any_dragon()), quint(suit_num("A", "Y"))),
            points=40,
            category=HandCategory.QUINTS,
            notes="Any 1 suit, any 2 numbers",
        ),
        HandTemplate(
            id=61,
            name="Quints #2",
            groups=(kong(any_flower()), quint(suit_num("A", "X")), quint(suit_num("B", "X", 1))),
            points=45,
            category=HandCategory.QUINTS,
            notes="Any 2 suits, 2 consecutive numbers",
        ),
        # winds and dragons
        HandTemplate(
            id=70,
            name="Winds Dragons #1",
            groups=(kong(fixed(NORTH)), pung(fixed(EAST)), pung(fixed(WEST)), kong(fixed(SOUTH))),
            category=HandCategory.WINDS_DRAGONS,
            notes="NEWS winds",
        ),
        HandTemplate(
            id=71,
            name="Winds Dragons #2",
            groups=(
                pair(any_flower()),
                kong(fixed(RED_DRAGON)),
                kong(fixed(GREEN_DRAGON)),
                kong(fixed(WHITE_DRAGON)),
            ),
            points=30,
            category=HandCategory.WINDS_DRAGONS,
            notes="All 3 dragons",
        ),
        HandTemplate(
            id=72,
            name="Winds Dragons #3",
            groups=(*_news("news-1"), *_news("news-2"), pung(any_dragon()), pung(any_dragon())),
            is_concealed=True,
            points=30,
            category=HandCategory.WINDS_DRAGONS,
            notes="Concealed, any 2 dragons",
        ),
        # singles and pairs
        HandTemplate(
            id=80,
            name="Singles Pairs #1",
            groups=(
                pair(any_flower()),
                *(pair(suit_fixed("A", n)) for n in (1, 3, 5, 7, 9)),
                pair(matching_dragon("A")),
            ),
            is_concealed=True,
            points=50,
            category=HandCategory.SINGLES_PAIRS,
            notes="Concealed, any 1 suit, matching dragon",
        ),
        HandTemplate(
            id=81,
            name="Singles Pairs #2",
            groups=tuple(pair(suit_num("A", "X", offset)) for offset in range(7)),
            is_concealed=True,
            points=75,
            category=HandCategory.SINGLES_PAIRS,
            notes="Concealed, any 1 suit, 7 consecutive pairs",
        ),
    )
