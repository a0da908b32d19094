"""
Enum definitions for card templates, melds and claims.
"""

from enum import Enum, IntEnum


class GroupSize(IntEnum):
    """Number of identical tiles a group requires."""

    SINGLE = 1
    PAIR = 2
    PUNG = 3
    KONG = 4
    QUINT = 5
    SEXTET = 6


# groups smaller than this can never use jokers or be claimed for a meld
MIN_JOKER_GROUP_SIZE = GroupSize.PUNG


class HandCategory(str, Enum):
    """Sections of the card a template is printed under."""

    YEAR = "year"
    TWOS_FOURS_SIXES_EIGHTS = "2468"
    ONES_THREES_FIVES_SEVENS_NINES = "13579"
    THREE_SIX_NINE = "369"
    ANY_LIKE_NUMBERS = "any_like"
    CONSECUTIVE_RUN = "consec"
    QUINTS = "quints"
    WINDS_DRAGONS = "winds_dragons"
    SINGLES_PAIRS = "singles_pairs"


class MeldType(str, Enum):
    """Kinds of exposed meld on a player's rack."""

    PUNG = "pung"
    KONG = "kong"
    QUINT = "quint"
    SEXTET = "sextet"


class ClaimType(str, Enum):
    """What a player may claim a discarded tile for."""

    PUNG = "pung"
    KONG = "kong"
    QUINT = "quint"
    SEXTET = "sextet"
    MAHJONG = "mahjong"  # the discard completes the hand


GROUP_SIZE_TO_CLAIM: dict[GroupSize, ClaimType] = {
    GroupSize.PUNG: ClaimType.PUNG,
    GroupSize.KONG: ClaimType.KONG,
    GroupSize.QUINT: ClaimType.QUINT,
    GroupSize.SEXTET: ClaimType.SEXTET,
}

MELD_TYPE_SIZE: dict[MeldType, int] = {
    MeldType.PUNG: GroupSize.PUNG,
    MeldType.KONG: GroupSize.KONG,
    MeldType.QUINT: GroupSize.QUINT,
    MeldType.SEXTET: GroupSize.SEXTET,
}
