"""
Distance evaluation -- how many more tiles a hand needs to complete one combination.

Jokers form a single shared pool. Groups are processed in declared order and
each group of 3 or more tiles may draw jokers from the pool for its shortfall;
singles and pairs never may. Allocation is greedy in group order and never
revisits a group once its tiles are assigned.
"""

from collections import Counter
from collections.abc import Sequence

from analysis.logic.tiles import JOKER, count_tiles, normalize_tile
from analysis.logic.types import (
    UNREACHABLE,
    CombinationDistance,
    ConcreteCombination,
    ExposedMeld,
    GroupMatch,
    PlayerHandState,
)

_UNREACHABLE_RESULT = CombinationDistance(distance=UNREACHABLE)


def split_jokers(tiles: Sequence[int]) -> tuple[Counter[int], int]:
    """Count tiles by normalized code, returning jokers as a separate pool."""
    counts = count_tiles(tiles)
    jokers = counts.pop(JOKER, 0)
    return counts, jokers


def match_exposed_melds(
    combination: ConcreteCombination,
    melds: Sequence[ExposedMeld],
) -> dict[int, int] | None:
    """
    Assign each exposed meld to a group it already satisfies.

    A meld satisfies the first unused group with the same normalized tile and
    the same size that is not required to stay concealed. Melds made only of
    jokers are skipped. Returns meld index -> group index, or None if some
    meld fits no group.
    """
    meld_to_group: dict[int, int] = {}
    used: set[int] = set()
    for meld_index, meld in enumerate(melds):
        natural = meld.natural_tile
        if natural is None:
            continue
        meld_tile = normalize_tile(natural)
        for group_index, group in enumerate(combination.groups):
            if group_index in used or group.must_be_concealed:
                continue
            if normalize_tile(group.tile) == meld_tile and group.count == len(meld.tiles):
                used.add(group_index)
                meld_to_group[meld_index] = group_index
                break
        else:
            return None
    return meld_to_group


def evaluate_combination(
    combination: ConcreteCombination,
    hand: PlayerHandState,
    *,
    is_concealed: bool = False,
) -> CombinationDistance:
    """
    Compute the minimum number of extra tiles needed to complete a combination.

    Concealed templates are unreachable once the hand has any exposed meld.
    For other templates exposed melds must each satisfy a group (see
    match_exposed_melds), otherwise the combination is unreachable.
    """
    if is_concealed and hand.exposed_melds:
        return _UNREACHABLE_RESULT

    meld_to_group = match_exposed_melds(combination, hand.exposed_melds)
    if meld_to_group is None:
        return _UNREACHABLE_RESULT
    meld_groups = set(meld_to_group.values())

    counts, jokers = split_jokers(hand.concealed_tiles)
    distance = 0
    jokers_used = 0
    matches: list[GroupMatch] = []

    for index, group in enumerate(combination.groups):
        needed = group.count
        if index in meld_groups:
            matches.append(GroupMatch(index, tiles_matched=needed, tiles_needed=needed, from_meld=True))
            continue

        tile = normalize_tile(group.tile)
        available = counts[tile]
        natural = min(available, needed)
        counts[tile] = available - natural

        shortfall = needed - natural
        from_pool = 0
        if shortfall and group.can_use_joker:
            from_pool = min(shortfall, jokers - jokers_used)
            jokers_used += from_pool

        distance += shortfall - from_pool
        matches.append(
            GroupMatch(index, tiles_matched=natural + from_pool, tiles_needed=needed, jokers_used=from_pool),
        )

    return CombinationDistance(
        distance=distance,
        group_matches=tuple(matches),
        jokers_used=jokers_used,
        meld_to_group=meld_to_group,
    )


def needed_tiles(combination: ConcreteCombination, matches: Sequence[GroupMatch]) -> tuple[int, ...]:
    """List each group's tile once per unmet slot, in group order."""
    needed: list[int] = []
    for group, match in zip(combination.groups, matches, strict=True):
        needed.extend([group.tile] * max(0, match.shortfall))
    return tuple(needed)
