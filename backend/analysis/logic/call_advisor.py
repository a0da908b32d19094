"""Call advice -- which ranked templates could legally claim a discarded tile.

A concealed template can only claim the discard as its winning tile. Other
templates claim it for the first unmet group it belongs to: a pung, kong,
quint or sextet by the group's size, or mahjong when it is the last tile
needed. Singles and pairs are never claimed from a discard.
"""

from collections.abc import Iterable

from analysis.logic.enums import GROUP_SIZE_TO_CLAIM, MIN_JOKER_GROUP_SIZE, ClaimType
from analysis.logic.tiles import normalize_tile
from analysis.logic.types import CallAdvice, HandAnalysis

_WINNING_DISTANCE = 1


def _advise_template(discard: int, analysis: HandAnalysis) -> CallAdvice | None:
    if not analysis.is_viable or analysis.best_combination is None:
        return None
    if discard not in {normalize_tile(tile) for tile in analysis.needed_tiles}:
        return None

    is_win = analysis.distance == _WINNING_DISTANCE
    new_distance = analysis.distance - 1

    if analysis.template.is_concealed:
        if not is_win:
            return None
        return CallAdvice(template=analysis.template, claim_type=ClaimType.MAHJONG, new_distance=new_distance)

    for index, (group, match) in enumerate(zip(analysis.best_combination.groups, analysis.group_matches, strict=True)):
        if match.is_complete or normalize_tile(group.tile) != discard:
            continue
        if group.size < MIN_JOKER_GROUP_SIZE:
            continue
        if is_win:
            claim_type = ClaimType.MAHJONG
        elif group.must_be_concealed:
            continue
        else:
            claim_type = GROUP_SIZE_TO_CLAIM[group.size]
        return CallAdvice(
            template=analysis.template,
            claim_type=claim_type,
            new_distance=new_distance,
            group_index=index,
        )
    return None


def advise_calls(discarded_tile: int, analyses: Iterable[HandAnalysis]) -> list[CallAdvice]:
    """
    Return at most one claim per template for a discarded tile.

    Analyses must have been computed against the hand before the discard.
    Non-viable templates never produce a claim.
    """
    discard = normalize_tile(discarded_tile)
    advice = []
    for analysis in analyses:
        call = _advise_template(discard, analysis)
        if call is not None:
            advice.append(call)
    return advice
