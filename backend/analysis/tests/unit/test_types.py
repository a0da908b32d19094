"""Unit tests for template and hand-state models."""

import math

import pytest
from pydantic import TypeAdapter, ValidationError

from analysis.lib.builders import any_flower, kong, pair, pung, suit_fixed
from analysis.logic.enums import GroupSize, HandCategory, MeldType
from analysis.logic.tiles import FLOWER, JOKER, ZERO, TileCategory, encode_tile
from analysis.logic.types import (
    UNREACHABLE,
    ConcreteGroup,
    ExposedMeld,
    FixedTile,
    GroupMatch,
    HandTemplate,
    NumberConstraints,
    PatternGroup,
    PlayerHandState,
    TileTemplate,
    VariableTile,
    ZeroTile,
)

FIVE_DOT = encode_tile(TileCategory.DOT, 5)


class TestNumberConstraints:
    def test_filters_commute(self):
        constraints = NumberConstraints(even_only=True, value_range=(3, 9), exclude=(6,))

        assert constraints.filter(range(1, 10)) == (4, 8)

    def test_specific_values(self):
        assert NumberConstraints(specific_values=(3, 6, 9)).filter(range(1, 10)) == (3, 6, 9)

    def test_odd_only(self):
        assert NumberConstraints(odd_only=True).filter(range(1, 10)) == (1, 3, 5, 7, 9)

    def test_even_and_odd_allow_nothing(self):
        assert NumberConstraints(even_only=True, odd_only=True).filter(range(1, 10)) == ()

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError, match="value_range"):
            NumberConstraints(value_range=(7, 2))


class TestTileTemplates:
    def test_parses_tagged_records(self):
        adapter = TypeAdapter(TileTemplate)

        fixed = adapter.validate_python({"kind": "fixed", "code": FIVE_DOT})
        variable = adapter.validate_python({"kind": "variable", "suit_var": "A", "number_var": "X", "offset": 2})
        marker = adapter.validate_python({"kind": "zero"})

        assert fixed == FixedTile(code=FIVE_DOT)
        assert isinstance(variable, VariableTile)
        assert variable.offset == 2
        assert isinstance(marker, ZeroTile)

    def test_fixed_rejects_invalid_code(self):
        with pytest.raises(ValidationError, match="invalid tile code"):
            FixedTile(code=0x1A)

    def test_variable_needs_suit_or_category(self):
        with pytest.raises(ValidationError, match="exactly one of suit_var or category"):
            VariableTile(number_var="X")
        with pytest.raises(ValidationError, match="exactly one of suit_var or category"):
            VariableTile(suit_var="A", category=TileCategory.DOT)

    def test_variable_cannot_range_over_jokers(self):
        with pytest.raises(ValidationError, match="JOKER"):
            VariableTile(category=TileCategory.JOKER, number_var="X")

    def test_offset_requires_number_var(self):
        with pytest.raises(ValidationError, match="offset requires a number_var"):
            VariableTile(suit_var="A", offset=1)

    def test_templates_are_frozen(self):
        tile = suit_fixed("A", 2)

        with pytest.raises(ValidationError):
            tile.suit_var = "B"


class TestHandTemplate:
    def test_tile_count(self):
        template = HandTemplate(
            id=1,
            name="FF 2222 4444 DDDD",
            groups=(pair(any_flower()), kong(suit_fixed("A", 2)), kong(suit_fixed("A", 4)), kong(FixedTile(code=ZERO))),
        )

        assert template.tile_count == 14
        assert template.points == 25
        assert not template.is_concealed

    def test_rejects_empty_group_list(self):
        with pytest.raises(ValidationError, match="at least one group"):
            HandTemplate(id=1, name="empty", groups=())

    def test_rejects_negative_points(self):
        with pytest.raises(ValidationError):
            HandTemplate(id=1, name="bad", groups=(pung(FixedTile(code=FIVE_DOT)),), points=-5)

    def test_parses_stored_record(self):
        record = {
            "id": 7,
            "name": "Quints #1",
            "points": 40,
            "category": "quints",
            "groups": [
                {"size": 5, "tile": {"kind": "variable", "suit_var": "A", "number_var": "X"}},
                {"size": 4, "tile": {"kind": "any_dragon"}, "must_be_concealed": True},
            ],
        }

        template = HandTemplate.model_validate(record)

        assert template.category is HandCategory.QUINTS
        assert template.groups[0].size is GroupSize.QUINT
        assert template.groups[1].must_be_concealed

    def test_rejects_group_size_outside_one_to_six(self):
        with pytest.raises(ValidationError):
            PatternGroup(size=7, tile=FixedTile(code=FIVE_DOT))


class TestHandState:
    def test_concealed_tiles_include_drawn_tile(self):
        hand = PlayerHandState(tiles=(FIVE_DOT, FLOWER), drawn_tile=JOKER)

        assert hand.concealed_tiles == (FIVE_DOT, FLOWER, JOKER)

    def test_concealed_tiles_without_drawn_tile(self):
        assert PlayerHandState(tiles=(FIVE_DOT,)).concealed_tiles == (FIVE_DOT,)

    def test_rejects_invalid_tiles(self):
        with pytest.raises(ValidationError, match="invalid tile code"):
            PlayerHandState(tiles=(FIVE_DOT, 0x99))
        with pytest.raises(ValidationError, match="invalid tile code"):
            PlayerHandState(drawn_tile=0)

    def test_meld_size_must_match_type(self):
        with pytest.raises(ValidationError, match="kong meld must have 4 tiles"):
            ExposedMeld(meld_type=MeldType.KONG, tiles=(FIVE_DOT,) * 3)

    def test_meld_joker_count_cannot_exceed_size(self):
        with pytest.raises(ValidationError, match="joker_count"):
            ExposedMeld(meld_type=MeldType.PUNG, tiles=(FIVE_DOT,) * 3, joker_count=4)

    def test_natural_tile_skips_jokers(self):
        meld = ExposedMeld(meld_type=MeldType.PUNG, tiles=(JOKER, FIVE_DOT, FIVE_DOT), joker_count=1)

        assert meld.natural_tile == FIVE_DOT
        assert ExposedMeld(meld_type=MeldType.PUNG, tiles=(JOKER,) * 3, joker_count=3).natural_tile is None


class TestResultTypes:
    def test_only_groups_of_three_or_more_take_jokers(self):
        assert not ConcreteGroup(tile=FIVE_DOT, size=GroupSize.PAIR).can_use_joker
        assert ConcreteGroup(tile=FIVE_DOT, size=GroupSize.PUNG).can_use_joker

    def test_group_match_shortfall(self):
        match = GroupMatch(group_index=0, tiles_matched=2, tiles_needed=4, jokers_used=1)

        assert match.shortfall == 2
        assert not match.is_complete

    def test_unreachable_is_infinite(self):
        assert math.isinf(UNREACHABLE)
