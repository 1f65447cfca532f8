"""Tests for the reward modifier pipeline."""

import pytest

from src.core.providers import SeededRandom, SequenceRandom
from src.island.companions import companion_modifier
from src.island.models import (
    EffectKind,
    Location,
    Modifier,
    Rarity,
    ResourceCategory,
    RewardOutcome,
)
from src.island.modifiers import (
    TOOL_MODIFIERS,
    apply_modifiers,
    describe_active_tools,
    tool_modifiers,
)

AXE = TOOL_MODIFIERS["stone_axe"]
ROD = TOOL_MODIFIERS["fishing_rod"]
BASKET = TOOL_MODIFIERS["basket"]
PARROT = companion_modifier("parrot")
DOLPHIN = companion_modifier("dolphin")


def flat(magnitude, **restrictions):
    return Modifier(
        id=f"flat-{magnitude}",
        name=f"Flat {magnitude}",
        effect_kind=EffectKind.FLAT_QUANTITY,
        magnitude=magnitude,
        **restrictions,
    )


def percent(magnitude, **restrictions):
    return Modifier(
        id=f"pct-{magnitude}",
        name=f"Percent {magnitude}",
        effect_kind=EffectKind.PERCENT_QUANTITY,
        magnitude=magnitude,
        **restrictions,
    )


class TestQuantityEffects:
    def test_flat_tool_on_wood_at_tree(self):
        base = RewardOutcome("wood_log", 2, Rarity.COMMON)
        tool = flat(
            1,
            locations=frozenset({Location.TREE}),
            categories=frozenset({ResourceCategory.WOOD}),
        )

        result = apply_modifiers(
            base, None, [tool], Location.TREE, ResourceCategory.WOOD, SequenceRandom([])
        )

        assert result.outcome.quantity == 3
        assert len(result.bonus_log) == 1

    def test_percent_always_uses_base_quantity(self):
        base = RewardOutcome("wood_log", 4, Rarity.COMMON)

        result = apply_modifiers(
            base, percent(100), [AXE], Location.TREE, ResourceCategory.WOOD, SequenceRandom([])
        )

        # +4 (100% of 4) then +2 (50% of the base 4), not 50% of the running 8
        assert result.outcome.quantity == 10

    def test_percent_bonus_is_at_least_one(self):
        base = RewardOutcome("stick", 1, Rarity.COMMON)

        result = apply_modifiers(
            base, None, [AXE], Location.TREE, ResourceCategory.WOOD, SequenceRandom([])
        )

        assert result.outcome.quantity == 2
        assert result.bonus_log == ("🪓 Stone Axe: +50% (+1)",)

    def test_restricted_tool_skipped_elsewhere(self):
        base = RewardOutcome("twigs", 2, Rarity.COMMON)

        result = apply_modifiers(
            base, None, [AXE], Location.BUSH, ResourceCategory.WOOD, SequenceRandom([])
        )

        assert result.outcome == base
        assert result.bonus_log == ()

    def test_dolphin_doubles_fish_at_sea(self):
        base = RewardOutcome("small_fish", 3, Rarity.COMMON)

        result = apply_modifiers(
            base, DOLPHIN, [], Location.SEA, ResourceCategory.FOOD, SequenceRandom([])
        )

        assert result.outcome.quantity == 6

    def test_quantity_effects_keep_resource_and_rarity(self):
        base = RewardOutcome("berries", 2, Rarity.COMMON)

        result = apply_modifiers(
            base, None, [BASKET], Location.BUSH, ResourceCategory.FOOD, SequenceRandom([])
        )

        assert result.outcome.resource_id == "berries"
        assert result.outcome.rarity == Rarity.COMMON
        assert result.outcome.quantity == 3


class TestOrdering:
    def test_companion_applies_before_tools(self):
        base = RewardOutcome("stick", 2, Rarity.COMMON)
        companion = Modifier(
            id="helper",
            name="Helper",
            effect_kind=EffectKind.FLAT_QUANTITY,
            magnitude=2,
        )

        result = apply_modifiers(
            base, companion, [BASKET], Location.TREE, ResourceCategory.WOOD, SequenceRandom([])
        )

        assert result.bonus_log == ("Helper: +2", "🧺 Basket: +1")
        assert result.outcome.quantity == 5

    def test_tools_apply_in_given_order(self):
        base = RewardOutcome("stick", 2, Rarity.COMMON)

        result = apply_modifiers(
            base, None, [BASKET, AXE], Location.TREE, ResourceCategory.WOOD, SequenceRandom([])
        )

        assert result.bonus_log[0].startswith("🧺 Basket")
        assert result.bonus_log[1].startswith("🪓 Stone Axe")

    def test_companion_takes_first_draw_then_tool(self):
        base = RewardOutcome("small_fish", 1, Rarity.COMMON)
        rng = SequenceRandom([0.5, 0.0])

        result = apply_modifiers(base, PARROT, [ROD], Location.SEA, ResourceCategory.FOOD, rng)

        # 50 misses the parrot's 5%, 0 lands the rod's 30%
        assert result.outcome.rarity == Rarity.RARE
        assert result.bonus_log == ("🎣 Fishing Rod: rarity upgraded to rare!",)
        assert rng.consumed == 2

    def test_companion_upgrade_logged_when_its_draw_hits(self):
        base = RewardOutcome("small_fish", 1, Rarity.COMMON)
        rng = SequenceRandom([0.0, 0.5])

        result = apply_modifiers(base, PARROT, [ROD], Location.SEA, ResourceCategory.FOOD, rng)

        assert result.outcome.rarity == Rarity.RARE
        assert result.bonus_log == ("🦜 Polly the Parrot: rarity upgraded to rare!",)
        assert rng.consumed == 2

    def test_same_seed_reproduces_result(self):
        base = RewardOutcome("small_fish", 4, Rarity.COMMON)

        def run():
            return apply_modifiers(
                base, PARROT, [BASKET, ROD], Location.SEA, ResourceCategory.FOOD, SeededRandom(42)
            )

        assert run() == run()


class TestNothingFound:
    def test_nothing_passes_through_without_draws(self):
        rng = SequenceRandom([])

        result = apply_modifiers(
            RewardOutcome.nothing(), PARROT, [BASKET, ROD], Location.SEA, None, rng
        )

        assert result.outcome == RewardOutcome.nothing()
        assert result.bonus_log == ()
        assert rng.consumed == 0


class TestRarityUpgrades:
    def test_successful_upgrade(self):
        base = RewardOutcome("small_fish", 1, Rarity.COMMON)
        rng = SequenceRandom([0.1])

        result = apply_modifiers(base, None, [ROD], Location.SEA, ResourceCategory.FOOD, rng)

        assert result.outcome.rarity == Rarity.RARE
        assert result.rarity_upgraded
        assert result.bonus_log == ("🎣 Fishing Rod: rarity upgraded to rare!",)
        assert rng.consumed == 1

    def test_failed_upgrade_still_consumes_draw(self):
        base = RewardOutcome("small_fish", 1, Rarity.COMMON)
        rng = SequenceRandom([0.5])

        result = apply_modifiers(base, None, [ROD], Location.SEA, ResourceCategory.FOOD, rng)

        assert result.outcome.rarity == Rarity.COMMON
        assert not result.rarity_upgraded
        assert rng.consumed == 1

    def test_legendary_is_ceiling(self):
        base = RewardOutcome("golden_fish", 1, Rarity.LEGENDARY)
        rng = SequenceRandom([0.0, 0.0])

        result = apply_modifiers(base, PARROT, [ROD], Location.SEA, ResourceCategory.SPECIAL, rng)

        assert result.outcome.rarity == Rarity.LEGENDARY
        assert result.bonus_log == ()
        # Parrot applies everywhere; the rod needs food, so only one draw
        assert rng.consumed == 1

    def test_upgrades_do_not_stack(self):
        base = RewardOutcome("small_fish", 1, Rarity.COMMON)
        rng = SequenceRandom([0.0, 0.0])

        result = apply_modifiers(base, PARROT, [ROD], Location.SEA, ResourceCategory.FOOD, rng)

        assert result.outcome.rarity == Rarity.RARE
        assert len(result.bonus_log) == 1
        assert rng.consumed == 2

    def test_inapplicable_upgrade_draws_nothing(self):
        base = RewardOutcome("stick", 1, Rarity.COMMON)
        rng = SequenceRandom([])

        result = apply_modifiers(base, None, [ROD], Location.TREE, ResourceCategory.WOOD, rng)

        assert result.outcome == base
        assert rng.consumed == 0

    @pytest.mark.parametrize(
        "rarity,expected",
        [
            (Rarity.COMMON, Rarity.RARE),
            (Rarity.RARE, Rarity.VERY_RARE),
            (Rarity.VERY_RARE, Rarity.LEGENDARY),
            (Rarity.LEGENDARY, Rarity.LEGENDARY),
        ],
    )
    def test_rarity_upgraded(self, rarity, expected):
        assert rarity.upgraded() == expected


class TestToolModifiers:
    def test_maps_crafted_ids_to_modifiers(self):
        assert tool_modifiers(["stone_axe", "basket"]) == [AXE, BASKET]

    def test_skips_raft_parts_and_unknown_ids(self):
        assert tool_modifiers(["rope", "mystery_box", "fishing_rod"]) == [ROD]

    def test_describe_active_tools_by_location(self):
        lines = describe_active_tools(["stone_axe", "basket"], Location.BEACH)

        assert len(lines) == 1
        assert "Basket" in lines[0]
