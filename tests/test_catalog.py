"""Tests for catalog records: promotion scope, promo code scope, router choice."""

from fiberorder.catalog import (
    NO_ROUTER,
    UNDECIDED,
    Addon,
    AddonCategory,
    NO_ROUTER_ID,
    PromoCode,
    Promotion,
    PromotionScope,
    RouterSelected,
    router_choice,
)


def test_global_promotion_without_targets_applies_everywhere():
    promo = Promotion("p", "Summer")
    assert promo.applies_to(None, None)
    assert promo.applies_to("einfach-300", "B-1")


def test_promotion_with_tariff_and_building_needs_both():
    promo = Promotion(
        "p",
        "Neubau",
        scope=PromotionScope.BUILDING,
        tariff_ids=frozenset({"einfach-300"}),
        building_ids=frozenset({"B-1"}),
    )
    assert promo.applies_to("einfach-300", "B-1")
    assert not promo.applies_to("einfach-300", "B-2")
    assert not promo.applies_to("einfach-600", "B-1")


def test_promotion_with_single_target():
    by_tariff = Promotion(
        "t", "Tarif", scope=PromotionScope.ADDRESS, tariff_ids=frozenset({"einfach-150"})
    )
    by_building = Promotion(
        "b", "Haus", scope=PromotionScope.BUILDING, building_ids=frozenset({"B-7"})
    )
    assert by_tariff.applies_to("einfach-150", None)
    assert not by_tariff.applies_to("einfach-300", "B-7")
    assert by_building.applies_to(None, "B-7")
    assert not by_building.applies_to("einfach-150", None)


def test_non_global_promotion_without_targets_never_applies():
    promo = Promotion("p", "Orphan", scope=PromotionScope.ADDRESS)
    assert not promo.applies_to("einfach-300", "B-1")


def test_promo_code_street_substring_match_is_case_insensitive():
    code = PromoCode("GWG", valid_addresses=("fontanestraße", "fontanestrasse"))
    assert code.valid_for("Fontanestraße")
    assert code.valid_for("Theodor-Fontanestrasse")
    assert not code.valid_for("Lindenweg")
    assert not code.valid_for(None)


def test_promo_code_without_addresses_is_valid_everywhere():
    assert PromoCode("ANY").valid_for("Lindenweg")
    assert PromoCode("ANY").valid_for(None)


def test_router_choice_variants():
    router = Addon("r1", "Router", AddonCategory.ROUTER, 500)
    no_router = Addon(NO_ROUTER_ID, "Kein Router", AddonCategory.ROUTER)

    assert router_choice(None) == UNDECIDED
    assert router_choice(no_router) == NO_ROUTER
    assert router_choice(router) == RouterSelected(router)
    assert NO_ROUTER != UNDECIDED
