"""Tests for pricing policy builders and environment settings."""

import pytest

from fiberorder.config import PricingPolicy, load_settings


def test_policy_defaults():
    policy = PricingPolicy()
    assert policy.referral_bonus == 5000
    assert policy.express_fallback_fee == 20000
    assert policy.stick_fallback_price == 5999
    assert policy.phone_line_fallback_price == 295
    assert "einfach" in policy.discount_families
    assert "fiber-basic" in policy.short_term_families


def test_policy_builders_return_new_instances():
    base = PricingPolicy()
    changed = base.with_referral_bonus(2500).with_short_term_families("promo")

    assert base.referral_bonus == 5000
    assert changed.referral_bonus == 2500
    assert changed.short_term_families == frozenset({"promo"})


def test_phone_line_bounds():
    policy = PricingPolicy().with_phone_lines(minimum=1, maximum=4)
    assert policy.clamp_lines(0) == 1
    assert policy.clamp_lines(9) == 4
    with pytest.raises(ValueError):
        PricingPolicy().with_phone_lines(minimum=3, maximum=2)


def test_load_settings_defaults(monkeypatch):
    for name in (
        "FIBERORDER_REFERRAL_BONUS_CENTS",
        "FIBERORDER_ORDER_PREFIX",
        "FIBERORDER_DISCOUNT_FAMILIES",
        "FIBERORDER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()
    assert settings.policy == PricingPolicy()
    assert settings.order_number_prefix == "COM"
    assert settings.log_level == "INFO"


def test_load_settings_overrides(monkeypatch):
    monkeypatch.setenv("FIBERORDER_REFERRAL_BONUS_CENTS", "3000")
    monkeypatch.setenv("FIBERORDER_DISCOUNT_FAMILIES", "einfach, premium")
    monkeypatch.setenv("FIBERORDER_ORDER_PREFIX", "FB")
    monkeypatch.setenv("FIBERORDER_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.policy.referral_bonus == 3000
    assert settings.policy.discount_families == frozenset({"einfach", "premium"})
    assert settings.order_number_prefix == "FB"
    assert settings.log_level == "DEBUG"


def test_load_settings_rejects_bad_numbers(monkeypatch):
    monkeypatch.setenv("FIBERORDER_EXPRESS_FEE_CENTS", "abc")
    with pytest.raises(ValueError):
        load_settings()

    monkeypatch.setenv("FIBERORDER_EXPRESS_FEE_CENTS", "-1")
    with pytest.raises(ValueError):
        load_settings()
