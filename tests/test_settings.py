"""Tests for environment-driven settings."""

from decimal import Decimal

import pytest

from split_wizard.config import WizardSettings, get_settings


class TestWizardSettings:

    def test_defaults(self):
        settings = WizardSettings()
        assert settings.require_category is True
        assert settings.default_currency == "USD"
        assert settings.min_split_participants == 2
        assert (settings.min_shares, settings.max_shares) == (1, 10)
        assert settings.percentage_tolerance == Decimal("0.1")
        assert settings.transition_cooldown_seconds == pytest.approx(0.35)
        assert settings.input_debounce_seconds == pytest.approx(0.1)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SPLIT_WIZARD_DEFAULT_CURRENCY", "eur")
        monkeypatch.setenv("SPLIT_WIZARD_REQUIRE_CATEGORY", "false")
        settings = WizardSettings()
        assert settings.default_currency == "EUR"
        assert settings.require_category is False

    def test_invalid_currency(self):
        with pytest.raises(ValueError):
            WizardSettings(default_currency="dollars")

    def test_share_bounds(self):
        with pytest.raises(ValueError):
            WizardSettings(min_shares=5, max_shares=2)

    def test_split_needs_two_people(self):
        with pytest.raises(ValueError):
            WizardSettings(min_split_participants=1)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
