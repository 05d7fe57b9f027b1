"""Configuration package."""

from split_wizard.config.settings import WizardSettings, get_settings

__all__ = [
    "WizardSettings",
    "get_settings",
]
