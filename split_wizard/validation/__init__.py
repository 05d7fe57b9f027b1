"""Validation package."""

from split_wizard.validation.validator import WizardValidator

__all__ = ["WizardValidator"]
