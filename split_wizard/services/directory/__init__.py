"""
Directory Services Package

The read-only people/groups directory the wizard consumes.
"""

from split_wizard.services.directory.interface import PeopleDirectory
from split_wizard.services.directory.in_memory import InMemoryDirectory

__all__ = [
    "InMemoryDirectory",
    "PeopleDirectory",
]
