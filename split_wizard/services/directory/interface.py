"""
Abstract People Directory Interface

DESIGN DECISION: The wizard depends only on this read-only capability,
never on a concrete contact store or a UI-bound singleton. This allows us to:
1. Test the wizard without any storage
2. Back the directory by whatever the host app already has
3. Keep the wizard working purely with ids

The wizard NEVER mutates the directory.
"""

from abc import ABC, abstractmethod
from typing import Optional

from split_wizard.models.transaction import Group, Person, PersonId


class PeopleDirectory(ABC):
    """Read-only view of the people and groups a user can split with."""

    @abstractmethod
    def list_people(self) -> list[Person]:
        """
        List every person the user can pick.

        Returns:
            People in the directory's display order
        """
        pass

    @abstractmethod
    def person(self, person_id: PersonId) -> Optional[Person]:
        """
        Look up one person.

        Args:
            person_id: Opaque person identifier

        Returns:
            The person if known, None otherwise
        """
        pass

    @abstractmethod
    def list_groups(self) -> list[Group]:
        """
        List the user's groups.

        Returns:
            Groups with their member ids
        """
        pass

    def group(self, group_id: str) -> Optional[Group]:
        """Look up one group by id (linear scan unless overridden)."""
        for group in self.list_groups():
            if group.id == group_id:
                return group
        return None
