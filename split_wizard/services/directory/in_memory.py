"""In-memory people directory."""

from typing import Iterable, Optional

from split_wizard.models.transaction import Group, Person, PersonId
from split_wizard.services.directory.interface import PeopleDirectory


class InMemoryDirectory(PeopleDirectory):
    """
    Directory backed by plain lists.

    Group members that are not listed as people are accepted as-is; the
    directory does not police its own consistency.
    """

    def __init__(
        self,
        people: Iterable[Person] = (),
        groups: Iterable[Group] = (),
    ):
        self._people = list(people)
        self._people_by_id = {p.id: p for p in self._people}
        self._groups = list(groups)
        self._groups_by_id = {g.id: g for g in self._groups}

    def list_people(self) -> list[Person]:
        return list(self._people)

    def person(self, person_id: PersonId) -> Optional[Person]:
        return self._people_by_id.get(person_id)

    def list_groups(self) -> list[Group]:
        return list(self._groups)

    def group(self, group_id: str) -> Optional[Group]:
        return self._groups_by_id.get(group_id)
