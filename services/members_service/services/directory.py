"""Member directory: the roster every other manager reads from.

Members are validated on the way in (name, email, positive dues, unique email)
and the whole roster is persisted under one key on every change. Listeners are
told about additions and updates so that obligations for the current month
can be generated right away.
"""

import uuid
from typing import Any, Callable, Optional

from libs.common.clock import Clock
from libs.common.errors import ConflictError, NotFoundError, ValidationError
from libs.common.exports import export_document, import_document
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, validate_input
from libs.db.store import KeyValueStore
from services.members_service.models import Member

logger = get_logger(__name__)

MEMBERS_KEY = "members"

MemberListener = Callable[[Member], Any]


def duplicate_emails(members: list[Member]) -> list[str]:
    seen = set()
    problems = []
    for member in members:
        key = member.email.lower()
        if key in seen:
            problems.append(f"email: {member.email} appears more than once")
        seen.add(key)
    return problems


class MemberDirectory:
    def __init__(self, store: KeyValueStore, clock: Clock):
        self.clock = clock
        self.repository = CollectionRepository(store, MEMBERS_KEY, Member)
        self.members: list[Member] = self.repository.load()
        self._listeners: list[MemberListener] = []
        logger.info("Loaded %d members", len(self.members))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def subscribe(self, listener: MemberListener) -> None:
        """Call ``listener(member)`` after every add or update."""
        self._listeners.append(listener)

    def _notify(self, member: Member) -> None:
        for listener in self._listeners:
            listener(member.model_copy())

    def _save(self) -> None:
        self.repository.save(self.members)

    def _index_of(self, member_id: uuid.UUID) -> int:
        for index, member in enumerate(self.members):
            if member.id == member_id:
                return index
        raise NotFoundError("Member", member_id)

    def _check_unique_email(
        self, email: str, exclude_id: Optional[uuid.UUID] = None
    ) -> None:
        wanted = email.lower()
        for member in self.members:
            if member.id != exclude_id and member.email.lower() == wanted:
                raise ConflictError(f"Email {email} is already used by {member.name}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_members(self) -> list[Member]:
        return [member.model_copy() for member in self.members]

    def find_member(self, member_id: uuid.UUID) -> Optional[Member]:
        for member in self.members:
            if member.id == member_id:
                return member.model_copy()
        return None

    def get_member(self, member_id: uuid.UUID) -> Member:
        member = self.find_member(member_id)
        if member is None:
            raise NotFoundError("Member", member_id)
        return member

    def roster_size(self) -> int:
        return len(self.members)

    def search_members(self, query: str) -> list[Member]:
        """Case-insensitive match on name, email or phone."""
        needle = query.strip().lower()
        if not needle:
            return self.get_all_members()
        return [
            member.model_copy()
            for member in self.members
            if needle in member.name.lower()
            or needle in member.email.lower()
            or needle in (member.phone or "").lower()
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_member(self, **fields) -> Member:
        now = self.clock.now()
        fields.setdefault("join_date", self.clock.today())
        member = validate_input(
            Member,
            {**fields, "id": None, "created_at": now, "updated_at": now},
            prefix="Invalid member",
        )
        self._check_unique_email(member.email)

        self.members.append(member)
        self._save()
        logger.info("Added member %s (%s)", member.name, member.id)
        self._notify(member)
        return member.model_copy()

    def update_member(self, member_id: uuid.UUID, **changes) -> Member:
        index = self._index_of(member_id)
        current = self.members[index]
        changes = {k: v for k, v in changes.items() if v is not None}
        changes.pop("id", None)
        changes.pop("created_at", None)

        merged = {**current.model_dump(), **changes, "updated_at": self.clock.now()}
        member = validate_input(Member, merged, prefix="Invalid member")
        self._check_unique_email(member.email, exclude_id=member.id)

        self.members[index] = member
        self._save()
        logger.info("Updated member %s (%s)", member.name, member.id)
        self._notify(member)
        return member.model_copy()

    def remove_member(self, member_id: uuid.UUID) -> Member:
        """Drop a member from the roster. Their payments and loans are kept."""
        index = self._index_of(member_id)
        member = self.members.pop(index)
        self._save()
        logger.info("Removed member %s (%s)", member.name, member.id)
        return member

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_members(self) -> dict:
        return export_document(
            "members", self.members, generated_at=self.clock.now()
        )

    def import_members(self, document: Any) -> int:
        """Replace the roster with an imported one. Nothing changes on error."""
        members = import_document(document, "members", Member)
        duplicates = duplicate_emails(members)
        if duplicates:
            raise ValidationError(duplicates, prefix="Invalid import document")

        self.members = members
        self._save()
        logger.info("Imported %d members", len(members))
        return len(members)
