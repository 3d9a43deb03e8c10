"""Attendance ledger: training sessions and who showed up."""

import datetime as dt
import uuid
from typing import Any, Optional

from libs.common.clock import Clock
from libs.common.errors import NotFoundError, ValidationError
from libs.common.exports import export_document, import_document
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, validate_input
from libs.db.store import KeyValueStore
from services.attendance_service.models import (
    AttendanceStatus,
    MemberAttendance,
    SessionStats,
    TrainingSession,
)
from services.members_service.services import MemberDirectory

logger = get_logger(__name__)

SESSIONS_KEY = "training_sessions"


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def _sort_key(session: TrainingSession) -> tuple:
    return (session.date, session.time)


class AttendanceLedger:
    def __init__(self, store: KeyValueStore, members: MemberDirectory, clock: Clock):
        self.members = members
        self.clock = clock
        self.repository = CollectionRepository(store, SESSIONS_KEY, TrainingSession)
        self.sessions: list[TrainingSession] = self.repository.load()
        logger.info("Loaded %d training sessions", len(self.sessions))

    def _save(self) -> None:
        self.repository.save(self.sessions)

    def _find(self, session_id: uuid.UUID) -> Optional[TrainingSession]:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def _get(self, session_id: uuid.UUID) -> TrainingSession:
        session = self._find(session_id)
        if session is None:
            raise NotFoundError("Training session", session_id)
        return session

    # Sessions

    def create_session(
        self,
        date: Optional[dt.date] = None,
        time: Optional[dt.time] = None,
        location: Optional[str] = None,
        notes: str = "",
    ) -> TrainingSession:
        """Schedule a practice. Date, time and location are all required."""
        now = self.clock.now()
        session = validate_input(
            TrainingSession,
            {
                "date": date,
                "time": time,
                "location": location,
                "notes": notes,
                "created_at": now,
                "updated_at": now,
            },
            prefix="Invalid training session",
        )
        self.sessions.append(session)
        self._save()
        logger.info(
            "Created training session %s on %s %s at %s",
            session.id,
            session.date,
            session.time.strftime("%H:%M"),
            session.location,
        )
        return session.model_copy(deep=True)

    def delete_session(self, session_id: uuid.UUID) -> bool:
        """Remove a session; deleting an unknown id is a no-op."""
        session = self._find(session_id)
        if session is None:
            return False
        self.sessions.remove(session)
        self._save()
        logger.info("Deleted training session %s", session_id)
        return True

    def get_session(self, session_id: uuid.UUID) -> TrainingSession:
        return self._get(session_id).model_copy(deep=True)

    def get_all_sessions(self) -> list[TrainingSession]:
        return [
            session.model_copy(deep=True)
            for session in sorted(self.sessions, key=_sort_key)
        ]

    def get_sessions_for_month(self, month: int, year: int) -> list[TrainingSession]:
        if not 1 <= month <= 12:
            raise ValidationError([f"month: must be between 1 and 12, got {month}"])
        return [
            session
            for session in self.get_all_sessions()
            if session.date.year == year and session.date.month == month
        ]

    def get_sessions_on(self, day: dt.date) -> list[TrainingSession]:
        return [session for session in self.get_all_sessions() if session.date == day]

    # Attendance entries

    def set_attendance(
        self,
        session_id: uuid.UUID,
        member_id: uuid.UUID,
        status: AttendanceStatus,
    ) -> TrainingSession:
        """Overwrite the member's status for the session."""
        status = AttendanceStatus(status)
        session = self._get(session_id)
        self.members.get_member(member_id)

        if session.attendance.get(member_id) != status:
            session.attendance[member_id] = status
            session.updated_at = self.clock.now()
            self._save()
            logger.info(
                "Marked member %s as %s for session %s",
                member_id,
                status.value,
                session_id,
            )
        return session.model_copy(deep=True)

    def clear_attendance(self, session_id: uuid.UUID, member_id: uuid.UUID) -> bool:
        """Return the member to unmarked. False when there was nothing to clear."""
        session = self._get(session_id)
        if member_id not in session.attendance:
            return False
        del session.attendance[member_id]
        session.updated_at = self.clock.now()
        self._save()
        logger.info("Cleared attendance of member %s for session %s", member_id, session_id)
        return True

    # Statistics

    def get_session_stats(self, session_id: uuid.UUID) -> SessionStats:
        session = self._get(session_id)
        statuses = list(session.attendance.values())
        roster = self.members.get_all_members()
        unmarked = sum(1 for member in roster if member.id not in session.attendance)
        present = statuses.count(AttendanceStatus.PRESENT)

        return SessionStats(
            session_id=session.id,
            present=present,
            absent=statuses.count(AttendanceStatus.ABSENT),
            justified=statuses.count(AttendanceStatus.JUSTIFIED),
            unmarked=unmarked,
            roster_size=len(roster),
            attendance_rate=_percent(present, len(roster)),
        )

    def get_member_attendance(self, member_id: uuid.UUID) -> MemberAttendance:
        statuses = [
            session.attendance[member_id]
            for session in self.sessions
            if member_id in session.attendance
        ]
        present = statuses.count(AttendanceStatus.PRESENT)
        return MemberAttendance(
            member_id=member_id,
            sessions_marked=len(statuses),
            present=present,
            absent=statuses.count(AttendanceStatus.ABSENT),
            justified=statuses.count(AttendanceStatus.JUSTIFIED),
            attendance_rate=_percent(present, len(statuses)),
        )

    # Export / import

    def export_sessions(self) -> dict:
        return export_document(
            "sessions", self.get_all_sessions(), generated_at=self.clock.now()
        )

    def import_sessions(self, document: Any) -> int:
        self.sessions = import_document(document, "sessions", TrainingSession)
        self._save()
        logger.info("Imported %d training sessions", len(self.sessions))
        return len(self.sessions)
