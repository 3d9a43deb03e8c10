"""Unit tests for training sessions and attendance statistics."""

import datetime as dt
import uuid

import pytest
from libs.common.errors import NotFoundError, ValidationError
from services.attendance_service.models import AttendanceStatus
from services.attendance_service.services import AttendanceLedger
from tests.factories import MemberFactory, SessionFactory


@pytest.fixture
def roster(directory):
    return [directory.add_member(**MemberFactory.payload()) for _ in range(4)]


@pytest.mark.unit
class TestSessions:
    def test_create_session_requires_date_time_and_location(self, ledger):
        with pytest.raises(ValidationError) as exc_info:
            ledger.create_session(location="  ")

        fields = {message.split(":")[0] for message in exc_info.value.errors}
        assert fields == {"date", "time", "location"}
        assert ledger.get_all_sessions() == []

    def test_create_and_reload(self, store, directory, ledger, clock):
        session = ledger.create_session(**SessionFactory.payload())

        reloaded = AttendanceLedger(store, directory, clock)
        assert reloaded.get_session(session.id).location == "Main Gym"
        assert reloaded.get_session(session.id).time == dt.time(19, 30)

    def test_delete_is_idempotent(self, ledger):
        session = ledger.create_session(**SessionFactory.payload())

        assert ledger.delete_session(session.id) is True
        assert ledger.delete_session(session.id) is False
        assert ledger.delete_session(uuid.uuid4()) is False

    def test_sessions_sorted_by_date_and_time(self, ledger):
        late = ledger.create_session(**SessionFactory.payload(time="20:00"))
        early = ledger.create_session(**SessionFactory.payload(time="08:00"))
        first = ledger.create_session(**SessionFactory.payload(date="2024-03-01"))

        assert [s.id for s in ledger.get_all_sessions()] == [first.id, early.id, late.id]

    def test_month_filter_uses_local_calendar_date(self, ledger):
        # Late evening on the last day of the month stays in that month
        march = ledger.create_session(
            **SessionFactory.payload(date="2024-03-31", time="23:30")
        )
        ledger.create_session(**SessionFactory.payload(date="2024-04-01", time="00:30"))

        assert [s.id for s in ledger.get_sessions_for_month(3, 2024)] == [march.id]
        assert len(ledger.get_sessions_for_month(4, 2024)) == 1
        assert ledger.get_sessions_for_month(3, 2023) == []

    def test_month_filter_rejects_invalid_month(self, ledger):
        with pytest.raises(ValidationError):
            ledger.get_sessions_for_month(0, 2024)

    def test_unknown_session_is_not_found(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.get_session(uuid.uuid4())


@pytest.mark.unit
class TestAttendance:
    def test_set_attendance_overwrites(self, ledger, roster):
        session = ledger.create_session(**SessionFactory.payload())
        member = roster[0]

        ledger.set_attendance(session.id, member.id, AttendanceStatus.ABSENT)
        updated = ledger.set_attendance(session.id, member.id, "justified")

        assert updated.attendance == {member.id: AttendanceStatus.JUSTIFIED}

    def test_set_attendance_for_unknown_member(self, ledger):
        session = ledger.create_session(**SessionFactory.payload())

        with pytest.raises(NotFoundError):
            ledger.set_attendance(session.id, uuid.uuid4(), AttendanceStatus.PRESENT)

    def test_clear_attendance(self, ledger, roster):
        session = ledger.create_session(**SessionFactory.payload())
        ledger.set_attendance(session.id, roster[0].id, AttendanceStatus.PRESENT)

        assert ledger.clear_attendance(session.id, roster[0].id) is True
        assert ledger.clear_attendance(session.id, roster[0].id) is False
        assert ledger.get_session(session.id).attendance == {}

    def test_session_stats(self, ledger, roster):
        session = ledger.create_session(**SessionFactory.payload())
        ledger.set_attendance(session.id, roster[0].id, AttendanceStatus.PRESENT)
        ledger.set_attendance(session.id, roster[1].id, AttendanceStatus.PRESENT)
        ledger.set_attendance(session.id, roster[2].id, AttendanceStatus.ABSENT)

        stats = ledger.get_session_stats(session.id)

        assert stats.present == 2
        assert stats.absent == 1
        assert stats.justified == 0
        assert stats.unmarked == 1
        assert stats.roster_size == 4
        assert stats.attendance_rate == 50.0

    def test_stats_follow_the_live_roster(self, directory, ledger, roster):
        session = ledger.create_session(**SessionFactory.payload())
        ledger.set_attendance(session.id, roster[0].id, AttendanceStatus.PRESENT)

        directory.remove_member(roster[3].id)

        stats = ledger.get_session_stats(session.id)
        assert stats.roster_size == 3
        assert stats.unmarked == 2
        assert stats.attendance_rate == 33.3

    def test_member_attendance(self, ledger, roster):
        member = roster[0]
        for status in ("present", "present", "absent"):
            session = ledger.create_session(**SessionFactory.payload())
            ledger.set_attendance(session.id, member.id, status)
        ledger.create_session(**SessionFactory.payload())

        summary = ledger.get_member_attendance(member.id)

        assert summary.sessions_marked == 3
        assert summary.present == 2
        assert summary.attendance_rate == 66.7

    def test_export_and_import_round_trip_keeps_attendance(self, ledger, roster):
        session = ledger.create_session(**SessionFactory.payload())
        ledger.set_attendance(session.id, roster[0].id, AttendanceStatus.PRESENT)
        document = ledger.export_sessions()
        ledger.delete_session(session.id)

        assert ledger.import_sessions(document) == 1
        restored = ledger.get_session(session.id)
        assert restored.attendance == {roster[0].id: AttendanceStatus.PRESENT}
