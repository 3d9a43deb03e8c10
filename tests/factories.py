"""
Payload and model factories for creating valid test data.

``payload()`` returns keyword arguments for the managers
(``directory.add_member(**payload)``); pass it through ``jsonable_encoder``
before posting it to the HTTP API. ``create()``
returns a validated model instance for pure-function tests.

Usage:
    member = MemberFactory.create(monthly_dues="80.00")
    club.members.add_member(**MemberFactory.payload(name="Ana Souza"))
"""

import datetime as dt
import uuid

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _unique_email() -> str:
    return f"player-{uuid.uuid4().hex[:8]}@volleyclub.com"


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


class MemberFactory:
    @staticmethod
    def payload(**overrides) -> dict:
        defaults = {
            "name": "Test Player",
            "email": _unique_email(),
            "phone": "+55 11 99999-0000",
            "position": "setter",
            "monthly_dues": "50.00",
            "join_date": "2024-01-15",
        }
        defaults.update(overrides)
        return defaults

    @staticmethod
    def create(**overrides):
        from services.members_service.models import Member

        return Member(**MemberFactory.payload(id=_uuid(), **overrides))


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class PaymentFactory:
    @staticmethod
    def create(member_id=None, **overrides):
        from services.payments_service.models import Payment

        defaults = {
            "id": _uuid(),
            "member_id": member_id or _uuid(),
            "amount": "50.00",
            "due_date": dt.date(2024, 3, 5),
            "status": "pending",
        }
        defaults.update(overrides)
        return Payment(**defaults)


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


class SessionFactory:
    @staticmethod
    def payload(**overrides) -> dict:
        defaults = {
            "date": "2024-03-12",
            "time": "19:30",
            "location": "Main Gym",
            "notes": "",
        }
        defaults.update(overrides)
        return defaults

    @staticmethod
    def create(**overrides):
        from services.attendance_service.models import TrainingSession

        return TrainingSession(**SessionFactory.payload(id=_uuid(), **overrides))


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------


class EquipmentFactory:
    @staticmethod
    def payload(**overrides) -> dict:
        defaults = {
            "name": "Match Ball",
            "category": "ball",
            "quantity": 5,
            "condition": "good",
            "purchase_date": dt.date(2024, 3, 1),
            "notes": "",
        }
        defaults.update(overrides)
        return defaults


class LoanFactory:
    @staticmethod
    def payload(equipment_id, member_id, **overrides) -> dict:
        defaults = {
            "equipment_id": equipment_id,
            "member_id": member_id,
            "quantity": 1,
            "expected_return_date": dt.date(2024, 3, 17),
            "notes": "",
        }
        defaults.update(overrides)
        return defaults


# ---------------------------------------------------------------------------
# Communications
# ---------------------------------------------------------------------------


class MessageFactory:
    @staticmethod
    def payload(**overrides) -> dict:
        defaults = {
            "title": "Tournament on Saturday",
            "content": "Meet at the gym at 8am.",
            "type": "announcement",
            "priority": "high",
        }
        defaults.update(overrides)
        return defaults
