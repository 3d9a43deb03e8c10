"""Unit tests for equipment stock, loans and maintenance scheduling."""

import datetime as dt
import logging
import uuid

import pytest
from libs.common.errors import ConflictError, NotFoundError, ValidationError
from services.equipment_service.models import (
    EquipmentCategory,
    EquipmentCondition,
    LoanStatus,
)
from services.equipment_service.services import EquipmentInventory
from services.equipment_service.services.inventory import find_invariant_violations
from tests.factories import EquipmentFactory, LoanFactory, MemberFactory


@pytest.fixture
def member(directory):
    return directory.add_member(**MemberFactory.payload(name="Bruno Lima"))


@pytest.fixture
def balls(inventory):
    return inventory.add_equipment(**EquipmentFactory.payload(quantity=5))


def _assert_stock_consistent(inventory):
    assert find_invariant_violations(inventory.equipment, inventory.loans) == []
    for item in inventory.equipment:
        assert 0 <= item.available_quantity <= item.quantity


@pytest.mark.unit
class TestAddEquipment:
    def test_new_stock_is_fully_available(self, balls):
        assert balls.available_quantity == 5
        assert balls.last_maintenance == dt.date(2024, 3, 1)
        # Balls are serviced every 30 days
        assert balls.next_maintenance == dt.date(2024, 3, 31)

    @pytest.mark.parametrize(
        "category, expected",
        [
            ("net", dt.date(2024, 5, 30)),
            ("uniform", dt.date(2024, 8, 28)),
            ("other-gear", dt.date(2024, 4, 30)),
        ],
    )
    def test_maintenance_interval_per_category(self, inventory, category, expected):
        item = inventory.add_equipment(**EquipmentFactory.payload(category=category))

        assert item.next_maintenance == expected

    def test_reports_every_missing_field(self, inventory):
        with pytest.raises(ValidationError) as exc_info:
            inventory.add_equipment(name="", quantity=0)

        fields = {message.split(":")[0] for message in exc_info.value.errors}
        assert fields == {"name", "category", "quantity", "condition", "purchase_date"}


@pytest.mark.unit
class TestLoans:
    def test_loan_lifecycle_keeps_stock_consistent(self, inventory, balls, member):
        loan = inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=3))
        assert inventory.get_equipment(balls.id).available_quantity == 2
        assert loan.member_name == "Bruno Lima"
        _assert_stock_consistent(inventory)

        with pytest.raises(ConflictError):
            inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=3))
        assert inventory.get_equipment(balls.id).available_quantity == 2

        returned = inventory.return_equipment(loan.id)
        assert returned.status == LoanStatus.RETURNED
        assert returned.actual_return_date == dt.date(2024, 3, 10)
        assert inventory.get_equipment(balls.id).available_quantity == 5
        _assert_stock_consistent(inventory)

    def test_second_return_does_not_credit_twice(self, inventory, balls, member):
        loan = inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=2))
        inventory.return_equipment(loan.id)

        with pytest.raises(ConflictError):
            inventory.return_equipment(loan.id)

        assert inventory.get_equipment(balls.id).available_quantity == 5

    def test_unknown_loan_or_item(self, inventory, member):
        with pytest.raises(NotFoundError):
            inventory.return_equipment(uuid.uuid4())
        with pytest.raises(NotFoundError):
            inventory.create_loan(**LoanFactory.payload(uuid.uuid4(), member.id))

    def test_loan_for_unknown_member(self, inventory, balls):
        with pytest.raises(NotFoundError):
            inventory.create_loan(**LoanFactory.payload(balls.id, uuid.uuid4()))

    def test_expected_return_before_loan_date_is_invalid(self, inventory, balls, member):
        with pytest.raises(ValidationError):
            inventory.create_loan(
                **LoanFactory.payload(
                    balls.id, member.id, expected_return_date=dt.date(2024, 3, 1)
                )
            )

    def test_overdue_is_derived_from_dates(self, inventory, balls, member, clock):
        loan = inventory.create_loan(**LoanFactory.payload(balls.id, member.id))

        clock.set(dt.datetime(2024, 3, 17, 18, 0))
        assert inventory.is_overdue(loan) is False

        clock.advance(days=2)
        assert inventory.is_overdue(loan) is True
        assert inventory.overdue_days(loan) == 2
        assert inventory.display_status(loan) == LoanStatus.OVERDUE
        assert inventory.get_loan(loan.id).status == LoanStatus.ACTIVE
        assert [overdue.id for overdue in inventory.get_overdue_loans()] == [loan.id]

        returned = inventory.return_equipment(loan.id)
        assert inventory.is_overdue(returned) is False

    def test_loans_survive_reload(self, store, directory, inventory, balls, member, clock):
        loan = inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=2))

        reloaded = EquipmentInventory(store, directory, clock)

        assert reloaded.get_equipment(balls.id).available_quantity == 3
        assert [active.id for active in reloaded.get_active_loans()] == [loan.id]


@pytest.mark.unit
class TestStockEdits:
    def test_delete_with_active_loan_is_a_conflict(self, inventory, balls, member):
        loan = inventory.create_loan(**LoanFactory.payload(balls.id, member.id))

        with pytest.raises(ConflictError):
            inventory.delete_equipment(balls.id)

        inventory.return_equipment(loan.id)
        inventory.delete_equipment(balls.id)
        assert inventory.get_all_equipment() == []

    def test_quantity_cannot_drop_below_loaned(self, inventory, balls, member):
        inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=3))

        with pytest.raises(ConflictError):
            inventory.update_equipment(balls.id, quantity=2)

        updated = inventory.update_equipment(balls.id, quantity=8)
        assert updated.available_quantity == 5
        _assert_stock_consistent(inventory)

    def test_available_quantity_is_clamped_and_logged(self, inventory, balls, caplog):
        with caplog.at_level(logging.WARNING):
            item = inventory.update_available_quantity(balls.id, 3)

        assert item.available_quantity == 5
        assert "Clamped available quantity" in caplog.text

        assert inventory.update_available_quantity(balls.id, -9).available_quantity == 0

    def test_update_condition_keeps_availability(self, inventory, balls):
        item = inventory.update_condition(balls.id, EquipmentCondition.POOR)

        assert item.condition == EquipmentCondition.POOR
        assert item.available_quantity == 5


@pytest.mark.unit
class TestMaintenance:
    def test_needs_maintenance_from_the_due_day(self, inventory, balls, clock):
        assert inventory.needs_maintenance(balls) is False

        clock.set(dt.datetime(2024, 3, 31, 8, 0))

        assert inventory.needs_maintenance(balls) is True
        assert [i.id for i in inventory.check_maintenance_schedule()] == [balls.id]

    def test_mark_maintenance_done(self, inventory, balls, member, clock):
        inventory.create_loan(**LoanFactory.payload(balls.id, member.id))
        inventory.update_condition(balls.id, EquipmentCondition.FAIR)
        clock.set(dt.datetime(2024, 4, 2, 10, 0))

        item = inventory.mark_maintenance_done(balls.id)

        assert item.last_maintenance == dt.date(2024, 4, 2)
        assert item.next_maintenance == dt.date(2024, 5, 2)
        assert item.condition == EquipmentCondition.FAIR
        assert item.available_quantity == 4

    def test_changing_category_reschedules(self, inventory, balls):
        item = inventory.update_equipment(balls.id, category=EquipmentCategory.NET)

        assert item.next_maintenance == dt.date(2024, 5, 30)


@pytest.mark.unit
class TestStatsAndImport:
    def test_stats(self, inventory, balls, member):
        inventory.add_equipment(**EquipmentFactory.payload(name="Net", category="net", quantity=1))
        inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=2))

        stats = inventory.get_equipment_stats()

        assert stats.equipment_types == 2
        assert stats.total_items == 6
        assert stats.available_items == 4
        assert stats.loaned_items == 2
        assert stats.active_loans == 1
        assert stats.overdue_loans == 0

    def test_import_rejects_inconsistent_stock(self, inventory, balls, member):
        inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=2))
        document = inventory.export_equipment()
        document["equipment"][0]["available_quantity"] = 5

        with pytest.raises(ValidationError):
            inventory.import_equipment(document)

        assert inventory.get_equipment(balls.id).available_quantity == 3

    def test_import_round_trip(self, inventory, balls, member):
        inventory.create_loan(**LoanFactory.payload(balls.id, member.id, quantity=2))
        document = inventory.export_equipment()

        assert inventory.import_equipment(document) == 1
        _assert_stock_consistent(inventory)
