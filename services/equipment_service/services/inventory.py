"""Equipment inventory and loan tracker.

For every item, at all times::

    0 <= available_quantity <= quantity
    quantity - available_quantity == sum(active loan quantities for the item)

Every mutation keeps both collections consistent in memory first and then
rewrites the ``equipment`` and ``equipment_loans`` keys.
"""

import datetime as dt
import uuid
from collections import defaultdict
from typing import Any, Optional

from libs.common.clock import Clock
from libs.common.errors import ConflictError, NotFoundError, ValidationError
from libs.common.exports import export_document
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, parse_records, validate_input
from libs.db.store import KeyValueStore
from pydantic import TypeAdapter
from services.equipment_service.models import (
    Equipment,
    EquipmentCategory,
    EquipmentCondition,
    EquipmentLoan,
    EquipmentStats,
    LoanStatus,
)
from services.equipment_service.services import maintenance
from services.members_service.services import MemberDirectory

logger = get_logger(__name__)

EQUIPMENT_KEY = "equipment"
LOANS_KEY = "equipment_loans"


def find_invariant_violations(
    equipment: list[Equipment], loans: list[EquipmentLoan]
) -> list[str]:
    """Describe every item whose loaned quantity does not match its active loans."""
    loaned = defaultdict(int)
    for loan in loans:
        if loan.is_active:
            loaned[loan.equipment_id] += loan.quantity

    problems = []
    known = {item.id for item in equipment}
    for equipment_id in loaned:
        if equipment_id not in known:
            problems.append(f"active loans reference unknown equipment {equipment_id}")
    for item in equipment:
        if item.loaned_quantity != loaned[item.id]:
            problems.append(
                f"{item.name} ({item.id}): {item.loaned_quantity} loaned by stock "
                f"but {loaned[item.id]} in active loans"
            )
    return problems


DERIVED_FIELDS = ("available_quantity:", "last_maintenance:", "next_maintenance:")

EDITABLE_FIELDS = ("name", "category", "quantity", "condition", "purchase_date", "notes")


_DATE = TypeAdapter(dt.date)


def _with_next_maintenance(fields: dict) -> dict:
    """Fill ``next_maintenance`` from the last maintenance date and category."""
    try:
        last = _DATE.validate_python(fields.get("last_maintenance"))
        category = EquipmentCategory(fields.get("category"))
    except ValueError:
        # Left for validate_input to report against the caller's fields
        return fields
    return {**fields, "next_maintenance": maintenance.next_maintenance_date(last, category)}


class EquipmentInventory:
    def __init__(self, store: KeyValueStore, members: MemberDirectory, clock: Clock):
        self.members = members
        self.clock = clock
        self.equipment_repository = CollectionRepository(store, EQUIPMENT_KEY, Equipment)
        self.loan_repository = CollectionRepository(store, LOANS_KEY, EquipmentLoan)
        self.equipment: list[Equipment] = self.equipment_repository.load()
        self.loans: list[EquipmentLoan] = self.loan_repository.load()
        logger.info(
            "Loaded %d equipment items and %d loans",
            len(self.equipment),
            len(self.loans),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _save(self) -> None:
        self.equipment_repository.save(self.equipment)
        self.loan_repository.save(self.loans)

    def _find_item(self, equipment_id: uuid.UUID) -> Optional[Equipment]:
        for item in self.equipment:
            if item.id == equipment_id:
                return item
        return None

    def _get_item(self, equipment_id: uuid.UUID) -> Equipment:
        item = self._find_item(equipment_id)
        if item is None:
            raise NotFoundError("Equipment", equipment_id)
        return item

    def _get_loan(self, loan_id: uuid.UUID) -> EquipmentLoan:
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        raise NotFoundError("Loan", loan_id)

    def _active_loans_for(self, equipment_id: uuid.UUID) -> list[EquipmentLoan]:
        return [
            loan
            for loan in self.loans
            if loan.equipment_id == equipment_id and loan.is_active
        ]

    def _apply_available_delta(self, item: Equipment, delta: int) -> None:
        target = item.available_quantity + delta
        clamped = max(0, min(item.quantity, target))
        if clamped != target:
            # Loan accounting should never get here
            logger.warning(
                "Clamped available quantity of %s from %d to %d",
                item.id,
                target,
                clamped,
            )
        item.available_quantity = clamped
        item.updated_at = self.clock.now()

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    def add_equipment(
        self,
        name: Optional[str] = None,
        category: Optional[EquipmentCategory] = None,
        quantity: Optional[int] = None,
        condition: Optional[EquipmentCondition] = None,
        purchase_date: Optional[dt.date] = None,
        notes: str = "",
    ) -> Equipment:
        """Register new stock; everything starts available and freshly maintained."""
        now = self.clock.now()
        fields = _with_next_maintenance(
            {
                "name": name,
                "category": category,
                "quantity": quantity,
                "available_quantity": quantity,
                "condition": condition,
                "purchase_date": purchase_date,
                "last_maintenance": purchase_date,
                "notes": notes,
                "created_at": now,
                "updated_at": now,
            }
        )
        try:
            item = validate_input(Equipment, fields, prefix="Invalid equipment")
        except ValidationError as e:
            # Report the caller's fields, not the ones derived from them
            own = [msg for msg in e.errors if not msg.startswith(DERIVED_FIELDS)]
            raise ValidationError(own or e.errors, prefix="Invalid equipment") from e

        self.equipment.append(item)
        self._save()
        logger.info("Added equipment %s (%s x%d)", item.name, item.id, item.quantity)
        return item.model_copy()

    def update_equipment(self, equipment_id: uuid.UUID, **changes) -> Equipment:
        """Edit an item. Quantity can never drop below what is out on loan."""
        current = self._get_item(equipment_id)
        index = self.equipment.index(current)
        changes = {
            k: v for k, v in changes.items() if v is not None and k in EDITABLE_FIELDS
        }

        quantity = changes.get("quantity", current.quantity)
        if isinstance(quantity, int) and quantity < current.loaned_quantity:
            raise ConflictError(
                f"Quantity {quantity} is below the {current.loaned_quantity} "
                f"units of {current.name} on loan"
            )

        merged = {**current.model_dump(), **changes, "updated_at": self.clock.now()}
        if isinstance(quantity, int):
            merged["available_quantity"] = quantity - current.loaned_quantity
        if "category" in changes:
            merged = _with_next_maintenance(merged)
        item = validate_input(Equipment, merged, prefix="Invalid equipment")

        self.equipment[index] = item
        self._save()
        logger.info("Updated equipment %s (%s)", item.name, item.id)
        return item.model_copy()

    def update_condition(
        self, equipment_id: uuid.UUID, condition: EquipmentCondition
    ) -> Equipment:
        item = self._get_item(equipment_id)
        item.condition = EquipmentCondition(condition)
        item.updated_at = self.clock.now()
        self._save()
        logger.info("Condition of %s set to %s", item.id, item.condition.value)
        return item.model_copy()

    def update_available_quantity(self, equipment_id: uuid.UUID, delta: int) -> Equipment:
        """Shift availability by ``delta``, clamped into ``[0, quantity]``."""
        item = self._get_item(equipment_id)
        self._apply_available_delta(item, delta)
        self._save()
        return item.model_copy()

    def delete_equipment(self, equipment_id: uuid.UUID) -> Equipment:
        item = self._get_item(equipment_id)
        active = self._active_loans_for(equipment_id)
        if active:
            raise ConflictError(
                f"Cannot delete {item.name}: {len(active)} active loan(s) reference it"
            )
        self.equipment.remove(item)
        self._save()
        logger.info("Deleted equipment %s (%s)", item.name, item.id)
        return item

    def mark_maintenance_done(self, equipment_id: uuid.UUID) -> Equipment:
        item = self._get_item(equipment_id)
        today = self.clock.today()
        item.last_maintenance = today
        item.next_maintenance = maintenance.next_maintenance_date(today, item.category)
        item.updated_at = self.clock.now()
        self._save()
        logger.info(
            "Maintenance done on %s; next due %s", item.id, item.next_maintenance
        )
        return item.model_copy()

    def needs_maintenance(self, item: Equipment) -> bool:
        return maintenance.needs_maintenance(item, self.clock.today())

    def get_equipment(self, equipment_id: uuid.UUID) -> Equipment:
        return self._get_item(equipment_id).model_copy()

    def get_all_equipment(self) -> list[Equipment]:
        return [item.model_copy() for item in self.equipment]

    def get_equipment_needing_maintenance(self) -> list[Equipment]:
        return [item for item in self.get_all_equipment() if self.needs_maintenance(item)]

    def filter_equipment(
        self,
        category: Optional[EquipmentCategory] = None,
        condition: Optional[EquipmentCondition] = None,
        search: Optional[str] = None,
    ) -> list[Equipment]:
        needle = (search or "").strip().lower()
        return [
            item
            for item in self.get_all_equipment()
            if (category is None or item.category == category)
            and (condition is None or item.condition == condition)
            and (not needle or needle in item.name.lower() or needle in item.notes.lower())
        ]

    def check_maintenance_schedule(self) -> list[Equipment]:
        """Scheduled check: log items whose maintenance is due."""
        due = self.get_equipment_needing_maintenance()
        if due:
            logger.info("%d equipment item(s) need maintenance", len(due))
        return due

    # ------------------------------------------------------------------
    # Loans
    # ------------------------------------------------------------------

    def create_loan(
        self,
        equipment_id: uuid.UUID,
        member_id: uuid.UUID,
        quantity: Optional[int] = None,
        expected_return_date: Optional[dt.date] = None,
        notes: str = "",
    ) -> EquipmentLoan:
        item = self._get_item(equipment_id)
        member = self.members.get_member(member_id)
        now = self.clock.now()
        loan = validate_input(
            EquipmentLoan,
            {
                "equipment_id": item.id,
                "member_id": member.id,
                "member_name": member.name,
                "quantity": quantity,
                "loan_date": self.clock.today(),
                "expected_return_date": expected_return_date,
                "notes": notes,
                "created_at": now,
                "updated_at": now,
            },
            prefix="Invalid loan",
        )
        if loan.quantity > item.available_quantity:
            raise ConflictError(
                f"Requested {loan.quantity} of {item.name} but only "
                f"{item.available_quantity} available"
            )

        self.loans.append(loan)
        self._apply_available_delta(item, -loan.quantity)
        self._save()
        logger.info(
            "Loaned %d x %s to %s (loan %s)",
            loan.quantity,
            item.name,
            member.name,
            loan.id,
        )
        return loan.model_copy()

    def return_equipment(self, loan_id: uuid.UUID) -> EquipmentLoan:
        """Close a loan and credit availability once; a second return is rejected."""
        loan = self._get_loan(loan_id)
        if not loan.is_active:
            raise ConflictError(f"Loan {loan_id} was already returned")
        item = self._get_item(loan.equipment_id)

        loan.status = LoanStatus.RETURNED
        loan.actual_return_date = self.clock.today()
        loan.updated_at = self.clock.now()
        self._apply_available_delta(item, loan.quantity)
        self._save()
        logger.info("Loan %s returned (%d x %s)", loan.id, loan.quantity, item.name)
        return loan.model_copy()

    def is_overdue(self, loan: EquipmentLoan) -> bool:
        return maintenance.loan_is_overdue(loan, self.clock.today())

    def overdue_days(self, loan: EquipmentLoan) -> int:
        return maintenance.loan_overdue_days(loan, self.clock.today())

    def display_status(self, loan: EquipmentLoan) -> LoanStatus:
        return LoanStatus.OVERDUE if self.is_overdue(loan) else loan.status

    def get_loan(self, loan_id: uuid.UUID) -> EquipmentLoan:
        return self._get_loan(loan_id).model_copy()

    def get_all_loans(self) -> list[EquipmentLoan]:
        return [loan.model_copy() for loan in self.loans]

    def get_active_loans(self) -> list[EquipmentLoan]:
        return [loan for loan in self.get_all_loans() if loan.is_active]

    def get_overdue_loans(self) -> list[EquipmentLoan]:
        return [loan for loan in self.get_all_loans() if self.is_overdue(loan)]

    def get_loans_for_member(self, member_id: uuid.UUID) -> list[EquipmentLoan]:
        return [loan for loan in self.get_all_loans() if loan.member_id == member_id]

    # ------------------------------------------------------------------
    # Statistics and export
    # ------------------------------------------------------------------

    def get_equipment_stats(self) -> EquipmentStats:
        return EquipmentStats(
            equipment_types=len(self.equipment),
            total_items=sum(item.quantity for item in self.equipment),
            available_items=sum(item.available_quantity for item in self.equipment),
            loaned_items=sum(item.loaned_quantity for item in self.equipment),
            needing_maintenance=len(self.get_equipment_needing_maintenance()),
            active_loans=len(self.get_active_loans()),
            overdue_loans=len(self.get_overdue_loans()),
        )

    def export_equipment(self) -> dict:
        return export_document(
            "equipment",
            self.equipment,
            generated_at=self.clock.now(),
            loans=[loan.model_dump(mode="json") for loan in self.loans],
        )

    def import_equipment(self, document: Any) -> int:
        """Replace items and loans together, rejecting inconsistent stock."""
        if not isinstance(document, dict) or not isinstance(document.get("equipment"), list):
            raise ValidationError(
                ["expected an object with an 'equipment' list"],
                prefix="Invalid import document",
            )
        equipment = parse_records("equipment", document["equipment"], Equipment)
        loans = parse_records("equipment_loans", document.get("loans", []), EquipmentLoan)
        problems = find_invariant_violations(equipment, loans)
        if problems:
            raise ValidationError(problems, prefix="Invalid import document")

        self.equipment = equipment
        self.loans = loans
        self._save()
        logger.info("Imported %d equipment items and %d loans", len(equipment), len(loans))
        return len(equipment)
