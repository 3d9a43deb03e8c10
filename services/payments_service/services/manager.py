"""Payment collection owner: generation, transitions, sweeps and reports.

Every public method is a synchronous call that mutates the in-memory list and
then rewrites the ``payments`` key once, so neither a request nor a scheduled
sweep can observe a half-applied change.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from libs.common.clock import Clock
from libs.common.errors import ConflictError, NotFoundError, ValidationError
from libs.common.exports import export_document, import_document
from libs.common.logging import get_logger
from libs.db.repository import CollectionRepository, validate_input
from libs.db.store import KeyValueStore
from services.members_service.services import MemberDirectory
from services.payments_service.models import (
    FinancialStats,
    MonthlyReport,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from services.payments_service.services import payment_rules
from services.payments_service.services.obligations import (
    DEFAULT_DUE_DAY,
    covered_members,
    duplicate_obligations,
    generate_monthly_obligations,
)

logger = get_logger(__name__)

PAYMENTS_KEY = "payments"


class PaymentManager:
    def __init__(
        self,
        store: KeyValueStore,
        members: MemberDirectory,
        clock: Clock,
        *,
        due_day: int = DEFAULT_DUE_DAY,
    ):
        self.members = members
        self.clock = clock
        self.due_day = due_day
        self.repository = CollectionRepository(store, PAYMENTS_KEY, Payment)
        self.payments: list[Payment] = self.repository.load()
        logger.info("Loaded %d payments", len(self.payments))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _save(self) -> None:
        self.repository.save(self.payments)

    def _index_of(self, payment_id: uuid.UUID) -> int:
        for index, payment in enumerate(self.payments):
            if payment.id == payment_id:
                return index
        raise NotFoundError("Payment", payment_id)

    def _replace(self, index: int, **changes) -> Payment:
        changes["updated_at"] = self.clock.now()
        payment = self.payments[index].model_copy(update=changes)
        self.payments[index] = payment
        self._save()
        return self._live(payment)

    def _live(self, payment: Payment) -> Payment:
        return payment_rules.with_live_status(payment, self.clock.today())

    # ------------------------------------------------------------------
    # Generation and sweeps
    # ------------------------------------------------------------------

    def generate_monthly_obligations(
        self, reference_date: Optional[date] = None
    ) -> list[Payment]:
        """Append the missing obligations for the month of ``reference_date``."""
        reference_date = reference_date or self.clock.today()
        new_payments = generate_monthly_obligations(
            self.members.get_all_members(),
            self.payments,
            reference_date,
            due_day=self.due_day,
            now=self.clock.now(),
        )
        if new_payments:
            self.payments.extend(new_payments)
            self._save()
            logger.info(
                "Generated %d obligations for %s",
                len(new_payments),
                reference_date.strftime("%Y-%m"),
            )
        return [payment.model_copy() for payment in new_payments]

    def sweep_overdue(self) -> int:
        """Persist pending -> overdue for every payment past its due date."""
        today = self.clock.today()
        now = self.clock.now()
        changed = 0
        for index, payment in enumerate(self.payments):
            if (
                payment.status == PaymentStatus.PENDING
                and payment_rules.is_overdue(payment, today)
            ):
                self.payments[index] = payment.model_copy(
                    update={"status": PaymentStatus.OVERDUE, "updated_at": now}
                )
                changed += 1
        if changed:
            self._save()
            logger.info("Marked %d payments as overdue", changed)
        return changed

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_payment(
        self,
        member_id: uuid.UUID,
        amount: Decimal,
        due_date: date,
        notes: str = "",
    ) -> Payment:
        """Record a manual obligation outside of the monthly generation."""
        now = self.clock.now()
        payment = validate_input(
            Payment,
            {
                "member_id": member_id,
                "amount": amount,
                "due_date": due_date,
                "notes": notes,
                "created_at": now,
                "updated_at": now,
            },
            prefix="Invalid payment",
        )
        self.members.get_member(payment.member_id)

        self.payments.append(payment)
        self._save()
        logger.info(
            "Added payment %s of %s for member %s",
            payment.id,
            payment.amount,
            payment.member_id,
        )
        return self._live(payment)

    def mark_paid(
        self,
        payment_id: uuid.UUID,
        method: PaymentMethod = PaymentMethod.CASH,
        notes: str = "",
    ) -> Payment:
        method = PaymentMethod(method)
        index = self._index_of(payment_id)
        payment_rules.ensure_transition(
            self.payments[index], PaymentStatus.PAID, self.clock.today()
        )
        changes = {
            "status": PaymentStatus.PAID,
            "payment_date": self.clock.now(),
            "payment_method": method,
        }
        if notes:
            changes["notes"] = notes
        payment = self._replace(index, **changes)
        logger.info("Marked payment %s as paid via %s", payment.id, method.value)
        return payment

    def cancel(self, payment_id: uuid.UUID, reason: str = "") -> Payment:
        index = self._index_of(payment_id)
        current = self.payments[index]
        if current.status == PaymentStatus.CANCELLED:
            return current.model_copy()

        payment_rules.ensure_transition(
            current, PaymentStatus.CANCELLED, self.clock.today()
        )
        payment = self._replace(
            index, status=PaymentStatus.CANCELLED, notes=reason.strip()
        )
        logger.info("Cancelled payment %s (%s)", payment.id, reason or "no reason")
        return payment

    def reactivate(self, payment_id: uuid.UUID) -> Payment:
        index = self._index_of(payment_id)
        current = self.payments[index]
        payment_rules.ensure_transition(
            current, PaymentStatus.PENDING, self.clock.today()
        )

        others = [p for p in self.payments if p.id != current.id]
        if current.member_id in covered_members(others, current.due_date):
            raise ConflictError(
                f"Member {current.member_id} already has an active payment "
                f"for {current.due_date.strftime('%Y-%m')}"
            )

        payment = self._replace(index, status=PaymentStatus.PENDING, notes="")
        logger.info("Reactivated payment %s", payment.id)
        return payment

    def correct_payment(
        self,
        payment_id: uuid.UUID,
        *,
        amount: Optional[Decimal] = None,
        due_date: Optional[date] = None,
        payment_date=None,
        notes: Optional[str] = None,
    ) -> Payment:
        """Fix amount or dates of a payment without touching its status."""
        index = self._index_of(payment_id)
        current = self.payments[index]
        if current.status == PaymentStatus.CANCELLED:
            raise ConflictError(f"Payment {current.id} is cancelled; reactivate it first")
        if payment_date is not None and current.status != PaymentStatus.PAID:
            raise ConflictError(
                f"Payment {current.id} is not paid; it has no payment date to correct"
            )

        changes = {
            "amount": amount,
            "due_date": due_date,
            "payment_date": payment_date,
            "notes": notes,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        merged = {**current.model_dump(), **changes, "updated_at": self.clock.now()}
        corrected = validate_input(Payment, merged, prefix="Invalid correction")

        self.payments[index] = corrected
        self._save()
        logger.info("Corrected payment %s: %s", corrected.id, ", ".join(sorted(changes)))
        return self._live(corrected)

    # ------------------------------------------------------------------
    # Reads (live status)
    # ------------------------------------------------------------------

    def get_payment(self, payment_id: uuid.UUID) -> Payment:
        return self._live(self.payments[self._index_of(payment_id)])

    def get_all_payments(self) -> list[Payment]:
        return [self._live(payment) for payment in self.payments]

    def get_payments_by_member(self, member_id: uuid.UUID) -> list[Payment]:
        return [p for p in self.get_all_payments() if p.member_id == member_id]

    def get_payments_by_status(self, status: PaymentStatus) -> list[Payment]:
        return [p for p in self.get_all_payments() if p.status == status]

    def get_overdue_payments(self) -> list[Payment]:
        return self.get_payments_by_status(PaymentStatus.OVERDUE)

    def is_overdue(self, payment: Payment) -> bool:
        return payment_rules.is_overdue(payment, self.clock.today())

    def days_overdue(self, payment: Payment) -> int:
        return payment_rules.days_overdue(payment, self.clock.today())

    def get_financial_stats(self) -> FinancialStats:
        return payment_rules.financial_stats(self.payments, self.clock.today())

    def get_monthly_report(self, month: int, year: int) -> MonthlyReport:
        if not 1 <= month <= 12:
            raise ValidationError([f"month: must be between 1 and 12, got {month}"])
        return payment_rules.monthly_report(
            self.payments, year, month, self.clock.today()
        )

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_payments(self) -> dict:
        return export_document(
            "payments",
            self.get_all_payments(),
            generated_at=self.clock.now(),
            stats=self.get_financial_stats(),
        )

    def import_payments(self, document: Any) -> int:
        """Replace every payment with an imported list. Nothing changes on error."""
        payments = import_document(document, "payments", Payment)
        duplicates = duplicate_obligations(payments)
        if duplicates:
            raise ValidationError(duplicates, prefix="Invalid import document")
        self.payments = payments
        self._save()
        logger.info("Imported %d payments", len(self.payments))
        return len(self.payments)
