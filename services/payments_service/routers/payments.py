"""Dues and payment endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from services.gateway_service.app.container import ClubContainer, get_club
from services.payments_service.models import (
    FinancialStats,
    MonthlyReport,
    Payment,
    PaymentStatus,
)
from services.payments_service.schemas import (
    CancelRequest,
    GenerateRequest,
    GenerateResponse,
    MarkPaidRequest,
    PaymentCorrection,
    PaymentCreate,
    PaymentResponse,
    SweepResponse,
)
from services.payments_service.services import PaymentManager

router = APIRouter(prefix="/payments", tags=["payments"])


def to_response(manager: PaymentManager, payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        **payment.model_dump(),
        is_overdue=manager.is_overdue(payment),
        days_overdue=manager.days_overdue(payment),
    )


@router.get("", response_model=list[PaymentResponse])
async def list_payments(
    member_id: Optional[uuid.UUID] = None,
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    current_user: ClubUser = Depends(require_permission("view_payments")),
    club: ClubContainer = Depends(get_club),
):
    """List payments with live status, optionally by member and/or status."""
    payments = club.payments.get_all_payments()
    if member_id is not None:
        payments = [p for p in payments if p.member_id == member_id]
    if status_filter is not None:
        payments = [p for p in payments if p.status == status_filter]
    return [to_response(club.payments, p) for p in payments]


@router.get("/overdue", response_model=list[PaymentResponse])
async def list_overdue_payments(
    current_user: ClubUser = Depends(require_permission("view_payments")),
    club: ClubContainer = Depends(get_club),
):
    return [to_response(club.payments, p) for p in club.payments.get_overdue_payments()]


@router.get("/stats", response_model=FinancialStats)
async def get_financial_stats(
    current_user: ClubUser = Depends(require_permission("view_payments")),
    club: ClubContainer = Depends(get_club),
):
    return club.payments.get_financial_stats()


@router.get("/reports/{year}/{month}", response_model=MonthlyReport)
async def get_monthly_report(
    year: int,
    month: int,
    current_user: ClubUser = Depends(require_permission("view_payments")),
    club: ClubContainer = Depends(get_club),
):
    return club.payments.get_monthly_report(month, year)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_payments")),
    club: ClubContainer = Depends(get_club),
):
    return to_response(club.payments, club.payments.get_payment(payment_id))


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payload: PaymentCreate,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    """Record a manual obligation (e.g. a tournament fee)."""
    payment = club.payments.add_payment(
        payload.member_id, payload.amount, payload.due_date, payload.notes
    )
    return to_response(club.payments, payment)


@router.post("/generate", response_model=GenerateResponse)
async def generate_obligations(
    payload: Optional[GenerateRequest] = None,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    reference_date = payload.reference_date if payload else None
    created = club.payments.generate_monthly_obligations(reference_date)
    return GenerateResponse(
        created=len(created),
        payments=[to_response(club.payments, p) for p in created],
    )


@router.post("/sweep-overdue", response_model=SweepResponse)
async def sweep_overdue(
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    return SweepResponse(marked_overdue=club.payments.sweep_overdue())


@router.post("/{payment_id}/pay", response_model=PaymentResponse)
async def mark_paid(
    payment_id: uuid.UUID,
    payload: MarkPaidRequest,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    payment = club.payments.mark_paid(payment_id, payload.method, payload.notes)
    return to_response(club.payments, payment)


@router.post("/{payment_id}/cancel", response_model=PaymentResponse)
async def cancel_payment(
    payment_id: uuid.UUID,
    payload: CancelRequest,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    payment = club.payments.cancel(payment_id, payload.reason)
    return to_response(club.payments, payment)


@router.post("/{payment_id}/reactivate", response_model=PaymentResponse)
async def reactivate_payment(
    payment_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    return to_response(club.payments, club.payments.reactivate(payment_id))


@router.patch("/{payment_id}", response_model=PaymentResponse)
async def correct_payment(
    payment_id: uuid.UUID,
    payload: PaymentCorrection,
    current_user: ClubUser = Depends(require_permission("manage_payments")),
    club: ClubContainer = Depends(get_club),
):
    """Correct amount or dates without changing the status."""
    payment = club.payments.correct_payment(
        payment_id, **payload.model_dump(exclude_none=True)
    )
    return to_response(club.payments, payment)
