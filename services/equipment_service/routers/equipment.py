"""Equipment inventory and loan endpoints."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from services.equipment_service.models import (
    Equipment,
    EquipmentCategory,
    EquipmentCondition,
    EquipmentLoan,
    EquipmentStats,
)
from services.equipment_service.schemas import (
    EquipmentCreate,
    EquipmentResponse,
    EquipmentUpdate,
    LoanCreate,
    LoanResponse,
)
from services.equipment_service.services import EquipmentInventory
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/equipment", tags=["equipment"])


def to_equipment_response(
    inventory: EquipmentInventory, item: Equipment
) -> EquipmentResponse:
    return EquipmentResponse(
        **item.model_dump(), needs_maintenance=inventory.needs_maintenance(item)
    )


def to_loan_response(inventory: EquipmentInventory, loan: EquipmentLoan) -> LoanResponse:
    return LoanResponse(
        **loan.model_dump(),
        display_status=inventory.display_status(loan),
        overdue_days=inventory.overdue_days(loan),
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(
    category: Optional[EquipmentCategory] = None,
    condition: Optional[EquipmentCondition] = None,
    search: Optional[str] = None,
    needs_maintenance: bool = False,
    current_user: ClubUser = Depends(require_permission("view_equipment")),
    club: ClubContainer = Depends(get_club),
):
    inventory = club.equipment
    items = inventory.filter_equipment(category, condition, search)
    if needs_maintenance:
        items = [item for item in items if inventory.needs_maintenance(item)]
    return [to_equipment_response(inventory, item) for item in items]


@router.get("/stats", response_model=EquipmentStats)
async def get_equipment_stats(
    current_user: ClubUser = Depends(require_permission("view_equipment")),
    club: ClubContainer = Depends(get_club),
):
    return club.equipment.get_equipment_stats()


@router.get("/loans", response_model=list[LoanResponse])
async def list_loans(
    active: bool = False,
    overdue: bool = False,
    member_id: Optional[uuid.UUID] = None,
    current_user: ClubUser = Depends(require_permission("view_equipment")),
    club: ClubContainer = Depends(get_club),
):
    inventory = club.equipment
    if member_id is not None:
        loans = inventory.get_loans_for_member(member_id)
    else:
        loans = inventory.get_all_loans()
    if overdue:
        loans = [loan for loan in loans if inventory.is_overdue(loan)]
    elif active:
        loans = [loan for loan in loans if loan.is_active]
    return [to_loan_response(inventory, loan) for loan in loans]


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("view_equipment")),
    club: ClubContainer = Depends(get_club),
):
    return to_equipment_response(club.equipment, club.equipment.get_equipment(equipment_id))


# ---------------------------------------------------------------------------
# Equipment mutations
# ---------------------------------------------------------------------------


@router.post("", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_equipment(
    payload: EquipmentCreate,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    item = club.equipment.add_equipment(**payload.model_dump())
    return to_equipment_response(club.equipment, item)


@router.patch("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: uuid.UUID,
    payload: EquipmentUpdate,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    item = club.equipment.update_equipment(
        equipment_id, **payload.model_dump(exclude_unset=True)
    )
    return to_equipment_response(club.equipment, item)


@router.delete("/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(
    equipment_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    """Rejected with 409 while any active loan references the item."""
    club.equipment.delete_equipment(equipment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{equipment_id}/maintenance", response_model=EquipmentResponse)
async def mark_maintenance_done(
    equipment_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    item = club.equipment.mark_maintenance_done(equipment_id)
    return to_equipment_response(club.equipment, item)


# ---------------------------------------------------------------------------
# Loans
# ---------------------------------------------------------------------------


@router.post("/loans", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
async def create_loan(
    payload: LoanCreate,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    loan = club.equipment.create_loan(**payload.model_dump())
    return to_loan_response(club.equipment, loan)


@router.post("/loans/{loan_id}/return", response_model=LoanResponse)
async def return_loan(
    loan_id: uuid.UUID,
    current_user: ClubUser = Depends(require_permission("manage_equipment")),
    club: ClubContainer = Depends(get_club),
):
    loan = club.equipment.return_equipment(loan_id)
    return to_loan_response(club.equipment, loan)
