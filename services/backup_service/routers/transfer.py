"""JSON export and import of single collections."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from libs.auth.dependencies import require_permission
from libs.auth.models import ClubUser
from libs.common.errors import ValidationError
from services.backup_service.schemas import DataCollection, ImportResult
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export/{collection}")
async def export_collection(
    collection: DataCollection,
    current_user: ClubUser = Depends(require_permission("export_data")),
    club: ClubContainer = Depends(get_club),
) -> dict:
    exporters = {
        DataCollection.MEMBERS: club.members.export_members,
        DataCollection.PAYMENTS: club.payments.export_payments,
        DataCollection.SESSIONS: club.attendance.export_sessions,
        DataCollection.EQUIPMENT: club.equipment.export_equipment,
        DataCollection.MESSAGES: club.communications.export_messages,
        DataCollection.REMINDERS: club.reminders.export_reminders,
    }
    return exporters[collection]()


@router.post("/import/{collection}", response_model=ImportResult)
async def import_collection(
    collection: DataCollection,
    document: Any = Body(...),
    current_user: ClubUser = Depends(require_permission("manage_backup")),
    club: ClubContainer = Depends(get_club),
):
    """Replace one collection wholesale. Invalid documents change nothing."""
    importers = {
        DataCollection.MEMBERS: club.members.import_members,
        DataCollection.PAYMENTS: club.payments.import_payments,
        DataCollection.SESSIONS: club.attendance.import_sessions,
        DataCollection.EQUIPMENT: club.equipment.import_equipment,
        DataCollection.MESSAGES: club.communications.import_messages,
    }
    if collection not in importers:
        raise ValidationError(
            [f"{collection.value} are derived and cannot be imported"],
            prefix="Invalid import",
        )
    imported = importers[collection](document)
    return ImportResult(collection=collection, imported=imported)
