"""Backup history, restore and sync settings."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from libs.auth.dependencies import get_current_user, require_permission
from libs.auth.models import ClubUser
from services.backup_service.models import BackupSummary, SyncSettings
from services.backup_service.schemas import SyncSettingsUpdate
from services.gateway_service.app.container import ClubContainer, get_club

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/history", response_model=list[BackupSummary])
async def get_backup_history(
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    """Backups newest first, without their snapshot data."""
    return club.backups.get_backup_history(current_user)


@router.post("", response_model=BackupSummary, status_code=status.HTTP_201_CREATED)
async def create_backup(
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.backups.create_backup(current_user)


@router.get("/settings", response_model=SyncSettings)
async def get_sync_settings(
    current_user: ClubUser = Depends(require_permission("manage_backup")),
    club: ClubContainer = Depends(get_club),
):
    return club.backups.get_sync_settings()


@router.patch("/settings", response_model=SyncSettings)
async def update_sync_settings(
    payload: SyncSettingsUpdate,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.backups.update_sync_settings(current_user, **payload.model_dump())


@router.get("/{backup_id}/download")
async def download_backup(
    backup_id: uuid.UUID,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
) -> dict:
    """Full backup record including the snapshot, as JSON."""
    return club.backups.export_backup(current_user, backup_id)


@router.post("/{backup_id}/restore", response_model=BackupSummary)
async def restore_backup(
    backup_id: uuid.UUID,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    return club.backups.restore_backup(current_user, backup_id)


@router.delete("/{backup_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_backup(
    backup_id: uuid.UUID,
    current_user: ClubUser = Depends(get_current_user),
    club: ClubContainer = Depends(get_club),
):
    club.backups.delete_backup(current_user, backup_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
