"""
Reminder Endpoints
Schedule, list and send deadline reminders
"""
from typing import List

from fastapi import APIRouter, Depends, status

from presentation.api.v1.schemas.reminders import (
    NotifyResponse,
    ReminderRequest,
    ReminderResponse,
)
from presentation.api.v1.container import get_reminder_service
from presentation.api.v1.dependencies import get_current_user
from application.services.reminders import IReminderService
from domain.entities import User


router = APIRouter()


@router.post("/reminders", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def schedule_reminder(
    body: ReminderRequest,
    current_user: User = Depends(get_current_user),
    service: IReminderService = Depends(get_reminder_service),
):
    """Schedule a reminder one lead time before the application's deadline"""
    reminder = await service.schedule_reminder(current_user.id, body.company_id, body.email)
    return ReminderResponse.from_entity(reminder)


@router.get("/reminders", response_model=List[ReminderResponse])
async def list_reminders(
    current_user: User = Depends(get_current_user),
    service: IReminderService = Depends(get_reminder_service),
):
    reminders = await service.list_reminders(current_user.id)
    return [ReminderResponse.from_entity(reminder) for reminder in reminders]


@router.post("/notify", response_model=NotifyResponse)
async def notify(
    body: ReminderRequest,
    current_user: User = Depends(get_current_user),
    service: IReminderService = Depends(get_reminder_service),
):
    """Send a reminder email right away"""
    application = await service.notify_now(current_user.id, body.company_id, body.email)
    return NotifyResponse(
        message=f"Reminder sent for {application.company}",
        company_id=str(application.id),
        recipient=body.email,
    )
