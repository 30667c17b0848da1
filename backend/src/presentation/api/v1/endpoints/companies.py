"""
Company Application Endpoints
/api/v1/companies routes; every route is scoped to the caller
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from presentation.api.v1.schemas.companies import (
    CompanyCreateRequest,
    CompanyResponse,
    CompanyUpdateRequest,
)
from presentation.api.v1.container import get_application_tracking_service
from presentation.api.v1.dependencies import get_current_user
from application.services.application_tracking import IApplicationTrackingService
from domain.entities import User


router = APIRouter()


@router.get("/companies", response_model=List[CompanyResponse])
async def list_companies(
    current_user: User = Depends(get_current_user),
    service: IApplicationTrackingService = Depends(get_application_tracking_service),
):
    """The caller's applications, nearest deadline first"""
    applications = await service.list_applications(current_user.id)
    return [CompanyResponse.from_entity(application) for application in applications]


@router.post("/companies", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    body: CompanyCreateRequest,
    current_user: User = Depends(get_current_user),
    service: IApplicationTrackingService = Depends(get_application_tracking_service),
):
    """Create an application, scheduling a reminder when reminder_email is given"""
    application, reminder = await service.create_application(
        current_user.id,
        body.details(),
        reminder_email=body.reminder_email,
    )
    return CompanyResponse.from_entity(
        application,
        reminder_id=str(reminder.id) if reminder else None,
    )


@router.get("/companies/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    service: IApplicationTrackingService = Depends(get_application_tracking_service),
):
    application = await service.get_application(current_user.id, company_id)
    return CompanyResponse.from_entity(application)


@router.put("/companies/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: UUID,
    body: CompanyUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: IApplicationTrackingService = Depends(get_application_tracking_service),
):
    """Partial update; omitted fields keep their values"""
    application = await service.update_application(current_user.id, company_id, body.changes())
    return CompanyResponse.from_entity(application)


@router.delete("/companies/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    service: IApplicationTrackingService = Depends(get_application_tracking_service),
):
    await service.delete_application(current_user.id, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
