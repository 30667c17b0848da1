"""
CompanyApplication Repository Implementation
SQLAlchemy-based repository for tracked applications
"""
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from core.clock import ensure_utc, utc_now
from core.exceptions import RepositoryException
from domain.entities import CompanyApplication
from application.repositories.interfaces import ICompanyApplicationRepository
from infrastructure.persistence.models.company_application import CompanyApplicationModel

MUTABLE_FIELDS = (
    "company",
    "role",
    "location",
    "ctc",
    "deadline",
    "oa_date",
    "oa_mode",
    "interview_date",
    "interview_mode",
    "updated_at",
)


class SQLAlchemyCompanyApplicationRepository(ICompanyApplicationRepository):
    """SQLAlchemy implementation of company application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: UUID) -> Optional[CompanyApplication]:
        """Get an application by its ID"""
        try:
            model = await self._get_model(application_id)
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def get_owned(self, application_id: UUID, owner_id: UUID) -> Optional[CompanyApplication]:
        """Get an application only if it belongs to the owner"""
        try:
            result = await self.session.execute(
                select(CompanyApplicationModel).where(
                    and_(
                        CompanyApplicationModel.id == application_id,
                        CompanyApplicationModel.owner_id == owner_id,
                    )
                )
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to get application {application_id} for {owner_id}: {str(e)}")
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def list_by_owner(self, owner_id: UUID) -> List[CompanyApplication]:
        """Get all applications of a user, nearest deadline first"""
        try:
            result = await self.session.execute(
                select(CompanyApplicationModel)
                .where(CompanyApplicationModel.owner_id == owner_id)
                .order_by(CompanyApplicationModel.deadline.asc(), CompanyApplicationModel.created_at.asc())
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except SQLAlchemyError as e:
            logger.error(f"Failed to list applications for {owner_id}: {str(e)}")
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    async def create(self, application: CompanyApplication) -> CompanyApplication:
        """Create a new application"""
        try:
            created_at = application.created_at or utc_now()
            fields = {name: getattr(application, name) for name in MUTABLE_FIELDS}
            fields["updated_at"] = application.updated_at or created_at
            model = CompanyApplicationModel(
                id=application.id,
                owner_id=application.owner_id,
                created_at=created_at,
                **fields,
            )
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except SQLAlchemyError as e:
            logger.error(f"Failed to create application for {application.owner_id}: {str(e)}")
            raise RepositoryException(f"Failed to create application: {str(e)}")

    async def update(self, application: CompanyApplication) -> Optional[CompanyApplication]:
        """Update an existing application"""
        try:
            model = await self._get_model(application.id)
            if not model:
                return None

            for name in MUTABLE_FIELDS:
                setattr(model, name, getattr(application, name))
            model.updated_at = application.updated_at or utc_now()
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except SQLAlchemyError as e:
            logger.error(f"Failed to update application {application.id}: {str(e)}")
            raise RepositoryException(f"Failed to update application: {str(e)}")

    async def delete_owned(self, application_id: UUID, owner_id: UUID) -> bool:
        """Delete an application if it belongs to the owner"""
        try:
            result = await self.session.execute(
                select(CompanyApplicationModel).where(
                    and_(
                        CompanyApplicationModel.id == application_id,
                        CompanyApplicationModel.owner_id == owner_id,
                    )
                )
            )
            model = result.scalar_one_or_none()
            if not model:
                return False

            await self.session.delete(model)
            await self.session.flush()
            return True

        except SQLAlchemyError as e:
            logger.error(f"Failed to delete application {application_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete application: {str(e)}")

    async def _get_model(self, application_id: UUID) -> Optional[CompanyApplicationModel]:
        result = await self.session.execute(
            select(CompanyApplicationModel).where(CompanyApplicationModel.id == application_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: CompanyApplicationModel) -> CompanyApplication:
        return CompanyApplication(
            id=model.id,
            owner_id=model.owner_id,
            company=model.company,
            role=model.role,
            location=model.location,
            ctc=model.ctc,
            deadline=ensure_utc(model.deadline),
            oa_date=ensure_utc(model.oa_date),
            oa_mode=model.oa_mode,
            interview_date=ensure_utc(model.interview_date),
            interview_mode=model.interview_mode,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
