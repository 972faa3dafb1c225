"""SQLAlchemy repository for the initialization gate record"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.app_state import AppState as AppStateORM, INITIALIZATION_KEY
from app.db.session import get_session_factory
from app.features.initialization.domain import AppInitialization

logger = logging.getLogger(__name__)


class AppStateRepository:
    """Repository for the app_state singleton rows"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def get_initialization(self) -> Optional[AppInitialization]:
        """Read the gate record, None if it was never written"""
        stmt = select(AppStateORM).where(AppStateORM.id == INITIALIZATION_KEY)
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()

        if row is None:
            return None

        return AppInitialization.model_validate(row)

    async def claim_initialization(self, initialized_by: str) -> bool:
        """
        Write the gate record unless it already says initialized.

        Single conditional upsert: a row that exists with initialized=false
        is taken over, an initialized row is left alone. Of two concurrent
        initializers exactly one gets True.

        Returns:
            True if this call wrote the record, False if it was already there
        """
        values = {
            "initialized": True,
            "initialized_at": datetime.now(timezone.utc),
            "initialized_by": initialized_by,
        }
        stmt = (
            insert(AppStateORM)
            .values(id=INITIALIZATION_KEY, **values)
            .on_conflict_do_update(
                index_elements=[AppStateORM.id],
                set_=values,
                where=AppStateORM.initialized.is_(False),
            )
            .returning(AppStateORM.id)
        )
        result = await self.db.execute(stmt)
        claimed = result.scalar_one_or_none() is not None
        await self.db.commit()

        if not claimed:
            logger.warning("Initialization record already exists; claim rejected")
        return claimed

    async def release_initialization(self) -> None:
        """Reset a claimed gate record so initialization can be retried"""
        stmt = (
            update(AppStateORM)
            .where(AppStateORM.id == INITIALIZATION_KEY)
            .values(initialized=False, initialized_by=None)
        )
        await self.db.execute(stmt)
        await self.db.commit()
        logger.warning("Initialization claim released")


async def read_initialization_record() -> Optional[AppInitialization]:
    """Read the gate record in a short-lived session (used outside request scope)"""
    async with get_session_factory()() as session:
        return await AppStateRepository(session).get_initialization()
