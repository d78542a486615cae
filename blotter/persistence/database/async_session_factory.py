# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2026 Recidiviz, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""
Class for generating SQLAlchemy AsyncSessions objects for a database.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from blotter.persistence.database.sqlalchemy_async_engine_manager import (
    SQLAlchemyAsyncEngineManager,
)
from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey


class AsyncSessionFactory:
    """Creates SQLAlchemy AsyncSessions for the given database"""

    @classmethod
    @asynccontextmanager
    async def using_database(
        cls,
        database_key: SQLAlchemyDatabaseKey,
        *,
        autocommit: bool = True,
    ) -> AsyncIterator[AsyncSession]:
        session = None
        try:
            session = await cls._for_database(database_key=database_key)
            yield session
            if autocommit:
                try:
                    await session.commit()
                except Exception as e:
                    await session.rollback()
                    raise e
        finally:
            if session:
                await session.close()

    @classmethod
    async def _for_database(cls, database_key: SQLAlchemyDatabaseKey) -> AsyncSession:
        engine = await SQLAlchemyAsyncEngineManager.get_async_engine_for_database(
            database_key=database_key
        )
        if engine is None:
            raise ValueError(f"No engine set for key [{database_key}]")

        session = AsyncSession(bind=engine, expire_on_commit=False)
        return session
