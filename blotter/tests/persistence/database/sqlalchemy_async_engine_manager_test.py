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
"""Tests for SQLAlchemyAsyncEngineManager."""
import unittest
from unittest import mock

from blotter.persistence.database.sqlalchemy_async_engine_manager import (
    SQLAlchemyAsyncEngineManager,
)
from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey


class SQLAlchemyAsyncEngineManagerTest(unittest.IsolatedAsyncioTestCase):
    """Tests for SQLAlchemyAsyncEngineManager."""

    async def asyncTearDown(self) -> None:
        await SQLAlchemyAsyncEngineManager.teardown_async_engines()

    @mock.patch(
        "blotter.persistence.database.sqlalchemy_async_engine_manager.create_async_engine"
    )
    async def test_initAsyncEngine_postgres(self, mock_create_engine: mock.MagicMock) -> None:
        mock_create_engine.return_value = mock.AsyncMock()
        key = SQLAlchemyDatabaseKey(
            db_url="postgresql+asyncpg://user@localhost/blotter",
            command_timeout_seconds=12.0,
        )

        await SQLAlchemyAsyncEngineManager.init_async_engine(key)

        mock_create_engine.assert_called_once_with(
            key.url,
            connect_args={"command_timeout": 12.0},
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            isolation_level="READ COMMITTED",
        )

    @mock.patch(
        "blotter.persistence.database.sqlalchemy_async_engine_manager.create_async_engine"
    )
    async def test_initAsyncEngine_sqlite(self, mock_create_engine: mock.MagicMock) -> None:
        mock_create_engine.return_value = mock.AsyncMock()
        key = SQLAlchemyDatabaseKey(
            db_url="sqlite+aiosqlite:///:memory:", command_timeout_seconds=3.0
        )

        await SQLAlchemyAsyncEngineManager.init_async_engine(key)

        mock_create_engine.assert_called_once_with(
            key.url, connect_args={"timeout": 3.0}
        )

    @mock.patch(
        "blotter.persistence.database.sqlalchemy_async_engine_manager.create_async_engine"
    )
    async def test_getAsyncEngine_cachesPerKey(
        self, mock_create_engine: mock.MagicMock
    ) -> None:
        mock_create_engine.return_value = mock.AsyncMock()
        key = SQLAlchemyDatabaseKey(db_url="sqlite+aiosqlite:///:memory:")

        first = await SQLAlchemyAsyncEngineManager.get_async_engine_for_database(key)
        second = await SQLAlchemyAsyncEngineManager.get_async_engine_for_database(key)

        self.assertIs(first, second)
        mock_create_engine.assert_called_once()

    @mock.patch(
        "blotter.persistence.database.sqlalchemy_async_engine_manager.create_async_engine"
    )
    async def test_initAsyncEngine_twice(self, mock_create_engine: mock.MagicMock) -> None:
        mock_create_engine.return_value = mock.AsyncMock()
        key = SQLAlchemyDatabaseKey(db_url="sqlite+aiosqlite:///:memory:")

        await SQLAlchemyAsyncEngineManager.init_async_engine(key)
        with self.assertRaises(ValueError):
            await SQLAlchemyAsyncEngineManager.init_async_engine(key)
