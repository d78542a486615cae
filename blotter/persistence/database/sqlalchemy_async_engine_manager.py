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
"""A class to manage all SQLAlchemy AsyncEngines for our database instances."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey


class SQLAlchemyAsyncEngineManager:
    """An async class to manage all SQLAlchemy Engines for our database instances."""

    _async_engine_for_database: Dict[SQLAlchemyDatabaseKey, AsyncEngine] = {}

    @classmethod
    def _connect_args_for_database(
        cls, database_key: SQLAlchemyDatabaseKey
    ) -> Dict[str, Any]:
        """Returns driver-specific connect args that apply the per-command
        timeout."""
        driver = database_key.url.get_driver_name()
        if driver == "asyncpg":
            return {"command_timeout": database_key.command_timeout_seconds}
        if driver == "aiosqlite":
            return {"timeout": database_key.command_timeout_seconds}
        return {}

    @classmethod
    async def init_async_engine(
        cls,
        database_key: SQLAlchemyDatabaseKey,
        **dialect_specific_kwargs: Any,
    ) -> AsyncEngine:
        """Initializes an asynchronous SQLAlchemy Engine object for the given database
        and caches it for future use."""
        if database_key in cls._async_engine_for_database:
            raise ValueError(f"Already initialized async database [{database_key}]")

        additional_kwargs: Dict[str, Any] = {}
        if database_key.pool_configuration:
            additional_kwargs["pool_size"] = database_key.pool_configuration.pool_size
            additional_kwargs[
                "max_overflow"
            ] = database_key.pool_configuration.max_overflow
            additional_kwargs[
                "pool_timeout"
            ] = database_key.pool_configuration.pool_timeout
        if database_key.isolation_level:
            additional_kwargs["isolation_level"] = database_key.isolation_level

        connect_args = cls._connect_args_for_database(database_key)
        connect_args.update(dialect_specific_kwargs.pop("connect_args", {}))
        additional_kwargs.update(dialect_specific_kwargs)

        try:
            engine = create_async_engine(
                database_key.url,
                connect_args=connect_args,
                **additional_kwargs,
            )
        except BaseException as e:
            logging.error(
                "Unable to create engine for [%s]: %s",
                database_key.url.render_as_string(hide_password=True),
                str(e),
            )

            raise e

        cls._async_engine_for_database[database_key] = engine
        return engine

    @classmethod
    async def get_async_engine_for_database(
        cls,
        database_key: SQLAlchemyDatabaseKey,
    ) -> Optional[AsyncEngine]:
        """Retrieve the async engine for a given database.

        Will attempt to create the engine if it does not already exist."""
        if database_key not in cls._async_engine_for_database:
            await cls.init_async_engine(database_key=database_key)
        return cls._async_engine_for_database.get(database_key, None)

    @classmethod
    async def teardown_async_engines(cls) -> None:
        for engine in cls._async_engine_for_database.values():
            await engine.dispose()
        cls._async_engine_for_database.clear()
