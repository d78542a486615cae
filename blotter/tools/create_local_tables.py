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
"""Creates the ingestion tables in a local development database.

Deployed databases are managed by migrations; this script refuses to run on a
deployed instance.

Usage:
    python -m blotter.tools.create_local_tables \
        --database-url postgresql+asyncpg://localhost/blotter
"""
import argparse
import asyncio
import logging

from blotter.persistence.database.schema import BlotterBase
from blotter.persistence.database.sqlalchemy_async_engine_manager import (
    SQLAlchemyAsyncEngineManager,
)
from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey
from blotter.utils import environment


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--database-url",
        required=True,
        help="SQLAlchemy async URL of the local database.",
    )
    return parser


@environment.local_only
async def create_local_tables(database_url: str) -> None:
    database_key = SQLAlchemyDatabaseKey(db_url=database_url)
    engine = await SQLAlchemyAsyncEngineManager.init_async_engine(database_key)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(BlotterBase.metadata.create_all)
        logging.info("Created [%s] tables", len(BlotterBase.metadata.sorted_tables))
    finally:
        await SQLAlchemyAsyncEngineManager.teardown_async_engines()


if __name__ == "__main__":
    logging.getLogger().setLevel(logging.INFO)
    args = create_parser().parse_args()
    asyncio.run(create_local_tables(args.database_url))
