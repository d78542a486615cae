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
"""Tests for create_local_tables.py."""
import os
import tempfile
from unittest import IsolatedAsyncioTestCase, mock

from sqlalchemy import create_engine, inspect

from blotter.persistence.database.schema import BlotterBase
from blotter.tools import create_local_tables


class CreateLocalTablesTest(IsolatedAsyncioTestCase):
    """Tests for create_local_tables.py."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "blotter.db")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    @mock.patch.dict(os.environ, {}, clear=True)
    async def test_createLocalTables(self) -> None:
        await create_local_tables.create_local_tables(
            f"sqlite+aiosqlite:///{self.db_path}"
        )

        engine = create_engine(f"sqlite:///{self.db_path}")
        try:
            table_names = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        self.assertEqual(set(BlotterBase.metadata.tables.keys()), table_names)

    @mock.patch.dict(os.environ, {"BLOTTER_ENV": "production"})
    async def test_createLocalTables_deployed(self) -> None:
        with self.assertRaises(RuntimeError):
            await create_local_tables.create_local_tables(
                f"sqlite+aiosqlite:///{self.db_path}"
            )
        self.assertFalse(os.path.exists(self.db_path))

    def test_createParser(self) -> None:
        args = create_local_tables.create_parser().parse_args(
            ["--database-url", "sqlite+aiosqlite:///blotter.db"]
        )
        self.assertEqual("sqlite+aiosqlite:///blotter.db", args.database_url)
