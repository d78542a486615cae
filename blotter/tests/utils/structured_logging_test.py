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
"""Tests for structured_logging.py."""
import logging
from unittest import TestCase

from blotter.monitoring.context import push_batch_context
from blotter.utils import structured_logging


class TestStructuredLogging(TestCase):
    """Tests that log records carry the batch being ingested."""

    def setUp(self) -> None:
        self.original_factory = logging.getLogRecordFactory()
        logging.setLogRecordFactory(structured_logging.ContextualLogRecord)

    def tearDown(self) -> None:
        logging.setLogRecordFactory(self.original_factory)

    def test_recordsCarryBatchContext(self) -> None:
        with push_batch_context("CAD_CALL", 12):
            with self.assertLogs(level="INFO") as logs:
                logging.info("inside batch")

        record = logs.records[0]
        self.assertEqual("CAD_CALL", getattr(record, "entity_kind"))
        self.assertEqual("12", getattr(record, "batch_size"))

    def test_contextIsResetAfterBatch(self) -> None:
        with push_batch_context("CAD_CALL", 12):
            pass

        with self.assertLogs(level="INFO") as logs:
            logging.info("outside batch")

        self.assertEqual("None", getattr(logs.records[0], "entity_kind"))
