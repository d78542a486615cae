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
"""Contains errors for the persistence directory."""
from typing import Any, Dict

from blotter.common.constants.entity_kind import EntityKind


class PersistenceError(Exception):
    """Raised when an error with the persistence layer is encountered."""


class RecordValidationError(PersistenceError):
    """Raised when a single scraped record cannot be normalized, e.g. because it
    is missing the fields that define its identity."""

    def __init__(self, msg: str, entity_kind: EntityKind, raw_record: Any):
        self.entity_kind = entity_kind
        self.raw_record = raw_record
        super().__init__(f"Invalid {entity_kind.value} record: {msg}")


class BatchValidationError(PersistenceError):
    """Raised when an ingestion batch as a whole is malformed (e.g. it is not a
    list of objects). Nothing in the batch is written."""


class BatchIngestError(PersistenceError):
    """Raised when an ingestion batch failed inside its transaction and was rolled
    back in full. The caller should treat none of the batch as applied and may
    retry the entire batch."""

    def __init__(self, entity_kind: EntityKind, batch_size: int, cause: Exception):
        self.entity_kind = entity_kind
        self.batch_size = batch_size
        super().__init__(
            f"Failed to ingest batch of [{batch_size}] {entity_kind.value} records: "
            f"{type(cause).__name__}: {cause}"
        )

    def context(self) -> Dict[str, Any]:
        return {"entity_kind": self.entity_kind.value, "batch_size": self.batch_size}
