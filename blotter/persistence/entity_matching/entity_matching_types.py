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
"""Contains types used throughout identity resolution."""
import enum
from typing import List

import attr

from blotter.persistence.entities import IngestRecord


@enum.unique
class MatchClassification(enum.Enum):
    # No stored or earlier in-batch record shares the identity or content.
    NEW = "NEW"
    # The identity is already stored, or appeared earlier in the same batch.
    EXACT_DUPLICATE = "EXACT_DUPLICATE"
    # The identity differs, but the defining content matches a stored row with
    # the same site identifier.
    LOGICAL_DUPLICATE = "LOGICAL_DUPLICATE"


@attr.s(frozen=True, kw_only=True)
class ClassifiedRecord:
    record: IngestRecord = attr.ib()
    classification: MatchClassification = attr.ib()

    @property
    def is_new(self) -> bool:
        return self.classification is MatchClassification.NEW


@attr.s(frozen=True, kw_only=True)
class ResolutionResult:
    """
    Object that contains output for identity resolution
    - classified: Every record of the batch, in input order, with its
        classification.
    """

    classified: List[ClassifiedRecord] = attr.ib(factory=list)

    def _records_classified_as(
        self, classification: MatchClassification
    ) -> List[IngestRecord]:
        return [c.record for c in self.classified if c.classification is classification]

    @property
    def new(self) -> List[IngestRecord]:
        return self._records_classified_as(MatchClassification.NEW)

    @property
    def exact_duplicates(self) -> List[IngestRecord]:
        return self._records_classified_as(MatchClassification.EXACT_DUPLICATE)

    @property
    def logical_duplicates(self) -> List[IngestRecord]:
        return self._records_classified_as(MatchClassification.LOGICAL_DUPLICATE)

    @property
    def new_identities(self) -> List[str]:
        """Identities admitted by this batch, in input order."""
        return [record.get_identity() for record in self.new]

    @property
    def skipped_count(self) -> int:
        return len(self.classified) - len(self.new)
