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
"""Classifies each record of an ingestion batch as new, an exact duplicate of a
known identity, or a logical duplicate of a stored row.

Resolution reads the database through the session of the batch's transaction
and never writes. Stored identities are fetched with one batched lookup per
batch rather than per record.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Sequence, Set

from sqlalchemy.ext.asyncio import AsyncSession

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence.database import database
from blotter.persistence.entities import BulletinReport, IngestRecord
from blotter.persistence.entity_matching.entity_matching_types import (
    ClassifiedRecord,
    MatchClassification,
    ResolutionResult,
)
from blotter.persistence.entity_matching.entity_matching_utils import (
    is_logical_match,
)


class IdentityResolver:
    """Resolves the records of one batch against stored rows.

    Records are classified in input order. Once a record is classified as new,
    its identity (and, for bulletin reports, its defining content) is known to
    the resolver, so later records of the same batch are caught as duplicates of
    it.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        logical_match_fields: Sequence[str],
        lookup_chunk_size: int,
    ):
        self._session = session
        self._logical_match_fields = tuple(logical_match_fields)
        self._lookup_chunk_size = lookup_chunk_size

    async def resolve(
        self, entity_kind: EntityKind, records: Sequence[IngestRecord]
    ) -> ResolutionResult:
        if not records:
            return ResolutionResult(classified=[])

        known_identities = await database.read_existing_identities(
            self._session,
            entity_kind,
            (record.get_identity() for record in records),
            self._lookup_chunk_size,
        )

        candidates_by_site_id: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)
        if entity_kind.supports_logical_matching:
            candidates_by_site_id = await self._read_candidates_by_site_id(records)

        classified = []
        for record in records:
            classification = self._classify(
                entity_kind, record, known_identities, candidates_by_site_id
            )
            if classification is MatchClassification.NEW:
                known_identities.add(record.get_identity())
                if entity_kind.supports_logical_matching:
                    self._add_candidate(record, candidates_by_site_id)
            classified.append(
                ClassifiedRecord(record=record, classification=classification)
            )

        result = ResolutionResult(classified=classified)
        logging.info(
            "Resolved [%s] %s records: [%s] new, [%s] exact duplicates, "
            "[%s] logical duplicates",
            len(records),
            entity_kind.value,
            len(result.new),
            len(result.exact_duplicates),
            len(result.logical_duplicates),
        )
        return result

    def _classify(
        self,
        entity_kind: EntityKind,
        record: IngestRecord,
        known_identities: Set[str],
        candidates_by_site_id: Mapping[str, List[Mapping[str, Any]]],
    ) -> MatchClassification:
        if record.get_identity() in known_identities:
            return MatchClassification.EXACT_DUPLICATE

        if entity_kind.supports_logical_matching and isinstance(record, BulletinReport):
            if record.site_id is not None and any(
                is_logical_match(candidate, record, self._logical_match_fields)
                for candidate in candidates_by_site_id.get(record.site_id, [])
            ):
                return MatchClassification.LOGICAL_DUPLICATE

        return MatchClassification.NEW

    async def _read_candidates_by_site_id(
        self, records: Sequence[IngestRecord]
    ) -> Dict[str, List[Mapping[str, Any]]]:
        site_ids = {
            record.site_id
            for record in records
            if isinstance(record, BulletinReport) and record.site_id is not None
        }
        candidates_by_site_id: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)
        if not site_ids:
            return candidates_by_site_id

        candidates = await database.read_bulletin_candidates(
            self._session,
            site_ids,
            self._logical_match_fields,
            self._lookup_chunk_size,
        )
        for candidate in candidates:
            candidates_by_site_id[candidate["site_id"]].append(candidate)
        return candidates_by_site_id

    def _add_candidate(
        self,
        record: IngestRecord,
        candidates_by_site_id: Dict[str, List[Mapping[str, Any]]],
    ) -> None:
        if not isinstance(record, BulletinReport) or record.site_id is None:
            return
        candidates_by_site_id[record.site_id].append(
            {field: getattr(record, field) for field in self._logical_match_fields}
        )
