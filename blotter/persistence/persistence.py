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
"""Contains the entry points for ingesting batches of scraped records.

Every call is bound to exactly one database transaction. Records are
normalized, resolved against stored rows and written inside that transaction,
which commits only after the whole batch has been applied. Any failure rolls
the entire batch back; the caller may safely retry it, since re-ingesting a
committed batch classifies every record as a duplicate.

Ingestion never infers anything from a record's absence in a batch. Batches may
be single pages of a larger scrape, so e.g. an inmate missing from a roster
batch is not marked as released.
"""
import logging
from typing import Any, Dict, List, Sequence

import attr
from sqlalchemy.ext.asyncio import AsyncSession

from blotter.common.constants.entity_kind import EntityKind
from blotter.config.settings import Settings
from blotter.monitoring.context import push_batch_context
from blotter.persistence.bulk_loader import bulk_load
from blotter.persistence.database.async_session_factory import AsyncSessionFactory
from blotter.persistence.database.database import PARENT_TABLE_BY_KIND
from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey
from blotter.persistence.entities import IngestRecord
from blotter.persistence.entity_matching.identity_resolver import IdentityResolver
from blotter.persistence.errors import BatchIngestError
from blotter.persistence.normalizer.record_normalizer import normalize_batch
from blotter.persistence.upsert_executor import UpsertExecutor


@attr.s(frozen=True, kw_only=True)
class BatchResult:
    """Summary of one committed ingestion batch."""

    entity_kind: EntityKind = attr.ib()
    inserted: int = attr.ib(default=0)
    updated: int = attr.ib(default=0)
    skipped: int = attr.ib(default=0)
    # Records dropped by the normalizer before the transaction began.
    rejected: int = attr.ib(default=0)
    # Identities admitted by this batch, in input order.
    inserted_ids: List[str] = attr.ib(factory=list)

    def to_response(self) -> Dict[str, Any]:
        """Returns the result in the shape reported to scrapers for this kind of
        batch."""
        if self.entity_kind in (EntityKind.ROSTER_RECORD, EntityKind.OFFENDER_DETAIL):
            return {"inserted": self.inserted, "updated": self.updated}
        if self.entity_kind is EntityKind.REGISTRY_ENTRANT:
            return {"count": self.inserted + self.updated}
        if self.entity_kind is EntityKind.OFFENDER_SUMMARY:
            return {"inserted": self.inserted, "skipped": self.skipped}
        return {
            "inserted": self.inserted,
            "skipped": self.skipped,
            "insertedIds": list(self.inserted_ids),
        }


class IngestionService:
    """Ingests batches of scraped records into the database identified by
    |database_key|."""

    def __init__(
        self,
        database_key: SQLAlchemyDatabaseKey,
        *,
        logical_match_fields: Sequence[str] = ("name", "time", "key"),
        lookup_chunk_size: int = 1000,
    ):
        self._database_key = database_key
        self._logical_match_fields = tuple(logical_match_fields)
        self._lookup_chunk_size = lookup_chunk_size

    @classmethod
    def from_settings(
        cls, settings: Settings, database_key: SQLAlchemyDatabaseKey
    ) -> "IngestionService":
        return cls(
            database_key,
            logical_match_fields=settings.bulletin_logical_match_fields,
            lookup_chunk_size=settings.lookup_chunk_size,
        )

    async def sync_roster(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.ROSTER_RECORD, raw_records)

    async def ingest_cad_calls(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.CAD_CALL, raw_records)

    async def sync_registrants(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.REGISTRY_ENTRANT, raw_records)

    async def ingest_daily_bulletin(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.BULLETIN_REPORT, raw_records)

    async def ingest_offender_summaries(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.OFFENDER_SUMMARY, raw_records)

    async def sync_offender_details(self, raw_records: Any) -> BatchResult:
        return await self.ingest(EntityKind.OFFENDER_DETAIL, raw_records)

    async def ingest(self, entity_kind: EntityKind, raw_records: Any) -> BatchResult:
        """Normalizes |raw_records| and writes them in a single transaction.

        Raises BatchValidationError if the batch itself is malformed, and
        BatchIngestError if anything fails once the transaction has begun, in
        which case nothing from the batch has been written.
        """
        normalized = normalize_batch(entity_kind, raw_records)
        records = normalized.records

        with push_batch_context(entity_kind.value, len(records)):
            logging.info(
                "Starting ingestion of [%s] %s records ([%s] rejected)",
                len(records),
                entity_kind.value,
                normalized.rejected_count,
            )
            if not records:
                return BatchResult(
                    entity_kind=entity_kind, rejected=normalized.rejected_count
                )

            try:
                async with AsyncSessionFactory.using_database(
                    self._database_key
                ) as session:
                    result = await self._write_batch(session, entity_kind, records)
            except Exception as e:
                logging.exception(
                    "Rolled back batch of [%s] %s records: [%s]",
                    len(records),
                    entity_kind.value,
                    type(e).__name__,
                )
                raise BatchIngestError(entity_kind, len(records), e) from e

            logging.info("Successfully committed %s batch", entity_kind.value)
            return attr.evolve(result, rejected=normalized.rejected_count)

    async def _write_batch(
        self,
        session: AsyncSession,
        entity_kind: EntityKind,
        records: Sequence[IngestRecord],
    ) -> BatchResult:
        resolver = IdentityResolver(
            session,
            logical_match_fields=self._logical_match_fields,
            lookup_chunk_size=self._lookup_chunk_size,
        )
        resolution = await resolver.resolve(entity_kind, records)

        if entity_kind is EntityKind.BULLETIN_REPORT:
            loaded = await bulk_load(
                session, PARENT_TABLE_BY_KIND[entity_kind].__table__, resolution.new
            )
            return BatchResult(
                entity_kind=entity_kind,
                inserted=loaded,
                skipped=resolution.skipped_count,
                inserted_ids=resolution.new_identities,
            )

        counts = await UpsertExecutor(session).apply(entity_kind, resolution)
        return BatchResult(
            entity_kind=entity_kind,
            inserted=counts.inserted,
            updated=counts.updated,
            skipped=counts.skipped,
            inserted_ids=resolution.new_identities,
        )
