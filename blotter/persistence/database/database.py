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
"""Contains the batched reads the ingestion path issues against the database.

Lookups are chunked so that a single IN (...) clause never exceeds
|chunk_size| parameters, however large the incoming batch is.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, Type

from more_itertools import chunked
from sqlalchemy import Column, select
from sqlalchemy.ext.asyncio import AsyncSession

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence.database import schema
from blotter.persistence.entities import ROOT_ENTITY_CLASS_BY_KIND

PARENT_TABLE_BY_KIND: Dict[EntityKind, Type[schema.BlotterBase]] = {
    EntityKind.ROSTER_RECORD: schema.JailInmate,
    EntityKind.CAD_CALL: schema.CadCall,
    EntityKind.REGISTRY_ENTRANT: schema.SexOffenderRegistrant,
    EntityKind.BULLETIN_REPORT: schema.DailyBulletinArrest,
    EntityKind.OFFENDER_SUMMARY: schema.OffenderSummary,
    EntityKind.OFFENDER_DETAIL: schema.OffenderDetail,
}


def identity_column(entity_kind: EntityKind) -> Column:
    """Returns the primary key column that stores the identity of |entity_kind|
    records. Parent tables name it after the entity's identity field."""
    table = PARENT_TABLE_BY_KIND[entity_kind].__table__
    return table.c[ROOT_ENTITY_CLASS_BY_KIND[entity_kind].identity_field]


async def read_existing_identities(
    session: AsyncSession,
    entity_kind: EntityKind,
    identities: Iterable[str],
    chunk_size: int,
) -> Set[str]:
    """Returns the subset of |identities| that is already stored for
    |entity_kind|."""
    column = identity_column(entity_kind)
    existing: Set[str] = set()
    for identity_chunk in chunked(sorted(set(identities)), chunk_size):
        result = await session.execute(select(column).where(column.in_(identity_chunk)))
        existing.update(result.scalars().all())

    logging.debug(
        "Found [%s] stored %s identities", len(existing), entity_kind.value
    )
    return existing


async def read_bulletin_candidates(
    session: AsyncSession,
    site_ids: Iterable[str],
    match_fields: Sequence[str],
    chunk_size: int,
) -> List[Mapping[str, Any]]:
    """Returns the stored bulletin rows sharing any of |site_ids|, restricted to
    the row identity, the site id and the |match_fields| used to recognize a
    logical duplicate."""
    table = schema.DailyBulletinArrest.__table__
    columns = [table.c.row_hash, table.c.site_id] + [
        table.c[field] for field in match_fields
    ]
    candidates: List[Mapping[str, Any]] = []
    for site_id_chunk in chunked(sorted(set(site_ids)), chunk_size):
        result = await session.execute(
            select(*columns).where(table.c.site_id.in_(site_id_chunk))
        )
        candidates.extend(dict(row) for row in result.mappings().all())

    logging.debug("Found [%s] logical duplicate candidates", len(candidates))
    return candidates
