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

"""Enumerates the kinds of scraped records that can be ingested."""
import enum


@enum.unique
class EntityKind(enum.Enum):
    """The kind of record carried by an ingestion batch. Every batch holds records
    of exactly one kind."""

    ROSTER_RECORD = "ROSTER_RECORD"
    CAD_CALL = "CAD_CALL"
    REGISTRY_ENTRANT = "REGISTRY_ENTRANT"
    BULLETIN_REPORT = "BULLETIN_REPORT"
    OFFENDER_SUMMARY = "OFFENDER_SUMMARY"
    OFFENDER_DETAIL = "OFFENDER_DETAIL"

    @property
    def supports_logical_matching(self) -> bool:
        """True if records of this kind may be matched to stored rows by their
        defining content when their identity differs."""
        return self is EntityKind.BULLETIN_REPORT

    @property
    def updates_on_resighting(self) -> bool:
        """True if a record whose identity is already stored should overwrite the
        stored attributes, rather than being skipped as a duplicate."""
        return self in (
            EntityKind.ROSTER_RECORD,
            EntityKind.REGISTRY_ENTRANT,
            EntityKind.OFFENDER_DETAIL,
        )
