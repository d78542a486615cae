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
"""
Application settings for the ingestion service.

To use, instantiate Settings. Values are read from BLOTTER_-prefixed environment
variables, e.g. BLOTTER_DATABASE_URL.
"""

from typing import Literal, Optional, Tuple

import attr
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blotter.persistence.entities import BulletinReport
from blotter.utils.environment import is_deployed

# For classes w/ Pydantic, define all fields as class attributes with type hints
# and a either a default value or Field(...).


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BLOTTER_")

    database_url: str = Field(
        ..., description="SQLAlchemy async URL, e.g. postgresql+asyncpg://..."
    )
    command_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on any single database command issued by ingest.",
    )
    lookup_chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Max number of identities bound into one IN (...) lookup.",
    )


class MatchingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BLOTTER_")

    # Heuristic fields compared when deciding whether a bulletin row with a new
    # row hash is the same event as a stored row under the same site id.
    bulletin_logical_match_fields: Tuple[str, ...] = Field(
        default=("name", "time", "key")
    )

    @field_validator("bulletin_logical_match_fields")
    @classmethod
    def _non_empty_match_fields(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if not value:
            raise ValueError("At least one logical match field is required.")
        unknown = set(value) - set(attr.fields_dict(BulletinReport))
        if unknown:
            raise ValueError(f"Unknown bulletin report fields: {sorted(unknown)}")
        return value


class Settings(DatabaseSettings, MatchingSettings):
    """Application settings for the ingestion service."""

    api_key: Optional[str] = Field(default=None)
    # Errors from the HTTP surface are reported to Sentry when this is set.
    sentry_dsn: Optional[str] = Field(default=None)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default_factory=lambda: "INFO" if is_deployed() else "DEBUG"
    )
