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
"""Endpoints scrapers call to submit batches of records.

Each route unwraps the batch from the request body and hands it to the
IngestionService; all normalization, matching and writing happens there.
"""
import logging
from http import HTTPStatus
from typing import Any, Optional

import sentry_sdk
from quart import Blueprint, Response, current_app, jsonify, request

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence.errors import BatchIngestError, BatchValidationError
from blotter.persistence.persistence import IngestionService

# Config key under which the app stores its IngestionService.
INGESTION_SERVICE_CONFIG_KEY = "BLOTTER_INGESTION_SERVICE"

ingestion_blueprint = Blueprint("ingestion", __name__)


def _error(message: str, status: HTTPStatus) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    return response


def _ingestion_service() -> IngestionService:
    return current_app.config[INGESTION_SERVICE_CONFIG_KEY]


def _get_case_insensitive(body: Any, key: str) -> Any:
    """Returns the value of |key| in the request object, matching the key
    without regard to case (scrapers send both 'Inmates' and 'inmates')."""
    if not isinstance(body, dict):
        raise BatchValidationError(
            f"Expected a JSON object wrapping [{key}], found {type(body).__name__}"
        )
    for body_key, value in body.items():
        if str(body_key).lower() == key.lower():
            return value
    return None


async def _request_json() -> Any:
    body = await request.get_json(force=True, silent=True)
    if body is None and await request.get_data():
        raise BatchValidationError("Request body is not valid JSON")
    return body


async def _ingest(entity_kind: EntityKind, raw_records: Optional[Any]) -> Response:
    try:
        result = await _ingestion_service().ingest(
            entity_kind, [] if raw_records is None else raw_records
        )
    except BatchValidationError as e:
        return _error(str(e), HTTPStatus.BAD_REQUEST)
    except BatchIngestError as e:
        sentry_sdk.set_context("ingest_batch", e.context())
        sentry_sdk.capture_exception(e)
        return _error(str(e), HTTPStatus.INTERNAL_SERVER_ERROR)
    return jsonify(result.to_response())


async def _ingest_wrapped(entity_kind: EntityKind, key: str) -> Response:
    try:
        raw_records = _get_case_insensitive(await _request_json(), key)
    except BatchValidationError as e:
        return _error(str(e), HTTPStatus.BAD_REQUEST)
    return await _ingest(entity_kind, raw_records)


async def _ingest_unwrapped(entity_kind: EntityKind) -> Response:
    try:
        raw_records = await _request_json()
    except BatchValidationError as e:
        return _error(str(e), HTTPStatus.BAD_REQUEST)
    return await _ingest(entity_kind, raw_records)


@ingestion_blueprint.route("/jail/sync", methods=["POST"])
async def sync_jail() -> Response:
    """Upserts a batch of jail roster records, posted as {"inmates": [...]}."""
    try:
        inmates = _get_case_insensitive(await _request_json(), "inmates")
    except BatchValidationError as e:
        return _error(str(e), HTTPStatus.BAD_REQUEST)
    if not inmates:
        logging.warning("Received jail sync with no inmates")
        return _error("No data provided", HTTPStatus.BAD_REQUEST)
    return await _ingest(EntityKind.ROSTER_RECORD, inmates)


@ingestion_blueprint.route("/recent-calls/batch", methods=["POST"])
async def batch_recent_calls() -> Response:
    """Inserts the unseen calls of a batch posted as {"calls": [...]}."""
    return await _ingest_wrapped(EntityKind.CAD_CALL, "calls")


@ingestion_blueprint.route("/sex-offenders/batch", methods=["POST"])
async def batch_sex_offenders() -> Response:
    """Upserts a batch of registrants posted as {"registrants": [...]}."""
    return await _ingest_wrapped(EntityKind.REGISTRY_ENTRANT, "registrants")


@ingestion_blueprint.route("/daily-bulletin/batch", methods=["POST"])
async def batch_daily_bulletin() -> Response:
    return await _ingest_unwrapped(EntityKind.BULLETIN_REPORT)


@ingestion_blueprint.route("/doc/batch-summary", methods=["POST"])
async def batch_offender_summaries() -> Response:
    return await _ingest_unwrapped(EntityKind.OFFENDER_SUMMARY)


@ingestion_blueprint.route("/doc/batch-details", methods=["POST"])
async def batch_offender_details() -> Response:
    return await _ingest_unwrapped(EntityKind.OFFENDER_DETAIL)
