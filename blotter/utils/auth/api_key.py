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
"""Shared-secret authorization for the ingestion API."""
import hmac
import logging
from http import HTTPStatus
from typing import Optional

from quart import Response, current_app, jsonify, request

API_KEY_HEADER = "X-API-KEY"

# Config key under which the app stores the expected API key.
API_KEY_CONFIG_KEY = "BLOTTER_API_KEY"

PROTECTED_PATH_PREFIX = "/api/"


def _error(message: str, status: HTTPStatus) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    return response


async def validate_api_key() -> Optional[Response]:
    """Rejects requests to the API that do not carry the configured API key.

    A missing header is unauthenticated (401). A wrong key, or a server with no
    key configured at all, is forbidden (403).
    """
    # OPTIONS requests do not require authentication
    if request.method == "OPTIONS":
        return None

    if not request.path.startswith(PROTECTED_PATH_PREFIX):
        return None

    provided_key = request.headers.get(API_KEY_HEADER)
    if provided_key is None:
        return _error("API Key was not provided.", HTTPStatus.UNAUTHORIZED)

    expected_key = current_app.config.get(API_KEY_CONFIG_KEY)
    if not expected_key:
        logging.error(
            "Rejecting request to [%s]: no API key is configured", request.path
        )
        return _error("Unauthorized client.", HTTPStatus.FORBIDDEN)

    if not hmac.compare_digest(provided_key.encode(), expected_key.encode()):
        return _error("Unauthorized client.", HTTPStatus.FORBIDDEN)

    return None
