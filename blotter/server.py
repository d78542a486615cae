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
"""Entrypoint for the ingestion API server."""
import logging
from typing import Optional

import sentry_sdk
from quart import Quart, Response, jsonify
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.quart import QuartIntegration

from blotter.config.settings import Settings
from blotter.ingest.ingestion_endpoint import (
    INGESTION_SERVICE_CONFIG_KEY,
    ingestion_blueprint,
)
from blotter.persistence.database.sqlalchemy_async_engine_manager import (
    SQLAlchemyAsyncEngineManager,
)
from blotter.persistence.database.sqlalchemy_database_key import SQLAlchemyDatabaseKey
from blotter.persistence.persistence import IngestionService
from blotter.utils import structured_logging
from blotter.utils.auth.api_key import API_KEY_CONFIG_KEY, validate_api_key
from blotter.utils.environment import get_deployed_environment


def create_app(settings: Optional[Settings] = None) -> Quart:
    """Builds the API app. Settings are read from the environment when not
    given."""
    if settings is None:
        settings = Settings()

    structured_logging.setup(settings.log_level)

    if settings.sentry_dsn:
        # pylint: disable=abstract-class-instantiated
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=get_deployed_environment(),
            integrations=[QuartIntegration(), AsyncioIntegration()],
        )

    database_key = SQLAlchemyDatabaseKey.from_settings(settings)

    app = Quart(__name__)
    app.config[API_KEY_CONFIG_KEY] = settings.api_key
    app.config[INGESTION_SERVICE_CONFIG_KEY] = IngestionService.from_settings(
        settings, database_key
    )

    app.before_request(validate_api_key)
    app.register_blueprint(ingestion_blueprint, url_prefix="/api/ingestion")

    @app.route("/health", methods=["GET"])
    async def health() -> Response:
        return jsonify({"status": "healthy"})

    @app.before_serving
    async def init_engine() -> None:
        await SQLAlchemyAsyncEngineManager.get_async_engine_for_database(database_key)
        logging.info("Initialized database engine for %s", database_key)

    @app.after_serving
    async def dispose_engines() -> None:
        await SQLAlchemyAsyncEngineManager.teardown_async_engines()

    return app
