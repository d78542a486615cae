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
"""Packaging for the blotter ingestion service.

REQUIRED_PACKAGES are the external packages the service imports at runtime.
Test-only packages live in the "test" extra.
"""
import setuptools

REQUIRED_PACKAGES = [
    "attrs",
    "dateparser",
    "hypercorn",
    "more-itertools",
    "opentelemetry-api",
    "pydantic>=2",
    "pydantic-settings>=2",
    "quart",
    "sentry-sdk[quart]",
    # 2.x is required for the async engine and session APIs.
    "SQLAlchemy[asyncio]>=2.0",
    # Driver for the deployed Postgres database.
    "asyncpg",
]

TEST_PACKAGES = [
    # Driver for the in-memory databases tests run against.
    "aiosqlite",
    "pytest",
]

setuptools.setup(
    name="blotter",
    version="1.0.0",
    python_requires=">=3.9",
    install_requires=REQUIRED_PACKAGES,
    extras_require={"test": TEST_PACKAGES},
    packages=setuptools.find_packages(include=["blotter", "blotter.*"]),
)
