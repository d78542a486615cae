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
"""Configures hypercorn.

Run with:
    hypercorn --config file:hypercorn.conf.py "blotter.server:create_app()"
"""
import multiprocessing

bind = ["0.0.0.0:8080"]

# Each worker holds its own connection pool. If we adjust the number of workers
# per cpu upwards, we may have to adjust the number of max connections in our
# postgres instance.
workers = multiprocessing.cpu_count() + 1
# Scrapers post large batches; leave connections open between them.
keep_alive_timeout = 650
loglevel = "info"
accesslog = "-"
