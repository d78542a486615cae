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
"""Configures logging setup."""

import logging
import sys
from types import TracebackType
from typing import Any, Optional, Tuple, Type, Union

from opentelemetry.baggage import get_baggage

from blotter.monitoring.keys import AttributeKey


class ContextualLogRecord(logging.LogRecord):
    """Fetches context from when the record was produced and adds it to the record.

    This must happen when the record is produced, not during formatting or emitting
    as those may happen asynchronously on a separate thread with different
    context.
    """

    # pylint: disable=too-many-positional-arguments
    def __init__(
        self,
        name: str,
        level: int,
        pathname: str,
        lineno: int,
        msg: str,
        args: Tuple[Any, ...],
        exc_info: Union[
            Tuple[Type[BaseException], BaseException, Optional[TracebackType]],
            Tuple[None, None, None],
            None,
        ],
        func: Optional[str] = None,
        sinfo: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            name,
            level,
            pathname,
            lineno,
            msg,
            args,
            exc_info,
            func=func,
            sinfo=sinfo,
            # Skip kwargs, they are unused and mypy complains.
        )

        self.entity_kind = str(get_baggage(AttributeKey.ENTITY_KIND))
        self.batch_size = str(get_baggage(AttributeKey.BATCH_SIZE))


_LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] "
    "[kind=%(entity_kind)s size=%(batch_size)s] %(message)s"
)

_STDOUT_HANDLER_NAME = "blotter_stdout"


def setup(level: str = "INFO") -> None:
    """Setup logging"""
    logging.setLogRecordFactory(ContextualLogRecord)
    logger = logging.getLogger()

    # Streams logs to stdout, where the hosting platform collects them.
    if not any(h.get_name() == _STDOUT_HANDLER_NAME for h in logger.handlers):
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.set_name(_STDOUT_HANDLER_NAME)
        stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(stdout_handler)
    logger.setLevel(level)
