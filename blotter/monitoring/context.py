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
"""Helpers for attaching attributes to the current OpenTelemetry context."""
from collections import deque
from contextlib import contextmanager
from typing import Dict, Generator, List, Optional, Tuple, Union

from opentelemetry import context
from opentelemetry.baggage import set_baggage
from opentelemetry.context import Context

from blotter.monitoring.keys import AttributeKey


@contextmanager
def push_monitoring_context(
    *args: Union[str, object, Dict[str, object]],
    current_context: Optional[Context] = None
) -> Generator[None, None, None]:
    """
    Adds attributes to the current OpenTelemetry context for the duration of this
    block. They can be read elsewhere (including from awaited coroutines) with a
    call to OpenTelemetry's get_baggage function.
    """

    name_value_pairs: List[Tuple[str, object]] = []
    args_queue = deque(args)
    while args_queue:
        arg = args_queue.popleft()

        if isinstance(arg, str):
            name_value_pairs.append((arg, args_queue.popleft()))
        elif isinstance(arg, dict):
            name_value_pairs.extend(list(arg.items()))
        else:
            raise ValueError(
                "Incorrect call signature; pass evenly matched name/value pairs, or dicts"
            )

    tokens = [
        context.attach(set_baggage(name, value, context=current_context))
        for name, value in name_value_pairs
    ]

    try:
        yield
    finally:
        for token in reversed(tokens):
            context.detach(token)


@contextmanager
def push_batch_context(
    entity_kind: str, batch_size: int
) -> Generator[None, None, None]:
    with push_monitoring_context(
        {
            AttributeKey.ENTITY_KIND: entity_kind,
            AttributeKey.BATCH_SIZE: batch_size,
        }
    ):
        yield
