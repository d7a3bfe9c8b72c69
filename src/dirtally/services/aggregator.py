# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Callable, Optional

from ..domain.models import ScanOutcome, Totals, TotalsSnapshot
from .cancellation import CancellationSignal
from .stream import SizeEventStream

logger = logging.getLogger(__name__)

TotalsCallback = Callable[[TotalsSnapshot], None]


class AggregatorState(enum.Enum):
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Aggregator:
    """
    Sole consumer of the size-event stream.

    Waits on three sources at once: the next size event, the cancellation
    signal and (if `tick_interval` is set) a periodic progress tick.
      - event: accumulate into the running totals
      - tick: hand a snapshot to `on_progress`
      - stream closed: COMPLETED, final snapshot to `on_totals`
      - cancellation: CANCELLED, then drain the stream until it closes so no
        producer is left blocked on send(). Drained events are not counted.
        The partial snapshot goes to `on_totals` only if `report_partial`.

    When several sources are ready together, cancellation wins, then the
    event, then the tick.
    """

    def __init__(
        self,
        stream: SizeEventStream,
        cancel: CancellationSignal,
        *,
        tick_interval: Optional[float] = None,
        on_progress: Optional[TotalsCallback] = None,
        on_totals: Optional[TotalsCallback] = None,
        report_partial: bool = False,
    ) -> None:
        self._stream = stream
        self._cancel = cancel
        self._tick_interval = tick_interval if on_progress is not None else None
        self._on_progress = on_progress
        self._on_totals = on_totals
        self._report_partial = bool(report_partial)
        self.state = AggregatorState.RUNNING
        self.totals = Totals()

    async def run(self) -> ScanOutcome:
        if self.state is not AggregatorState.RUNNING:
            raise RuntimeError(f"aggregator already {self.state.value}")

        receive = asyncio.ensure_future(self._stream.receive())
        cancelled = asyncio.ensure_future(self._cancel.wait())
        tick: Optional[asyncio.Future] = None
        if self._tick_interval:
            tick = asyncio.ensure_future(asyncio.sleep(self._tick_interval))

        try:
            while True:
                waiting = {receive, cancelled}
                if tick is not None:
                    waiting.add(tick)
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

                if cancelled in done:
                    self.state = AggregatorState.CANCELLED
                    discarded = await self._drain(receive)
                    return self._finish(cancelled=True, discarded=discarded)

                if receive in done:
                    size = receive.result()
                    if size is None:
                        self.state = AggregatorState.COMPLETED
                        return self._finish(cancelled=False)
                    self.totals.add(size)
                    receive = asyncio.ensure_future(self._stream.receive())

                if tick is not None and tick in done:
                    if self._on_progress is not None:
                        self._on_progress(self.totals.snapshot())
                    tick = asyncio.ensure_future(asyncio.sleep(self._tick_interval))
        finally:
            for fut in (receive, cancelled, tick):
                if fut is not None and not fut.done():
                    fut.cancel()

    async def _drain(self, pending: "asyncio.Future") -> int:
        """Receive and discard until the stream is closed. Returns events discarded."""
        discarded = 0
        size = await pending
        while size is not None:
            discarded += 1
            size = await self._stream.receive()
        logger.debug("Aggregator: drained %d size events after cancellation", discarded)
        return discarded

    def _finish(self, *, cancelled: bool, discarded: int = 0) -> ScanOutcome:
        snap = self.totals.snapshot()
        if self._on_totals is not None and (not cancelled or self._report_partial):
            self._on_totals(snap)
        return ScanOutcome(totals=snap, cancelled=cancelled, discarded=discarded)
