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
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from ..adapters.filesystem.local_fs import LocalFS
from ..config import DEFAULT_CAPACITY
from ..domain.errors import ConfigurationError
from ..domain.models import ScanOutcome
from ..ports.filesystem import FilesystemPort
from .aggregator import Aggregator, TotalsCallback
from .cancellation import CancellationSignal
from .completion import CompletionCounter
from .gate import ConcurrencyGate
from .stream import SizeEventStream
from .traversal import ErrorReporter, ScanContext, log_error

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ScanService:
    """
    Orchestrates one concurrent disk-usage scan:
      - one traversal task per directory, reads bounded by a ConcurrencyGate
      - file sizes fan in to a single Aggregator
      - a watcher closes the size stream once the last task has exited
      - a CancellationSignal stops new work; the aggregator drains what is in flight

    Every scan gets fresh scan-scoped state, so one service can run many scans
    and several services can coexist in one process.
    """

    def __init__(
        self,
        fs: Optional[FilesystemPort] = None,
        *,
        capacity: int = DEFAULT_CAPACITY,
        progress_interval: Optional[float] = None,  # seconds
        on_progress: Optional[TotalsCallback] = None,
        on_totals: Optional[TotalsCallback] = None,
        on_error: Optional[ErrorReporter] = None,
        report_partial: bool = False,
    ) -> None:
        if capacity < 1:
            raise ConfigurationError(f"capacity must be >= 1, got {capacity}")
        if progress_interval is not None and progress_interval <= 0:
            raise ConfigurationError(
                f"progress interval must be > 0, got {progress_interval}"
            )
        self._fs = fs if fs is not None else LocalFS()
        self._capacity = int(capacity)
        self._progress_interval = progress_interval
        self._on_progress = on_progress
        self._on_totals = on_totals
        self._on_error = on_error or log_error
        self._report_partial = bool(report_partial)

        # Context of the most recent scan (gate peak, counter and stream state).
        self.last_context: Optional[ScanContext] = None

    def scan(
        self, roots: Iterable[PathLike] = (), cancel: Optional[CancellationSignal] = None
    ) -> ScanOutcome:
        """
        Scan the given directory trees (default: the current directory).

        Returns:
            ScanOutcome with the totals and whether the scan was cancelled.
        """
        return asyncio.run(self.scan_async(roots, cancel))

    async def scan_async(
        self, roots: Iterable[PathLike] = (), cancel: Optional[CancellationSignal] = None
    ) -> ScanOutcome:
        paths = [str(r) for r in roots] or ["."]
        cancel = cancel or CancellationSignal()
        cancel.bind(asyncio.get_running_loop())

        ctx = ScanContext(
            fs=self._fs,
            cancel=cancel,
            gate=ConcurrencyGate(self._capacity),
            counter=CompletionCounter(),
            stream=SizeEventStream(),
            report_error=self._on_error,
        )
        self.last_context = ctx
        logger.debug(
            "ScanService: scanning %d root(s), gate capacity %d", len(paths), self._capacity
        )

        ctx.counter.add(len(paths))
        for path in paths:
            ctx.spawn(path)
        watcher = asyncio.create_task(self._close_when_done(ctx))

        aggregator = Aggregator(
            ctx.stream,
            cancel,
            tick_interval=self._progress_interval,
            on_progress=self._on_progress,
            on_totals=self._on_totals,
            report_partial=self._report_partial,
        )
        try:
            outcome = await aggregator.run()
        except BaseException:
            # No consumer left: producers would block forever on send().
            await self._abort(ctx, watcher)
            raise

        await watcher
        if ctx.tasks:
            await asyncio.gather(*list(ctx.tasks), return_exceptions=True)

        logger.debug(
            "ScanService: %s, %d files, %d bytes, %d discarded, gate peak %d",
            "cancelled" if outcome.cancelled else "completed",
            outcome.totals.files,
            outcome.totals.bytes,
            outcome.discarded,
            ctx.gate.peak,
        )
        return outcome

    @staticmethod
    async def _close_when_done(ctx: ScanContext) -> None:
        await ctx.counter.wait_zero()
        await ctx.stream.close()

    @staticmethod
    async def _abort(ctx: ScanContext, watcher: "asyncio.Task[None]") -> None:
        ctx.cancel.cancel()
        pending = [watcher, *ctx.tasks]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
