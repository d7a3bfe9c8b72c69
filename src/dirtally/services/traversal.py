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
import os
from dataclasses import dataclass, field
from typing import Callable, Optional, Set, Tuple

from ..domain.errors import FilesystemError
from ..domain.models import DirEntry
from ..ports.filesystem import FilesystemPort
from .cancellation import CancellationSignal
from .completion import CompletionCounter
from .gate import ConcurrencyGate
from .stream import SizeEventStream

logger = logging.getLogger(__name__)

ErrorReporter = Callable[[FilesystemError], None]


def log_error(err: FilesystemError) -> None:
    logger.warning("%s", err)


@dataclass
class ScanContext:
    """Everything one scan's traversal tasks share. Created per scan, never global."""

    fs: FilesystemPort
    cancel: CancellationSignal
    gate: ConcurrencyGate
    counter: CompletionCounter
    stream: SizeEventStream
    report_error: ErrorReporter = log_error
    tasks: Set["asyncio.Task[None]"] = field(default_factory=set)

    def spawn(self, path: str) -> None:
        """Start a traversal task for `path`. The caller has already counted it."""
        task = asyncio.create_task(walk_dir(self, path))
        self.tasks.add(task)
        task.add_done_callback(self._forget)

    def _forget(self, task: "asyncio.Task[None]") -> None:
        self.tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("traversal task failed", exc_info=exc)


async def read_directory(ctx: ScanContext, path: str) -> Optional[Tuple[DirEntry, ...]]:
    """
    Gated directory read.

    Returns:
        The entries read (possibly partial, possibly empty), or None when
        admission was aborted by cancellation and no I/O happened.
    """
    if not await ctx.gate.acquire(ctx.cancel):
        return None
    try:
        loop = asyncio.get_running_loop()
        listing = await loop.run_in_executor(None, ctx.fs.read_dir, path)
    finally:
        ctx.gate.release()

    if listing.error is not None:
        action = "read" if listing.opened else "open"
        ctx.report_error(FilesystemError(path, listing.error, action=action))
    return listing.entries


async def walk_dir(ctx: ScanContext, path: str) -> None:
    """
    Traverse one directory: count its files, fan out one task per subdirectory.
    """
    try:
        if ctx.cancel.is_set():
            return
        entries = await read_directory(ctx, path)
        if entries is None:
            return
        for entry in entries:
            if ctx.cancel.is_set():
                break
            if entry.is_dir:
                ctx.counter.add()
                ctx.spawn(os.path.join(path, entry.name))
            else:
                await ctx.stream.send(entry.size)
    finally:
        ctx.counter.done()
