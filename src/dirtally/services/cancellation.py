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
import threading
from typing import Optional


class CancellationSignal:
    """
    Write-once, process-visible "stop scanning" flag.

    Any thread may raise it (the stdin watcher runs on its own thread); event
    loop code may poll it with is_set() or await wait(). Once raised it stays
    raised. One instance belongs to exactly one scan.
    """

    def __init__(self) -> None:
        self._flag = threading.Event()
        self._lock = threading.Lock()
        self._event: Optional[asyncio.Event] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def bind(self, loop: asyncio.AbstractEventLoop) -> asyncio.Event:
        """Attach the event loop that will await this signal. Called at scan start."""
        with self._lock:
            self._loop = loop
            event = self._event = asyncio.Event()
            if self._flag.is_set():
                event.set()
        return event

    def cancel(self) -> bool:
        """
        Raise the signal.

        Returns:
            True for the call that raised it, False for every later call.
        """
        with self._lock:
            if self._flag.is_set():
                return False
            self._flag.set()
            loop, event = self._loop, self._event

        if loop is not None and event is not None and not loop.is_closed():
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                event.set()
            else:
                try:
                    loop.call_soon_threadsafe(event.set)
                except RuntimeError:
                    pass  # loop closed in between; nobody left to wake
        return True

    def is_set(self) -> bool:
        return self._flag.is_set()

    async def wait(self) -> None:
        event = self._event
        if event is None:
            event = self.bind(asyncio.get_running_loop())
        await event.wait()
