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

from ..domain.errors import ConfigurationError, GateError
from .cancellation import CancellationSignal

logger = logging.getLogger(__name__)


class ConcurrencyGate:
    """
    Counting admission control around directory reads.

    At most `capacity` acquisitions are outstanding at any instant. `active`
    and `peak` expose the current and the highest observed number of holders.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ConfigurationError(f"gate capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._sem = asyncio.Semaphore(self.capacity)
        self.active = 0
        self.peak = 0

    def _admit(self) -> bool:
        self.active += 1
        if self.active > self.peak:
            self.peak = self.active
        return True

    async def acquire(self, cancel: CancellationSignal) -> bool:
        """
        Wait for a free slot or for cancellation, whichever comes first.

        Returns:
            True if a slot is held (caller must release()), False if aborted.
        """
        if cancel.is_set():
            return False
        if not self._sem.locked():
            # Free slot: Semaphore.acquire() returns without suspending.
            await self._sem.acquire()
            return self._admit()

        slot = asyncio.ensure_future(self._sem.acquire())
        aborted = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({slot, aborted}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            aborted.cancel()
            if not slot.done():
                slot.cancel()

        if slot.done() and not slot.cancelled():
            if not cancel.is_set():
                return self._admit()
            # Both ready: cancellation wins, hand the slot back.
            self._sem.release()
            return False
        try:
            await slot
        except asyncio.CancelledError:
            # Only swallow our own cancellation of `slot`, not the caller's.
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return False
        # Semaphore was granted while we were cancelling the waiter.
        self._sem.release()
        return False

    def release(self) -> None:
        if self.active <= 0:
            raise GateError("release() without a matching acquire()")
        self.active -= 1
        self._sem.release()
