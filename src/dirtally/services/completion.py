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

import asyncio

from ..domain.errors import CounterError


class CompletionCounter:
    """
    Number of traversal tasks still outstanding.

    Incremented before every spawn (roots included) and decremented when a
    task exits. Reaching zero happens exactly once and is final.
    """

    def __init__(self) -> None:
        self._count = 0
        self._started = False
        self._zero = asyncio.Event()

    @property
    def count(self) -> int:
        return self._count

    @property
    def reached_zero(self) -> bool:
        return self._zero.is_set()

    def add(self, n: int = 1) -> None:
        if self._zero.is_set():
            raise CounterError("add() after the counter reached zero")
        if n < 0:
            raise CounterError(f"add() takes a non-negative delta, got {n}")
        self._started = True
        self._count += n

    def done(self) -> None:
        if self._count <= 0:
            raise CounterError("done() called more often than add()")
        self._count -= 1
        if self._count == 0:
            self._zero.set()

    async def wait_zero(self) -> None:
        if not self._started:
            raise CounterError("wait_zero() before any task was added")
        await self._zero.wait()
