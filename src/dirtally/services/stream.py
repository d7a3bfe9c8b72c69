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
from typing import Optional

from ..domain.errors import StreamClosedError

_CLOSED = object()


class SizeEventStream:
    """
    Many-producer, single-consumer stream of file sizes.

    send() blocks until the consumer has room (capacity 1), so producers move
    in step with the aggregator. close() puts an end marker behind every
    event already sent; receive() returns None once it reaches it.
    """

    def __init__(self) -> None:
        self._queue: "asyncio.Queue[object]" = asyncio.Queue(maxsize=1)
        self._closed = False
        self._drained = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, size: int) -> None:
        if self._closed:
            raise StreamClosedError("send() on a closed stream")
        await self._queue.put(size)

    async def close(self) -> None:
        if self._closed:
            raise StreamClosedError("stream closed twice")
        self._closed = True
        await self._queue.put(_CLOSED)

    async def receive(self) -> Optional[int]:
        if self._drained:
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            self._drained = True
            return None
        return item  # type: ignore[return-value]
