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

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class DirEntry:
    """One immediate child of a directory."""

    name: str
    is_dir: bool
    size: int = 0  # bytes; always 0 for directories


@dataclass(frozen=True)
class DirectoryListing:
    """
    Result of reading one directory.

    Notes:
      * opened=False: the directory could not be opened; entries is empty.
      * opened=True with an error: enumeration stopped part way. The entries
        obtained before the failure are still valid and must be used.
    """

    entries: Tuple[DirEntry, ...] = ()
    error: Optional[OSError] = None
    opened: bool = True

    @classmethod
    def unopened(cls, error: OSError) -> "DirectoryListing":
        return cls(entries=(), error=error, opened=False)

    @property
    def partial(self) -> bool:
        return self.opened and self.error is not None


@dataclass(frozen=True)
class TotalsSnapshot:
    files: int
    bytes: int


class Totals:
    """Running (file count, byte sum) of one scan. Only the aggregator mutates it."""

    __slots__ = ("files", "bytes")

    def __init__(self) -> None:
        self.files = 0
        self.bytes = 0

    def add(self, size: int) -> None:
        self.files += 1
        self.bytes += size

    def snapshot(self) -> TotalsSnapshot:
        return TotalsSnapshot(files=self.files, bytes=self.bytes)


@dataclass(frozen=True)
class ScanOutcome:
    """
    How a scan ended.

    `totals` holds what was accumulated before termination; for a cancelled
    scan these are partial. `discarded` counts size events drained without
    being accumulated after cancellation.
    """

    totals: TotalsSnapshot
    cancelled: bool = False
    discarded: int = 0
