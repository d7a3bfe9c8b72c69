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

import enum

from ..domain.models import TotalsSnapshot

KiB = 1 << 10
MiB = 1 << 20
GiB = 1 << 30


class SizeUnit(enum.Enum):
    """Display unit for byte totals. Affects output only, never the computed totals."""

    KIB = ("KiB", KiB)
    MIB = ("MiB", MiB)
    GIB = ("GiB", GiB)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def divisor(self) -> int:
        return self.value[1]

    @classmethod
    def from_flags(cls, kib: bool = False, gib: bool = False) -> "SizeUnit":
        if kib:
            return cls.KIB
        if gib:
            return cls.GIB
        return cls.MIB


def format_totals(totals: TotalsSnapshot, unit: SizeUnit = SizeUnit.MIB) -> str:
    """
    Render one totals line, e.g. "12 files 3.50 MiB".
    """
    size = totals.bytes / unit.divisor
    return f"{totals.files} files {size:.2f} {unit.label}"
