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

from abc import ABC, abstractmethod

from ..domain.models import DirectoryListing


class FilesystemPort(ABC):
    """Abstract interface for filesystem access."""

    @abstractmethod
    def read_dir(self, path: str) -> DirectoryListing:
        """
        List the immediate entries of `path` (files with their size, and subdirectories).

        Must not raise for I/O problems: an unopenable directory is returned as
        DirectoryListing.unopened(err); a listing that failed part way carries
        the entries obtained so far plus the error.
        """
        raise NotImplementedError
