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

import logging
import os
from typing import List, Optional

from ...domain.models import DirEntry, DirectoryListing
from ...ports.filesystem import FilesystemPort

logger = logging.getLogger(__name__)


class LocalFS(FilesystemPort):
    """
    Local filesystem adapter built on os.scandir.

    Entries are classified without following symlinks: a link to a directory
    counts as a file of the link's own size and is never descended into.
    """

    def read_dir(self, path: str) -> DirectoryListing:
        try:
            it = os.scandir(path)
        except OSError as e:
            return DirectoryListing.unopened(e)

        entries: List[DirEntry] = []
        error: Optional[OSError] = None
        with it:
            while True:
                try:
                    entry = next(it)
                except StopIteration:
                    break
                except OSError as e:
                    # Enumeration broke off; keep what we have.
                    error = e
                    break

                try:
                    if entry.is_dir(follow_symlinks=False):
                        entries.append(DirEntry(entry.name, True))
                    else:
                        size = entry.stat(follow_symlinks=False).st_size
                        entries.append(DirEntry(entry.name, False, size))
                except OSError as e:
                    # e.g. removed between listing and stat
                    logger.debug("LocalFS.read_dir: skipping %s: %s", entry.path, e)
                    if error is None:
                        error = e

        return DirectoryListing(entries=tuple(entries), error=error)
