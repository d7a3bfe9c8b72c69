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
import sys
import threading
from typing import Optional, TextIO

from ...services.cancellation import CancellationSignal

logger = logging.getLogger(__name__)

PROMPT = "Press return to cancel at any time..."


def _is_terminal(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (OSError, ValueError):
        return False


def _watch(cancel: CancellationSignal, stream: TextIO) -> None:
    try:
        data = stream.read(1)
    except (OSError, ValueError) as e:
        # stdin closed or not readable; cancellation stays keyboard-less
        logger.debug("stdin trigger: cannot read stdin: %s", e)
        return
    if data or _is_terminal(stream):
        # Ctrl-D at a terminal is a keystroke too.
        if cancel.cancel():
            logger.debug("stdin trigger: cancellation requested")
    else:
        logger.debug("stdin trigger: EOF on non-terminal stdin, not cancelling")


def start_stdin_trigger(
    cancel: CancellationSignal, stream: Optional[TextIO] = None
) -> Optional[threading.Thread]:
    """
    Raise `cancel` on the first character read from stdin (or `stream`).

    EOF cancels only when stdin is a terminal (Ctrl-D); EOF from a pipe,
    a file or /dev/null is ignored, so non-interactive runs scan to completion.
    The reader is a daemon thread and never keeps the process alive.
    """
    stream = sys.stdin if stream is None else stream
    if stream is None:
        return None
    t = threading.Thread(
        target=_watch, args=(cancel, stream), name="dirtally-stdin", daemon=True
    )
    t.start()
    return t
