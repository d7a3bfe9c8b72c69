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
from typing import List, Optional

import typer

from ..adapters.filesystem.local_fs import LocalFS
from ..adapters.terminal.stdin_trigger import PROMPT, start_stdin_trigger
from ..config import ScanSettings
from ..domain.errors import ConfigurationError, FilesystemError
from ..domain.models import TotalsSnapshot
from ..services import CancellationSignal, ScanService, SizeUnit, format_totals

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(
    help="dirtally - concurrent disk usage for one or more directory trees",
    add_completion=False,
)

logger = logging.getLogger(__name__)


def _settings(
    concurrency: Optional[int], interval: Optional[int], verbose: bool, partial: bool
) -> ScanSettings:
    """
    Environment defaults, overridden by whatever was given on the command line.
    Raises Typer BadParameter on unusable values.
    """
    try:
        settings = ScanSettings.from_env()
        if concurrency is not None:
            settings.capacity = concurrency
        if interval is not None:
            settings.progress_ms = interval
        settings.verbose = verbose
        settings.report_partial = partial
        return settings.validate()
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))


def _wire(settings: ScanSettings, unit: SizeUnit) -> ScanService:
    """
    Minimal composition root:
      LocalFS + ScanService, totals printed to stdout, read errors to stderr
    """

    def print_totals(totals: TotalsSnapshot) -> None:
        typer.echo(format_totals(totals, unit))

    def print_error(err: FilesystemError) -> None:
        typer.echo(str(err), err=True)

    return ScanService(
        LocalFS(),
        capacity=settings.capacity,
        progress_interval=settings.progress_interval,
        on_progress=print_totals,
        on_totals=print_totals,
        on_error=print_error,
        report_partial=settings.report_partial,
    )


@app.command()
def du(
    dirs: Optional[List[str]] = typer.Argument(
        None, help="Directories to scan (default: current directory)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Verbose progress messages"
    ),
    kib: bool = typer.Option(
        False, "--kib", "-k", help="Display size in KiB (wins over -g)"
    ),
    gib: bool = typer.Option(False, "--gib", "-g", help="Display size in GiB"),
    interval: Optional[int] = typer.Option(
        None,
        "--interval",
        min=10,
        help="Milliseconds between progress messages with --verbose (default 500).",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-c",
        min=1,
        help="Maximum number of directories read at the same time (default 20).",
    ),
    partial: bool = typer.Option(
        False,
        "--partial/--no-partial",
        help="When cancelled, still print the totals gathered so far.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Count files and total their sizes under each DIR, concurrently.
    """
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    unit = SizeUnit.from_flags(kib=kib, gib=gib)
    settings = _settings(concurrency, interval, verbose, partial)
    scan_service = _wire(settings, unit)

    cancel = CancellationSignal()
    typer.echo(PROMPT, err=True)
    start_stdin_trigger(cancel)

    outcome = scan_service.scan(dirs or ["."], cancel=cancel)
    if outcome.cancelled:
        # Cancellation is a clean exit, not an error.
        typer.echo("Scan cancelled.", err=True)


def main() -> None:
    app()
