# tests/cli/test_cli_cancel.py
import re
import time
from pathlib import Path

from typer.testing import CliRunner
from dirtally.adapters.filesystem.local_fs import LocalFS
import dirtally.cli.app as cli_app
from dirtally.cli.app import app

runner = CliRunner()


class SlowLocalFS(LocalFS):
    """Local reads that take long enough for a keystroke to land mid-scan."""

    def read_dir(self, path):
        time.sleep(0.2)
        return super().read_dir(path)


def _chain(root: Path, depth: int) -> Path:
    d = root
    for i in range(depth):
        d = d / f"d{i}"
        d.mkdir(parents=True)
        (d / "f").write_bytes(b"x")
    return root


def test_prompt_is_shown_and_eof_does_not_cancel(tmp_path: Path):
    (tmp_path / "f").write_bytes(b"12")

    r = runner.invoke(app, [str(tmp_path), "-k"], input="")

    assert r.exit_code == 0, r.output
    assert "Press return to cancel" in r.output
    assert "Scan cancelled." not in r.output


def test_keystroke_cancels_and_partial_prints_totals(tmp_path: Path, monkeypatch):
    # 30 nested directories at 0.2 s each: ~6 s uncancelled.
    root = _chain(tmp_path / "data", 30)
    monkeypatch.setattr(cli_app, "LocalFS", SlowLocalFS)

    started = time.monotonic()
    r = runner.invoke(app, [str(root), "-c", "1", "-k", "--partial"], input="\n")
    elapsed = time.monotonic() - started

    assert r.exit_code == 0, r.output
    assert "Scan cancelled." in r.output
    totals = [line for line in r.output.splitlines() if " files " in line]
    assert len(totals) == 1
    m = re.fullmatch(r"(\d+) files \d+\.\d{2} KiB", totals[0])
    assert m and int(m.group(1)) < 30
    assert elapsed < 5


def test_cancel_without_partial_prints_no_totals(tmp_path: Path, monkeypatch):
    root = _chain(tmp_path / "data", 30)
    monkeypatch.setattr(cli_app, "LocalFS", SlowLocalFS)

    r = runner.invoke(app, [str(root), "-c", "1"], input="x")

    assert r.exit_code == 0, r.output
    assert "Scan cancelled." in r.output
    assert not [line for line in r.output.splitlines() if " files " in line]
