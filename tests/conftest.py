"""
Shared fixtures for manifest engine tests.
Creates isolated temporary directory trees with controlled file contents.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List
import sys

# Add src/ to sys.path so the 'treesum' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

MD5_X = "9dd4e461268c8034f5c8564e155c67a6"      # md5("x")
MD5_EMPTY = "d41d8cd98f00b204e9800998ecf8427e"  # md5("")
MD5_ABC = "900150983cd24fb0d6963f7d28e17f72"    # md5("abc")


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def save_dir(temp_dir) -> Path:
    out = temp_dir / "out"
    out.mkdir()
    return out


@pytest.fixture
def manifest_tree(temp_dir) -> Dict[str, Path]:
    """
    Creates a small tree under <temp>/data/set:
        a.txt            "x"
        b/f1.txt         "abc"
        b/f2.txt         ""
        b/notes.MD       "abc"
        b/c/deep.txt     "x"
    """
    root = temp_dir / "data" / "set"
    (root / "b" / "c").mkdir(parents=True)

    files = {
        "root": root,
        "a": root / "a.txt",
        "f1": root / "b" / "f1.txt",
        "f2": root / "b" / "f2.txt",
        "notes": root / "b" / "notes.MD",
        "deep": root / "b" / "c" / "deep.txt",
    }
    files["a"].write_bytes(b"x")
    files["f1"].write_bytes(b"abc")
    files["f2"].write_bytes(b"")
    files["notes"].write_bytes(b"abc")
    files["deep"].write_bytes(b"x")
    return files


class RecordingSink:
    """ProgressSink that remembers everything it receives."""

    def __init__(self):
        self.percents: List[int] = []
        self.summaries: List[str] = []

    def on_percent(self, percent: int) -> None:
        self.percents.append(percent)

    def on_summary(self, summary: str) -> None:
        self.summaries.append(summary)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fixed_clock():
    """Clock frozen at a known epoch so backup names are predictable."""
    return lambda: 1700000000.0


def read_lines(path: Path) -> List[str]:
    return path.read_text().splitlines()
