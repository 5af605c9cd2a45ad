"""Shared utilities: colors, output formatting, report files."""

import io
import os
import sys
import tempfile
from pathlib import Path

# Force UTF-8 output on Windows to handle box chars and the " · " separator
if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}


def _no_color() -> bool:
    return os.environ.get("NO_COLOR") is not None


def c(text: str, color: str) -> str:
    if _no_color() or not sys.stdout.isatty():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def log(msg: str):
    print(c(msg, "dim"), file=sys.stderr)


def print_table(headers: list[str], rows: list[list[str]], widths: list[int] | None = None):
    if not rows:
        return
    if not widths:
        widths = [max(len(str(h)), *(len(str(r[i])) for r in rows)) for i, h in enumerate(headers)]
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(c(header_line, "bold"))
    try:
        print(c("─" * (sum(widths) + 2 * (len(widths) - 1)), "dim"))
    except UnicodeEncodeError:
        print(c("-" * (sum(widths) + 2 * (len(widths) - 1)), "dim"))
    for row in rows:
        print("  ".join(str(v).ljust(w) for v, w in zip(row, widths)))


def print_box(lines: list[str], width: int = 45):
    """Print a box around lines of text."""
    try:
        print("┌" + "─" * width + "┐")
        for line in lines:
            padded = line.ljust(width - 2)[:width - 2]
            print(f"│ {padded} │")
        print("└" + "─" * width + "┘")
    except UnicodeEncodeError:
        print("+" + "-" * width + "+")
        for line in lines:
            padded = line.ljust(width - 2)[:width - 2]
            print(f"| {padded} |")
        print("+" + "-" * width + "+")


def write_report(content: str, path: str | Path) -> Path:
    """Write a report file atomically (temp file in the same dir, then replace)."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=str(p.parent), suffix=".tmp")
    try:
        try:
            os.write(fd, content.encode("utf-8"))
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_path, str(p))
    except OSError:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return p
