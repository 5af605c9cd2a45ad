"""Scanning pipelines for design documents."""

from .usage import UsageScanner
from .detached import DetachedScanner

SCANNERS = {
    UsageScanner.name: UsageScanner,
    DetachedScanner.name: DetachedScanner,
}


def get_scanner(mode: str):
    """Instantiate the scanner registered under a mode name."""
    try:
        return SCANNERS[mode]()
    except KeyError:
        raise ValueError(f"Unknown scan mode: {mode!r} (expected one of {', '.join(SCANNERS)})") from None
