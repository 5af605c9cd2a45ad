"""Base class for document scanners."""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..host import Host


class BaseScanner(ABC):
    """Base class for all scanning pipelines.

    Each scanner walks every page once through the host, classifies the
    nodes it cares about and returns a ScanSummary dict ready to post to
    the panel.
    """

    name: str = "base"
    description: str = ""

    @abstractmethod
    def scan(self, host: Host) -> dict:
        """Run the pipeline against the host document. Returns a ScanSummary dict."""
        ...

    @abstractmethod
    def empty_summary(self) -> dict:
        """Zero-valued summary with every field present."""
        ...
