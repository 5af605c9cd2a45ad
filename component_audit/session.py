"""Panel session: routes panel requests to the scanner and the navigator.

Messages are handled one at a time; every scan runs to completion before
the next message is read, so no state is kept between requests.
"""

from __future__ import annotations

from typing import Callable

from .host import Host
from .navigator import NOTICE_TIMEOUT_MS, focus_node
from .scanners.base import BaseScanner
from .utils import log

PANEL_WIDTH = 400
PANEL_HEIGHT = 600
SCAN_FAILED_MESSAGE = "Unexpected error during scan"
NAVIGATE_FAILED_MESSAGE = "Unexpected error during navigation"


class PanelSession:
    """Dispatcher between the results panel and the host document."""

    def __init__(self, host: Host, scanner: BaseScanner, post_message: Callable[[dict], None]):
        self.host = host
        self.scanner = scanner
        self.post_message = post_message
        self._started = False

    def start(self):
        """Open the panel and announce readiness. Only the first call has an effect."""
        if self._started:
            return
        self._started = True
        self.host.open_panel(PANEL_WIDTH, PANEL_HEIGHT)
        self.post_message({"type": "ready"})

    def handle_message(self, message) -> None:
        """Dispatch one inbound panel message. Unknown shapes are ignored."""
        if not isinstance(message, dict):
            return

        kind = message.get("type")
        if kind == "scan":
            self.handle_scan()
        elif kind == "navigate":
            node_id = message.get("nodeId")
            if isinstance(node_id, str):
                self.handle_navigate(node_id)

    def _report_failure(self, message: str) -> None:
        self.host.notify_user(message, NOTICE_TIMEOUT_MS)
        self.post_message({"type": "error", "message": message})

    def handle_navigate(self, node_id: str) -> None:
        try:
            focus_node(self.host, node_id, self.post_message)
        except Exception as e:
            log(f"  navigation to {node_id} failed: {e!r}")
            self._report_failure(str(e) or NAVIGATE_FAILED_MESSAGE)

    def handle_scan(self) -> None:
        try:
            summary = self.scanner.scan(self.host)
        except Exception as e:
            log(f"  {self.scanner.name} scan failed: {e!r}")
            self._report_failure(str(e) or SCAN_FAILED_MESSAGE)
            return

        if not summary["pageBreakdown"]:
            summary = self.scanner.empty_summary()
        self.post_message({"type": "results", "data": summary})
