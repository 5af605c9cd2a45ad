"""Host application capabilities consumed by the scanners and the panel session.

The scanners only read the document; the navigator and the session are the
only callers of the methods with visible side effects (active page,
viewport, notices, panel).
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .document import DesignDocument, DesignNode, Variable
from .utils import log


class Host(ABC):
    """What the core needs from the application hosting the document."""

    @abstractmethod
    def list_pages(self) -> list[DesignNode]:
        ...

    @abstractmethod
    def find_all_descendants(self, page: DesignNode) -> list[DesignNode]:
        """Every node below the page, all types, all depths."""
        ...

    @abstractmethod
    def resolve_variable(self, variable_id: str) -> Variable | None:
        ...

    @abstractmethod
    def lookup_node_by_id(self, node_id: str) -> DesignNode | None:
        ...

    @abstractmethod
    def set_active_page(self, page: DesignNode) -> None:
        ...

    @abstractmethod
    def bring_into_view(self, node: DesignNode) -> None:
        ...

    @abstractmethod
    def notify_user(self, message: str, timeout_ms: int = 2000) -> None:
        ...

    @abstractmethod
    def open_panel(self, width: int, height: int) -> None:
        ...


class DocumentHost(Host):
    """Host backed by a loaded DesignDocument.

    Records every side effect so the CLI can report it and tests can
    assert on it.
    """

    def __init__(self, doc: DesignDocument):
        self.doc = doc
        self.active_page: DesignNode | None = doc.pages[0] if doc.pages else None
        self.viewport: list[DesignNode] = []
        self.notices: list[tuple[str, int]] = []
        self.panel_size: tuple[int, int] | None = None

    def list_pages(self) -> list[DesignNode]:
        return list(self.doc.pages)

    def find_all_descendants(self, page: DesignNode) -> list[DesignNode]:
        return list(page.descendants())

    def resolve_variable(self, variable_id: str) -> Variable | None:
        return self.doc.variables.get(variable_id)

    def lookup_node_by_id(self, node_id: str) -> DesignNode | None:
        return self.doc.node_by_id(node_id)

    def set_active_page(self, page: DesignNode) -> None:
        self.active_page = page

    def bring_into_view(self, node: DesignNode) -> None:
        self.viewport = [node]

    def notify_user(self, message: str, timeout_ms: int = 2000) -> None:
        self.notices.append((message, timeout_ms))
        log(f"  {message}")

    def open_panel(self, width: int, height: int) -> None:
        self.panel_size = (width, height)
