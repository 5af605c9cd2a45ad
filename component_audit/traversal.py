"""Single-pass walk over every page of the document."""

from __future__ import annotations

from typing import Iterator

from .document import DesignNode
from .host import Host


def iter_pages(host: Host) -> Iterator[tuple[DesignNode, list[DesignNode]]]:
    """Yield (page, descendants) for each page, in document order.

    Each node is visited once. Empty documents and empty pages yield
    nothing special: no pages, or an empty descendant list.
    """
    for page in host.list_pages():
        yield page, host.find_all_descendants(page)
