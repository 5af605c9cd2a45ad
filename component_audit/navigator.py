"""Navigator: focus the host on a node picked from the results panel."""

from __future__ import annotations

from typing import Callable

from .host import Host

NOT_FOUND_NOTICE = "Target node not found. It may have been deleted."
NOT_FOUND_MESSAGE = "Node not found or removed."
NOTICE_TIMEOUT_MS = 2000


def focus_node(host: Host, node_id: str, post_message: Callable[[dict], None]) -> bool:
    """Switch to the node's page and bring it into view.

    Returns False (after notifying the user and posting an error) when the
    node no longer exists. Nodes outside any page are still brought into
    view, the active page is left alone.
    """
    node = host.lookup_node_by_id(node_id)
    if node is None:
        host.notify_user(NOT_FOUND_NOTICE, NOTICE_TIMEOUT_MS)
        post_message({"type": "error", "message": NOT_FOUND_MESSAGE})
        return False

    page = node.owning_page()
    if page is not None:
        host.set_active_page(page)
    host.bring_into_view(node)
    return True
