"""Detached scanner: finds instances cut off from their main component and
variable bindings that point at deleted variables."""

from __future__ import annotations

from .base import BaseScanner
from ..document import DETACHED, DesignNode
from ..host import Host
from ..traversal import iter_pages

COMPONENT = "component"
VARIABLE = "variable"
UNNAMED_DETACHED = "Unnamed Instance"
NAME_SEPARATOR = " · "


def _item(node: DesignNode, page: DesignNode, name: str, item_type: str, metadata: dict | None = None) -> dict:
    item = {
        "id": node.id,
        "name": name,
        "type": item_type,
        "pageId": page.id,
        "pageName": page.name,
    }
    if metadata:
        item["metadata"] = metadata
    return item


def detached_component_item(node: DesignNode, page: DesignNode) -> dict | None:
    """Item for an instance whose main component is gone, else None."""
    if not node.is_instance or node.definition_state != DETACHED:
        return None
    return _item(node, page, node.name or UNNAMED_DETACHED, COMPONENT)


def broken_binding_items(node: DesignNode, page: DesignNode, host: Host) -> list[dict]:
    """One item per bound property whose variable no longer resolves."""
    items = []
    for prop, binding in node.bindings.items():
        if not isinstance(binding, dict):
            continue
        variable_id = binding.get("id")
        if not isinstance(variable_id, str) or not variable_id:
            continue
        if host.resolve_variable(variable_id) is None:
            label = f"{node.name or node.type}{NAME_SEPARATOR}{prop}"
            items.append(_item(node, page, label, VARIABLE, {"property": prop}))
    return items


def collect_page_items(page: DesignNode, nodes: list[DesignNode], host: Host) -> list[dict]:
    """Classify a page's nodes, keeping discovery order."""
    items = []
    for node in nodes:
        component = detached_component_item(node, page)
        if component:
            items.append(component)
        items.extend(broken_binding_items(node, page, host))
    return items


class DetachedScanner(BaseScanner):
    """Reports detached instances and broken variable bindings per page."""

    name = "detached"
    description = "Finds detached component instances and broken variable bindings"

    def empty_summary(self) -> dict:
        return {"totalDetachedComponents": 0, "totalDetachedVariables": 0, "pageBreakdown": []}

    def scan(self, host: Host) -> dict:
        page_breakdown = []
        for page, nodes in iter_pages(host):
            items = collect_page_items(page, nodes, host)
            if items:
                page_breakdown.append({"pageId": page.id, "pageName": page.name, "items": items})

        def count(item_type: str) -> int:
            return sum(1 for p in page_breakdown for i in p["items"] if i["type"] == item_type)

        return {
            "totalDetachedComponents": count(COMPONENT),
            "totalDetachedVariables": count(VARIABLE),
            "pageBreakdown": page_breakdown,
        }
