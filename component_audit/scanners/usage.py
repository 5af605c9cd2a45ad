"""Usage scanner: groups linked component instances by their main component."""

from __future__ import annotations

from .base import BaseScanner
from ..document import DesignNode
from ..host import Host
from ..sorting import sort_by_name
from ..traversal import iter_pages

UNNAMED_COMPONENT = "Unnamed Component"
UNNAMED_INSTANCE = "Instance"


def make_instance_record(node: DesignNode, page: DesignNode) -> dict | None:
    """Member record for a linked instance, or None if the node doesn't qualify.

    componentKey is left out when the main component has no key.
    """
    if not node.is_instance or node.main_component is None:
        return None
    main = node.main_component
    record = {
        "id": node.id,
        "name": node.name or UNNAMED_INSTANCE,
        "componentId": main.id,
        "componentKey": main.key,
        "componentName": main.name or UNNAMED_COMPONENT,
        "pageId": page.id,
        "pageName": page.name,
    }
    if not main.key:
        del record["componentKey"]
    return record


def group_instances(records: list[dict]) -> dict[str, dict]:
    """Group member records by component key (falling back to id), in discovery order."""
    groups: dict[str, dict] = {}
    for record in records:
        group_key = record.get("componentKey") or record["componentId"]
        group = groups.get(group_key)
        if group is None:
            group = groups[group_key] = {
                "componentId": record["componentId"],
                "componentName": record["componentName"],
                "instances": [],
            }
            if "componentKey" in record:
                group["componentKey"] = record["componentKey"]
        group["instances"].append(record)
    return groups


def sort_groups(groups: list[dict]) -> list[dict]:
    """Order groups by component name and each group's instances by name."""
    ordered = sort_by_name(groups, "componentName")
    for group in ordered:
        group["instances"] = sort_by_name(group["instances"])
    return ordered


class UsageScanner(BaseScanner):
    """Counts component instances per page and across the file."""

    name = "usage"
    description = "Lists component instances grouped by main component"

    def empty_summary(self) -> dict:
        return {"totalInstances": 0, "totalUniqueComponents": 0, "pageBreakdown": []}

    def scan(self, host: Host) -> dict:
        page_breakdown = []
        unique_keys: set[str] = set()

        for page, nodes in iter_pages(host):
            records = [r for r in (make_instance_record(n, page) for n in nodes) if r]
            groups = group_instances(records)
            if not groups:
                continue
            unique_keys.update(groups)
            component_groups = sort_groups(list(groups.values()))
            page_breakdown.append({
                "pageId": page.id,
                "pageName": page.name,
                "instanceCount": sum(len(g["instances"]) for g in component_groups),
                "componentGroups": component_groups,
            })

        return {
            "totalInstances": sum(p["instanceCount"] for p in page_breakdown),
            "totalUniqueComponents": len(unique_keys),
            "pageBreakdown": page_breakdown,
        }
