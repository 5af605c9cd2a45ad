"""Markdown formatter: renders a scan summary as a human-readable report."""

from __future__ import annotations


def _escape(text: str) -> str:
    return str(text).replace("|", "\\|")


def _usage_markdown(summary: dict, source: str) -> list[str]:
    lines = [
        "# Component Usage",
        "",
        f"**Source**: `{source}`",
        f"**Instances**: {summary.get('totalInstances', 0)}",
        f"**Unique components**: {summary.get('totalUniqueComponents', 0)}",
        "",
    ]
    pages = summary.get("pageBreakdown", [])
    if not pages:
        lines.append("No component instances found.")
        lines.append("")
        return lines

    for page in pages:
        lines.append(f"## {page['pageName']} ({page['instanceCount']} instances)")
        lines.append("")
        lines.append("| Component | Instances | Names |")
        lines.append("|-----------|-----------|-------|")
        for group in page["componentGroups"]:
            names = [i["name"] for i in group["instances"]]
            shown = ", ".join(_escape(n) for n in names[:5])
            if len(names) > 5:
                shown += ", ..."
            lines.append(f"| {_escape(group['componentName'])} | {len(names)} | {shown} |")
        lines.append("")
    return lines


def _detached_markdown(summary: dict, source: str) -> list[str]:
    lines = [
        "# Detached Components & Variables",
        "",
        f"**Source**: `{source}`",
        f"**Detached components**: {summary.get('totalDetachedComponents', 0)}",
        f"**Broken variable bindings**: {summary.get('totalDetachedVariables', 0)}",
        "",
    ]
    pages = summary.get("pageBreakdown", [])
    if not pages:
        lines.append("Nothing detached. All instances and bindings are linked.")
        lines.append("")
        return lines

    for page in pages:
        lines.append(f"## {page['pageName']} ({len(page['items'])} issues)")
        lines.append("")
        for item in page["items"]:
            tag = "component" if item["type"] == "component" else "variable"
            lines.append(f"- [{tag}] {item['name']} (`{item['id']}`)")
        lines.append("")
    return lines


def generate_markdown(summary: dict, mode: str, source: str = "unknown") -> str:
    """Generate a markdown report for a usage or detached scan summary."""
    if mode == "usage":
        lines = _usage_markdown(summary, source)
    elif mode == "detached":
        lines = _detached_markdown(summary, source)
    else:
        raise ValueError(f"No markdown layout for scan mode {mode!r}")
    return "\n".join(lines)
