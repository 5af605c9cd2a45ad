"""Link health scoring.

Combines the two scan summaries into a single number: the share of
component instances that are still linked to a main component. Broken
variable bindings are reported next to it but don't move the score, since
there is no denominator for them (bound properties are not counted).

Bands:
- healthy: >= 90% of instances linked
- drifting: 70-90%
- broken: < 70%
"""

from __future__ import annotations

BAND_NAMES = {
    "healthy": "Healthy",
    "drifting": "Drifting",
    "broken": "Broken",
}


def health_band(pct: float) -> str:
    if pct >= 90:
        return "healthy"
    if pct >= 70:
        return "drifting"
    return "broken"


def compute_health(usage: dict, detached: dict) -> dict:
    """Compute link health from a usage summary and a detached summary.

    Returns:
        {
            "linked": int,
            "detached": int,
            "broken_bindings": int,
            "unique_components": int,
            "pct": float,       # linked / (linked + detached), 100.0 if no instances
            "band": str,
            "by_page": {page_name: {"linked": N, "detached": N, "broken_bindings": N}},
        }
    """
    by_page: dict[str, dict[str, int]] = {}

    for page in usage.get("pageBreakdown", []):
        ps = by_page.setdefault(page["pageName"], {"linked": 0, "detached": 0, "broken_bindings": 0})
        ps["linked"] += page["instanceCount"]

    for page in detached.get("pageBreakdown", []):
        ps = by_page.setdefault(page["pageName"], {"linked": 0, "detached": 0, "broken_bindings": 0})
        for item in page["items"]:
            if item["type"] == "component":
                ps["detached"] += 1
            else:
                ps["broken_bindings"] += 1

    linked = usage.get("totalInstances", 0)
    detached_count = detached.get("totalDetachedComponents", 0)
    total = linked + detached_count
    pct = round((linked / total) * 100, 1) if total > 0 else 100.0

    return {
        "linked": linked,
        "detached": detached_count,
        "broken_bindings": detached.get("totalDetachedVariables", 0),
        "unique_components": usage.get("totalUniqueComponents", 0),
        "pct": pct,
        "band": health_band(pct),
        "by_page": by_page,
    }
