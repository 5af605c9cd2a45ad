"""Tests for the usage and detached scanners."""

from component_audit.document import parse_design_json
from component_audit.host import DocumentHost
from component_audit.scanners import SCANNERS, DetachedScanner, UsageScanner, get_scanner
from component_audit.sorting import collation_key


def _sample_doc() -> dict:
    return {
        "components": [
            {"id": "c1", "key": "K1", "name": "Logo Set"},
            {"id": "c2", "key": "K2", "name": "Header"},
        ],
        "variables": [{"id": "VariableID:1", "name": "color/primary"}],
        "pages": [
            {
                "id": "0:1",
                "name": "Cover",
                "children": [
                    {"id": "1:1", "type": "FRAME", "name": "Hero", "children": [
                        {"id": "1:2", "type": "INSTANCE", "name": "Logo", "componentId": "c1"},
                        {"id": "1:3", "type": "INSTANCE", "name": "logo-small", "componentId": "c1"},
                    ]},
                    {"id": "1:4", "type": "INSTANCE", "name": "Header", "componentId": "c2"},
                ],
            },
            {
                "id": "0:2",
                "name": "Screens",
                "children": [
                    {"id": "2:1", "type": "INSTANCE", "name": "Header", "componentId": "c2"},
                    {"id": "2:2", "type": "INSTANCE", "name": "Old Card", "mainComponent": None},
                    {"id": "2:3", "type": "RECTANGLE", "name": "Frame", "boundVariables": {
                        "fill": {"id": "VariableID:gone"},
                        "stroke": {"id": "VariableID:1"},
                    }},
                ],
            },
            {"id": "0:3", "name": "Empty", "children": []},
            {
                "id": "0:4",
                "name": "Archive",
                "children": [
                    {"id": "3:1", "type": "INSTANCE", "name": "", "mainComponent": None},
                ],
            },
        ],
    }


def _host(data: dict | None = None) -> DocumentHost:
    return DocumentHost(parse_design_json(data if data is not None else _sample_doc()))


# ── usage ────────────────────────────────────────────────────


def test_usage_totals():
    summary = UsageScanner().scan(_host())
    assert summary["totalInstances"] == 4
    assert summary["totalUniqueComponents"] == 2


def test_usage_omits_pages_without_linked_instances():
    summary = UsageScanner().scan(_host())
    assert [p["pageName"] for p in summary["pageBreakdown"]] == ["Cover", "Screens"]


def test_usage_group_and_member_order():
    summary = UsageScanner().scan(_host())
    cover = summary["pageBreakdown"][0]
    assert cover["instanceCount"] == 3
    groups = cover["componentGroups"]
    assert [g["componentName"] for g in groups] == ["Header", "Logo Set"]
    assert [i["name"] for i in groups[1]["instances"]] == ["Logo", "logo-small"]


def test_usage_member_record_shape():
    summary = UsageScanner().scan(_host())
    member = summary["pageBreakdown"][0]["componentGroups"][0]["instances"][0]
    assert member == {
        "id": "1:4",
        "name": "Header",
        "componentId": "c2",
        "componentKey": "K2",
        "componentName": "Header",
        "pageId": "0:1",
        "pageName": "Cover",
    }


def test_usage_counts_match_members():
    summary = UsageScanner().scan(_host())
    total = 0
    for page in summary["pageBreakdown"]:
        members = sum(len(g["instances"]) for g in page["componentGroups"])
        assert members == page["instanceCount"]
        total += members
    assert total == summary["totalInstances"]


def test_usage_unique_components_are_file_wide():
    # Header appears on both pages but counts once
    summary = UsageScanner().scan(_host())
    per_page = sum(len(p["componentGroups"]) for p in summary["pageBreakdown"])
    assert per_page == 3
    assert summary["totalUniqueComponents"] == 2


def test_usage_placeholders_and_key_fallback():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "a", "type": "INSTANCE", "name": "", "mainComponent": {"id": "m1", "name": ""}},
        {"id": "b", "type": "INSTANCE", "name": "Second", "mainComponent": {"id": "m1", "key": "", "name": ""}},
    ]}]}
    summary = UsageScanner().scan(_host(data))
    groups = summary["pageBreakdown"][0]["componentGroups"]
    assert len(groups) == 1
    assert groups[0]["componentName"] == "Unnamed Component"
    assert "componentKey" not in groups[0]
    assert all("componentKey" not in i for i in groups[0]["instances"])
    assert groups[0]["componentId"] == "m1"
    assert [i["name"] for i in groups[0]["instances"]] == ["Instance", "Second"]
    assert summary["totalUniqueComponents"] == 1


def test_usage_key_wins_over_id():
    # Two definitions with different ids but the same key merge into one group
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "a", "type": "INSTANCE", "name": "A", "mainComponent": {"id": "m1", "key": "shared", "name": "Btn"}},
        {"id": "b", "type": "INSTANCE", "name": "B", "mainComponent": {"id": "m2", "key": "shared", "name": "Btn"}},
    ]}]}
    summary = UsageScanner().scan(_host(data))
    assert len(summary["pageBreakdown"][0]["componentGroups"]) == 1
    assert summary["totalUniqueComponents"] == 1


def test_usage_case_variants_sort_lowercase_first():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "a", "type": "INSTANCE", "name": "x", "mainComponent": {"id": "m1", "key": "k1", "name": "Button"}},
        {"id": "b", "type": "INSTANCE", "name": "y", "mainComponent": {"id": "m2", "key": "k2", "name": "button"}},
    ]}]}
    first = UsageScanner().scan(_host(data))
    second = UsageScanner().scan(_host(data))
    names = [g["componentName"] for g in first["pageBreakdown"][0]["componentGroups"]]
    assert names == ["button", "Button"]
    assert first == second


def test_usage_empty_document():
    summary = UsageScanner().scan(_host({}))
    assert summary == {"totalInstances": 0, "totalUniqueComponents": 0, "pageBreakdown": []}


def test_usage_is_idempotent():
    host = _host()
    assert UsageScanner().scan(host) == UsageScanner().scan(host)


# ── detached ─────────────────────────────────────────────────


def test_detached_totals():
    summary = DetachedScanner().scan(_host())
    assert summary["totalDetachedComponents"] == 2
    assert summary["totalDetachedVariables"] == 1


def test_detached_keeps_discovery_order():
    summary = DetachedScanner().scan(_host())
    assert [p["pageName"] for p in summary["pageBreakdown"]] == ["Screens", "Archive"]
    screens = summary["pageBreakdown"][0]["items"]
    assert [i["name"] for i in screens] == ["Old Card", "Frame · fill"]


def test_detached_orphan_page_only_in_detached():
    usage = UsageScanner().scan(_host())
    detached = DetachedScanner().scan(_host())
    assert "Archive" not in [p["pageName"] for p in usage["pageBreakdown"]]
    archive = detached["pageBreakdown"][1]
    assert archive["items"] == [{
        "id": "3:1",
        "name": "Unnamed Instance",
        "type": "component",
        "pageId": "0:4",
        "pageName": "Archive",
    }]


def test_broken_binding_item():
    summary = DetachedScanner().scan(_host())
    item = summary["pageBreakdown"][0]["items"][1]
    assert item == {
        "id": "2:3",
        "name": "Frame · fill",
        "type": "variable",
        "pageId": "0:2",
        "pageName": "Screens",
        "metadata": {"property": "fill"},
    }


def test_broken_binding_uses_type_when_unnamed():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "t", "type": "TEXT", "name": "", "boundVariables": {"characters": {"id": "VariableID:x"}}},
    ]}]}
    items = DetachedScanner().scan(_host(data))["pageBreakdown"][0]["items"]
    assert [i["name"] for i in items] == ["TEXT · characters"]


def test_malformed_bindings_are_skipped():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "n", "type": "FRAME", "name": "Card", "boundVariables": {
            "opacity": None,
            "width": {"id": 5},
            "height": {},
            "itemSpacing": {"id": ""},
            "fills": [{"type": "VARIABLE_ALIAS", "id": "VariableID:x"}],
        }},
    ]}]}
    summary = DetachedScanner().scan(_host(data))
    assert summary == {"totalDetachedComponents": 0, "totalDetachedVariables": 0, "pageBreakdown": []}


def test_orphan_with_broken_binding_reports_both():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "i", "type": "INSTANCE", "name": "Chip", "mainComponent": None,
         "boundVariables": {"fill": {"id": "VariableID:x"}, "stroke": {"id": "VariableID:y"}}},
    ]}]}
    items = DetachedScanner().scan(_host(data))["pageBreakdown"][0]["items"]
    assert [(i["type"], i["name"]) for i in items] == [
        ("component", "Chip"),
        ("variable", "Chip · fill"),
        ("variable", "Chip · stroke"),
    ]


def test_linked_instances_are_not_detached():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "a", "type": "INSTANCE", "name": "A", "mainComponent": {"id": "m", "name": "M"}},
    ]}]}
    assert DetachedScanner().scan(_host(data))["pageBreakdown"] == []


def test_instance_without_definition_info_is_in_neither_pipeline():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "i", "type": "INSTANCE", "name": "NoInfo"},
        {"id": "j", "type": "INSTANCE", "name": "ById", "componentId": "c9"},
    ]}]}
    assert UsageScanner().scan(_host(data))["pageBreakdown"] == []
    assert DetachedScanner().scan(_host(data))["pageBreakdown"] == []


def test_component_id_missing_from_table_is_detached():
    data = {"components": [], "pages": [{"id": "p", "name": "Page", "children": [
        {"id": "j", "type": "INSTANCE", "name": "Gone", "componentId": "c9"},
    ]}]}
    summary = DetachedScanner().scan(_host(data))
    assert summary["totalDetachedComponents"] == 1
    assert summary["pageBreakdown"][0]["items"][0]["name"] == "Gone"


def test_key_only_definition_is_linked():
    data = {"pages": [{"id": "p", "name": "Page", "children": [
        {"id": "a", "type": "INSTANCE", "name": "Primary", "mainComponent": {"key": "K", "name": "Btn"}},
    ]}]}
    usage = UsageScanner().scan(_host(data))
    assert usage["totalInstances"] == 1
    assert usage["totalUniqueComponents"] == 1
    assert usage["pageBreakdown"][0]["componentGroups"][0]["componentKey"] == "K"
    assert DetachedScanner().scan(_host(data))["totalDetachedComponents"] == 0


# ── registry and ordering ────────────────────────────────────


def test_registry():
    assert set(SCANNERS) == {"usage", "detached"}
    assert isinstance(get_scanner("detached"), DetachedScanner)


def test_unknown_mode():
    import pytest
    with pytest.raises(ValueError):
        get_scanner("styles")


def test_collation_key_ordering():
    names = ["logo-small", "Logo", "Éclair", "eclair", "Banner", "banner"]
    assert sorted(names, key=collation_key) == ["banner", "Banner", "eclair", "Éclair", "Logo", "logo-small"]


def test_collation_key_punctuation_before_digits_before_letters():
    names = ["a1", "11", "_1", "-x", "1a"]
    assert sorted(names, key=collation_key) == ["-x", "_1", "11", "1a", "a1"]
