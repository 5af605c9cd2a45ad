"""Parser for design file JSON exports.

The exporter writes the document as a forest of pages, each holding a tree
of nodes, plus the component definitions and variables the nodes refer to.

The parser can accept:
1. A JSON file containing the full document export
2. A dict already loaded into memory

Node types that matter to the scanners:
- PAGE: top-level canvas (CANVAS in Figma REST exports is normalised to PAGE)
- INSTANCE: component instance, linked to a main component or detached
- anything else (FRAME, TEXT, RECTANGLE, GROUP, ...) only matters for its
  variable bindings
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

PAGE = "PAGE"
INSTANCE = "INSTANCE"

_PAGE_ALIASES = {"PAGE", "CANVAS"}

# Definition states of an instance
LINKED = "linked"
DETACHED = "detached"
UNKNOWN = "unknown"


class DocumentFormatError(ValueError):
    """The export is not a JSON object we know how to read."""


@dataclass
class ComponentDef:
    """A main component that instances are derived from."""
    id: str
    key: str = ""
    name: str = ""

    @property
    def group_key(self) -> str:
        """Stable identity used to merge instances: key, else node id."""
        return self.key or self.id


@dataclass
class Variable:
    id: str
    name: str = ""


@dataclass
class DesignNode:
    """Represents a node in the design document tree."""
    id: str
    type: str
    name: str = ""
    children: list["DesignNode"] = field(default_factory=list)
    bindings: dict = field(default_factory=dict)
    main_component: ComponentDef | None = None
    # LINKED, DETACHED (confirmed gone) or UNKNOWN (export says nothing)
    definition_state: str = UNKNOWN
    # Navigational only: the parent owns the child, never the reverse.
    parent: "DesignNode | None" = field(default=None, repr=False, compare=False)

    @property
    def is_page(self) -> bool:
        return self.type == PAGE

    @property
    def is_instance(self) -> bool:
        return self.type == INSTANCE

    def walk(self):
        """Yield this node and every descendant (pre-order, iterative)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def descendants(self):
        """Yield every node below this one, excluding itself."""
        walker = self.walk()
        next(walker)
        yield from walker

    def owning_page(self) -> "DesignNode | None":
        """Closest PAGE ancestor, or None for a detached subtree."""
        current = self.parent
        while current is not None:
            if current.is_page:
                return current
            current = current.parent
        return None


@dataclass
class DesignDocument:
    """Represents a parsed design document."""
    pages: list[DesignNode] = field(default_factory=list)
    components: dict[str, ComponentDef] = field(default_factory=dict)
    variables: dict[str, Variable] = field(default_factory=dict)
    name: str = ""
    source_file: str = ""
    _index: dict[str, DesignNode] | None = field(default=None, repr=False, compare=False)

    def node_by_id(self, node_id: str) -> DesignNode | None:
        """Look up any node (pages included) by its id."""
        if self._index is None:
            index: dict[str, DesignNode] = {}
            for page in self.pages:
                for node in page.walk():
                    index.setdefault(node.id, node)
            self._index = index
        return self._index.get(node_id)

    @property
    def all_instances(self) -> list[DesignNode]:
        """All component instances across all pages."""
        return [n for page in self.pages for n in page.walk() if n.is_instance]


def _str(value) -> str:
    return value if isinstance(value, str) else ""


def _parse_entries(raw, factory) -> dict:
    """Accept either a list of {id, ...} objects or an {id: {...}} mapping."""
    entries = {}
    if isinstance(raw, dict):
        raw = [dict(v, id=k) if isinstance(v, dict) else {"id": k} for k, v in raw.items()]
    if not isinstance(raw, list):
        return entries
    for item in raw:
        if not isinstance(item, dict):
            continue
        item_id = _str(item.get("id"))
        if item_id:
            entries[item_id] = factory(item)
    return entries


def _component_from(item: dict) -> ComponentDef:
    return ComponentDef(id=_str(item.get("id")), key=_str(item.get("key")), name=_str(item.get("name")))


def _variable_from(item: dict) -> Variable:
    return Variable(id=_str(item.get("id")), name=_str(item.get("name")))


def _lookup(component_id: str, components: dict[str, ComponentDef] | None) -> tuple[ComponentDef | None, str]:
    if components is None:
        return None, UNKNOWN
    main = components.get(component_id)
    return main, LINKED if main is not None else DETACHED


def _resolve_main_component(
    data: dict, components: dict[str, ComponentDef] | None
) -> tuple[ComponentDef | None, str]:
    """Resolve an instance's main component and how sure we are about it.

    Inline mainComponent wins over a componentId lookup. Only an explicit
    null, or an id missing from a components table the export ships,
    counts as detached. `components` is None when there is no table.
    """
    if "mainComponent" in data:
        main = data["mainComponent"]
        if main is None:
            return None, DETACHED
        if isinstance(main, dict) and (_str(main.get("key")) or _str(main.get("id"))):
            return _component_from(main), LINKED
        if isinstance(main, str) and main:
            return _lookup(main, components)
        return None, UNKNOWN
    component_id = data.get("componentId")
    if isinstance(component_id, str) and component_id:
        return _lookup(component_id, components)
    return None, UNKNOWN


def _make_node(data: dict, components: dict[str, ComponentDef] | None) -> DesignNode:
    node_type = _str(data.get("type")).upper() or "FRAME"
    if node_type in _PAGE_ALIASES:
        node_type = PAGE
    bindings = data.get("boundVariables")
    node = DesignNode(
        id=_str(data.get("id")),
        type=node_type,
        name=_str(data.get("name")),
        bindings=dict(bindings) if isinstance(bindings, dict) else {},
    )
    if node.is_instance:
        node.main_component, node.definition_state = _resolve_main_component(data, components)
    return node


def _parse_tree(data: dict, components: dict[str, ComponentDef] | None) -> DesignNode:
    """Build a node tree without recursion so deep exports parse fine."""
    root = _make_node(data, components)
    pending = [(root, data)]
    while pending:
        node, raw = pending.pop()
        raw_children = raw.get("children", [])
        if not isinstance(raw_children, list):
            continue
        for child_data in raw_children:
            if not isinstance(child_data, dict):
                continue
            child = _make_node(child_data, components)
            child.parent = node
            node.children.append(child)
            pending.append((child, child_data))
    return root


def parse_design_json(data: dict) -> DesignDocument:
    """Parse a design export structure into a DesignDocument."""
    if not isinstance(data, dict):
        raise DocumentFormatError(f"Expected a JSON object at the top level, got {type(data).__name__}")

    components = None
    if "components" in data:
        components = _parse_entries(data["components"], _component_from)
    variables = _parse_entries(data.get("variables", []), _variable_from)

    raw_pages = data.get("pages")
    if raw_pages is None and isinstance(data.get("document"), dict):
        raw_pages = data["document"].get("children", [])
    if raw_pages is None:
        raw_pages = []
    if not isinstance(raw_pages, list):
        raise DocumentFormatError("'pages' must be a list of page objects")

    pages = []
    for page_data in raw_pages:
        if not isinstance(page_data, dict):
            continue
        page = _parse_tree(page_data, components)
        page.type = PAGE
        pages.append(page)

    return DesignDocument(
        pages=pages,
        components=components or {},
        variables=variables,
        name=_str(data.get("name")),
    )


def load_design_file(path: str | Path) -> DesignDocument:
    """Load and parse a design JSON export file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"{path} is not valid JSON: {e}") from e

    doc = parse_design_json(data)
    doc.source_file = str(p)
    return doc
