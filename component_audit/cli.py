"""CLI entry point for component-audit."""

import argparse
import json
import os
import sys

from .document import DocumentFormatError
from .utils import c, log, print_box, print_table

DEFAULT_MODE = "usage"
MODES = ["usage", "detached"]


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="component-audit",
        description="component-audit: component instance and detached-link scanner for design files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  component-audit scan design-export.json
  component-audit scan design-export.json --mode detached --format markdown
  component-audit scan design-export.json --format json --output report.json
  component-audit navigate design-export.json 12:345
  component-audit serve design-export.json --mode detached
  component-audit badge design-export.json --output health.png

environment:
  COMPONENT_AUDIT_MODE        default scan mode (usage | detached)
  COMPONENT_AUDIT_BADGE_PATH  default scorecard path (scorecard.png)
  NO_COLOR                    disable colored output
""",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # scan: run one pipeline over the whole file
    p_scan = sub.add_parser("scan", help="Scan a design export and summarize instances or detached links")
    p_scan.add_argument("file", type=str, help="Path to the design JSON export")
    p_scan.add_argument("--mode", type=str, default=None, choices=MODES,
                        help="Pipeline to run (default: $COMPONENT_AUDIT_MODE or usage)")
    p_scan.add_argument("--format", type=str, default="summary",
                        choices=["summary", "json", "markdown"],
                        help="Output format (default: summary)")
    p_scan.add_argument("--output", type=str, default=None, help="Write the report to this file")

    # navigate: resolve a node's page the way the panel would
    p_nav = sub.add_parser("navigate", help="Locate a node and the page that owns it")
    p_nav.add_argument("file", type=str)
    p_nav.add_argument("node_id", type=str, help="Node id as reported by scan")

    # serve: line-delimited JSON bridge for a results panel
    p_serve = sub.add_parser("serve", help="Answer panel messages (one JSON object per line) on stdin/stdout")
    p_serve.add_argument("file", type=str)
    p_serve.add_argument("--mode", type=str, default=None, choices=MODES)

    # badge: link health scorecard
    p_badge = sub.add_parser("badge", help="Render a link-health scorecard PNG")
    p_badge.add_argument("file", type=str)
    p_badge.add_argument("--output", type=str, default=None,
                         help="PNG path (default: $COMPONENT_AUDIT_BADGE_PATH or scorecard.png)")

    return parser


def _get_mode(args) -> str:
    mode = getattr(args, "mode", None) or os.environ.get("COMPONENT_AUDIT_MODE") or DEFAULT_MODE
    if mode not in MODES:
        print(c(f"  Error: unknown scan mode {mode!r} (expected one of: {', '.join(MODES)})", "red"),
              file=sys.stderr)
        sys.exit(2)
    return mode


def _load_host(path: str):
    from .document import load_design_file
    from .host import DocumentHost

    doc = load_design_file(path)
    log(f"  Loaded: {path} ({len(doc.pages)} pages)")
    return DocumentHost(doc)


def cmd_scan(args):
    """Run one scanning pipeline against a design export."""
    from .scanners import get_scanner

    mode = _get_mode(args)
    host = _load_host(args.file)
    scanner = get_scanner(mode)
    summary = scanner.scan(host)
    if not summary["pageBreakdown"]:
        summary = scanner.empty_summary()

    if args.format == "json":
        content = json.dumps(summary, indent=2, ensure_ascii=False) + "\n"
    elif args.format == "markdown":
        from .formatters.markdown import generate_markdown
        content = generate_markdown(summary, mode, source=args.file)
    else:
        content = None

    if content is None:
        _print_scan_summary(summary, mode)
        return

    if args.output:
        from .utils import write_report
        path = write_report(content, args.output)
        print(c(f"  Written: {path}", "green"))
    else:
        print(content)


def _print_scan_summary(summary: dict, mode: str):
    """Print the scan summary box and a per-page table."""
    pages = summary["pageBreakdown"]

    if mode == "usage":
        lines = [
            "component-audit: instance usage",
            "",
            f"Instances:          {summary['totalInstances']}",
            f"Unique components:  {summary['totalUniqueComponents']}",
            f"Pages with usage:   {len(pages)}",
        ]
        rows = [[p["pageName"][:30], str(p["instanceCount"]), str(len(p["componentGroups"]))]
                for p in pages]
        headers, widths = ["Page", "Instances", "Components"], [30, 9, 10]
    else:
        lines = [
            "component-audit: detached links",
            "",
            f"Detached components:  {summary['totalDetachedComponents']}",
            f"Broken bindings:      {summary['totalDetachedVariables']}",
            f"Pages with issues:    {len(pages)}",
        ]
        rows = []
        for p in pages:
            comps = sum(1 for i in p["items"] if i["type"] == "component")
            rows.append([p["pageName"][:30], str(comps), str(len(p["items"]) - comps)])
        headers, widths = ["Page", "Detached", "Bindings"], [30, 8, 8]

    print()
    print_box(lines)
    print()

    if not pages:
        print(c("  Nothing found.", "green"))
        print()
        return

    print_table(headers, rows, widths)
    print()


def cmd_navigate(args):
    """Resolve a node and report the page that would be activated."""
    from .navigator import focus_node

    host = _load_host(args.file)
    errors: list[dict] = []
    if not focus_node(host, args.node_id, errors.append):
        print(c(f"  Error: {errors[0]['message']} ({args.node_id})", "red"))
        sys.exit(1)

    node = host.viewport[0]
    page = node.owning_page()
    print(c(f"\n  {node.name or node.type} ({node.id})", "bold"))
    if page is not None:
        print(f"  Page: {page.name} ({page.id})")
    else:
        print(c("  Not on any page", "yellow"))
    print()


def cmd_serve(args):
    """Answer panel messages read from stdin, one JSON object per line."""
    from .scanners import get_scanner
    from .session import PanelSession

    mode = _get_mode(args)
    host = _load_host(args.file)

    def post_message(message: dict):
        sys.stdout.write(json.dumps(message, ensure_ascii=False) + "\n")
        sys.stdout.flush()

    session = PanelSession(host, get_scanner(mode), post_message)
    session.start()

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            log(f"  Ignoring undecodable message: {e}")
            continue
        session.handle_message(message)


def cmd_badge(args):
    """Render the link-health scorecard for a design export."""
    from .badge import generate_scorecard, get_badge_path
    from .scanners import DetachedScanner, UsageScanner
    from .scoring import compute_health

    host = _load_host(args.file)
    health = compute_health(UsageScanner().scan(host), DetachedScanner().scan(host))
    path = generate_scorecard(health, get_badge_path(args))
    print(c(f"  Link health: {health['pct']}% ({health['band']})", "bold"))
    print(c(f"  Written: {path}", "green"))


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)

    commands = {
        "scan": cmd_scan,
        "navigate": cmd_navigate,
        "serve": cmd_serve,
        "badge": cmd_badge,
    }

    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)
    except (FileNotFoundError, DocumentFormatError) as e:
        print(c(f"  Error: {e}", "red"), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
