"""CLI for element lookup and notification waits: python -m axnav"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Any

from axnav import application
from axnav._router import get_backend
from axnav.errors import AccessibilityError
from axnav.format import element_at, to_json
from axnav.notifications import default_timeout


def _parse_filter(raw: str) -> tuple[str, Any]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Filter must look like KEY=VALUE, got {raw!r}")
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def _load_backend(args: argparse.Namespace):
    if args.tree:
        from axnav.platforms.memory import MemoryBackend, MemoryNode

        with open(args.tree, encoding="utf-8") as f:
            root = MemoryNode.from_dict(json.load(f))
        backend = MemoryBackend()
        pid = 1 if args.pid is None else args.pid
        backend.add_application(pid, root, bundle_id=args.bundle_id)
        return backend
    return get_backend(args.platform)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="axnav: find accessibility elements by short names"
    )
    parser.add_argument(
        "element_type",
        nargs="?",
        default=None,
        help="Type to search for (e.g. button, text_fields). Plural returns all matches.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--pid", type=int, default=None, help="Application process id")
    target.add_argument("--bundle-id", type=str, default=None, help="Application bundle id")
    parser.add_argument(
        "--path", type=str, default="", help="Child-index path from the app root (e.g. 0.2)"
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        type=_parse_filter,
        default=[],
        metavar="KEY=VALUE",
        help="Attribute filter; VALUE is parsed as JSON when possible (repeatable)",
    )
    parser.add_argument("--attribute", type=str, default=None, help="Read one attribute")
    parser.add_argument("--wait", type=str, default=None, help="Wait for a notification")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Wait timeout in seconds (default: AXNAV_NOTIFICATION_TIMEOUT or 10)",
    )
    parser.add_argument(
        "--platform",
        type=str,
        default=None,
        choices=["macos", "memory"],
        help="Force backend (default: AXNAV_PLATFORM or auto-detect)",
    )
    parser.add_argument("--tree", type=str, default=None, help="Serve a JSON tree from memory")
    parser.add_argument("--verbose", action="store_true", help="Debug logging and timing")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    if args.pid is None and args.bundle_id is None and not args.tree:
        parser.error("one of --pid, --bundle-id or --tree is required")

    backend = _load_backend(args)
    t0 = time.perf_counter()
    try:
        if args.pid is not None or args.bundle_id is None:
            app = application(1 if args.pid is None else args.pid, backend=backend)
        else:
            app = application(bundle_id=args.bundle_id, backend=backend)
        element = element_at(app, args.path)

        if args.wait:
            timeout = args.timeout if args.timeout is not None else default_timeout()
            result: Any = element.wait_for_notification(args.wait, timeout)
        elif args.attribute:
            result = element.get_attribute(args.attribute)
        elif args.element_type:
            result = element.search(args.element_type, dict(args.filters))
        else:
            result = element
    except (AccessibilityError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(to_json(result))
    if args.verbose:
        print(f"Done in {(time.perf_counter() - t0) * 1000:.1f} ms", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
