#!/usr/bin/env python3
"""
browser-actions - Action catalogue inspector

Prints what a model would be shown for a given page, or checks an action
call the way execute() would before any handler runs.

Usage:
    python run.py                                   # Prompt text for a page-less turn
    python run.py --url https://docs.google.com/x   # Actions offered on that page
    python run.py --format json                     # Tool catalogue as JSON
    python run.py --include go_to_url --include done --format schema
    python run.py --check '{"go_to_url": {"url": "https://example.com"}}'
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv

from browser_actions.config import get_validated_config, load_config
from browser_actions.controller import Controller
from browser_actions.registry import ActionCall, ActionNotApplicable, PageState, Registry, RegistryError

# Load environment variables
load_dotenv()


def check_call(registry: Registry, call: Mapping[str, Any], page: PageState | None = None) -> dict[str, Any]:
    """Validate a model's action call without running it.

    Returns:
        {"action": name, "params": validated arguments with defaults filled}

    Raises:
        RegistryError: The call would be rejected by execute().
    """
    action = ActionCall.from_dict(call)
    descriptor = registry.lookup(action.name)
    args = descriptor.param_schema.validate(
        action.params, action=action.name, coerce=registry.engine.coerce_types
    )
    if not registry.matcher.is_available(descriptor, page):
        raise ActionNotApplicable(action.name, page.url if page else None)
    return {"action": action.name, "params": args}


def main(argv: list[str] | None = None) -> None:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Inspect the browser action catalogue"
    )
    parser.add_argument(
        "--config", default=None, help="Path to config file (default: config/config.yaml)"
    )
    parser.add_argument("--url", default=None, help="URL of the current page")
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        help="Only include this action in the catalogue (repeatable)",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json", "schema"],
        default="text",
        help="text: prompt lines, json: tool list, schema: selection JSON schema",
    )
    parser.add_argument(
        "--check",
        default=None,
        metavar="CALL_JSON",
        help='Validate an action call such as \'{"wait": {"seconds": 2}}\'',
    )
    args: argparse.Namespace = parser.parse_args(argv)

    call = None
    if args.check is not None:
        try:
            call = json.loads(args.check)
        except json.JSONDecodeError as e:
            parser.error(f"--check is not valid JSON: {e}")

    load_config(args.config)
    config = get_validated_config()
    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    controller = Controller.from_config(config)
    page = PageState(url=args.url) if args.url else None

    try:
        if call is not None:
            payload = check_call(controller.registry, call, page)
            print(json.dumps(payload, indent=2))
        elif args.format == "text":
            print(controller.describe(page))
        else:
            catalogue = controller.registry.build_schema(args.include, page)
            payload = catalogue.tools if args.format == "json" else catalogue.to_json_schema()
            print(json.dumps(payload, indent=2))
    except RegistryError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
