#!/usr/bin/env python3
"""
figma-component-search — 搜尋 Figma 檔案中的組件並輸出 JSON / 表格

  figma-component-search button
  figma-component-search --id 12:34 --verbose
  figma-component-search icon --output table
"""

import argparse
import contextlib
import json
import os
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .components import Component, extract_components
from .config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from .figma_reader import FigmaAPIClient, FigmaAPIError


def filter_components(components: list, term: str) -> list:
    """name / path / description 不分大小寫子字串比對."""
    needle = term.lower()
    return [
        c for c in components
        if needle in c.name.lower() or needle in c.path.lower() or needle in c.description.lower()
    ]


def component_to_dict(component: Component, verbose: bool = False) -> dict:
    data = {
        "id": component.id,
        "name": component.name,
        "path": component.path,
        "type": component.type,
        "description": component.description,
        "width": component.width,
        "height": component.height,
        "componentSetId": component.component_set_id,
        "componentSet": None,
    }
    if component.component_set:
        ref = component.component_set
        data["componentSet"] = {"id": ref.id, "name": ref.name, "path": ref.path}
    if verbose:
        data["node"] = component.node
    return data


def format_table(components: list) -> list:
    lines = []
    for index, c in enumerate(components, 1):
        lines.append(f"\n{index}. {c.name} ({c.id})")
        lines.append(f"   Path: {c.path}")
        lines.append(f"   Size: {c.width}x{c.height}px")
        if c.description:
            lines.append(f"   Description: {c.description}")
        if c.component_set:
            lines.append(f"   Component Set: {c.component_set.name} ({c.component_set_id})")
    return lines


def _resolve_file(args) -> tuple:
    """回傳 (token, file_id, page_selector)；--file-id 優先於設定檔."""
    token = os.environ.get("FIGMA_TOKEN")
    if args.file_id:
        if not token:
            raise ConfigError("Figma token is required: set the FIGMA_TOKEN environment variable")
        return token, args.file_id, None
    config = load_config(args.config, token=token)
    return config.token, config.file_id, config.pages


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="figma-component-search",
        description="Search for components in a Figma file and output their JSON structure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("searchTerm", nargs="?", default="", help="Term to search for in component names, paths, or descriptions")
    parser.add_argument("--id", "-i", help="Search for a specific component by ID")
    parser.add_argument("--verbose", "-v", action="store_true", help="Include the raw Figma node")
    parser.add_argument("--output", "-o", choices=["json", "table"], default="json", help="Output format")
    parser.add_argument("--file-id", help="Figma file ID (overrides the config file)")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    args = parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    try:
        token, file_id, pages = _resolve_file(args)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    print(f"📥 Fetching components from Figma file: {file_id}...", file=sys.stderr)
    client = FigmaAPIClient(token)
    try:
        figma_data = client.get_file(file_id)
    except FigmaAPIError as e:
        print("❌ Error fetching data from Figma API:")
        for line in e.describe():
            print(line)
        return 1

    with contextlib.redirect_stdout(sys.stderr):
        components = extract_components(figma_data.get("document", {}), pages)
    if args.searchTerm:
        components = filter_components(components, args.searchTerm)

    if args.id:
        match = next((c for c in components if c.id == args.id), None)
        if match is None:
            print(f"❌ Component with ID \"{args.id}\" not found")
            return 1
        components = [match]
        if args.output == "json":
            print(json.dumps(component_to_dict(match, args.verbose), indent=2, ensure_ascii=False))
            return 0

    if not components:
        print("No components found matching your criteria.")
        return 0

    if args.output == "json":
        print(json.dumps([component_to_dict(c, args.verbose) for c in components], indent=2, ensure_ascii=False))
    else:
        print(f"Found {len(components)} components:")
        for line in format_table(components):
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
