#!/usr/bin/env python3
"""
figma-asset-downloader CLI — 由 Figma 組件匯出 Android / iOS 素材

  figma-asset-downloader icon/home img/banner   # 指定組件名稱（精確比對）
  figma-asset-downloader --all                  # 全部組件
  figma-asset-downloader --section "Icons / Nav"  # path 含指定字串的組件
  figma-asset-downloader --find-duplicate       # 列出重名的 icon/img 組件
"""

import argparse
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from . import __version__
from .components import extract_components
from .config import DEFAULT_CONFIG_PATH, AssetConfig, ConfigError, load_config
from .exporter import AssetExporter, ExportReport
from .figma_reader import FigmaAPIClient, FigmaAPIError
from .resolver import (
    AmbiguousComponentsError,
    ResolutionError,
    ResolutionRequest,
    find_duplicates,
    format_duplicate_report,
    resolve,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-asset-downloader",
        description="Download and convert Figma assets for Android and iOS projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("componentNames", nargs="*", help="Component names to download (e.g. icon/home img/banner)")
    parser.add_argument("--all", action="store_true", help="Download all components")
    parser.add_argument("--section", help="Download components whose path contains this text")
    parser.add_argument("--find-duplicate", action="store_true", help="List icon/img names used by more than one component")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    return parser


def request_from_args(args) -> ResolutionRequest:
    if args.all:
        return ResolutionRequest.for_all()
    if args.section is not None:
        return ResolutionRequest.for_section(args.section)
    return ResolutionRequest.for_names(args.componentNames)


def fetch_components(client: FigmaAPIClient, config: AssetConfig) -> list:
    print(f"📥 Fetching components from Figma: {config.file_id}")
    figma_data = client.get_file(config.file_id)
    components = extract_components(figma_data.get("document", {}), config.pages)
    print(f"   ✅ Found {len(components)} components")
    return components


def cmd_find_duplicate(components: list, config: AssetConfig) -> int:
    groups = find_duplicates(components)
    if not groups:
        print("   ✅ No duplicate icon/img component names.")
        return 0
    print(f"   ⚠️  {len(groups)} duplicate component names:")
    for line in format_duplicate_report(groups, config.file_id):
        print(line)
    return 0


def print_resolution_error(error: ResolutionError, config: AssetConfig) -> None:
    if isinstance(error, AmbiguousComponentsError):
        print("❌ Multiple components found with the same name; rename them in Figma first:")
        for line in format_duplicate_report(error.conflicts, config.file_id):
            print(line)
        return
    print(f"❌ {error}")


def print_summary(report: ExportReport, skipped=()) -> None:
    print()
    print(f"✅ Exported {len(report.processed)} components ({len(report.written)} files)")
    if report.failed:
        print(f"⚠️  Failed ({len(report.failed)}):")
        for name in report.failed:
            print(f"     - {name}")
    if report.not_found:
        print(f"❓ Not found ({len(report.not_found)}):")
        for name in report.not_found:
            print(f"     - {name}")
    if skipped:
        print(f"⏭️  Skipped, not icon/ or img/ ({len(skipped)}):")
        for name in skipped:
            print(f"     - {name}")


def cmd_export(client: FigmaAPIClient, components: list, request: ResolutionRequest, config: AssetConfig) -> int:
    try:
        resolution = resolve(components, request)
    except ResolutionError as e:
        print_resolution_error(e, config)
        return 1

    if not request.names:
        # all / section 模式不因重名中止，但同名檔案會互相覆蓋
        groups = find_duplicates(resolution.components)
        if groups:
            print(f"   ⚠️  {len(groups)} names are shared by several components; later ones overwrite earlier files:")
            for line in format_duplicate_report(groups, config.file_id):
                print(line)

    print(f"   ✅ Resolved {len(resolution.components)} components")
    exporter = AssetExporter(client, config)
    report = exporter.export(resolution.components, not_found=resolution.not_found)
    # 僅回報明確指定的非素材名稱
    skipped = [c.name for c in resolution.components if c.category is None] if request.names else []
    print_summary(report, skipped)
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    request = request_from_args(args)
    if request.is_empty and not args.find_duplicate:
        parser.print_help()
        return 0
    if args.componentNames and (args.all or args.section is not None):
        parser.error("component names cannot be combined with --all or --section")
    if args.all and args.section is not None:
        parser.error("--all and --section are mutually exclusive")

    load_dotenv(find_dotenv(usecwd=True))
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"❌ {e}")
        return 1
    print(f"   ✅ Loaded configuration for file: {config.file_id} ({config.platform})")

    client = FigmaAPIClient(config.token)
    try:
        components = fetch_components(client, config)
    except FigmaAPIError as e:
        print("❌ Error fetching components from Figma")
        for line in e.describe():
            print(line)
        return 1

    if args.find_duplicate:
        return cmd_find_duplicate(components, config)
    return cmd_export(client, components, request, config)


if __name__ == "__main__":
    sys.exit(main())
