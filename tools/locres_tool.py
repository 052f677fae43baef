#!/usr/bin/env python3
"""
locres_tool.py - Inspect .locmeta and .locres files

Usage:
  # Summary of a descriptor or resource file
  python locres_tool.py info Game.locmeta
  python locres_tool.py info fi/Game.locres

  # Human-readable YAML listing of a resource file
  python locres_tool.py dump fi/Game.locres
  python locres_tool.py dump fi/Game.locres -o Game.fi.yaml
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from loc_errors import LocError
from locmeta import LOCMETA_EXTENSION, Locmeta, LocmetaFile
from locres import LOCRES_EXTENSION, Locres, LocresFile, build_string_table


def locmeta_info(locmeta: Locmeta) -> List[str]:
    lines = [
        f"Format: locmeta {locmeta.version.name}",
        f"Native culture: {locmeta.native_culture}",
        f"Native locres: {locmeta.native_locres}",
    ]
    if locmeta.compiled_cultures is not None:
        cultures = ', '.join(locmeta.compiled_cultures) or '(none)'
        lines.append(f"Compiled cultures ({len(locmeta.compiled_cultures)}): {cultures}")
    return lines


def locres_info(locres: Locres) -> List[str]:
    table = build_string_table(locres)
    shared = sum(1 for row in table if row.ref_count > 1)
    return [
        f"Format: locres {locres.version.name}",
        f"Namespaces: {locres.count}",
        f"Keys: {locres.entry_count}",
        f"Unique translations: {len(table)} ({shared} shared)",
    ]


def locres_listing(locres: Locres) -> Dict[str, Any]:
    """Build a plain-dict view of a dictionary for YAML output."""
    namespaces = {}
    for namespace in locres:
        namespaces[namespace.name] = {
            entry.key: {
                'translation': entry.translation,
                'source_hash': f'0x{entry.source_hash:08X}',
            }
            for entry in namespace
        }
    return {
        'version': locres.version.name,
        'namespaces': namespaces,
    }


def cmd_info(path: Path) -> None:
    if str(path).endswith(LOCMETA_EXTENSION):
        lines = locmeta_info(LocmetaFile(path).read())
    else:
        lines = locres_info(LocresFile(path).read())
    print(f"File: {path} ({path.stat().st_size} bytes)")
    print('\n'.join(lines))


def cmd_dump(path: Path, output: Optional[Path] = None) -> None:
    locres = LocresFile(path).read()
    text = yaml.safe_dump(locres_listing(locres), default_flow_style=False,
                          sort_keys=False, allow_unicode=True)
    if output:
        output.write_text(text, encoding='utf-8')
        print(f"Dumped {locres.entry_count} keys to {output}", file=sys.stderr)
    else:
        print(text, end='')


def main(argv=None):
    parser = argparse.ArgumentParser(
        description=f'Inspect {LOCMETA_EXTENSION} and {LOCRES_EXTENSION} files')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    inf = subparsers.add_parser('info', help='Show file summary')
    inf.add_argument('input', type=Path, help='Input .locmeta or .locres file')

    dmp = subparsers.add_parser('dump', help='List resource entries as YAML')
    dmp.add_argument('input', type=Path, help='Input .locres file')
    dmp.add_argument('-o', '--output', type=Path, help='Output YAML file')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.command == 'info':
            cmd_info(args.input)
        elif args.command == 'dump':
            cmd_dump(args.input, args.output)
    except (LocError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
