#!/usr/bin/env python3
"""
Command line entry point for static-csp.

Usage:
    static-csp build [DIST] [--config FILE] [--preset NAME ...] [--dry-run]
    static-csp verify [NGINX_CONF]

`build` hashes every inline script and style under DIST (default: dist),
stamps integrity attributes into the HTML and writes the policy to
DIST/_csp/nginx.conf and DIST/_csp/hashes.json.

`verify` checks that every sha256 hash in a generated nginx snippet is
well formed.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, JsonOptions, NginxOptions, load_config
from .console import print_status
from .presets import PRESETS, UnknownPresetError
from .processor import CSP_OUTPUT_DIR, NGINX_FILENAME, run_build
from .verify import verify_nginx_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='static-csp',
        description='Hash inline scripts/styles in built HTML and generate a Content-Security-Policy.',
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    build = subparsers.add_parser('build', help='Process a build directory')
    build.add_argument('dist', nargs='?', default='dist', help='Directory containing built HTML (default: dist)')
    build.add_argument('--config', help='YAML configuration file (default: ./static-csp.yaml if present)')
    build.add_argument('--preset', action='append', default=[], choices=sorted(PRESETS),
                       help='Allow the origins of a preset (repeatable)')
    build.add_argument('--nginx-output', help='Where to write the nginx snippet')
    build.add_argument('--json-output', help='Where to write the JSON report')
    build.add_argument('--no-nginx', action='store_true', help='Do not write the nginx snippet')
    build.add_argument('--no-json', action='store_true', help='Do not write the JSON report')
    build.add_argument('--dry-run', action='store_true', help='Report hashes without writing any file')

    verify = subparsers.add_parser('verify', help='Check the hashes of a generated nginx snippet')
    verify.add_argument('nginx_conf', nargs='?', default=str(Path('dist') / CSP_OUTPUT_DIR / NGINX_FILENAME),
                        help='nginx snippet to check (default: dist/_csp/nginx.conf)')

    return parser


def run_build_command(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print_status("ERROR", str(e))
        return 1

    for name in args.preset:
        if name not in config.presets:
            config.presets.append(name)

    if args.no_nginx:
        config.nginx = None
    elif args.nginx_output:
        config.nginx = config.nginx or NginxOptions()
        config.nginx.output_path = args.nginx_output

    if args.no_json:
        config.json = None
    elif args.json_output:
        config.json = config.json or JsonOptions()
        config.json.output_path = args.json_output

    try:
        result = run_build(args.dist, config, dry_run=args.dry_run)
    except (UnknownPresetError, FileNotFoundError) as e:
        print_status("ERROR", str(e))
        return 1

    collected = result.collected
    print_status("INFO", f"Processed {result.processed_files} HTML files")
    print_status("INFO", f"Found {len(collected.script_hashes)} script hashes, "
                         f"{len(collected.style_hashes)} style hashes")
    for skipped in result.skipped_files:
        print_status("WARNING", f"Skipped {skipped}")

    if args.dry_run:
        for name, tokens in result.directives.items():
            print(f"  {name} {' '.join(tokens)}")
        print_status("SUCCESS", "Dry run complete, no files written")
        return 0

    for path in result.artifacts:
        print_status("SUCCESS", f"Wrote {path}")
    return 0


def run_verify_command(args: argparse.Namespace) -> int:
    try:
        with open(args.nginx_conf, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        print_status("ERROR", f"{args.nginx_conf} not found")
        return 1

    report = verify_nginx_config(content)
    if report.policy is None:
        print_status("ERROR", f"Could not find Content-Security-Policy header in {args.nginx_conf}")
        return 1

    print(f"Found {len(report.valid) + len(report.invalid)} CSP hashes")
    for hash_val in report.invalid:
        print(f"  ✗ sha256-{hash_val}")

    if report.ok:
        print_status("SUCCESS", "All CSP hashes are valid")
        return 0
    print_status("ERROR", f"{len(report.invalid)} CSP hashes are malformed")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == 'build':
        return run_build_command(args)
    return run_verify_command(args)


if __name__ == '__main__':
    sys.exit(main())
