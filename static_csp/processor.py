"""
Process a directory of built HTML files.

Every *.html file under the directory is scanned, its inline scripts and styles
are hashed and stamped with integrity attributes, and the file is rewritten in
place. Hashes and external URLs from all files are aggregated and turned into a
single policy, written out as an nginx snippet and a JSON report.

Files are visited in sorted path order so repeated builds produce identical
policies.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import CspConfig
from .console import print_status
from .directives import build_directives
from .injector import process_html
from .models import CollectedSources
from .nginx import generate_nginx_config
from .presets import validate_presets

CSP_OUTPUT_DIR = '_csp'
NGINX_FILENAME = 'nginx.conf'
JSON_FILENAME = 'hashes.json'


@dataclass
class BuildResult:
    processed_files: int = 0
    skipped_files: List[Path] = field(default_factory=list)
    collected: CollectedSources = field(default_factory=CollectedSources)
    directives: Dict[str, List[str]] = field(default_factory=dict)
    artifacts: List[Path] = field(default_factory=list)


def find_html_files(dist_dir: Union[str, Path]) -> List[Path]:
    """Return every .html file below dist_dir, sorted by path."""
    root = Path(dist_dir)
    files = [path for path in root.rglob('*.html') if path.is_file()]
    return sorted(files, key=lambda path: path.relative_to(root).as_posix())


def process_directory(dist_dir: Union[str, Path], write: bool = True) -> BuildResult:
    dist_path = Path(dist_dir)
    if not dist_path.is_dir():
        raise FileNotFoundError(f"Build directory {dist_path} not found")

    result = BuildResult()

    for file_path in find_html_files(dist_path):
        try:
            # newline='' keeps CRLF files byte-for-byte outside the stamped tags
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                html = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print_status("WARNING", f"Could not read {file_path}: {e}")
            result.skipped_files.append(file_path)
            continue

        processed = process_html(html)

        if write and processed.html != html:
            try:
                with open(file_path, 'w', encoding='utf-8', newline='') as f:
                    f.write(processed.html)
            except OSError as e:
                # The hashes still describe the file as it is on disk
                print_status("WARNING", f"Could not write {file_path}: {e}")

        result.processed_files += 1
        result.collected.add(processed)

    return result


def build_report(collected: CollectedSources, directives: Dict[str, List[str]]) -> Dict[str, Any]:
    return {
        'scripts': collected.script_hashes,
        'styles': collected.style_hashes,
        'externalScripts': collected.external_scripts,
        'externalStyles': collected.external_styles,
        'directives': directives,
    }


def _write_file(output_path: Path, content: str) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding='utf-8')
    return output_path


def write_artifacts(result: BuildResult, config: CspConfig, dist_dir: Union[str, Path]) -> List[Path]:
    """Write the nginx snippet and JSON report enabled in config."""
    default_dir = Path(dist_dir) / CSP_OUTPUT_DIR
    written = []

    if config.nginx is not None:
        output_path = Path(config.nginx.output_path or default_dir / NGINX_FILENAME)
        content = generate_nginx_config(result.directives, config.nginx.include_comments)
        written.append(_write_file(output_path, content))

    if config.json is not None:
        output_path = Path(config.json.output_path or default_dir / JSON_FILENAME)
        report = build_report(result.collected, result.directives)
        if config.json.pretty:
            content = json.dumps(report, indent=2) + '\n'
        else:
            content = json.dumps(report, separators=(',', ':'))
        written.append(_write_file(output_path, content))

    return written


def run_build(dist_dir: Union[str, Path], config: Optional[CspConfig] = None, dry_run: bool = False) -> BuildResult:
    """
    Rewrite every HTML file under dist_dir and emit the resulting policy.

    Presets are validated before any file is touched. With dry_run nothing is
    written: the result still carries the hashes and directives.
    """
    config = config or CspConfig()
    validate_presets(config.presets)

    result = process_directory(dist_dir, write=not dry_run)
    result.collected.add_external_scripts(config.external_scripts)
    result.collected.add_external_styles(config.external_styles)
    result.directives = build_directives(result.collected, config)

    if not dry_run:
        result.artifacts = write_artifacts(result, config, dist_dir)

    return result
