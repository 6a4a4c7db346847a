from typing import Dict, List

from .directives import format_policy
from .hasher import HASH_ALGORITHM

HEADER_NAME = 'Content-Security-Policy'


def count_hashes(tokens: List[str]) -> int:
    return sum(1 for token in tokens if token.startswith(f"'{HASH_ALGORITHM}-"))


def generate_nginx_config(directives: Dict[str, List[str]], include_comments: bool = True) -> str:
    """Render the directive map as an nginx add_header snippet."""
    policy = format_policy(directives).replace('"', '\\"')

    lines = []
    if include_comments:
        lines.extend([
            f"# {HEADER_NAME} generated by static-csp",
            "# Include this file from a server or location block:",
            "#   include /path/to/this/nginx.conf;",
            f"# Script hashes: {count_hashes(directives.get('script-src', []))}",
            f"# Style hashes: {count_hashes(directives.get('style-src', []))}",
        ])
    lines.append(f'add_header {HEADER_NAME} "{policy}" always;')
    lines.append('')
    return '\n'.join(lines)
