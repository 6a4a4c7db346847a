"""
Check the hash tokens of a generated nginx Content-Security-Policy snippet.

Each 'sha256-...' token must be valid base64 of exactly 32 bytes; anything else
would be silently ignored by browsers and block the inline element it was
meant to allow.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import List, Optional

CSP_HEADER_RE = re.compile(r'add_header\s+Content-Security-Policy\s+"((?:[^"\\]|\\.)*)"(?:\s+always)?\s*;')
HASH_TOKEN_RE = re.compile(r"'sha256-([^']*)'")

SHA256_DIGEST_SIZE = 32


@dataclass
class VerifyReport:
    policy: Optional[str] = None
    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.policy is not None and not self.invalid


def is_valid_sha256(value: str) -> bool:
    """True if value is the base64 encoding of a 32 byte digest."""
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return len(decoded) == SHA256_DIGEST_SIZE


def verify_nginx_config(content: str) -> VerifyReport:
    """Verify all CSP hashes found in the add_header line of content"""
    report = VerifyReport()

    csp_match = CSP_HEADER_RE.search(content)
    if not csp_match:
        return report
    report.policy = csp_match.group(1)

    for hash_val in HASH_TOKEN_RE.findall(report.policy):
        if is_valid_sha256(hash_val):
            report.valid.append(hash_val)
        else:
            report.invalid.append(hash_val)

    return report
