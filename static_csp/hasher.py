import base64
import hashlib
from typing import Iterable, List

from .models import DigestRecord, ElementKind, InlineElement

HASH_ALGORITHM = 'sha256'


def calculate_hash(content: str) -> str:
    """Return the 'sha256-<base64>' digest of the exact content bytes."""
    # CSP requires the hash of the raw bytes, whitespace included
    digest = hashlib.sha256(content.encode('utf-8')).digest()
    b64 = base64.b64encode(digest).decode('ascii')
    return f"{HASH_ALGORITHM}-{b64}"


def normalize_newlines(content: str) -> str:
    return content.replace('\r\n', '\n').replace('\r', '\n')


def hash_inline_elements(elements: Iterable[InlineElement], kind: ElementKind) -> List[DigestRecord]:
    """
    Hash each element body as the browser will see it.

    The HTML parser turns CR LF and lone CR into LF before a script or style
    body is hashed, so the digest is taken over the normalized text. The record
    keeps the body as written so the injector can still find the element.
    """
    return [
        DigestRecord(
            hash=calculate_hash(normalize_newlines(element.content)),
            content=element.content,
            kind=kind,
        )
        for element in elements
    ]
