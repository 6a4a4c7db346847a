"""
Regular expressions for the handful of tags the scanner and injector care about.

This is a lexical scan, not an HTML parser. An opening tag runs up to the first
'>' outside a quoted attribute value. A tag with an unterminated quote is not
recognized at all, and CSP fails closed on the missing hash.
"""

import re
from typing import Dict, Optional

# Attribute text of an opening tag; quoted values may contain '>'
_ATTRS = r'''(?P<attrs>(?:[^>"']|"[^"]*"|'[^']*')*)'''

SCRIPT_ELEMENT_RE = re.compile(
    r'<script(?=[\s/>])' + _ATTRS + r'>(?P<body>[\s\S]*?)</script\s*>',
    re.IGNORECASE,
)
STYLE_ELEMENT_RE = re.compile(
    r'<style(?=[\s/>])' + _ATTRS + r'>(?P<body>[\s\S]*?)</style\s*>',
    re.IGNORECASE,
)
LINK_TAG_RE = re.compile(r'<link(?=[\s/>])' + _ATTRS + r'>', re.IGNORECASE)

ATTRIBUTE_RE = re.compile(
    r'''(?P<name>[^\s"'<>/=]+)'''
    r'''(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?'''
)


def parse_attributes(attrs: str) -> Dict[str, Optional[str]]:
    """
    Parse the attribute text of an opening tag into a dict.

    Names are lower-cased; the first occurrence of a name wins, as in browsers.
    Attributes without a value map to None.
    """
    attributes: Dict[str, Optional[str]] = {}
    for match in ATTRIBUTE_RE.finditer(attrs):
        name = match.group('name').lower()
        if name in attributes:
            continue
        value = match.group('dq')
        if value is None:
            value = match.group('sq')
        if value is None:
            value = match.group('bare')
        attributes[name] = value
    return attributes
