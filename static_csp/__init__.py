"""
static-csp: Content-Security-Policy hashes for statically built sites.
"""

from .config import ConfigError, CspConfig, load_config
from .directives import build_directives, extract_origin, format_policy
from .hasher import calculate_hash, hash_inline_elements
from .injector import inject_integrity, process_html
from .models import (
    CollectedSources,
    DigestRecord,
    ElementKind,
    InlineElement,
    ProcessedDocument,
    ScanResult,
)
from .presets import PRESETS, UnknownPresetError, apply_presets, get_preset
from .processor import process_directory, run_build
from .scanner import extract_inline_elements, scan

__version__ = '0.1.0'

__all__ = [
    'CollectedSources',
    'ConfigError',
    'CspConfig',
    'DigestRecord',
    'ElementKind',
    'InlineElement',
    'PRESETS',
    'ProcessedDocument',
    'ScanResult',
    'UnknownPresetError',
    'apply_presets',
    'build_directives',
    'calculate_hash',
    'extract_inline_elements',
    'extract_origin',
    'format_policy',
    'get_preset',
    'hash_inline_elements',
    'inject_integrity',
    'load_config',
    'process_directory',
    'process_html',
    'run_build',
    'scan',
]
