"""
Named bundles of third-party origins that can be allowed by name.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


class UnknownPresetError(ValueError):
    pass


@dataclass(frozen=True)
class Preset:
    name: str
    scripts: Tuple[str, ...] = ()
    styles: Tuple[str, ...] = ()
    fonts: Tuple[str, ...] = ()
    connect: Tuple[str, ...] = ()


PRESETS: Dict[str, Preset] = {
    'google-analytics': Preset(
        name='google-analytics',
        scripts=(
            'https://www.googletagmanager.com',
            'https://www.google-analytics.com',
        ),
        connect=(
            'https://www.google-analytics.com',
            'https://analytics.google.com',
            'https://stats.g.doubleclick.net',
        ),
    ),
    'cloudflare-insights': Preset(
        name='cloudflare-insights',
        scripts=('https://static.cloudflareinsights.com',),
        connect=('https://cloudflareinsights.com',),
    ),
    'google-fonts': Preset(
        name='google-fonts',
        styles=('https://fonts.googleapis.com',),
        fonts=('https://fonts.gstatic.com',),
    ),
}


@dataclass
class PresetResources:
    scripts: List[str]
    styles: List[str]
    fonts: List[str]
    connect: List[str]


def get_preset(name: str) -> Preset:
    try:
        return PRESETS[name]
    except KeyError:
        known = ', '.join(sorted(PRESETS))
        raise UnknownPresetError(f"Unknown preset: {name} (known presets: {known})") from None


def validate_presets(names: Iterable[str]) -> None:
    """Raise UnknownPresetError for the first name that isn't registered."""
    for name in names:
        get_preset(name)


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


def apply_presets(names: Iterable[str]) -> PresetResources:
    """Merge the origins of several presets, deduplicated per category in order."""
    scripts: List[str] = []
    styles: List[str] = []
    fonts: List[str] = []
    connect: List[str] = []

    for name in names:
        preset = get_preset(name)
        scripts.extend(preset.scripts)
        styles.extend(preset.styles)
        fonts.extend(preset.fonts)
        connect.extend(preset.connect)

    return PresetResources(
        scripts=_unique(scripts),
        styles=_unique(styles),
        fonts=_unique(fonts),
        connect=_unique(connect),
    )
