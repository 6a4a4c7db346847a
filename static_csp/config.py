"""
YAML configuration for static-csp.

A config file may name a base file with `extends: base.yaml`; the base is
loaded relative to the extending file and deep-merged underneath it.

Example:

    presets: [google-analytics, google-fonts]
    external:
      scripts: [https://cdn.example.com/widget.js]
    directives:
      img-src: ["'self'", 'data:', 'https:']
    nginx:
      output_path: dist/_csp/nginx.conf
      include_comments: true
    json: false
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

DEFAULT_CONFIG_FILE = 'static-csp.yaml'

TOP_LEVEL_KEYS = {'presets', 'external', 'directives', 'nginx', 'json'}


class ConfigError(Exception):
    pass


@dataclass
class NginxOptions:
    output_path: Optional[str] = None
    include_comments: bool = True


@dataclass
class JsonOptions:
    output_path: Optional[str] = None
    pretty: bool = True


@dataclass
class CspConfig:
    presets: List[str] = field(default_factory=list)
    directives: Dict[str, List[str]] = field(default_factory=dict)
    external_scripts: List[str] = field(default_factory=list)
    external_styles: List[str] = field(default_factory=list)
    # None disables the artifact
    nginx: Optional[NginxOptions] = field(default_factory=NginxOptions)
    json: Optional[JsonOptions] = field(default_factory=JsonOptions)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Configuration file {file_path} not found") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{file_path} must contain a mapping at the top level")
    return data


def merge_config(config_path: Path, _seen: Optional[set] = None) -> Dict[str, Any]:
    """Load a configuration file merged over the file it extends, if any."""
    seen = _seen or set()
    resolved = config_path.resolve()
    if resolved in seen:
        raise ConfigError(f"Circular 'extends' chain at {config_path}")
    seen.add(resolved)

    config = load_yaml_file(config_path)

    extends_file = config.pop('extends', None)
    if extends_file is not None and not isinstance(extends_file, str):
        raise ConfigError(f"'extends' in {config_path} must be a file name")
    if extends_file:
        base_config = merge_config(config_path.parent / extends_file, seen)
        return deep_merge(base_config, config)

    return config


def _string_list(value: Any, what: str) -> List[str]:
    if value is None:
        return []
    # Allow a space separated string, as tokens appear in a CSP header
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{what}' must be a list of strings")
    return list(value)


def _directive_tokens(value: Any, what: str) -> List[str]:
    tokens = _string_list(value, what)
    # nginx expands $name inside add_header values and has no escape for '$'
    for token in tokens:
        if '$' in token:
            raise ConfigError(f"'{what}' token {token} contains '$', which nginx would expand as a variable")
    return tokens


def _options(value: Any, what: str, options_cls):
    if value is False:
        return None
    if value is None or value is True:
        return options_cls()
    if not isinstance(value, dict):
        raise ConfigError(f"'{what}' must be false or a mapping")
    try:
        return options_cls(**value)
    except TypeError:
        raise ConfigError(f"Unknown option in '{what}': {', '.join(sorted(value))}") from None


def config_from_dict(data: Dict[str, Any]) -> CspConfig:
    unknown = set(data) - TOP_LEVEL_KEYS
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    directives = data.get('directives') or {}
    if not isinstance(directives, dict):
        raise ConfigError("'directives' must be a mapping of directive name to sources")

    external = data.get('external') or {}
    if not isinstance(external, dict):
        raise ConfigError("'external' must be a mapping with 'scripts' and/or 'styles'")

    return CspConfig(
        presets=_string_list(data.get('presets'), 'presets'),
        directives={
            str(name): _directive_tokens(tokens, f'directives.{name}')
            for name, tokens in directives.items()
        },
        external_scripts=_string_list(external.get('scripts'), 'external.scripts'),
        external_styles=_string_list(external.get('styles'), 'external.styles'),
        nginx=_options(data.get('nginx'), 'nginx', NginxOptions),
        json=_options(data.get('json'), 'json', JsonOptions),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> CspConfig:
    """
    Load the configuration from path.

    Without a path, static-csp.yaml in the current directory is used if it
    exists, otherwise the defaults.
    """
    if path is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if not default_path.exists():
            return CspConfig()
        path = default_path

    return config_from_dict(merge_config(Path(path)))
