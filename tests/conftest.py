import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest


@pytest.fixture
def dist_dir(tmp_path):
    """An empty build output directory."""
    path = tmp_path / "dist"
    path.mkdir()
    return path


@pytest.fixture
def write_html(dist_dir):
    """Write an HTML file relative to dist_dir and return its path."""
    def _write(relative_path, html):
        path = dist_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def no_config_file(tmp_path, monkeypatch):
    """Run from a directory without a static-csp.yaml."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
