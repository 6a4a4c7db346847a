import json

import pytest

from static_csp.config import CspConfig, JsonOptions, NginxOptions
from static_csp.hasher import calculate_hash
from static_csp.presets import UnknownPresetError
from static_csp.processor import find_html_files, process_directory, run_build


def test_find_html_files_sorted_and_recursive(dist_dir, write_html):
    write_html('z.html', '')
    write_html('blog/post.html', '')
    write_html('a.html', '')
    write_html('assets/app.js', '')

    files = find_html_files(dist_dir)

    assert [p.relative_to(dist_dir).as_posix() for p in files] == ['a.html', 'blog/post.html', 'z.html']


def test_processes_nested_files(dist_dir, write_html):
    write_html('index.html', '<script>a</script>')
    write_html('blog/post.html', '<script>b</script>')

    result = process_directory(dist_dir)

    assert result.processed_files == 2
    assert len(result.collected.script_hashes) == 2


def test_rewrites_files_in_place(dist_dir, write_html):
    path = write_html('index.html', '<html><head><script>console.log("test")</script></head></html>')

    process_directory(dist_dir)

    digest = calculate_hash('console.log("test")')
    assert path.read_text(encoding='utf-8') == (
        f'<html><head><script integrity="{digest}">console.log("test")</script></head></html>'
    )


def test_collects_unique_hashes_across_files(dist_dir, write_html):
    write_html('a.html', '<script>code1</script>')
    write_html('b.html', '<script>code1</script><script>code2</script>')

    result = process_directory(dist_dir)

    assert result.collected.script_hashes == [calculate_hash('code1'), calculate_hash('code2')]


def test_hash_order_follows_sorted_paths(dist_dir, write_html):
    write_html('b.html', '<script>second</script>')
    write_html('a.html', '<script>first</script>')

    result = process_directory(dist_dir)

    assert result.collected.script_hashes == [calculate_hash('first'), calculate_hash('second')]


def test_directory_without_scripts(dist_dir, write_html):
    path = write_html('index.html', '<html><body>Hello</body></html>')

    result = process_directory(dist_dir)

    assert result.collected.script_hashes == []
    assert result.collected.style_hashes == []
    assert path.read_text(encoding='utf-8') == '<html><body>Hello</body></html>'


def test_undecodable_file_is_skipped(dist_dir, write_html, capsys):
    write_html('ok.html', '<script>ok()</script>')
    broken = dist_dir / 'broken.html'
    broken.write_bytes(b'<script>\xff\xfe</script>')

    result = process_directory(dist_dir)

    assert result.processed_files == 1
    assert result.skipped_files == [broken]
    assert result.collected.script_hashes == [calculate_hash('ok()')]
    assert 'Could not read' in capsys.readouterr().out


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        process_directory(tmp_path / 'nope')


def test_run_build_writes_artifacts(dist_dir, write_html):
    write_html('index.html', (
        '<script>init()</script>'
        '<style>body{margin:0}</style>'
        '<script src="https://cdn.example.com/lib.js"></script>'
    ))

    result = run_build(dist_dir, CspConfig(presets=['google-fonts']))

    nginx_conf = dist_dir / '_csp' / 'nginx.conf'
    hashes_json = dist_dir / '_csp' / 'hashes.json'
    assert result.artifacts == [nginx_conf, hashes_json]

    script_hash = calculate_hash('init()')
    conf = nginx_conf.read_text(encoding='utf-8')
    assert f"script-src 'self' '{script_hash}' https://cdn.example.com;" in conf
    assert conf.rstrip().endswith('always;')

    report = json.loads(hashes_json.read_text(encoding='utf-8'))
    assert report['scripts'] == [script_hash]
    assert report['styles'] == [calculate_hash('body{margin:0}')]
    assert report['externalScripts'] == ['https://cdn.example.com/lib.js']
    assert report['externalStyles'] == []
    assert report['directives']['font-src'] == ["'self'", 'https://fonts.gstatic.com']


def test_run_build_custom_outputs(tmp_path, dist_dir, write_html):
    write_html('index.html', '<script>x()</script>')
    config = CspConfig(
        nginx=NginxOptions(output_path=str(tmp_path / 'conf' / 'csp.conf'), include_comments=False),
        json=JsonOptions(output_path=str(tmp_path / 'csp.json'), pretty=False),
    )

    run_build(dist_dir, config)

    conf = (tmp_path / 'conf' / 'csp.conf').read_text(encoding='utf-8')
    assert conf.startswith('add_header Content-Security-Policy')
    assert '\n  ' not in (tmp_path / 'csp.json').read_text(encoding='utf-8')
    assert not (dist_dir / '_csp').exists()


def test_run_build_with_artifacts_disabled(dist_dir, write_html):
    write_html('index.html', '<script>x()</script>')

    result = run_build(dist_dir, CspConfig(nginx=None, json=None))

    assert result.artifacts == []
    assert not (dist_dir / '_csp').exists()


def test_run_build_adds_configured_external_urls(dist_dir, write_html):
    write_html('index.html', '<p>static</p>')
    config = CspConfig(
        external_scripts=['https://widgets.example.com/embed.js'],
        external_styles=['https://cdn.example.com/theme.css'],
        json=None,
    )

    result = run_build(dist_dir, config)

    assert 'https://widgets.example.com' in result.directives['script-src']
    assert 'https://cdn.example.com' in result.directives['style-src']


def test_dry_run_writes_nothing(dist_dir, write_html):
    path = write_html('index.html', '<script>x()</script>')

    result = run_build(dist_dir, dry_run=True)

    assert path.read_text(encoding='utf-8') == '<script>x()</script>'
    assert f"'{calculate_hash('x()')}'" in result.directives['script-src']
    assert result.artifacts == []
    assert not (dist_dir / '_csp').exists()


def test_unknown_preset_fails_before_touching_files(dist_dir, write_html):
    path = write_html('index.html', '<script>x()</script>')

    with pytest.raises(UnknownPresetError):
        run_build(dist_dir, CspConfig(presets=['not-a-preset']))

    assert path.read_text(encoding='utf-8') == '<script>x()</script>'
    assert not (dist_dir / '_csp').exists()


def test_second_run_is_stable(dist_dir, write_html):
    path = write_html('index.html', '<script>x()</script><style>p{}</style>')

    first = run_build(dist_dir)
    html_after_first = path.read_text(encoding='utf-8')
    second = run_build(dist_dir)

    assert path.read_text(encoding='utf-8') == html_after_first
    assert second.directives == first.directives


def test_crlf_line_endings_are_preserved(dist_dir):
    path = dist_dir / 'index.html'
    path.write_bytes(b'<p>x</p>\r\n<script>a()\r\nb()</script>\r\n')

    result = process_directory(dist_dir)

    # Browsers hash the body after turning CRLF into LF
    digest = calculate_hash('a()\nb()')
    assert result.collected.script_hashes == [digest]
    assert path.read_bytes() == (
        f'<p>x</p>\r\n<script integrity="{digest}">a()\r\nb()</script>\r\n'.encode('utf-8')
    )
