# tests/test_cli.py
"""CLI exit codes and output, with the browser session replaced by fixtures."""

import json
import os

import pytest

from kioskboard import cli
from kioskboard.exceptions import KioskUnavailableError
from kioskboard.scraper.source import StaticPageSource
from tests.helpers import read_fixture

SUITE = '0f4c2b7e-4f7a-4a55-9d0e-3c1f2a9b8d7e'


class FakeSession:
    """Stands in for KioskSession; serves a fixture as the page source."""

    html = read_fixture('kiosk_structured.html')
    source_factory = StaticPageSource

    def __init__(self, url, headless=True):
        self.url = url
        self.source = None

    def __enter__(self):
        self.source = self.source_factory(self.html, url=self.url)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.source = None

    def screenshot(self, path):
        pass

    def dump_html(self, path):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.html)


@pytest.fixture
def fake_session(monkeypatch):
    monkeypatch.setattr('kioskboard.scraper.session.KioskSession', FakeSession)
    return FakeSession


def _args(tmp_path, *extra):
    return [SUITE, '--duration', '0', '--settle', '0', '--out-dir', str(tmp_path), *extra]


def test_missing_target_exits_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
    assert 'usage' in capsys.readouterr().err.lower()


def test_successful_scrape_writes_json(tmp_path, fake_session):
    dump = tmp_path / 'dump.html'
    code = cli.main(_args(tmp_path, '--dump-raw', str(dump)))

    assert code == 0
    with open(os.path.join(str(tmp_path), f'{SUITE}.json'), 'r', encoding='utf-8') as f:
        data = json.load(f)
    assert data['suite'] == SUITE
    assert data['target'].endswith(SUITE)
    assert len(data['games']) == 2
    assert dump.exists()


def test_unreachable_page_exits_1(tmp_path, monkeypatch):
    class DeadSession(FakeSession):
        def __enter__(self):
            raise KioskUnavailableError('net::ERR_NAME_NOT_RESOLVED')

    monkeypatch.setattr('kioskboard.scraper.session.KioskSession', DeadSession)

    assert cli.main(_args(tmp_path)) == 1
    assert not os.path.exists(os.path.join(str(tmp_path), f'{SUITE}.json'))


def test_failure_mid_run_flushes_partial_results(tmp_path, fake_session):
    class FlakySource(StaticPageSource):
        calls = 0

        def current_dom_state(self):
            self.calls += 1
            if self.calls > 1:
                raise RuntimeError('Target closed')
            return super().current_dom_state()

    fake_session.source_factory = FlakySource
    try:
        code = cli.main([SUITE, '--duration', '5', '--interval', '0', '--no-nudge',
                         '--out-dir', str(tmp_path)])
    finally:
        fake_session.source_factory = StaticPageSource

    assert code == 1
    with open(os.path.join(str(tmp_path), f'{SUITE}.json'), 'r', encoding='utf-8') as f:
        data = json.load(f)
    assert len(data['games']) == 2


def test_failed_screenshot_still_saves_result(tmp_path, monkeypatch, capsys):
    class NoScreenshotSession(FakeSession):
        def screenshot(self, path):
            raise RuntimeError('Target closed')

    monkeypatch.setattr('kioskboard.scraper.session.KioskSession', NoScreenshotSession)
    dump = tmp_path / 'dump.html'

    code = cli.main(_args(tmp_path, '--screenshot', str(tmp_path / 'k.png'), '--dump-raw', str(dump)))

    assert code == 0
    assert os.path.exists(os.path.join(str(tmp_path), f'{SUITE}.json'))
    assert dump.exists()
    assert 'Could not save screenshot' in capsys.readouterr().out
