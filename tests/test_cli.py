import json
import sys

import pytest
import requests
from hydra.core.global_hydra import GlobalHydra
from loguru import logger
from openpyxl import load_workbook

import coffee_extractor


PAGE = '<html><body><h1>Elida Gesha</h1><p>250g, 19.50 EUR, washed</p></body></html>'


class DummyResp:
    def __init__(self, status_code=200, data=None, text=''):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        return self._data


def completion(content):
    return {'choices': [{'message': {'role': 'assistant', 'content': content}}]}


@pytest.fixture
def run_cli(clean_env, tmp_path, monkeypatch):
    """Invoke the Hydra entry point with the given overrides."""
    clean_env.chdir(tmp_path)
    monkeypatch.setattr(requests, 'get', lambda url, headers=None, timeout=None: DummyResp(200, text=PAGE))

    def run(*overrides):
        argv = ['coffee_extractor.py', f'hydra.run.dir={tmp_path}/run', 'hydra.output_subdir=null',
                'hydra/job_logging=disabled', 'hydra/hydra_logging=disabled', 'logging.console=false']
        monkeypatch.setattr(sys, 'argv', argv + list(overrides))
        coffee_extractor.main()

    yield run
    if GlobalHydra().is_initialized():
        GlobalHydra.instance().clear()
    logger.remove()
    logger.add(sys.stderr)


def test_cli_prints_record_as_json(run_cli, clean_env, monkeypatch, capsys):
    clean_env.setenv('GITHUB_TOKEN', 'ghp_cli')
    monkeypatch.setattr(requests, 'post', lambda url, json=None, headers=None, timeout=None:
                        DummyResp(200, completion('{"price": "19.50", "weight": "250"}')))

    run_cli('url=https://thebarn.de/products/elida')

    record = json.loads(capsys.readouterr().out)
    assert record['price'] == '19.50'
    assert record['weight'] == '250'
    assert record['farmer'] is None


def test_cli_exports_when_output_is_set(run_cli, clean_env, monkeypatch, tmp_path):
    clean_env.setenv('OPENAI_API_KEY', 'sk-cli')
    monkeypatch.setattr(requests, 'post', lambda url, json=None, headers=None, timeout=None:
                        DummyResp(200, completion('```json\n{"price": "19.50", "processing": "washed"}\n```')))
    out = tmp_path / 'coffee.xlsx'

    run_cli('url=https://thebarn.de/products/elida', f'output={out}')

    sheet = load_workbook(out)['Coffee']
    row = [cell.value for cell in sheet[2]]
    assert row[0] == 'https://thebarn.de/products/elida'
    assert row[1] == '19.50'
    assert row[4] == 'washed'


def test_cli_exits_1_when_extraction_fails(run_cli, capsys):
    with pytest.raises(SystemExit) as exc:
        run_cli('url=https://thebarn.de/products/elida')

    assert exc.value.code == 1
    printed = json.loads(capsys.readouterr().out)
    assert printed['ok'] is False
    assert printed['error']['kind'] == 'missing_credential'


def test_cli_exits_1_when_page_fetch_fails(run_cli, clean_env, monkeypatch, capsys):
    clean_env.setenv('GITHUB_TOKEN', 'ghp_cli')
    monkeypatch.setattr(requests, 'get', lambda url, headers=None, timeout=None: DummyResp(404, text='gone'))

    with pytest.raises(SystemExit) as exc:
        run_cli('url=https://thebarn.de/products/missing')

    assert exc.value.code == 1
    assert capsys.readouterr().out == ''
