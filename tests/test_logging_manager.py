import json
import sys

import pytest
from loguru import logger
from omegaconf import OmegaConf

from logging_manager import LoggingManager


@pytest.fixture(autouse=True)
def restore_loguru():
    yield
    logger.remove()
    logger.add(sys.stderr)


def logging_config(**overrides):
    section = {'level': 'INFO', 'format': 'detailed', 'console': False, 'file': None,
               'rotation': '1 MB', 'retention': '1 day', 'colorize': False}
    section.update(overrides)
    return OmegaConf.create({'logging': section})


def test_json_file_sink_serializes_structured_fields(tmp_path):
    log_file = tmp_path / 'logs' / 'extractor.log'
    LoggingManager().setup_logging(logging_config(format='json', file=str(log_file)))

    logger.info('Using provider', provider='openai', inferred=True)
    logger.remove()

    records = [json.loads(line)['record'] for line in log_file.read_text(encoding='utf-8').splitlines()]
    used = [r for r in records if r['message'] == 'Using provider']
    assert len(used) == 1
    assert used[0]['extra'] == {'provider': 'openai', 'inferred': True}
    assert used[0]['level']['name'] == 'INFO'


def test_plain_file_sink_respects_level(tmp_path):
    log_file = tmp_path / 'extractor.log'
    manager = LoggingManager()
    manager.setup_logging(logging_config(level='warning', file=str(log_file)))

    logger.info('Prompt built', chars=120)
    manager.log_error('Error scraping page', url='https://x', error='HTTP 404')
    logger.remove()

    content = log_file.read_text(encoding='utf-8')
    assert 'Prompt built' not in content
    assert 'Error scraping page' in content
    assert "'url': 'https://x'" in content


def test_console_sink_writes_to_stderr(capsys):
    LoggingManager().setup_logging(logging_config(console=True, format='simple'))
    logger.warning('Provider inferred from credential')

    captured = capsys.readouterr()
    assert 'WARNING - Provider inferred from credential' in captured.err
    assert captured.out == ''
