import pytest
from loguru import logger

from errors import CredentialMismatch, MissingCredential
from utils.provider_resolver import (
    PROVIDER_GITHUB,
    PROVIDER_OPENAI,
    looks_like_openai_key,
    mask_credential,
    normalize_credential,
    resolve_provider,
)


@pytest.mark.parametrize('raw, expected', [
    ('"Bearer abc123" ', 'abc123'),
    ("'ghp_token'", 'ghp_token'),
    ('bearer sk-xyz', 'sk-xyz'),
    ('  BEARER   tok  ', 'tok'),
    ('plain', 'plain'),
    ('', ''),
    (None, ''),
    ('Bearer Bearer x', 'x'),
    ('\'"tok"\'', 'tok'),
])
def test_normalize_credential(raw, expected):
    assert normalize_credential(raw) == expected


@pytest.mark.parametrize('raw', [
    '"Bearer abc123" ', '"""', "'\"tok\"'", 'Bearer Bearer x', '" Bearer "', "'", 'sk-abc', '  ',
])
def test_normalize_credential_is_idempotent(raw):
    once = normalize_credential(raw)
    assert normalize_credential(once) == once


def test_openai_shape_detection():
    assert looks_like_openai_key('sk-xyz')
    assert looks_like_openai_key('"Bearer sk-xyz"')
    assert not looks_like_openai_key('ghp_xyz')
    assert not looks_like_openai_key(None)


def test_openai_key_in_github_slot_selects_openai_with_warning(recording_log):
    selection = resolve_provider(None, 'sk-xyz', None, log=recording_log)
    assert selection.provider == PROVIDER_OPENAI
    assert selection.credential == 'sk-xyz'
    assert selection.inferred is True
    assert any('OpenAI-style key' in m for m in recording_log.messages('WARNING'))


def test_github_token_selects_github(recording_log):
    selection = resolve_provider('', 'ghp_xyz', None, log=recording_log)
    assert selection.provider == PROVIDER_GITHUB
    assert selection.credential == 'ghp_xyz'
    assert recording_log.messages('WARNING') == []


def test_explicit_choice_is_case_insensitive():
    selection = resolve_provider('  OpenAI ', 'ghp_xyz', '"sk-real"')
    assert selection.provider == PROVIDER_OPENAI
    assert selection.credential == 'sk-real'
    assert selection.inferred is False


def test_openai_prefers_openai_slot_over_github_slot():
    selection = resolve_provider(None, 'sk-misplaced', 'sk-proper')
    assert selection.provider == PROVIDER_OPENAI
    assert selection.credential == 'sk-proper'


def test_explicit_openai_falls_back_to_openai_shaped_github_slot():
    selection = resolve_provider('openai', 'Bearer sk-misplaced', None)
    assert selection.credential == 'sk-misplaced'


def test_explicit_openai_ignores_non_openai_github_slot():
    with pytest.raises(MissingCredential) as exc:
        resolve_provider('openai', 'ghp_xyz', '')
    assert exc.value.provider == PROVIDER_OPENAI


def test_explicit_github_with_openai_key_is_a_mismatch():
    with pytest.raises(CredentialMismatch):
        resolve_provider('github', 'sk-xyz', None)


def test_github_without_token_is_missing():
    with pytest.raises(MissingCredential) as exc:
        resolve_provider(None, '  ', None)
    assert exc.value.provider == PROVIDER_GITHUB
    assert exc.value.kind == 'missing_credential'


def test_unknown_choice_falls_back_to_inference(recording_log):
    selection = resolve_provider('anthropic', 'ghp_xyz', None, log=recording_log)
    assert selection.provider == PROVIDER_GITHUB
    assert selection.inferred is True
    assert recording_log.messages('WARNING') == ['Ignoring unknown provider choice']


def test_inference_warning_reaches_loguru_by_default():
    seen = []
    handler_id = logger.add(lambda message: seen.append(message.record['level'].name), level='WARNING')
    try:
        resolve_provider(None, 'sk-xyz', None)
    finally:
        logger.remove(handler_id)
    assert 'WARNING' in seen


def test_selection_repr_hides_credential():
    selection = resolve_provider(None, 'ghp_supersecret', None)
    assert 'supersecret' not in repr(selection)
    assert selection.masked_credential == 'ghp_...cret'


def test_mask_credential_short_values():
    assert mask_credential('') == ''
    assert mask_credential('abc') == '***'
