"""
Tests for the CompletionClient class.
"""
from unittest.mock import MagicMock, patch

import openai
import pytest
from pydantic import SecretStr

from blobprompt.completion import CompletionClient
from blobprompt.config import Settings
from blobprompt.exceptions import CompletionError, MissingCredentialError

from conftest import TEST_OPENAI_KEY, make_completion


def test_client_built_from_settings(settings):
    with patch("blobprompt.completion.OpenAI") as mock_cls:
        CompletionClient(settings)

    mock_cls.assert_called_once_with(
        api_key=TEST_OPENAI_KEY,
        base_url=None,
        timeout=30.0,
        max_retries=0,
    )


def test_complete_sends_single_user_message(settings, mock_openai):
    client = CompletionClient(settings)

    answer = client.complete("hello world")

    assert answer == "stubbed reply"
    mock_openai.chat.completions.create.assert_called_once_with(
        model="gpt-3.5-turbo",
        messages=[{"role": "user", "content": "hello world"}],
    )


def test_complete_uses_configured_model(test_env, mock_openai):
    settings = Settings.from_env(dict(test_env, OPENAI_MODEL="gpt-4o-mini"))
    CompletionClient(settings).complete("hi")

    assert mock_openai.chat.completions.create.call_args.kwargs["model"] == "gpt-4o-mini"


def test_complete_returns_first_choice(settings):
    fake = MagicMock()
    fake.chat.completions.create.return_value = make_completion("first", "second")

    assert CompletionClient(settings, client=fake).complete("hi") == "first"


def test_missing_key_fails_before_any_call():
    """An empty key is rejected without constructing or calling the API client"""
    settings = Settings.model_construct(openai_key=SecretStr(""), openai_model="gpt-3.5-turbo")
    with patch("blobprompt.completion.OpenAI") as mock_cls:
        with pytest.raises(MissingCredentialError, match="OPENAI_KEY"):
            CompletionClient(settings)
    mock_cls.assert_not_called()


def test_missing_key_checked_again_on_complete(settings):
    fake = MagicMock()
    client = CompletionClient(settings, client=fake)
    client._api_key = ""

    with pytest.raises(MissingCredentialError):
        client.complete("hi")
    fake.chat.completions.create.assert_not_called()


def test_api_error_wrapped(settings):
    fake = MagicMock()
    fake.chat.completions.create.side_effect = openai.OpenAIError("rate limited")

    with pytest.raises(CompletionError, match="ChatCompletion error: rate limited") as exc:
        CompletionClient(settings, client=fake).complete("hi")
    assert isinstance(exc.value.__cause__, openai.OpenAIError)


def test_no_choices(settings):
    fake = MagicMock()
    fake.chat.completions.create.return_value = make_completion()

    with pytest.raises(CompletionError, match="no choices"):
        CompletionClient(settings, client=fake).complete("hi")


def test_empty_content(settings):
    fake = MagicMock()
    fake.chat.completions.create.return_value = make_completion(None)

    with pytest.raises(CompletionError, match="empty content"):
        CompletionClient(settings, client=fake).complete("hi")
