from types import SimpleNamespace

import httpx
import openai
import pytest

from comment.domain.exceptions import CompletionFailedError
from comment.infrastructure.client.openai_completion_client import OpenAICompletionClient
from config.settings import OpenAISettings

KEY = "sk-test-secret"


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return self.response


def make_client(completions):
    settings = OpenAISettings(api_key=KEY, model="gpt-5-mini", temperature=1.0, max_completion_tokens=500)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAICompletionClient(settings, client=fake)


def test_complete_sends_messages_and_limits():
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content='{"a": 1}'))])
    completions = FakeCompletions(response=response)

    text = make_client(completions).complete("system text", "user text")

    assert text == '{"a": 1}'
    assert completions.kwargs["model"] == "gpt-5-mini"
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]
    assert completions.kwargs["temperature"] == 1.0
    assert completions.kwargs["max_completion_tokens"] == 500


def test_complete_without_choices_returns_none():
    completions = FakeCompletions(response=SimpleNamespace(choices=[]))

    assert make_client(completions).complete("s", "u") is None


def test_api_error_becomes_completion_failed_and_is_masked():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.APIConnectionError(message=f"connection dropped for {KEY}", request=request)

    with pytest.raises(CompletionFailedError) as excinfo:
        make_client(FakeCompletions(error=error)).complete("s", "u")

    assert KEY not in str(excinfo.value)


def test_server_error_is_sent_once_without_retries():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(500, json={"error": {"message": "upstream exploded", "type": "server_error"}})

    settings = OpenAISettings(api_key=KEY, model="gpt-5-mini", temperature=1.0, max_completion_tokens=500)
    client = OpenAICompletionClient(settings, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(CompletionFailedError):
        client.complete("s", "u")

    assert len(requests) == 1
    assert requests[0].url.path.endswith("/chat/completions")


def test_close_releases_sdk_client():
    closed = []
    fake = SimpleNamespace(close=lambda: closed.append(True))
    settings = OpenAISettings(api_key=KEY, model="gpt-5-mini", temperature=1.0, max_completion_tokens=500)

    OpenAICompletionClient(settings, client=fake).close()

    assert closed == [True]
