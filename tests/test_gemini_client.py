import pytest
from google.api_core import exceptions as google_exceptions

from guruai import gemini_client
from guruai.errors import (
    AuthenticationError,
    MalformedResponse,
    NetworkFailure,
    ProviderError,
    QuotaExceeded,
)
from guruai.gemini_client import GeminiProvider, classify_provider_error, to_provider_turns
from guruai.models import ChatMessage, Role


class FakeResponse:
    def __init__(self, text=None, blocked=False):
        self._text = text
        self._blocked = blocked

    @property
    def text(self):
        if self._blocked:
            raise ValueError("response was blocked")
        return self._text


class FakeModel:
    instances = []
    response = FakeResponse("ok")
    error = None

    def __init__(self, model_name, system_instruction=None, generation_config=None):
        self.model_name = model_name
        self.system_instruction = system_instruction
        self.generation_config = generation_config
        self.contents = None
        self.request_options = None
        FakeModel.instances.append(self)

    def generate_content(self, contents, request_options=None):
        self.contents = contents
        self.request_options = request_options
        if FakeModel.error is not None:
            raise FakeModel.error
        return FakeModel.response


@pytest.fixture
def fake_genai(monkeypatch):
    FakeModel.instances = []
    FakeModel.response = FakeResponse("ok")
    FakeModel.error = None
    configured = []
    monkeypatch.setattr(gemini_client.genai, "GenerativeModel", FakeModel)
    monkeypatch.setattr(gemini_client.genai, "configure", lambda **kwargs: configured.append(kwargs))
    return configured


def test_missing_key_fails_before_any_call(fake_genai):
    provider = GeminiProvider(api_key="")

    with pytest.raises(AuthenticationError):
        provider.generate_text([], "hi", "sys", 0.7)
    with pytest.raises(AuthenticationError):
        provider.generate_structured("quiz", {"type": "ARRAY"})
    with pytest.raises(AuthenticationError):
        provider.generate_multimodal(b"\xff\xd8", "image/jpeg", "solve", "sys")

    assert FakeModel.instances == []
    assert fake_genai == []


def test_transcript_roles_map_to_provider_roles():
    history = [
        ChatMessage(role=Role.USER, content="What is 2+2?"),
        ChatMessage(role=Role.ASSISTANT, content="4"),
    ]

    turns = to_provider_turns(history, "And 3+3?")

    assert [t["role"] for t in turns] == ["user", "model", "user"]
    assert turns[-1]["parts"] == [{"text": "And 3+3?"}]


def test_generate_text_passes_instruction_and_temperature(fake_genai):
    provider = GeminiProvider(api_key="test-key", model_name="gemini-test", timeout_s=5)

    text = provider.generate_text([ChatMessage(role=Role.USER, content="hi")], "again", "be kind", 0.7)

    model = FakeModel.instances[0]
    assert text == "ok"
    assert fake_genai == [{"api_key": "test-key"}]
    assert model.model_name == "gemini-test"
    assert model.system_instruction == "be kind"
    assert model.generation_config.temperature == 0.7
    assert len(model.contents) == 2
    assert model.request_options == {"timeout": 5}


def test_generate_structured_requests_json(fake_genai):
    provider = GeminiProvider(api_key="test-key")
    schema = {"type": "ARRAY", "items": {"type": "STRING"}}

    provider.generate_structured("make a quiz", schema)

    config = FakeModel.instances[0].generation_config
    assert config.response_mime_type == "application/json"
    assert config.response_schema == schema
    assert FakeModel.instances[0].contents == "make a quiz"


def test_generate_multimodal_sends_inline_blob(fake_genai):
    provider = GeminiProvider(api_key="test-key")

    provider.generate_multimodal(b"jpeg-bytes", "image/jpeg", "explain", "visual teacher")

    model = FakeModel.instances[0]
    assert model.system_instruction == "visual teacher"
    assert model.contents == [{"mime_type": "image/jpeg", "data": b"jpeg-bytes"}, "explain"]


def test_blocked_response_is_malformed(fake_genai):
    FakeModel.response = FakeResponse(blocked=True)

    with pytest.raises(MalformedResponse):
        GeminiProvider(api_key="test-key").generate_text([], "hi", "sys", 0.7)


def test_blank_response_is_malformed(fake_genai):
    FakeModel.response = FakeResponse("   ")

    with pytest.raises(MalformedResponse):
        GeminiProvider(api_key="test-key").generate_structured("quiz", {})


def test_sdk_errors_are_translated(fake_genai):
    FakeModel.error = google_exceptions.ResourceExhausted("Quota exceeded")

    with pytest.raises(QuotaExceeded) as excinfo:
        GeminiProvider(api_key="test-key").generate_text([], "hi", "sys", 0.7)

    assert isinstance(excinfo.value.__cause__, google_exceptions.ResourceExhausted)


@pytest.mark.parametrize(
    "exc, expected",
    [
        (google_exceptions.PermissionDenied("denied"), AuthenticationError),
        (google_exceptions.Unauthenticated("no creds"), AuthenticationError),
        (google_exceptions.InvalidArgument("API key not valid"), AuthenticationError),
        (google_exceptions.ResourceExhausted("slow down"), QuotaExceeded),
        (google_exceptions.ServiceUnavailable("unavailable"), NetworkFailure),
        (google_exceptions.DeadlineExceeded("timeout"), NetworkFailure),
        (ConnectionResetError("reset"), NetworkFailure),
        (RuntimeError("HTTP 429 Too Many Requests"), QuotaExceeded),
        (google_exceptions.NotFound("no such model"), ProviderError),
        (RuntimeError("weird"), ProviderError),
    ],
)
def test_classify_provider_error(exc, expected):
    assert type(classify_provider_error(exc)) is expected
