import json

import pytest

from OmniCalc import AiService
from OmniCalc.AiService import AiResponse, AiSolveClient
from OmniCalc import error as E

SENTINEL = {"result": "Error", "explanation": "Could not process the request.", "steps": []}


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.text)


class FakeClient:
    def __init__(self, text=None, exc=None):
        self.models = FakeModels(text, exc)


def make_client(text=None, exc=None):
    return AiSolveClient(client=FakeClient(text, exc), model="test-model")


def test_solve_returns_structured_answer():
    payload = {"result": "375", "explanation": "25% is a quarter.", "steps": ["1500 / 4", "= 375"]}
    answer = make_client(json.dumps(payload)).solve("What is 25% of 1500?")

    assert answer == AiResponse("375", "25% is a quarter.", ["1500 / 4", "= 375"])


def test_request_carries_problem_model_and_schema():
    client = make_client(json.dumps({"result": "5", "explanation": "", "steps": []}))
    client.solve("2x + 5 = 15")

    call = client._client.models.calls[0]
    assert call["model"] == "test-model"
    assert '"2x + 5 = 15"' in call["contents"]
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].response_schema.required == ["result", "explanation", "steps"]


@pytest.mark.parametrize("text", [
    "not json at all",
    "",
    None,
    "[1, 2, 3]",
    json.dumps({"result": "5", "explanation": "x"}),
    json.dumps({"result": 5, "explanation": "x", "steps": []}),
    json.dumps({"result": "5", "explanation": "x", "steps": [1, 2]}),
])
def test_unparsable_output_gives_sentinel(text):
    answer = make_client(text).solve("1 + 1")
    assert answer.to_dict() == SENTINEL


def test_transport_failure_gives_sentinel():
    answer = make_client(exc=ConnectionError("offline")).solve("1 + 1")
    assert answer.to_dict() == SENTINEL


def test_missing_api_key_gives_sentinel(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)

    answer = AiSolveClient(model="test-model").solve("1 + 1")
    assert answer.to_dict() == SENTINEL


def test_request_classifies_failures():
    with pytest.raises(E.AiTransportError) as excinfo:
        make_client(exc=TimeoutError("slow")).request("1 + 1")
    assert excinfo.value.code == "6001"

    with pytest.raises(E.AiParseError):
        AiService.parse_response("{")


def test_sentinel_is_a_fresh_object():
    first = AiResponse.sentinel()
    first.steps.append("mutated")
    assert AiResponse.sentinel().steps == []
