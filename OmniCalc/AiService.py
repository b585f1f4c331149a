# AiService.py
"""""
Gemini client for the "AI Assistant" mode.

The model does the actual math. This module only sends the problem together
with the required response shape {result, explanation, steps} and checks what
comes back. Every failure, whether transport or parsing, ends up as the same
sentinel AiResponse, so callers never see an exception.
"""""

import json
import os

from google import genai
from google.genai import types

from . import config_manager as config_manager
from . import error as E

PROMPT_TEMPLATE = ('Solve this mathematical problem or answer the calculation request: "{problem}". '
                   'Provide a structured response.')

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "result": types.Schema(
            type=types.Type.STRING,
            description="The final numerical or concise answer.",
        ),
        "explanation": types.Schema(
            type=types.Type.STRING,
            description="A brief explanation of how the answer was reached.",
        ),
        "steps": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="Step-by-step breakdown of the calculation.",
        ),
    },
    required=["result", "explanation", "steps"],
)


class AiResponse:
    """Answer of the model: final result, short explanation and ordered steps."""

    __slots__ = ("result", "explanation", "steps")

    def __init__(self, result, explanation, steps):
        self.result = result
        self.explanation = explanation
        self.steps = list(steps)

    @classmethod
    def sentinel(cls):
        return cls("Error", "Could not process the request.", [])

    def to_dict(self):
        return {"result": self.result, "explanation": self.explanation, "steps": list(self.steps)}

    def __eq__(self, other):
        if not isinstance(other, AiResponse):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"AiResponse(result={self.result!r}, steps={len(self.steps)})"


def parse_response(text):
    """Turn the raw model text into an AiResponse; raises AiParseError if it doesn't fit."""
    try:
        data = json.loads(text or "")
    except (TypeError, json.JSONDecodeError) as e:
        raise E.AiParseError(f"Response is not JSON: {e}", code="6002")

    if not isinstance(data, dict):
        raise E.AiParseError("Response is not an object.", code="6003")

    for field in ("result", "explanation"):
        if not isinstance(data.get(field), str):
            raise E.AiParseError(f"'{field}' missing or not a string.", code="6003")

    steps = data.get("steps")
    if not isinstance(steps, list) or not all(isinstance(step, str) for step in steps):
        raise E.AiParseError("'steps' missing or not a list of strings.", code="6003")

    return AiResponse(data["result"], data["explanation"], steps)


class AiSolveClient:

    def __init__(self, client=None, model=None, api_key=None):
        self._client = client
        self.model = model or config_manager.load_setting_value("ai_model")
        self.api_key = api_key
        self.debug = config_manager.is_debug()

    def _get_client(self):
        if self._client is None:
            api_key = self.api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
            if not api_key:
                raise E.AiTransportError("No API key configured.", code="6000")
            self._client = genai.Client(api_key=api_key)
        return self._client

    def request(self, problem):
        """Send the problem to the model and return the raw response text."""
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=PROMPT_TEMPLATE.format(problem=problem),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
            return response.text
        except E.AiError:
            raise
        except Exception as e:
            raise E.AiTransportError(f"Request failed: {e}", code="6001", equation=problem)

    def solve(self, problem):
        """Ask the model to solve `problem`. Never raises; failures give the sentinel."""
        try:
            return parse_response(self.request(problem))
        except E.AiError as e:
            e.equation = problem
            if self.debug == True:
                print(f"AI error {e.code}: {e.message}")
            return AiResponse.sentinel()
