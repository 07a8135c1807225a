import logging

from google import genai
from google.genai import errors, types

from ..errors import CollaboratorError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
# Thinking tokens count against max_output_tokens; short replies need none
DEFAULT_THINKING_BUDGET = 0


class GeminiClient:
    """Thin wrapper over the google-genai SDK returning plain reply text.

    Every failure (API error, transport error, empty reply) surfaces as
    CollaboratorError so callers can fall back per call.
    """

    def __init__(self, api_key=None, model=DEFAULT_MODEL, client=None, thinking_budget=DEFAULT_THINKING_BUDGET):
        if client is None:
            if not api_key:
                raise ConfigurationError("GOOGLE_API_KEY is required for the Gemini collaborator")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model
        self.thinking_budget = thinking_budget

    def generate(self, prompt, system_instruction=None, temperature=0.3,
                 max_output_tokens=1024, json_output=False):
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_mime_type="application/json" if json_output else None,
            thinking_config=(types.ThinkingConfig(thinking_budget=self.thinking_budget)
                             if self.thinking_budget is not None else None),
        )
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except errors.APIError as e:
            raise CollaboratorError(f"Gemini API error: {e}") from e
        except Exception as e:
            raise CollaboratorError(f"Gemini request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise CollaboratorError("Empty response from Gemini")
        return text.strip()
