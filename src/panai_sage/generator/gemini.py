"""Gemini-backed response generator with a model fallback chain."""

import logging
from typing import Sequence

from google import genai
from google.genai import types

from panai_sage.config import Settings
from panai_sage.generator import GenerationResult
from panai_sage.generator.static import STATIC_MODEL, static_response
from panai_sage.store.conversations import Turn
from panai_sage.summit import BOT_NAME, build_context, load_summit_data

logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT = f"Understood! I am {BOT_NAME}, ready to assist with PanAfrican AI Summit questions."


def _preview(text: str, length: int = 50) -> str:
    return text[:length]


def _is_model_not_found(exc: Exception) -> bool:
    """Unknown or retired model names come back as 404 / "not found"."""
    return getattr(exc, "code", None) == 404 or "not found" in str(exc).lower()


def _content(role: str, text: str) -> types.Content:
    return types.Content(role=role, parts=[types.Part(text=text)])


class GeminiGenerator:
    """
    Generates replies through the Gemini API.

    - Primary model gets the full conversation (context, history, prompt)
    - If the primary model does not exist, fallback models are tried in order
      with a single-turn prompt
    - If every fallback fails, a canned keyword-matched reply is returned
    - Any other primary error is reported as a failed GenerationResult
    """

    def __init__(
        self,
        client: genai.Client,
        model: str,
        fallback_models: Sequence[str] = (),
        context: str | None = None,
    ):
        self.client = client
        self.model = model
        self.fallback_models = list(fallback_models)
        self.context = context if context is not None else build_context(load_summit_data())

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiGenerator":
        if not settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is not defined in environment variables")

        logger.info("Initializing Gemini generator with model %s", settings.gemini_model)
        client = genai.Client(api_key=settings.gemini_api_key)
        return cls(
            client=client,
            model=settings.gemini_model,
            fallback_models=settings.gemini_fallback_models,
        )

    def _build_contents(self, prompt: str, history: Sequence[Turn]) -> list[types.Content]:
        contents = [
            _content("user", self.context),
            _content("model", ACKNOWLEDGEMENT),
        ]
        contents.extend(_content(turn.role, turn.text) for turn in history)
        contents.append(_content("user", prompt))
        return contents

    async def generate(self, prompt: str, history: Sequence[Turn]) -> GenerationResult:
        logger.info('Generating response for: "%s"', _preview(prompt))
        contents = self._build_contents(prompt, history)

        try:
            logger.debug("Sending %d messages to %s", len(contents), self.model)
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=0.7,
                    max_output_tokens=1000,
                    top_p=0.95,
                    top_k=40,
                ),
            )
            text = response.text
            if not text:
                return GenerationResult.failure(
                    "Failed to generate response", "empty response from model", model=self.model
                )
            return GenerationResult(success=True, text=text, model=self.model)
        except Exception as e:
            logger.error("Gemini error on %s: %s", self.model, e)
            if _is_model_not_found(e):
                return await self._try_fallback_models(prompt)
            return GenerationResult.failure("Failed to generate response", str(e), model=self.model)

    async def _try_fallback_models(self, prompt: str) -> GenerationResult:
        for model in self.fallback_models:
            try:
                logger.info("Trying fallback model: %s", model)
                response = await self.client.aio.models.generate_content(
                    model=model,
                    contents=[_content("user", f"{self.context}\n\nUser: {prompt}")],
                    config=types.GenerateContentConfig(
                        temperature=0.7,
                        max_output_tokens=500,
                    ),
                )
                if not response.text:
                    logger.warning("Fallback model %s returned an empty response", model)
                    continue
                logger.info("Fallback model %s succeeded", model)
                return GenerationResult(success=True, text=response.text, model=model, is_fallback=True)
            except Exception as e:
                logger.warning("Fallback model %s failed: %s", model, e)
                continue

        logger.warning("All Gemini models failed, using static response")
        return GenerationResult(
            success=True,
            text=static_response(prompt),
            model=STATIC_MODEL,
            is_fallback=True,
        )

    async def test_connection(self) -> dict:
        """Send a tiny prompt to the primary model."""
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[_content("user", "Say hello")],
                config=types.GenerateContentConfig(temperature=0.7, max_output_tokens=50),
            )
            logger.info("Connection test successful: %s", _preview(response.text or ""))
            return {"success": True, "message": "API connection successful", "model": self.model}
        except Exception as e:
            logger.error("Connection test failed: %s", e)
            return {"success": False, "error": str(e), "model": self.model}
