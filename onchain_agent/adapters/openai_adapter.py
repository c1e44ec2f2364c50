"""
LLM provider adapter for the Onchain Agent system.

This adapter implements the LLMProvider interface on top of OpenAI.
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel
import logfire

from onchain_agent.interfaces.providers.llm import LLMProvider

# Setup logger for this module
logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_CHAT_MODEL = "gpt-4.1"
DEFAULT_PARSE_MODEL = "gpt-4.1"


class OpenAIAdapter(LLMProvider):
    """OpenAI implementation of LLMProvider using the Responses API."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        logfire_api_key: Optional[str] = None,
    ):
        self.api_key = api_key
        self.client = AsyncOpenAI(api_key=api_key)

        self.logfire = False
        if logfire_api_key:
            try:
                logfire.configure(token=logfire_api_key)
                self.logfire = True
                logfire.instrument_openai(self.client)
                logger.info(
                    "Logfire configured and OpenAI client instrumented successfully."
                )
            except Exception as e:
                logger.error(f"Failed to configure Logfire: {e}")
                self.logfire = False

        self.text_model = model or DEFAULT_CHAT_MODEL
        self.parse_model = model or DEFAULT_PARSE_MODEL

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str = "",
        model: Optional[str] = None,
    ) -> str:  # pragma: no cover
        """Generate text using OpenAI Responses API."""
        request_params: Dict[str, Any] = {
            "model": model or self.text_model,
            "input": prompt,
        }
        if system_prompt:
            request_params["instructions"] = system_prompt

        try:
            response = await self.client.responses.create(**request_params)
            return response.output_text
        except OpenAIError as e:
            logger.error(f"OpenAI API error during text generation: {e}")
            raise

    @staticmethod
    def _schema_instructions(system_prompt: str, model_class: Type[BaseModel]) -> str:
        schema = json.dumps(model_class.model_json_schema())
        return (
            f"{system_prompt}\n\n"
            f"Respond with a single JSON object matching this schema:\n{schema}"
        )

    async def _parse_with_responses(
        self, prompt: str, system_prompt: str, model_class: Type[T], model: str
    ) -> T:
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=prompt,
            text={
                "format": {
                    "type": "json_schema",
                    "name": model_class.__name__,
                    "strict": True,
                    "schema": model_class.model_json_schema(),
                }
            },
        )
        return model_class.model_validate_json(response.output_text)

    async def _parse_with_chat(
        self, prompt: str, system_prompt: str, model_class: Type[T], model: str
    ) -> T:
        # Models without strict schema support still honour json_object mode
        completion = await self.client.chat.completions.create(
            model=model,
            messages=[
                {
                    "role": "system",
                    "content": self._schema_instructions(system_prompt, model_class),
                },
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
        return model_class.model_validate_json(completion.choices[0].message.content)

    async def parse_structured_output(
        self,
        prompt: str,
        system_prompt: str,
        model_class: Type[T],
        model: Optional[str] = None,
    ) -> T:
        """Parse the model's answer into model_class.

        Uses a strict JSON schema through the Responses API, then JSON mode
        through chat completions.

        Raises:
            ValueError: if neither call yields a valid instance
        """
        parse_model = model or self.parse_model
        try:
            return await self._parse_with_responses(
                prompt, system_prompt, model_class, parse_model
            )
        except (OpenAIError, ValueError) as e:
            logger.warning(
                f"Strict {model_class.__name__} output failed, retrying in JSON mode: {e}"
            )
            first_error = e

        try:
            return await self._parse_with_chat(
                prompt, system_prompt, model_class, parse_model
            )
        except (OpenAIError, ValueError) as e:
            logger.error(f"JSON mode {model_class.__name__} output failed: {e}")
            raise ValueError(
                f"Failed to generate {model_class.__name__}: {first_error}"
            ) from e
