"""
CompletionClient - single-shot chat completions through the OpenAI API.
"""
import logging
from typing import Any, Optional

import openai
from openai import OpenAI

from .config import ENV_OPENAI_KEY, Settings
from .exceptions import CompletionError, MissingCredentialError


class CompletionClient:
    """
    Sends one user message to a hosted chat model and returns the reply.

    No streaming and no conversation state: every ``complete`` call is a
    single request with a single message.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[Any] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the CompletionClient

        Args:
            settings: Resolved configuration holding the API key and model
            client: Preconfigured OpenAI-compatible client (built from settings if None)
            logger: Optional logger instance

        Raises:
            MissingCredentialError: If the API key is empty
        """
        self.logger = logger or logging.getLogger(__name__)
        self.model = settings.openai_model
        self._api_key = settings.openai_key.get_secret_value()
        self._require_key()

        if client is None:
            client = OpenAI(
                api_key=self._api_key,
                base_url=settings.openai_base_url,
                timeout=settings.timeout,
                max_retries=settings.retry_count,
            )
        self.client = client

    def _require_key(self) -> None:
        if not self._api_key or not self._api_key.strip():
            raise MissingCredentialError(f"{ENV_OPENAI_KEY} environment variable not set")

    def complete(self, prompt_text: str) -> str:
        """
        Run one chat completion

        Args:
            prompt_text: Content of the single user message

        Returns:
            Text of the first choice

        Raises:
            MissingCredentialError: If the API key is empty
            CompletionError: On transport, authentication or rate-limit faults,
                or when the response carries no text
        """
        self._require_key()

        messages = [{"role": "user", "content": prompt_text}]
        self.logger.debug(f"Requesting completion from {self.model} ({len(prompt_text)} chars)")

        try:
            response = self.client.chat.completions.create(model=self.model, messages=messages)
        except openai.OpenAIError as e:
            raise CompletionError(f"ChatCompletion error: {e}") from e

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise CompletionError("ChatCompletion error: no choices returned")

        content = choices[0].message.content
        if not content:
            raise CompletionError("ChatCompletion error: empty content in first choice")
        return content
