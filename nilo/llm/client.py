"""
LLM Client for hosted chat-completion APIs.

Groq serves every request by default; when the requested model fails the
client retries with a smaller Groq model and finally with Google Gemini
(only if a Google API key is configured).
"""
import time
from typing import Optional, List, Dict

import google.generativeai as genai
from groq import Groq

from nilo.core.config import get_settings, Settings
from nilo.core.exceptions import LLMError
from nilo.core.logging_config import get_logger

logger = get_logger(__name__)

PROVIDER_GROQ = "groq"
PROVIDER_GOOGLE = "google"


class LLMClient:
    """
    Hybrid client for the Groq and Google Gemini APIs.

    Example:
        >>> client = LLMClient()
        >>> client.generate("¿Cuántos empleados hay?", system_prompt="Eres NILO")
        'Actualmente hay 12 empleados activos.'
    """

    def __init__(self, settings: Optional[Settings] = None, groq_client=None):
        """
        Initialize provider clients.

        Args:
            settings: Optional settings, defaults to the cached environment settings
            groq_client: Optional pre-built Groq client (used by tests)
        """
        self.settings = settings or get_settings()

        self.groq_client = groq_client or Groq(api_key=self.settings.groq_api_key)

        if self.settings.gemini_enabled:
            genai.configure(api_key=self.settings.google_api_key)

        self.temperature = self.settings.llm_temperature
        self.max_tokens = self.settings.llm_max_tokens
        self.backoff_seconds = self.settings.llm_retry_backoff_seconds

        logger.info(
            f"LLM client initialized (groq"
            f"{' + google' if self.settings.gemini_enabled else ''})"
        )

    def generate(
        self,
        user_message: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None
    ) -> str:
        """
        Generate a completion, falling back across providers on failure.

        Args:
            user_message: Content of the user turn
            system_prompt: Optional system instruction
            model: Groq model to try first (defaults to the chat model)

        Returns:
            Stripped completion text (may be empty)

        Raises:
            LLMError: If every provider attempt failed
        """
        last_error = None

        for i, attempt in enumerate(self._build_cascade(model)):
            provider = attempt["provider"]
            target_model = attempt["model"]

            try:
                if i > 0:
                    logger.info(f"Attempt {i + 1}: falling back to {provider} ({target_model})")
                    time.sleep(self.backoff_seconds * i)

                if provider == PROVIDER_GOOGLE:
                    content = self._generate_google(user_message, system_prompt, target_model)
                else:
                    content = self._generate_groq(user_message, system_prompt, target_model)

                return (content or "").strip()

            except Exception as e:
                error_msg = str(e).lower()
                is_rate_limit = "429" in error_msg or "quota" in error_msg or "rate limit" in error_msg

                log_fn = logger.warning if is_rate_limit else logger.error
                log_fn(f"Provider failed ({provider}/{target_model}): {e}")

                last_error = e

        logger.critical("All LLM providers failed")
        raise LLMError(f"All LLM providers failed. Last error: {last_error}")

    def _build_cascade(self, model: Optional[str]) -> List[Dict[str, str]]:
        primary = model or self.settings.llm_model_chat
        cascade = [{"provider": PROVIDER_GROQ, "model": primary}]

        if self.settings.llm_model_fallback and self.settings.llm_model_fallback != primary:
            cascade.append({"provider": PROVIDER_GROQ, "model": self.settings.llm_model_fallback})

        if self.settings.gemini_enabled:
            cascade.append({"provider": PROVIDER_GOOGLE, "model": self.settings.llm_model_google})

        return cascade

    def _generate_groq(self, user_message, system_prompt, model):
        """Execute request using Groq."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_message})

        response = self.groq_client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content

    def _generate_google(self, user_message, system_prompt, model):
        """Execute request using Google Gemini."""
        model_instance = genai.GenerativeModel(
            model_name=model,
            system_instruction=system_prompt
        )
        response = model_instance.generate_content(
            user_message,
            generation_config=genai.types.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
            )
        )
        return response.text


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the shared LLM client."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
