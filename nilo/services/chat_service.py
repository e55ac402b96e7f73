"""
Chat Service - Conversational answers from the NILO persona.

Used directly in CHAT mode and as the fallback of SQL mode when no usable
query could be produced.
"""
from typing import Optional

from nilo.core.config import get_settings, Settings
from nilo.core.exceptions import LLMError
from nilo.core.logging_config import get_logger
from nilo.llm.client import LLMClient, get_llm_client
from nilo.llm.prompts import get_chat_system_prompt

logger = get_logger(__name__)

DEFAULT_GREETING = "¡Hola! ¿En qué puedo ayudarte?"
REPLY_UNAVAILABLE = "❌ No fue posible responder. Intenta más tarde."


class ChatService:
    """
    Service for conversational (non-SQL) replies.

    Example:
        >>> service = ChatService()
        >>> service.reply("Hola, ¿quién eres?")
        '¡Hola! Soy NILO, tu asistente...'
    """

    def __init__(self, llm_client: Optional[LLMClient] = None, settings: Optional[Settings] = None):
        self.llm_client = llm_client or get_llm_client()
        self.settings = settings or get_settings()

    def reply(self, prompt: str) -> str:
        """
        Answer a prompt conversationally.

        Never raises: LLM failures turn into a static apology.

        Args:
            prompt: Sanitized user prompt

        Returns:
            Reply text
        """
        logger.info("Answering in conversational mode")

        try:
            content = self.llm_client.generate(
                user_message=prompt,
                system_prompt=get_chat_system_prompt(),
                model=self.settings.llm_model_chat
            )
        except LLMError as e:
            logger.error(f"Conversational reply failed: {e}")
            return REPLY_UNAVAILABLE

        if not content:
            logger.warning("LLM returned an empty conversational reply")
            return DEFAULT_GREETING

        return content


# Singleton instance
_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the chat service singleton."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


def reset_chat_service() -> None:
    """Reset the chat service singleton (useful for testing)."""
    global _chat_service
    _chat_service = None
