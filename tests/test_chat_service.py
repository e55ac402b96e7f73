"""Unit tests: conversational replies."""

from __future__ import annotations

from nilo.core.config import get_settings
from nilo.core.exceptions import LLMError
from nilo.services.chat_service import DEFAULT_GREETING, REPLY_UNAVAILABLE, ChatService


def test_reply_uses_persona_and_chat_model(fake_llm_factory) -> None:
    llm = fake_llm_factory("¡Hola! Soy NILO.")
    service = ChatService(llm_client=llm, settings=get_settings())

    assert service.reply("Hola") == "¡Hola! Soy NILO."
    assert llm.calls[0]["model"] == "chat-model"
    assert "NILO" in llm.calls[0]["system_prompt"]


def test_empty_reply_becomes_greeting(fake_llm_factory) -> None:
    service = ChatService(llm_client=fake_llm_factory(""), settings=get_settings())
    assert service.reply("Hola") == DEFAULT_GREETING


def test_llm_failure_becomes_apology(fake_llm_factory) -> None:
    service = ChatService(llm_client=fake_llm_factory(LLMError("down")), settings=get_settings())
    assert service.reply("Hola") == REPLY_UNAVAILABLE
