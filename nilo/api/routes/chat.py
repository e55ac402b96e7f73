"""
Chat Routes - API endpoints for conversational interactions.

- POST /api/chat      : LLM path, mode='SQL' queries the database,
                        anything else is conversation
- POST /api/assistant : rule-based path, keyword intents with canned answers

Both endpoints always answer with HTTP 200 and a Spanish message; failures
are logged and turned into a short error text for the chat window.
"""
from fastapi import APIRouter, Depends

from nilo.api.dependencies import get_chat_processor, get_chat_service, get_sql_service
from nilo.chat.processor import ChatProcessor
from nilo.core.logging_config import get_logger
from nilo.core.validators import MODE_CHAT, normalize_mode, sanitize_prompt
from nilo.models.chat import AssistantRequest, AssistantResponse, ChatRequest, ChatResponse
from nilo.services.chat_service import ChatService
from nilo.services.sql_service import SQLService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])

EMPTY_PROMPT = "⚠️ Debes escribir una pregunta."


def internal_error_message(error: Exception) -> str:
    return f"❌ Error interno: {error}"


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    summary="Ask NILO a question",
    description="""
    Send a question in Spanish.

    **Modes:**
    - `mode='SQL'`: NILO writes a SELECT over the payroll/billing tables,
      runs it and explains the result. The executed SQL comes back in `query`.
      If no SQL can be produced it answers conversationally.
    - any other value: conversational answer.
    """
)
def send_message(
    request: ChatRequest,
    sql_service: SQLService = Depends(get_sql_service),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    prompt = sanitize_prompt(request.prompt)
    if not prompt:
        return ChatResponse(result=EMPTY_PROMPT)

    mode = normalize_mode(request.mode)
    logger.info(f"Prompt received: {prompt[:100]}")
    logger.info(f"Mode: {mode}")

    try:
        if mode == MODE_CHAT:
            return ChatResponse(result=chat_service.reply(prompt))

        response = sql_service.answer(prompt)
        logger.info(f"Answered in {response.mode_used} mode ({response.row_count} rows)")
        return ChatResponse(result=response.result, query=response.query)

    except Exception as e:
        logger.exception(f"Chat request failed: {e}")
        return ChatResponse(result=internal_error_message(e))


@router.post(
    "/assistant",
    response_model=AssistantResponse,
    summary="Ask the rule-based assistant",
    description="""
    Answers a fixed set of payroll and billing questions (top clients,
    debtors, payroll totals, active employees, an employee's deductions,
    overtime or contract type...) without calling the LLM.
    """
)
def ask_assistant(
    request: AssistantRequest,
    processor: ChatProcessor = Depends(get_chat_processor),
) -> AssistantResponse:
    question = sanitize_prompt(request.question)
    if not question:
        return AssistantResponse(answer=EMPTY_PROMPT)

    logger.info(f"Assistant question received: {question[:100]}")

    try:
        return AssistantResponse(answer=processor.process_question(question))
    except Exception as e:
        logger.exception(f"Assistant request failed: {e}")
        return AssistantResponse(answer=internal_error_message(e))
