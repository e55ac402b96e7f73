"""
SQL Service - Orchestrates SQL mode.

This service handles the complete flow:
1. Ask the LLM for a single SELECT over the payroll catalog
2. Fall back to a conversational reply when no usable SQL comes back
3. Validate the SQL
4. Execute the query
5. Summarize the first rows
6. Have the LLM explain the summary (the summary itself if that fails)
"""
from dataclasses import dataclass
from typing import Optional

from nilo.analytics.formatter import ResultFormatter
from nilo.core.config import get_settings, Settings
from nilo.core.exceptions import DatabaseError, LLMError
from nilo.core.logging_config import get_logger
from nilo.core.validators import MODE_CHAT, MODE_SQL
from nilo.database.executor import QueryExecutor
from nilo.database.schema import describe_catalog
from nilo.database.validator import catalog_validator
from nilo.llm.client import LLMClient, get_llm_client
from nilo.llm.parsing import extract_sql
from nilo.llm.prompts import (
    get_sql_system_prompt,
    get_sql_user_prompt,
    get_explain_system_prompt,
    get_explain_user_prompt,
)
from nilo.services.chat_service import ChatService, get_chat_service

logger = get_logger(__name__)

NO_ROWS_FOUND = "🔍 No se encontraron resultados."

# Rows shown to the LLM when explaining a result
SUMMARY_ROWS = 3


@dataclass
class SQLResponse:
    """
    Response from SQL mode.

    Attributes:
        result: Text shown to the user
        query: Executed SQL, None when the answer came from the chat fallback
        row_count: Rows returned by the query
        mode_used: SQL, or CHAT when the service fell back to conversation
    """
    result: str
    query: Optional[str] = None
    row_count: int = 0
    mode_used: str = MODE_SQL


class SQLService:
    """
    Answers questions by generating and running SQL.

    Example:
        >>> service = SQLService()
        >>> response = service.answer("¿Cuántos empleados activos hay?")
        >>> response.query
        'SELECT COUNT(*) FROM employees WHERE status = 1 LIMIT 100'
    """

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        executor: Optional[QueryExecutor] = None,
        chat_service: Optional[ChatService] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or get_settings()
        self.llm = llm or get_llm_client()
        self.executor = executor or QueryExecutor()
        self.chat_service = chat_service or get_chat_service()

        self.formatter = ResultFormatter()
        self.validator = catalog_validator(
            self.settings.database_url,
            max_limit=self.settings.query_max_rows
        )
        self.catalog = describe_catalog()

    def answer(self, prompt: str) -> SQLResponse:
        """
        Answer a question from the database.

        Args:
            prompt: Sanitized user question

        Returns:
            SQLResponse with the answer and the executed SQL

        Raises:
            DatabaseError: If the generated query fails to execute
        """
        sql = self._generate_sql(prompt)
        if not sql:
            logger.warning("SQL not generated, falling back to conversation")
            return self._fallback(prompt)

        validation = self.validator.validate(sql)
        if not validation.is_valid:
            logger.warning(f"Generated SQL rejected: {validation.error}")
            return self._fallback(prompt)

        sql = validation.sql
        logger.info(f"Generated query: {sql}")

        result = self.executor.execute(sql)
        if not result.success:
            raise DatabaseError(result.error or "Query failed")

        if not result.data:
            return SQLResponse(result=NO_ROWS_FOUND, query=sql)

        summary = self.formatter.format_for_humans(result.data[:SUMMARY_ROWS])
        message = self._explain_results(prompt, summary)

        return SQLResponse(result=message, query=sql, row_count=result.row_count)

    def _generate_sql(self, prompt: str) -> Optional[str]:
        """Ask the LLM for SQL; None when it fails or answers without SQL."""
        try:
            content = self.llm.generate(
                user_message=get_sql_user_prompt(prompt),
                system_prompt=get_sql_system_prompt(self.catalog),
                model=self.settings.llm_model_sql
            )
        except LLMError as e:
            logger.error(f"SQL generation failed: {e}")
            return None

        return extract_sql(content)

    def _explain_results(self, prompt: str, summary: str) -> str:
        """Natural language explanation of the summary, or the summary itself."""
        try:
            explanation = self.llm.generate(
                user_message=get_explain_user_prompt(prompt, summary),
                system_prompt=get_explain_system_prompt(),
                model=self.settings.llm_model_explain
            )
        except LLMError as e:
            logger.error(f"Result explanation failed: {e}")
            return summary

        return explanation or summary

    def _fallback(self, prompt: str) -> SQLResponse:
        return SQLResponse(result=self.chat_service.reply(prompt), mode_used=MODE_CHAT)


# Singleton instance
_sql_service: Optional[SQLService] = None


def get_sql_service() -> SQLService:
    """Get or create SQL service singleton."""
    global _sql_service
    if _sql_service is None:
        _sql_service = SQLService()
    return _sql_service


def reset_sql_service() -> None:
    """Reset the SQL service singleton (useful for testing)."""
    global _sql_service
    _sql_service = None
