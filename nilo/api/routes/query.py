"""
Query Routes - Run a raw SELECT against the payroll database.

The statement goes through the same validator as LLM-generated SQL, so
only single SELECTs over the catalog tables are executed.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from nilo.analytics.formatter import ResultFormatter
from nilo.api.dependencies import get_query_executor, get_sql_validator
from nilo.core.logging_config import get_logger
from nilo.database.executor import QueryExecutor
from nilo.database.validator import SQLValidator
from nilo.models.chat import ErrorResponse, QueryRequest, QueryResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Query"],
    responses={
        400: {"model": ErrorResponse, "description": "Missing or rejected query"},
        500: {"model": ErrorResponse, "description": "Query execution failed"},
    }
)

MISSING_QUERY = "Falta la consulta"

_formatter = ResultFormatter()


@router.post(
    "/query",
    response_model=QueryResponse,
    summary="Run a SELECT statement",
)
def run_query(
    request: QueryRequest,
    executor: QueryExecutor = Depends(get_query_executor),
    validator: SQLValidator = Depends(get_sql_validator),
):
    if not request.query or not request.query.strip():
        return JSONResponse(status_code=400, content={"error": MISSING_QUERY})

    validation = validator.validate(request.query)
    if not validation.is_valid:
        logger.warning(f"Raw query rejected: {validation.error}")
        return JSONResponse(status_code=400, content={"error": validation.error})

    result = executor.execute(validation.sql)
    if not result.success:
        return JSONResponse(status_code=500, content={"error": result.error})

    return QueryResponse(
        data=result.data,
        row_count=result.row_count,
        formatted_data=_formatter.format_as_table(result.data),
    )
