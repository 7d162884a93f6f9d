"""
Handler decorators for error handling, logging, and response formatting.
"""
import functools
import uuid
import traceback
from typing import Callable, Any, Dict
from logger_config import get_logger
from utils.exceptions import ParameterConflictError, ParameterNotFoundError

logger = get_logger(__name__)


def _status_for(error: Exception) -> int:
    if isinstance(error, ValueError):
        return 400
    if isinstance(error, ParameterNotFoundError):
        return 404
    if isinstance(error, ParameterConflictError):
        return 409
    return 500


def lambda_handler(
    func: Callable[[Any, Any], Any]
) -> Callable[[Any, Any], Dict[str, Any]]:
    """
    Decorator for Lambda handler functions.

    Provides:
    - Request correlation IDs for logging
    - Response formatting
    - Mapping of toolkit errors to structured error responses

    Args:
        func: The handler function to decorate

    Returns:
        Decorated handler function
    """
    @functools.wraps(func)
    def wrapper(event: Any, context: Any) -> Dict[str, Any]:
        correlation_id = str(uuid.uuid4())

        logger.info(
            f"Handler {func.__name__} invoked",
            extra={
                "correlation_id": correlation_id,
                "handler": func.__name__,
                "request_id": getattr(context, "aws_request_id", None) if context else None
            }
        )

        try:
            result = func(event, context)
        except Exception as e:
            status = _status_for(e)
            error_response = {
                "error": {
                    "type": type(e).__name__,
                    "message": str(e),
                    "status": status,
                    "correlation_id": correlation_id
                },
                "metadata": {
                    "correlation_id": correlation_id,
                    "handler": func.__name__
                }
            }

            if status < 500:
                logger.warning(
                    f"Handler {func.__name__} rejected request ({status}): {str(e)}",
                    extra={"correlation_id": correlation_id}
                )
            else:
                logger.error(
                    f"Handler {func.__name__} failed: {str(e)}",
                    extra={
                        "correlation_id": correlation_id,
                        "traceback": traceback.format_exc()
                    },
                    exc_info=True
                )

            return error_response

        if not isinstance(result, dict):
            if isinstance(result, (list, str)):
                result = {"result": result}
            else:
                result = {"data": result}

        result.setdefault("metadata", {})["correlation_id"] = correlation_id

        logger.info(
            f"Handler {func.__name__} completed successfully",
            extra={"correlation_id": correlation_id}
        )

        return result

    return wrapper
