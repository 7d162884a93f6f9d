"""
Lambda handler functions for managing service configuration in Parameter Store.

Each handler takes a small JSON event, delegates to ParameterStoreService and
returns a dict; errors are turned into structured responses by the
lambda_handler decorator.
"""
from typing import Any, Dict, List, Optional
from logger_config import get_logger
from config import get_config, parse_flag
from services.parameter_store_service import ParameterStoreService
from utils.decorators import lambda_handler
from utils.exceptions import InvalidInputError

logger = get_logger(__name__)

_parameter_store: Optional[ParameterStoreService] = None


def _event_flag(event: Dict[str, Any], name: str, default: bool) -> bool:
    """Read a boolean event field given as a JSON bool or a true/false string."""
    value = event.get(name, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return parse_flag(name, value)
        except ValueError:
            pass
    raise InvalidInputError(f"{name} must be true or false, got: {value!r}", field=name)


def _event_keys(event: Dict[str, Any]) -> List[str]:
    keys = event.get('keys')
    if keys is None:
        return []
    if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
        raise InvalidInputError(f"keys must be a list of strings, got: {keys!r}", field="keys")
    return keys


def get_parameter_store() -> ParameterStoreService:
    """Get the Parameter Store service (reused across Lambda invocations)."""
    global _parameter_store
    if _parameter_store is None:
        config = get_config()
        _parameter_store = ParameterStoreService(
            is_encrypted=config.ssm_encrypted, config=config
        )
    return _parameter_store


@lambda_handler
def get_parameter(event, context):
    """Return the value of a single parameter."""
    key = event.get('key', '')
    value = get_parameter_store().get_parameter(key)
    return {"key": key, "value": value}


@lambda_handler
def get_parameters_by_path(event, context):
    """Return every parameter under a path, with any page errors."""
    path = event.get('path', '')
    recursive = _event_flag(event, 'recursive', True)

    result = get_parameter_store().get_parameters_by_path(path, recursive=recursive)
    if not result.complete:
        logger.warning(f'Returning partial results for {path}')

    return {
        "parameters": result.parameters,
        "errors": [str(error) for error in result.errors],
    }


@lambda_handler
def get_parameters(event, context):
    """Return the values of several parameters and the names SSM rejected."""
    keys = _event_keys(event)
    parameters, invalid = get_parameter_store().get_parameters(*keys)
    return {"parameters": parameters, "invalid": invalid}


@lambda_handler
def put_parameter(event, context):
    """Create or update a parameter, returning its previous value."""
    key = event.get('key', '')
    previous = get_parameter_store().put_parameter(
        key,
        event.get('value', ''),
        overwrite=_event_flag(event, 'overwrite', False)
    )
    return {"key": key, "previous": previous}


@lambda_handler
def delete_parameter(event, context):
    """Delete a parameter, returning the value it held."""
    key = event.get('key', '')
    previous = get_parameter_store().delete_parameter(key)
    return {"key": key, "previous": previous}
