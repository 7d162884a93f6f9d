"""
Parameter Store service for microservice configuration data.

Wraps the five SSM calls the toolkit needs behind a small CRUD facade:
single reads, path reads, batch reads, delete, and put-if-different.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from config import Config, get_config
from logger_config import get_logger
from utils.exceptions import (
    InvalidInputError,
    ParameterConflictError,
    ParameterNotFoundError,
    ParameterStoreSystemError,
    map_ssm_error,
)

logger = get_logger(__name__)

# GetParameters accepts at most this many names per request
MAX_BATCH_SIZE = 10


class ParameterStoreAPI(Protocol):
    """The subset of the boto3 SSM client used by ParameterStoreService."""

    def get_parameter(self, **kwargs: Any) -> Dict[str, Any]: ...

    def get_parameters(self, **kwargs: Any) -> Dict[str, Any]: ...

    def get_parameters_by_path(self, **kwargs: Any) -> Dict[str, Any]: ...

    def put_parameter(self, **kwargs: Any) -> Dict[str, Any]: ...

    def delete_parameter(self, **kwargs: Any) -> Dict[str, Any]: ...


@dataclass
class PathResult:
    """Parameters fetched under a path, plus any page errors encountered."""

    parameters: Dict[str, str] = field(default_factory=dict)
    errors: List[ParameterStoreSystemError] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise self.errors[0]


def ensure_path_prefix(path: str) -> str:
    """Prefix ``path`` with a separator when it does not start with one."""
    if not path.startswith('/'):
        path = '/' + path
    return path


def _collect(parameters: List[Dict[str, Any]], into: Dict[str, str]) -> None:
    for parameter in parameters:
        name = parameter.get('Name')
        value = parameter.get('Value')
        if name is None or value is None:
            continue
        into[name] = value


class ParameterStoreService:
    """Service for SSM Parameter Store operations."""

    def __init__(
        self,
        api: Optional[ParameterStoreAPI] = None,
        is_encrypted: Optional[bool] = None,
        config: Optional[Config] = None
    ):
        """
        Initialize Parameter Store service.

        Args:
            api: Any object exposing the five SSM calls; a boto3 client is
                created lazily when omitted
            is_encrypted: Whether reads request decryption; defaults to
                the SSM_ENCRYPTED setting
            config: Settings for region and timeouts; defaults to get_config()
        """
        self._config = config
        self._api = api
        self._is_encrypted = is_encrypted

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def api(self) -> ParameterStoreAPI:
        """Lazy initialization of the SSM client."""
        if self._api is None:
            self._api = boto3.client(
                'ssm',
                region_name=self.config.aws_region,
                config=BotoConfig(
                    connect_timeout=self.config.ssm_connect_timeout,
                    read_timeout=self.config.ssm_read_timeout,
                    retries={'total_max_attempts': 1, 'mode': 'standard'},
                ),
            )
        return self._api

    @property
    def is_encrypted(self) -> bool:
        if self._is_encrypted is None:
            self._is_encrypted = self.config.ssm_encrypted
        return self._is_encrypted

    ensure_path_prefix = staticmethod(ensure_path_prefix)

    def get_parameter(self, key: str) -> str:
        """
        Retrieve a single parameter value.

        Args:
            key: Full parameter name

        Returns:
            The parameter value, or an empty string if it was never set

        Raises:
            InvalidInputError: If key is empty
            ParameterNotFoundError: If the parameter does not exist
            ParameterStoreSystemError: For any other remote failure
        """
        if not key:
            raise InvalidInputError("key is empty, a non empty key is required", field="key")

        try:
            response = self.api.get_parameter(Name=key, WithDecryption=self.is_encrypted)
        except (ClientError, BotoCoreError) as e:
            error = map_ssm_error(e, 'GetParameter', key)
            logger.debug(f'SSM get_parameter failed for {key}: {error}')
            raise error from e

        return (response or {}).get('Parameter', {}).get('Value') or ''

    def get_parameters_by_path(
        self,
        path: str,
        recursive: bool = True,
        strict: bool = False,
        page_size: Optional[int] = None
    ) -> PathResult:
        """
        Retrieve every parameter under a hierarchy.

        Pages are requested until SSM stops returning a NextToken. A failed
        page ends the walk since no further token is available; the error is
        recorded on the result next to whatever was already fetched.

        Args:
            path: Hierarchy to read; a leading '/' is added when missing
            recursive: Descend into sub-paths
            strict: Raise on the first page error instead of recording it
            page_size: Optional MaxResults per page (SSM allows 1-10)

        Returns:
            PathResult mapping full keys to values, plus page errors

        Raises:
            InvalidInputError: If path is empty
            ParameterStoreSystemError: On a page error when strict is set
        """
        if not path:
            raise InvalidInputError("path is empty", field="path")

        path = ensure_path_prefix(path)
        request: Dict[str, Any] = {
            'Path': path,
            'Recursive': recursive,
            'WithDecryption': self.is_encrypted,
        }
        if page_size:
            request['MaxResults'] = page_size

        result = PathResult()
        pages = 0
        while True:
            try:
                response = self.api.get_parameters_by_path(**request)
            except (ClientError, BotoCoreError) as e:
                error = ParameterStoreSystemError(
                    f"GetParametersByPath failed ({path}) after {pages} page(s): {e}",
                    operation='GetParametersByPath',
                    original_error=e
                )
                if strict:
                    raise error from e
                logger.warning(
                    f'Stopped reading {path} after {pages} page(s), '
                    f'{len(result.parameters)} parameter(s) fetched: {e}'
                )
                result.errors.append(error)
                break

            pages += 1
            _collect(response.get('Parameters', []), result.parameters)

            next_token = response.get('NextToken')
            if not next_token:
                break
            request['NextToken'] = next_token

        logger.debug(f'Read {len(result.parameters)} parameter(s) from {path} in {pages} page(s)')
        return result

    def get_parameters(self, *keys: str) -> Tuple[Dict[str, str], List[str]]:
        """
        Retrieve several parameters regardless of hierarchy.

        Args:
            keys: Full parameter names

        Returns:
            Tuple of (found key -> value, keys the store reported as invalid)

        Raises:
            InvalidInputError: If no keys are given
            ParameterStoreSystemError: If the remote call fails
        """
        if not keys:
            raise InvalidInputError("keys must have at least one key", field="keys")

        found: Dict[str, str] = {}
        invalid: List[str] = []
        names = list(keys)
        for start in range(0, len(names), MAX_BATCH_SIZE):
            batch = names[start:start + MAX_BATCH_SIZE]
            try:
                response = self.api.get_parameters(Names=batch, WithDecryption=self.is_encrypted)
            except (ClientError, BotoCoreError) as e:
                raise ParameterStoreSystemError(
                    f"GetParameters failed ({', '.join(batch)}): {e}",
                    operation='GetParameters',
                    original_error=e
                ) from e

            _collect(response.get('Parameters', []), found)
            invalid.extend(name for name in response.get('InvalidParameters', []) if name)

        return found, invalid

    def delete_parameter(self, key: str) -> str:
        """
        Remove a parameter and return the value it held.

        Raises:
            InvalidInputError: If key is empty
            ParameterNotFoundError: If the parameter does not exist
            ParameterStoreSystemError: For any other remote failure
        """
        previous = self.get_parameter(key)

        try:
            self.api.delete_parameter(Name=key)
        except (ClientError, BotoCoreError) as e:
            raise map_ssm_error(e, 'DeleteParameter', key) from e

        logger.info(f'Deleted parameter {key}')
        return previous

    def put_parameter(self, key: str, value: str, overwrite: bool = False) -> str:
        """
        Write a parameter only when it is absent or holds a different value.

        Args:
            key: Full parameter name
            value: New value
            overwrite: Allow replacing an existing, different value

        Returns:
            The prior value, or an empty string if the parameter was created

        Raises:
            InvalidInputError: If key is empty
            ParameterConflictError: If the parameter exists and overwrite is False
            ParameterStoreSystemError: For any other remote failure
        """
        exists = True
        try:
            previous = self.get_parameter(key)
        except ParameterNotFoundError:
            exists = False
            previous = ''

        if exists and previous == value:
            logger.debug(f'Parameter {key} already holds the requested value')
            return previous

        if exists and not overwrite:
            raise ParameterConflictError(
                f"param ({key}) exists but overwrite is false", key=key
            )

        try:
            self.api.put_parameter(
                Name=key,
                Value=value,
                Type='String',
                Overwrite=overwrite,
                Tier='Standard',
            )
        except (ClientError, BotoCoreError) as e:
            raise map_ssm_error(e, 'PutParameter', key) from e

        logger.info(f'{"Overwrote" if exists else "Created"} parameter {key}')
        return previous
