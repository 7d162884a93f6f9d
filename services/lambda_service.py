"""
Lambda service for function configuration updates.
"""
import boto3
from typing import Any, Dict, Optional, TYPE_CHECKING
from botocore.exceptions import ClientError
from logger_config import get_logger

if TYPE_CHECKING:
    from mypy_boto3_lambda import LambdaClient
else:
    LambdaClient = Any

logger = get_logger(__name__)


class LambdaService:
    """Service for Lambda API operations."""

    def __init__(self, region_name: Optional[str] = None) -> None:
        """
        Initialize Lambda service.

        Args:
            region_name: AWS region; boto3's default resolution when omitted
        """
        self.region_name = region_name
        self._client: Optional[LambdaClient] = None

    @property
    def client(self) -> LambdaClient:
        """Lazy initialization of Lambda client."""
        if self._client is None:
            self._client = boto3.client('lambda', region_name=self.region_name)
        return self._client

    def update_environment(
        self,
        function_name: str,
        environment: Dict[str, Dict[str, str]]
    ) -> Dict[str, Any]:
        """
        Replace a deployed function's environment variables.

        Args:
            function_name: Fully qualified function name
            environment: Environment in the Lambda API shape ({"Variables": {...}})

        Returns:
            The UpdateFunctionConfiguration response

        Raises:
            ClientError: If the Lambda API call fails
        """
        try:
            response = self.client.update_function_configuration(
                FunctionName=function_name,
                Environment=environment
            )
        except ClientError as e:
            logger.error(f'Lambda update_function_configuration failed for {function_name}: {str(e)}')
            raise

        logger.info(
            f'Updated {len(environment.get("Variables", {}))} environment '
            f'variable(s) on {function_name}'
        )
        return response
