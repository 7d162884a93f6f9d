"""
Naming and directory conventions for serverless function deployments.

A function is identified by its service prefix, service name, trigger and
base name. Its deployed name and its location on disk are both derived from
that identity, so build scripts and deploy scripts agree on where code lives.
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from config import Config, get_config
from logger_config import get_logger
from services.lambda_service import LambdaService
from utils.exceptions import UnknownTriggerError

logger = get_logger(__name__)

DEFAULT_APP_DIR = "app"
DEFAULT_LAMBDA_DIR = "lambdas"
DEFAULT_BUILD_DIR = "build"


class LambdaTrigger(Enum):
    """Event source that invokes a function."""

    APIGW = "apigw"
    DDB = "ddb"
    DIRECT = "direct"
    COGNITO = "cognito"
    S3 = "s3"
    SNS = "sns"
    SQS = "sqs"

    def __str__(self) -> str:
        return self.value


def to_lambda_trigger(name: str) -> LambdaTrigger:
    """
    Look up a trigger by name, ignoring case.

    Raises:
        UnknownTriggerError: If the name is not a registered trigger
    """
    try:
        return LambdaTrigger(name.lower())
    except ValueError:
        raise UnknownTriggerError(name) from None


@dataclass
class Lambda:
    """Identity and runtime environment of one deployable function."""

    prefix: str
    service: str
    trigger: LambdaTrigger
    base_name: str
    binary_name: str = ""
    binary_zip_name: str = ""
    env: Dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.prefix}-{self.service}-{self.trigger}_{self.base_name}"

    def qualified_name(self) -> str:
        return str(self)

    def trigger_dir(self) -> str:
        return str(self.trigger)

    def code_dir(self) -> str:
        """Code directory relative to the service's lambdas dir."""
        return os.path.join(self.trigger_dir(), self.base_name)

    def add_env(self, name: str, value: str) -> None:
        self.env[name] = value

    def to_aws_env(self) -> Dict[str, Dict[str, str]]:
        """Environment in the shape UpdateFunctionConfiguration expects."""
        return {"Variables": dict(self.env)}


@dataclass(frozen=True)
class ServiceLayout:
    """
    Directories that locate a service's function code and build output.

    Every path is derived from ``root``:

        {root}/{app}/{lambdas}/{trigger}/{base_name}   function source
        {root}/{build}                                 build artifacts
    """

    root: str
    app: str = DEFAULT_APP_DIR
    lambdas: str = DEFAULT_LAMBDA_DIR
    build: str = DEFAULT_BUILD_DIR

    @classmethod
    def from_config(cls, config: Config) -> "ServiceLayout":
        return cls(root=config.service_root)

    def root_dir(self) -> str:
        return self.root

    def app_dir(self) -> str:
        return os.path.join(self.root_dir(), self.app)

    def lambdas_dir(self) -> str:
        return os.path.join(self.app_dir(), self.lambdas)

    def build_dir(self) -> str:
        return os.path.join(self.root_dir(), self.build)

    def trigger_dir(self, trigger: LambdaTrigger) -> str:
        return os.path.join(self.lambdas_dir(), str(trigger))

    def code_dir(self, fn: Lambda) -> str:
        return os.path.join(self.lambdas_dir(), fn.code_dir())


class Service:
    """A named service, its layout, and the functions it deploys."""

    def __init__(
        self,
        name: str,
        env: str,
        layout: ServiceLayout,
        lambda_service: Optional[LambdaService] = None,
        prefix: Optional[str] = None
    ):
        """
        Initialize a service.

        Args:
            name: Service name, used as the middle segment of function names
            env: Deployment environment (dev, prod, ...)
            layout: Directory layout of the service's code
            lambda_service: Lambda API wrapper used by sync_env; built for
                the configured AWS_REGION when omitted
            prefix: Function name prefix; defaults to env
        """
        self.name = name
        self.env = env
        self.layout = layout
        self.prefix = prefix or env
        self.features: Dict[str, Lambda] = {}
        self._lambda_service = lambda_service

    @classmethod
    def from_config(cls, config: Config, lambda_service: Optional[LambdaService] = None) -> "Service":
        return cls(
            name=config.service_name,
            env=config.service_env,
            layout=ServiceLayout.from_config(config),
            lambda_service=lambda_service or LambdaService(config.aws_region),
        )

    @property
    def lambda_service(self) -> LambdaService:
        if self._lambda_service is None:
            self._lambda_service = LambdaService(get_config().aws_region)
        return self._lambda_service

    def feature_names(self) -> List[str]:
        return sorted(self.features)

    def add_feature(self, fn: Lambda) -> None:
        self.features[fn.base_name] = fn

    def new_lambda(self, trigger: LambdaTrigger, base_name: str, **kwargs) -> Lambda:
        """Build a function under this service's prefix and register it."""
        fn = Lambda(
            prefix=self.prefix,
            service=self.name,
            trigger=trigger,
            base_name=base_name,
            **kwargs
        )
        self.add_feature(fn)
        return fn

    def code_dir(self, feature_name: str) -> str:
        return self.layout.code_dir(self.features[feature_name])

    def sync_env(self, feature_name: str) -> Dict:
        """Push a feature's environment variables to its deployed function."""
        fn = self.features[feature_name]
        logger.info(f'Syncing environment for {fn.qualified_name()}')
        return self.lambda_service.update_environment(
            fn.qualified_name(), fn.to_aws_env()
        )
