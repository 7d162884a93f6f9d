"""
Configuration module for environment variable validation and type-safe config.

All settings are read from the Lambda environment and validated once; the
resulting object is cached for the lifetime of the execution environment.
"""
import os
from dataclasses import dataclass
from typing import Optional


_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no", ""}


def parse_flag(name: str, raw: str) -> bool:
    """
    Interpret a true/false string, ignoring case and surrounding spaces.

    Raises:
        ValueError: If the string is not one of the accepted spellings.
    """
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be true or false, got: {raw}")


def _parse_bool(name: str, default: str) -> bool:
    return parse_flag(name, os.environ.get(name, default))


def _parse_timeout(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got: {raw}")
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero, got: {raw}")
    return value


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    aws_region: str = "us-east-1"
    log_level: str = "INFO"
    ssm_encrypted: bool = False
    ssm_connect_timeout: float = 5.0
    ssm_read_timeout: float = 10.0
    service_name: str = ""
    service_env: str = "dev"
    service_root: str = "."

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        aws_region = os.environ.get("AWS_REGION", "us-east-1")
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_log_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}"
            )

        return cls(
            aws_region=aws_region,
            log_level=log_level,
            ssm_encrypted=_parse_bool("SSM_ENCRYPTED", "false"),
            ssm_connect_timeout=_parse_timeout("SSM_CONNECT_TIMEOUT", "5"),
            ssm_read_timeout=_parse_timeout("SSM_READ_TIMEOUT", "10"),
            service_name=os.environ.get("SERVICE_NAME", ""),
            service_env=os.environ.get("SERVICE_ENV", "dev"),
            service_root=os.environ.get("SERVICE_ROOT", "."),
        )


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If an environment variable holds an invalid value.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
