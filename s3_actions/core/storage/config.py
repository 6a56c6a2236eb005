"""
Connection config resolution.

Turns the connection half of an option bag into a StorageConfig. This is
pure derivation: nothing here talks to the network.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from .models import (
    CUSTOM_PROVIDER,
    DEFAULT_PROVIDER,
    DEFAULT_REGION,
    Credentials,
    StorageConfig,
)
from .options import ActionOptions, parse_options, required

logger = logging.getLogger(__name__)


class ConnectionOptions(ActionOptions):
    """Credentials and endpoint selection shared by every action."""
    access_key_id: str = required("AccessKeyId is required.")
    secret_access_key: str = required("SecretAccessKey is required.")
    region: str = DEFAULT_REGION
    provider: str = DEFAULT_PROVIDER
    endpoint: str = ""
    force_path_style: bool = False


def aws_endpoint(region: str) -> str:
    """Regional AWS S3 endpoint."""
    return f"https://s3.{region}.amazonaws.com"


def build_storage_config(connection: ConnectionOptions) -> StorageConfig:
    """
    Derive a StorageConfig from parsed connection options.

    The endpoint override only applies to the custom provider. A custom
    provider without an override falls back to the AWS regional
    endpoint; callers relying on that get exactly what they asked for.
    """
    endpoint = aws_endpoint(connection.region)
    if connection.provider == CUSTOM_PROVIDER and connection.endpoint:
        endpoint = connection.endpoint

    return StorageConfig(
        region=connection.region,
        credentials=Credentials(
            access_key_id=connection.access_key_id,
            secret_access_key=connection.secret_access_key,
        ),
        endpoint=endpoint,
        force_path_style=connection.force_path_style,
        provider=connection.provider,
    )


def resolve_storage_config(options: Optional[Mapping[str, Any]]) -> StorageConfig:
    """Parse and resolve the connection fields of an option bag."""
    config = build_storage_config(parse_options(ConnectionOptions, options))

    logger.debug(
        "Resolved storage config",
        extra={
            "region": config.region,
            "provider": config.provider,
            "endpoint": config.endpoint,
            "addressing_mode": config.addressing_mode.value,
        }
    )

    return config
