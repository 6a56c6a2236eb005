"""
Public object URLs.

The URL has to agree with the addressing mode the client was configured
for, otherwise links handed to users point at the wrong host.
"""

from urllib.parse import quote

from .models import AddressingMode, StorageConfig, addressing_mode

# characters encodeURIComponent leaves alone besides alphanumerics and -_.
_URI_COMPONENT_SAFE = "!~*'()"


def encode_key(key: str) -> str:
    """Percent-encode a key as a single URI component ('/' becomes %2F)."""
    return quote(key, safe=_URI_COMPONENT_SAFE)


def build_file_url(
    endpoint: str,
    bucket: str,
    key: str,
    region: str,
    provider: str,
    force_path_style: bool,
) -> str:
    """
    Build the externally reachable URL of an object.

    Path style: {endpoint}/{bucket}/{key}, with one trailing slash
    dropped from the endpoint. Virtual hosted:
    https://{bucket}.s3.{region}.amazonaws.com/{key}.
    """
    encoded = encode_key(key)

    if addressing_mode(force_path_style, provider) is AddressingMode.PATH_STYLE:
        base = endpoint[:-1] if endpoint.endswith("/") else endpoint
        return f"{base}/{bucket}/{encoded}"

    return f"https://{bucket}.s3.{region}.amazonaws.com/{encoded}"


def object_url(config: StorageConfig, bucket: str, key: str) -> str:
    """build_file_url for an already resolved config."""
    return build_file_url(
        endpoint=config.endpoint,
        bucket=bucket,
        key=key,
        region=config.region,
        provider=config.provider,
        force_path_style=config.force_path_style,
    )
