"""
Unit tests for the storage domain models.

These tests verify plain value behaviour without touching boto3 or
the network.
"""

from datetime import datetime, timezone

import pytest

from s3_actions.core.storage.models import (
    AddressingMode,
    Credentials,
    ObjectDescriptor,
    ObjectLocator,
    StorageConfig,
    addressing_mode,
)


def make_config(**overrides) -> StorageConfig:
    values = {
        "region": "us-east-1",
        "credentials": Credentials("AK", "SK"),
        "endpoint": "https://s3.us-east-1.amazonaws.com",
    }
    values.update(overrides)
    return StorageConfig(**values)


# ---------------------------------------------------------------------------
# Addressing Mode Tests
# ---------------------------------------------------------------------------

class TestAddressingMode:
    """Tests for deriving the addressing mode."""

    def test_aws_defaults_to_virtual_hosted(self):
        assert addressing_mode(False, "aws") is AddressingMode.VIRTUAL_HOSTED

    def test_force_path_style_wins_for_aws(self):
        assert addressing_mode(True, "aws") is AddressingMode.PATH_STYLE

    def test_custom_provider_is_always_path_style(self):
        assert addressing_mode(False, "custom") is AddressingMode.PATH_STYLE
        assert addressing_mode(True, "custom") is AddressingMode.PATH_STYLE

    def test_unknown_provider_is_treated_as_aws(self):
        """Only the exact string 'custom' switches behaviour."""
        assert addressing_mode(False, "minio") is AddressingMode.VIRTUAL_HOSTED
        assert addressing_mode(False, "Custom") is AddressingMode.VIRTUAL_HOSTED


# ---------------------------------------------------------------------------
# StorageConfig Tests
# ---------------------------------------------------------------------------

class TestStorageConfig:
    """Tests for the StorageConfig value object."""

    def test_config_is_frozen(self):
        config = make_config()
        with pytest.raises(AttributeError):
            config.region = "eu-west-1"

    def test_config_exposes_addressing_mode(self):
        assert make_config().addressing_mode is AddressingMode.VIRTUAL_HOSTED
        assert make_config(provider="custom").addressing_mode is AddressingMode.PATH_STYLE

    def test_is_custom(self):
        assert not make_config().is_custom
        assert make_config(provider="custom").is_custom

    def test_credentials_repr_hides_secret(self):
        """Secrets must not leak through logs or tracebacks."""
        text = repr(Credentials("AKID", "very-secret"))
        assert "AKID" in text
        assert "very-secret" not in text


# ---------------------------------------------------------------------------
# Locator and Descriptor Tests
# ---------------------------------------------------------------------------

class TestObjectLocator:
    """Tests for the ObjectLocator value object."""

    def test_copy_source_joins_bucket_and_key(self):
        assert ObjectLocator("src", "dir/file.txt").copy_source == "src/dir/file.txt"

    def test_rejects_empty_bucket(self):
        with pytest.raises(ValueError, match="Bucket"):
            ObjectLocator("", "key")

    def test_rejects_empty_key(self):
        with pytest.raises(ValueError, match="Key"):
            ObjectLocator("bucket", "")


class TestObjectDescriptor:
    """Tests for listing entries."""

    def test_to_dict_uses_camel_case_keys(self):
        modified = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        descriptor = ObjectDescriptor(
            key="a.txt",
            size=12,
            last_modified=modified,
            etag='"abc"',
            url="https://b.s3.us-east-1.amazonaws.com/a.txt",
        )

        assert descriptor.to_dict() == {
            "key": "a.txt",
            "size": 12,
            "lastModified": modified,
            "etag": '"abc"',
            "url": "https://b.s3.us-east-1.amazonaws.com/a.txt",
        }
