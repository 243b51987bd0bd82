"""Configuration management for the scoped storage client.

Settings are loaded with pydantic-settings from environment variables
(prefixed with ``S3_LIBRARY_``) or a ``.env`` file. Build one instance at
startup and hand it to ``StorageClient.from_settings``.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class StorageSettings(BaseSettings):
    """Storage client settings loaded from environment variables.

    Attributes:
        # Credentials (2 fields)
        access_key: Access key for the object store
        secret: Secret key for the object store

        # Endpoint Configuration (3 fields)
        service_endpoint: Service endpoint URL (e.g. http://localhost:9000)
        signing_region: Region used when signing requests
        signer_type: Request signer (botocore signature version or legacy name)

        # Storage Layout (2 fields)
        bucket: Bucket holding all items
        root_directory: Optional directory prepended to every object key

        # Application Configuration (1 field)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    model_config = SettingsConfigDict(
        env_prefix="S3_LIBRARY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials (2 fields)
    access_key: str = Field(
        ...,
        description="Access key for the object store",
    )
    secret: str = Field(
        ...,
        description="Secret key for the object store",
    )

    # Endpoint Configuration (3 fields)
    service_endpoint: str = Field(
        ...,
        description="Service endpoint URL (e.g. http://localhost:9000)",
    )
    signing_region: str = Field(
        ...,
        description="Region used when signing requests",
    )
    signer_type: str = Field(
        ...,
        description="Request signer (botocore signature version or legacy name)",
    )

    # Storage Layout (2 fields)
    bucket: str = Field(
        ...,
        description="Bucket holding all items",
        min_length=1,
    )
    root_directory: str = Field(
        default="",
        description="Optional directory prepended to every object key",
    )

    # Application Configuration (1 field)
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the logging level.

        Args:
            v: The log_level value

        Returns:
            The upper-cased level

        Raises:
            ValueError: If the level is not a known loguru level
        """
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
