"""
Application Configuration
Add constants, secrets, env variables here
"""

from functools import lru_cache
import os
import json
from pathlib import Path
from pydantic import computed_field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

# Load .env file into os.environ so os.getenv() works correctly
# This must happen before Settings class is instantiated
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_secret(secret_name: str, region_name: str) -> dict:
    """
    Retrieve secrets from AWS Secrets Manager

    Args:
        secret_name: Name of the secret in Secrets Manager
        region_name: AWS region where secret is stored

    Returns:
        dict: Parsed secret value

    Raises:
        ClientError: If secret cannot be retrieved
    """
    session = boto3.session.Session()
    client = session.client(
        service_name='secretsmanager',
        region_name=region_name
    )
    get_secret_value_response = client.get_secret_value(
        SecretId=secret_name
    )
    secret = get_secret_value_response['SecretString']
    return json.loads(
        secret.replace('\n', '')
    )


def _as_bool(value: str | bool | None, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return value.strip().lower() in ("1", "true", "yes", "on")


# Define settings class for univeral access
class Settings(BaseSettings):
    # Computed or constant values
    client_origin: str | None = os.getenv("client_origin")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Index holding ingested file records
    FILES_INDEX: str = os.getenv("FILES_INDEX", "files")

    # Cache for AWS Secrets Manager to avoid multiple API calls
    # Note: Must use PrivateAttr for Pydantic v2 private attributes
    _secret_cache: dict | None = PrivateAttr(default=None)

    def _get_config_value(
        self,
        env_var_name: str,
        secret_key_name: str | None = None,
        default: str | None = None
    ) -> str | None:
        """
        Get configuration value from environment variable or AWS Secrets Manager (with caching).

        Args:
            env_var_name: Environment variable name to check first
            secret_key_name: Key name in AWS Secrets (defaults to env_var_name if not provided)
            default: Default value to return if not found in env or secrets

        Returns:
            Configuration value, or default value if not found
        """
        # 1. Check environment variable first
        env_value = os.getenv(env_var_name)
        if env_value:
            return env_value

        # 2. Try to get from AWS Secrets Manager with caching
        if secret_key_name is None:
            secret_key_name = env_var_name

        if self._secret_cache is None:
            env_secret = os.getenv("ENV_SECRETS")
            self._secret_cache = {}
            if env_secret:
                try:
                    self._secret_cache = get_secret(
                        env_secret, os.getenv("AWS_REGION", "us-east-1")
                    )
                except (BotoCoreError, ClientError, ValueError):
                    # Secrets are optional, fall through to the default
                    pass

        secret_value = self._secret_cache.get(secret_key_name)
        if secret_value is not None:
            return secret_value

        # 3. Return default value if provided
        return default

    # OpenSearch Configuration
    @computed_field
    @property
    def OPENSEARCH_HOST(self) -> str | None:
        """Get OpenSearch host from env or secrets"""
        return self._get_config_value("OPENSEARCH_HOST")

    @computed_field
    @property
    def OPENSEARCH_PORT(self) -> str | None:
        """Get OpenSearch port from env or secrets"""
        return self._get_config_value("OPENSEARCH_PORT", default="9200")

    @computed_field
    @property
    def OPENSEARCH_USER(self) -> str | None:
        """Get OpenSearch user from env or secrets"""
        return self._get_config_value("OPENSEARCH_USER")

    @computed_field
    @property
    def OPENSEARCH_PASSWORD(self) -> str | None:
        """Get OpenSearch password from env or secrets"""
        return self._get_config_value("OPENSEARCH_PASSWORD")

    @computed_field
    @property
    def OPENSEARCH_USE_SSL(self) -> bool:
        """Connect to OpenSearch over https (default: true)"""
        return _as_bool(self._get_config_value("OPENSEARCH_USE_SSL"), True)

    @computed_field
    @property
    def OPENSEARCH_VERIFY_CERTS(self) -> bool:
        """Verify the OpenSearch server certificate (default: false)"""
        return _as_bool(self._get_config_value("OPENSEARCH_VERIFY_CERTS"), False)

    # Read environment variables from .env file, if it exists
    # extra='ignore' prevents validation errors from extra env vars
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Export settings
@lru_cache
def get_settings() -> Settings:
    """
    Get settings instance, cached for performance
    """
    return Settings()


if __name__ == "__main__":
    # To use in other modules
    # from core.config import get_settings
    print(get_settings().OPENSEARCH_HOST)
