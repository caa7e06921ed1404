"""
Configuration for the BytePlus CDN deployer and uploader.
Handles environment variable / mapping parsing and validation.
"""

import os
import logging
from typing import Any, List, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_REGION = "ap-singapore-1"
DEFAULT_ENDPOINT = "cdn.byteplusapi.com"
DEFAULT_TIMEOUT = 30


def _validate_credentials(access_key: str, secret_key: str) -> List[str]:
    errors = []

    for name, value in (("access key", access_key), ("secret key", secret_key)):
        if not (value or "").strip():
            errors.append(f"BytePlus {name} is required")

    return errors


def is_wildcard_domain(domain: str) -> bool:
    """Check if a domain is a "*.<suffix>" wildcard."""
    return domain.startswith("*.")


def _lookup(data: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class BytePlusCDNUploaderConfig:
    """Credentials and endpoint for uploading certificates to BytePlus CDN."""

    access_key: str
    secret_key: str
    region: str = DEFAULT_REGION
    endpoint: str = DEFAULT_ENDPOINT
    timeout: int = DEFAULT_TIMEOUT

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = _validate_credentials(self.access_key, self.secret_key)
        if self.timeout <= 0:
            errors.append("BytePlus request timeout must be positive")
        return errors

    def __repr__(self) -> str:
        return (
            f"BytePlusCDNUploaderConfig(access_key={self.access_key!r}, "
            f"secret_key='***', region={self.region!r}, endpoint={self.endpoint!r})"
        )


@dataclass(frozen=True)
class BytePlusCDNDeployerConfig:
    """Configuration for deploying a certificate to BytePlus CDN domains."""

    access_key: str
    secret_key: str
    # Accelerated domain, either an exact name or a "*.<suffix>" wildcard
    domain: str
    region: str = DEFAULT_REGION
    endpoint: str = DEFAULT_ENDPOINT
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BytePlusCDNDeployerConfig":
        """Build configuration from a mapping using the stored access keys."""
        return cls(
            access_key=_lookup(data, "accessKey", "access_key"),
            secret_key=_lookup(data, "secretKey", "secret_key"),
            domain=_lookup(data, "domain"),
            region=_lookup(data, "region", default=DEFAULT_REGION),
            endpoint=_lookup(data, "endpoint", default=DEFAULT_ENDPOINT),
            timeout=int(_lookup(data, "timeout", default=DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_env(cls) -> "BytePlusCDNDeployerConfig":
        """Load configuration from environment variables."""
        return cls(
            access_key=os.getenv("BYTEPLUS_ACCESS_KEY", ""),
            secret_key=os.getenv("BYTEPLUS_SECRET_KEY", ""),
            domain=os.getenv("BYTEPLUS_CDN_DOMAIN", ""),
            region=os.getenv("BYTEPLUS_REGION", DEFAULT_REGION),
            endpoint=os.getenv("BYTEPLUS_CDN_ENDPOINT", DEFAULT_ENDPOINT),
            timeout=int(os.getenv("BYTEPLUS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = _validate_credentials(self.access_key, self.secret_key)

        if not self.domain:
            errors.append("BytePlus CDN domain is required")
        elif not self._is_valid_domain(self.domain):
            errors.append(f"Invalid domain format: {self.domain}")

        if self.timeout <= 0:
            errors.append("BytePlus request timeout must be positive")

        if errors:
            logger.debug(f"BytePlus CDN deployer config has {len(errors)} error(s)")
        return errors

    @staticmethod
    def _is_valid_domain(domain: str) -> bool:
        """Basic domain validation."""
        if not domain or len(domain) > 253:
            return False

        # Handle wildcard domains
        if domain.startswith("*."):
            domain = domain[2:]

        parts = domain.split(".")
        if len(parts) < 2:
            return False

        for part in parts:
            if not part or len(part) > 63:
                return False
            if part.startswith("-") or part.endswith("-"):
                return False
            if "*" in part:
                return False

        return True

    def is_wildcard(self) -> bool:
        """Check if the configured domain is a wildcard."""
        return is_wildcard_domain(self.domain)

    def to_uploader_config(self) -> BytePlusCDNUploaderConfig:
        """Uploader configuration sharing these credentials."""
        return BytePlusCDNUploaderConfig(
            access_key=self.access_key,
            secret_key=self.secret_key,
            region=self.region,
            endpoint=self.endpoint,
            timeout=self.timeout,
        )

    def __repr__(self) -> str:
        return (
            f"BytePlusCDNDeployerConfig(access_key={self.access_key!r}, "
            f"secret_key='***', domain={self.domain!r}, region={self.region!r})"
        )
