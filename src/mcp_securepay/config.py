"""Configuration loading and management."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

try:
    import tomli
except ImportError:  # pragma: no cover
    import tomllib as tomli  # Python 3.11+


class Environment(Enum):
    """SecurePay environment."""
    LIVE = "live"
    TEST = "test"


# Default API hosts per environment
DEFAULT_HOSTS = {
    Environment.LIVE: "https://api.securepay.com.au",
    Environment.TEST: "https://test.api.securepay.com.au",
}

DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class ClientConfig:
    """Merchant credentials and connection settings."""

    # Merchant settings
    merchant_id: str = ""
    password: str = ""

    # Connection settings
    environment: Environment = Environment.TEST
    host: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT  # seconds

    @property
    def default_host(self) -> str:
        """Get default API host for current environment."""
        return DEFAULT_HOSTS[self.environment]

    @property
    def base_url(self) -> str:
        """Get configured or default host, without trailing slash."""
        return (self.host or self.default_host).rstrip("/")

    def service_url(self, path: str) -> str:
        """Build the absolute URL of a service endpoint.

        Args:
            path: Absolute path of the service, e.g. "/xmlapi/payment"
        """
        return f"{self.base_url}/{path.lstrip('/')}"


DEFAULT_CONFIG = ClientConfig()


def load_config(path: Path) -> ClientConfig:
    """Load configuration from TOML file.

    Args:
        path: Path to config file

    Returns:
        Loaded configuration, merged with defaults

    Raises:
        ValueError: If the environment name is unknown
    """
    if not path.exists():
        return ClientConfig()

    with open(path, "rb") as f:
        data = tomli.load(f)

    # Parse merchant section
    merchant = data.get("merchant", {})

    # Parse connection section
    conn = data.get("connection", {})
    environment_str = conn.get("environment", "test")

    return ClientConfig(
        merchant_id=merchant.get("id", ""),
        password=merchant.get("password", ""),
        environment=Environment(environment_str),
        host=conn.get("host") or None,
        timeout=float(conn.get("timeout", DEFAULT_TIMEOUT)),
    )
