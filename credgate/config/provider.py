"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class TokenConfig:
    """Token signing configuration."""
    secret: str
    algorithm: str = "HS256"


@dataclass(frozen=True)
class StoreConfig:
    """Credential store configuration."""
    backend: str = "redis"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    key_prefix: str = "credgate:"
    hash_rounds: int = 12

    @property
    def redis_url(self) -> str:
        """Redis URL without password (password is passed separately)."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


@dataclass(frozen=True)
class APIConfig:
    """API configuration."""
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_config(self) -> TokenConfig:
        """Get token signing configuration."""
        ...

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider.

    Values are read once, at construction, and never re-read for the
    lifetime of the process.
    """

    def __init__(self, environ: Optional[dict] = None):
        env = os.environ if environ is None else environ
        self._token = self._load_token_config(env)
        self._store = self._load_store_config(env)
        self._api = self._load_api_config(env)

    @staticmethod
    def _load_token_config(env) -> TokenConfig:
        # The signing secret is required - no default for security
        secret = env.get("SECRET")
        if not secret:
            raise ValueError(
                "SECRET environment variable is required. "
                "Set it to a long random string used to sign tokens."
            )
        # Tokens are signed with a shared secret, so only HMAC algorithms apply
        algorithm = env.get("JWT_ALGORITHM", "HS256").upper()
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(
                f"Unsupported JWT_ALGORITHM: {algorithm} (expected one of {', '.join(HMAC_ALGORITHMS)})"
            )
        return TokenConfig(secret=secret, algorithm=algorithm)

    @staticmethod
    def _load_store_config(env) -> StoreConfig:
        # Parse Redis port (might be in tcp://host:port format from K8s)
        redis_port_env = env.get("REDIS_PORT", "6379")
        if redis_port_env.startswith("tcp://"):
            redis_port = int(redis_port_env.split(":")[-1])
        else:
            redis_port = int(redis_port_env)

        backend = env.get("STORE_BACKEND", "redis").lower()
        if backend not in ("redis", "memory"):
            raise ValueError(f"Unknown STORE_BACKEND: {backend} (expected 'redis' or 'memory')")

        return StoreConfig(
            backend=backend,
            redis_host=env.get("REDIS_HOST", "localhost"),
            redis_port=redis_port,
            redis_db=int(env.get("REDIS_DB", "0")),
            redis_password=env.get("REDIS_PASSWORD"),
            key_prefix=env.get("STORE_KEY_PREFIX", "credgate:"),
            hash_rounds=int(env.get("HASH_ROUNDS", "12")),
        )

    @staticmethod
    def _load_api_config(env) -> APIConfig:
        return APIConfig(
            host=env.get("API_HOST", "0.0.0.0"),
            port=int(env.get("API_PORT", "3000")),
            debug=env.get("DEBUG", "false").lower() == "true",
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def get_token_config(self) -> TokenConfig:
        """Get token signing configuration."""
        return self._token

    def get_store_config(self) -> StoreConfig:
        """Get credential store configuration."""
        return self._store

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        return self._api
