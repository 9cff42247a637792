"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with GAMEHOUND_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).

Learn: The JWT signing secret is configuration, not code. In development
a placeholder is accepted so the app boots with zero setup; any other
environment must supply GAMEHOUND_JWT_SECRET (e.g. from a secret store
mounted as an env var) or Settings() refuses to load.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All app configuration. Set via GAMEHOUND_* env vars."""

    # Database — embedded SQLite by default, any async SQLAlchemy URL works
    database_url: str = "sqlite+aiosqlite:///./gamehound.db"
    auto_create_schema: bool = True

    # Redis (rate limiting only — optional)
    redis_url: str = "redis://localhost:6379/0"

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    jwt_leeway_seconds: int = 30  # tolerated clock skew on exp/iat
    bcrypt_rounds: int = 12

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Rate limiting
    rate_limit_rpm: int = 100  # requests per minute per IP
    rate_limit_auth_rpm: int = 10  # stricter limit for login/register

    model_config = {"env_prefix": "GAMEHOUND_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ValueError(
                "GAMEHOUND_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("GAMEHOUND_BCRYPT_ROUNDS must be between 4 and 31")
        return self


# Process-wide default — create_app() accepts an explicit Settings instead
settings = Settings()
