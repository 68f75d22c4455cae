from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB connection string, e.g. mongodb://localhost:27017
    auth_database: str = "auth_db"  # Database holding users and sessions
    content_database: str = "sample_mflix"  # Database holding movies, comments and theaters
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False
    production: bool = False  # Marks auth cookies as secure
    jwt_secret: str = "default_secret"  # HS256 signing key, override in every real deployment
    token_ttl_hours: int = 24
    bcrypt_rounds: int = 10
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MFLIX_",
        "extra": "ignore",
    }

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 60 * 60

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == "default_secret"
