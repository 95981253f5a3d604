"""Environment-backed settings for the Smart Deals service.

Read once at startup (see get_settings); there is no hot reload.
"""
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Protected route -> verifier strategy ("firebase" | "jwt").
DEFAULT_ROUTE_VERIFIERS: dict[str, str] = {
    "create_product": "firebase",
    "my_bids": "firebase",
    "product_bids": "firebase",
}


class Settings(BaseSettings):
    """Settings loaded from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # MongoDB
    mongodb_uri: SecretStr | None = Field(default=None)
    db_user: str | None = Field(default=None)
    db_password: SecretStr | None = Field(default=None)
    db_cluster_host: str = Field(default="cluster0.mongodb.net")
    db_app_name: str = Field(default="Cluster0")
    db_name: str = Field(default="smart_DB")
    use_in_memory_store: bool = Field(default=False)
    ping_on_startup: bool = Field(default=False)

    # Auth
    jwt_secret: SecretStr | None = Field(default=None)
    firebase_service_key: SecretStr | None = Field(default=None)  # base64 JSON
    firebase_service_key_path: str | None = Field(default=None)
    route_verifiers: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ROUTE_VERIFIERS)
    )

    # HTTP
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    port: int = Field(default=3000)
    bind_host: str = Field(default="0.0.0.0")
    protocol: str = Field(default="http")  # display only
    host: str = Field(default="localhost")  # display only
    log_level: str = Field(default="INFO")

    def mongo_uri(self) -> str:
        """Return the MongoDB connection string.

        MONGODB_URI wins when set; otherwise an Atlas SRV URI is built from
        DB_USER, DB_PASSWORD and DB_CLUSTER_HOST.
        """
        if self.mongodb_uri and self.mongodb_uri.get_secret_value():
            return self.mongodb_uri.get_secret_value()
        if not self.db_user or self.db_password is None:
            raise ValueError("Set MONGODB_URI or DB_USER and DB_PASSWORD")
        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password.get_secret_value())
        return (
            f"mongodb+srv://{user}:{password}@{self.db_cluster_host}"
            f"/?appName={self.db_app_name}"
        )

    @property
    def public_url(self) -> str:
        """Display URL used in the startup log line."""
        return f"{self.protocol}://{self.host}:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
