"""Configuration management."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Neo4j
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: SecretStr = SecretStr("password")
    neo4j_database: str | None = Field(default=None, description="Database name, None selects the server default")
    default_connection: str = Field(default="default", description="Alias used when no connection is named")

    # Compilation
    parameter_prefix: str = Field(default="param", description="Prefix of generated parameter names")
    batch_variable: str = Field(default="toCreate", description="Row variable bound by UNWIND in batch creates")

    # App config
    log_level: str = "INFO"
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="CYPHER_BUILDER_",
        env_file=".env",
        extra="ignore",  # Ignore extra fields in .env file
        env_nested_delimiter="__",
    )


settings = Settings()
