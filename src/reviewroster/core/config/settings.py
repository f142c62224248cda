"""Configuration management for reviewroster."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewRosterConfig(BaseSettings):
    """Main configuration for the reviewroster service.

    Configuration can be loaded from:
    1. Environment variables (prefixed with REVIEWROSTER_)
    2. YAML configuration file (reviewroster.yaml)
    3. Default values
    """

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8080, description="API port")
    request_timeout: float = Field(
        default=30.0,
        ge=0.0,
        description="Per-request timeout in seconds (0 disables the limit)"
    )

    # Database Configuration
    storage: str = Field(default="sqlite", description="Storage backend (sqlite or postgresql)")
    db_path: str = Field(default="./reviewroster.db", description="Database file path for SQLite")
    db_url: Optional[str] = Field(default=None, description="Database URL for PostgreSQL")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")
    sqlite_busy_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Seconds a SQLite writer waits for a competing transaction"
    )

    # Assignment Configuration
    reviewers_per_pull_request: int = Field(
        default=2,
        ge=0,
        description="Number of reviewers assigned when a pull request is created"
    )
    selection_seed: Optional[int] = Field(
        default=None,
        description="Seed for reviewer selection (unset uses system entropy)"
    )

    # Statistics Configuration
    top_reviewers_limit: int = Field(
        default=10,
        ge=1,
        description="Number of reviewers listed in the statistics rollup"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_prefix="REVIEWROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_database_url(self) -> str:
        """Get the database URL based on configuration.

        Returns:
            Database URL string
        """
        if self.db_url:
            return self.db_url

        if self.storage == "sqlite":
            if self.db_path == ":memory:":
                return "sqlite+aiosqlite:///:memory:"
            # Ensure path is absolute
            db_path = Path(self.db_path)
            if not db_path.is_absolute():
                db_path = Path.cwd() / db_path
            return f"sqlite+aiosqlite:///{db_path}"
        elif self.storage == "postgresql":
            raise ValueError(
                "PostgreSQL selected but db_url not provided. "
                "Set REVIEWROSTER_DB_URL or db_url in config file."
            )
        else:
            raise ValueError(f"Unknown storage backend: {self.storage}")

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ReviewRosterConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ReviewRosterConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file: {config_path}")

        return cls(**data)

    def to_yaml(self, config_path: str | Path) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save configuration file
        """
        config_path = Path(config_path)

        # Convert to dict and remove None values
        data = self.model_dump(exclude_none=True)

        with open(config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def create_default_config(cls, config_path: str | Path) -> "ReviewRosterConfig":
        """Create a default configuration file."""
        config = cls()
        config.to_yaml(config_path)
        return config


# Global configuration instance
_config: Optional[ReviewRosterConfig] = None


def init_config(config_path: Optional[str | Path] = None) -> ReviewRosterConfig:
    """Initialize the global configuration.

    Args:
        config_path: Optional path to YAML configuration file.
                    If not provided, uses environment variables and defaults.

    Returns:
        ReviewRosterConfig instance
    """
    global _config

    if config_path:
        _config = ReviewRosterConfig.from_yaml(config_path)
    else:
        # Try to load from default location
        default_paths = [
            Path("reviewroster.yaml"),
            Path("reviewroster.yml"),
            Path(".reviewroster.yaml"),
            Path.home() / ".reviewroster" / "config.yaml",
        ]

        for path in default_paths:
            if path.exists():
                _config = ReviewRosterConfig.from_yaml(path)
                return _config

        # No config file found, use defaults and env vars
        _config = ReviewRosterConfig()

    return _config


def get_config() -> ReviewRosterConfig:
    """Get the global configuration instance, initializing it on first use."""
    if _config is None:
        return init_config()
    return _config
