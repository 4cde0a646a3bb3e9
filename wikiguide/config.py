"""
Centralized configuration management with validation and type conversion.

Every tunable of the guide engine (timeouts, languages, wiki domains, image
filters, logging) is read here once from the environment instead of through
scattered os.getenv() calls.
"""

import os
import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum


class Environment(Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


@dataclass
class TimeoutConfig:
    """Timeout configuration for different operations."""
    fetch: float = 5.0
    api: float = 30.0

    def get(self, operation: str) -> float:
        """Get timeout for a specific operation.

        Args:
            operation: Operation name

        Returns:
            Timeout value in seconds
        """
        return getattr(self, operation, self.api)


@dataclass
class LanguageConfig:
    """Language preferences for the source chain."""
    default: str = "pt"
    fallback: str = "en"
    encyclopedia: str = "pt"


@dataclass
class SourceConfig:
    """Upstream wiki endpoints. Domains are templates over ``{lang}``."""
    travel_wiki_domain: str = "{lang}.wikivoyage.org"
    encyclopedia_domain: str = "{lang}.wikipedia.org"
    media_repository_api: str = "https://commons.wikimedia.org/w/api.php"
    user_agent: str = "WikiGuide/1.0 (https://github.com/markcodeman/travelland)"


@dataclass
class ImageConfig:
    """Image resolver configuration."""
    guide_limit: int = 6
    min_width: int = 400
    min_height: int = 300
    thumb_width: int = 800


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5


class Config:
    """Centralized configuration with validation and type conversion."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.environment = self._get_environment()
        self.debug = self._get_bool("DEBUG", False)

        # Timeouts
        self.timeout_config = TimeoutConfig(
            fetch=self._get_float("TIMEOUT_FETCH", 5.0),
            api=self._get_float("TIMEOUT_API", 30.0),
        )

        # Languages
        default_language = self._get_str("DEFAULT_LANGUAGE", "pt").lower()
        self.language_config = LanguageConfig(
            default=default_language,
            fallback=self._get_str("FALLBACK_LANGUAGE", "en").lower(),
            encyclopedia=self._get_str("ENCYCLOPEDIA_LANGUAGE", default_language).lower(),
        )

        # Sources
        self.source_config = SourceConfig(
            travel_wiki_domain=self._get_str("TRAVEL_WIKI_DOMAIN", "{lang}.wikivoyage.org"),
            encyclopedia_domain=self._get_str("ENCYCLOPEDIA_DOMAIN", "{lang}.wikipedia.org"),
            media_repository_api=self._get_str(
                "MEDIA_REPOSITORY_API", "https://commons.wikimedia.org/w/api.php"
            ),
            user_agent=self._get_str(
                "USER_AGENT", "WikiGuide/1.0 (https://github.com/markcodeman/travelland)"
            ),
        )

        # Images
        self.image_config = ImageConfig(
            guide_limit=self._get_int("GUIDE_IMAGE_LIMIT", 6),
            min_width=self._get_int("IMAGE_MIN_WIDTH", 400),
            min_height=self._get_int("IMAGE_MIN_HEIGHT", 300),
            thumb_width=self._get_int("IMAGE_THUMB_WIDTH", 800),
        )

        # Logging
        self.logging_config = LoggingConfig(
            level=self._get_str("LOG_LEVEL", "INFO"),
            format=self._get_str("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            file=self._get_optional("LOG_FILE"),
            max_bytes=self._get_int("LOG_MAX_BYTES", 10485760),
            backup_count=self._get_int("LOG_BACKUP_COUNT", 5),
        )

        self.cors_allow_origin = self._get_str("CORS_ALLOW_ORIGIN", "*")

        # Validation
        self._validate()

    def _get_environment(self) -> Environment:
        """Get application environment."""
        env_str = self._get_str("ENVIRONMENT", "development").lower()
        try:
            return Environment(env_str)
        except ValueError:
            raise ValueError(f"Invalid environment: {env_str}")

    def _get_optional(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get optional environment variable."""
        return os.getenv(key, default)

    def _get_str(self, key: str, default: str) -> str:
        """Get string environment variable with default.

        Empty values count as unset so ``FOO=`` in a .env file keeps the default.
        """
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable with default.

        Raises:
            ValueError: If value cannot be converted to int
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"Invalid integer for {key}: {value}")

    def _get_float(self, key: str, default: float) -> float:
        """Get float environment variable with default.

        Raises:
            ValueError: If value cannot be converted to float
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"Invalid float for {key}: {value}")

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable with default."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('1', 'true', 'yes', 'on')

    def _validate(self):
        """Validate configuration values."""
        for attr_name in ['fetch', 'api']:
            timeout = getattr(self.timeout_config, attr_name)
            if timeout <= 0:
                raise ValueError(f"Invalid timeout for {attr_name}: {timeout}")

        for attr_name in ['guide_limit', 'min_width', 'min_height', 'thumb_width']:
            value = getattr(self.image_config, attr_name)
            if value <= 0:
                raise ValueError(f"Invalid image setting {attr_name}: {value}")

        for template in (self.source_config.travel_wiki_domain, self.source_config.encyclopedia_domain):
            if "{lang}" not in template:
                raise ValueError(f"Domain template must contain '{{lang}}': {template}")

        if not self.source_config.media_repository_api.startswith(('http://', 'https://')):
            raise ValueError(f"Invalid media repository URL: {self.source_config.media_repository_api}")

    def get_timeout(self, operation: str) -> float:
        """Get timeout for a specific operation."""
        return self.timeout_config.get(operation)

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for debugging."""
        return {
            'environment': self.environment.value,
            'debug': self.debug,
            'timeout_config': {
                'fetch': self.timeout_config.fetch,
                'api': self.timeout_config.api,
            },
            'language_config': {
                'default': self.language_config.default,
                'fallback': self.language_config.fallback,
                'encyclopedia': self.language_config.encyclopedia,
            },
            'source_config': {
                'travel_wiki_domain': self.source_config.travel_wiki_domain,
                'encyclopedia_domain': self.source_config.encyclopedia_domain,
                'media_repository_api': self.source_config.media_repository_api,
            },
            'image_config': {
                'guide_limit': self.image_config.guide_limit,
                'min_width': self.image_config.min_width,
                'min_height': self.image_config.min_height,
                'thumb_width': self.image_config.thumb_width,
            },
        }


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance, building it on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() rereads the environment."""
    global _config
    _config = None


def setup_logging():
    """Set up logging based on configuration."""
    from logging.handlers import RotatingFileHandler

    config = get_config()

    logging.basicConfig(
        level=getattr(logging, config.logging_config.level.upper(), logging.INFO),
        format=config.logging_config.format,
    )

    if config.logging_config.file:
        file_handler = RotatingFileHandler(
            config.logging_config.file,
            maxBytes=config.logging_config.max_bytes,
            backupCount=config.logging_config.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(config.logging_config.format))
        logging.getLogger().addHandler(file_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    if config.is_development() and config.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif config.is_production():
        logging.getLogger().setLevel(logging.INFO)
