"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OrderSettings(BaseSettings):
    """Order ledger and staff handshake configuration"""
    
    max_note_length: int = Field(default=200, ge=1, le=1000)
    # Pause on the "all answered" screen before handing the device back
    auto_return_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    # Idle time before an abandoned session is disposed; 0 keeps sessions until deleted
    idle_timeout_seconds: float = Field(default=1800.0, ge=0.0)
    
    model_config = {"env_prefix": "ORDER_"}


class MatcherSettings(BaseSettings):
    """Dish de-duplication thresholds"""
    
    duplicate_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    word_match_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    short_name_length: int = Field(default=3, ge=0, le=16)
    short_name_min_similarity: float = Field(default=0.8, ge=0.0, le=1.0)
    
    model_config = {"env_prefix": "MATCHER_"}


class CatalogSettings(BaseSettings):
    """Catalog provider and store configuration"""
    
    database_url: str = Field(default="sqlite:///./accessmenu.db")
    provider_url: Optional[str] = Field(
        default=None,
        description="Base URL of a remote catalog provider; the SQL catalog is used when unset"
    )
    request_timeout_seconds: float = Field(default=10.0, ge=0.5, le=120.0)
    ingestion_language: str = Field(default="en")
    
    model_config = {"env_prefix": "CATALOG_"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""
    
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    
    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]
    
    model_config = {"env_prefix": "SECURITY_"}


class Settings(BaseSettings):
    """Main application settings"""
    
    # Application Configuration
    app_name: str = Field(default="AccessMenu Ordering Core")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)
    
    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)
    
    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json", pattern="^(json|text)$")
    log_file: Optional[str] = Field(default=None)
    
    # Nested Settings
    order: OrderSettings = Field(default_factory=OrderSettings)
    matcher: MatcherSettings = Field(default_factory=MatcherSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    
    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v
    
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION
    
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT
    
    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }
    
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
