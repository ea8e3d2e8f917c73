"""
Configuration for the neo-rbac authorization engine.

Settings are read from the environment (prefix ``RBAC_``) and an optional
``.env`` file using Pydantic settings.
"""
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.value_objects.hierarchy import NO_CONTEXT


class RbacSettings(BaseSettings):
    """Runtime settings for hierarchy caching, auditing and logging."""

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True
    )

    # Audit configuration
    audit_enabled: bool = Field(default=True, description="Emit one audit event per checkPermission")

    # Tenant context
    no_context_sentinel: str = Field(
        default=NO_CONTEXT,
        description="Context id that denotes the global hierarchy, besides empty"
    )
    preload_contexts: List[str] = Field(
        default_factory=list,
        description="Tenant contexts whose hierarchies are built when the engine starts"
    )

    # Logging configuration. log_level drives the stdlib "neo_rbac" logger and
    # the loguru handler of the services; log_verbosity drives the stdlib root
    # logger; enable_hierarchy_logging only affects the stdlib graph and cache
    # loggers.
    configure_logging: bool = Field(default=False, description="Apply LoggingConfig on engine creation")
    log_level: str = Field(default="INFO")
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")
    enable_hierarchy_logging: bool = Field(default=False)

    @field_validator("log_level", "log_verbosity")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("simple", "detailed", "json"):
            raise ValueError(f"Unsupported log format: {value}")
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Settings as a plain dictionary, for diagnostics."""
        return self.model_dump()


@lru_cache()
def get_settings() -> RbacSettings:
    """Get cached settings instance."""
    return RbacSettings()
