"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. Unknown keys or
wrong types raise a clear ValidationError instead of a KeyError deep in the
resolver. Every field has a default so a missing file means "use defaults".

Each top-level class corresponds to one file in <config dir>/settings/:
    UCPSchema      → ucp.yaml
    StoreSchema    → store.yaml
    LoggingSchema  → logging.yaml
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# ucp.yaml
# =============================================================================


class UCPSchema(_StrictBase):
    timeout: float = Field(default=30.0, gt=0)
    verify_tls: bool = True
    token_path: str = "~/.ucptoken"
    page_limit: int = Field(default=100, ge=1)


# =============================================================================
# store.yaml
# =============================================================================


class StoreSchema(_StrictBase):
    hub_url: str = "https://hub.docker.com"
    billing_url: str = "https://store.docker.com/api/billing/v4/subscriptions"
    timeout: float = Field(default=30.0, gt=0)
    token_path: str = "~/.dockerstore"


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool = True


class FileHandlerSchema(_StrictBase):
    enabled: bool = False
    path: str = "logs/diver.jsonl"
    max_bytes: int = 10485760
    backup_count: int = 5


class LogHandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema = Field(default_factory=ConsoleHandlerSchema)
    file: FileHandlerSchema = Field(default_factory=FileHandlerSchema)


class LoggingSchema(_StrictBase):
    level: str = "WARNING"
    format: str = "console"
    handlers: LogHandlersSchema = Field(default_factory=LogHandlersSchema)
