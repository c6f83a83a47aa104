from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from model_catalog.consts import UNKNOWN_NAME, UNKNOWN_PROVIDER

Number = int | float


class SourceType(str, Enum):
    """Supported model metadata sources."""

    MODELS_DEV = "models.dev"
    OPENROUTER = "openrouter"
    HUGGINGFACE = "huggingface"
    ARTIFICIAL_ANALYSIS = "artificialanalysis"


class CatalogModel(BaseModel):
    """Canonical model entity produced by every source transformer.

    Serialized field names are camelCase (``contextWindow``, ``inputCost``...).
    Instances are frozen: a re-sync produces new instances instead of patching
    existing ones.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    # Identification
    id: str = Field(default="", description="Stable identifier, empty for malformed input")
    name: str = Field(default=UNKNOWN_NAME, description="Display name")
    provider: str = Field(default=UNKNOWN_PROVIDER, description="Model vendor or registry")

    # Limits
    context_window: Number = Field(default=0, ge=0, description="Context window in tokens")
    max_output_tokens: Number = Field(default=0, ge=0, description="Max completion tokens")

    # Pricing
    input_cost: Number = Field(default=0, ge=0)
    output_cost: Number = Field(default=0, ge=0)
    cache_read_cost: Number = Field(default=0, ge=0)
    cache_write_cost: Number = Field(default=0, ge=0)

    # Modalities and capabilities (unordered, duplicates removed)
    modalities: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)

    # Dates
    release_date: str = Field(default="", description="ISO date string, may be empty")
    last_updated: str = Field(default="", description="ISO date string, may be empty")
    knowledge: str = Field(default="", description="Free-text knowledge or source note")

    # Flags
    open_weights: bool = False
    supports_temperature: bool = False
    supports_attachments: bool = False
    is_new: bool = Field(
        default=False,
        alias="new",
        description="Released within the last 30 days at normalization time",
    )

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-shaped record used by the filter engine and the API layer."""
        return self.model_dump(mode="json", by_alias=True)


class TransformerDefaults(BaseModel):
    """Per-field fallback values a source transformer uses for missing data."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: str = UNKNOWN_NAME
    provider: str = UNKNOWN_PROVIDER
    context_window: Number = 0
    max_output_tokens: Number = 0
    input_cost: Number = 0
    output_cost: Number = 0
    cache_read_cost: Number = 0
    cache_write_cost: Number = 0
    modalities: tuple[str, ...] = ()
    capabilities: tuple[str, ...] = ()
    supports_temperature: bool = False
    open_weights: bool = False
