from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaxonomySettings(BaseSettings):
    """Configuration for fetching and building the quantity taxonomy.

    Environment variables are prefixed with QUANTITY_TAXONOMY_.
    """

    model_config = SettingsConfigDict(env_prefix="QUANTITY_TAXONOMY_", extra="ignore")

    # --- Core ---
    log_level: str = Field(default="INFO", description="Python logging level")

    # --- Endpoint ---
    endpoint_url: str = Field(default="https://query.wikidata.org/sparql")
    user_agent: str = Field(default="quantity-taxonomy/0.1 (https://www.wikidata.org)")
    accept: str = Field(default="application/sparql-results+json")
    request_timeout: float = Field(default=60.0, description="Read timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, description="Attempts for transient transport errors")

    # --- Taxonomy ---
    entity_prefix: str = Field(default="http://www.wikidata.org/entity/")
    base_quantity: str = Field(default="Q107715", description="Root concept, 'physical quantity'")
    label_language: str = Field(default="en")


settings = TaxonomySettings()
