"""Configuration DTO for the persisted query pipeline."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PersistCacheConfig(BaseModel):
    """Validated pipeline configuration.

    Accepts either ``map`` (the wire name) or ``query_map`` for the
    persisted query mapping.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    path: str = Field("/graphql", description="Exact route the pipeline intercepts")
    query_map: dict[str, str] = Field(
        ...,
        alias="map",
        description="Persisted query id -> query text",
    )
    sort_variable_keys: bool = Field(
        False,
        description="Sort variable keys before fingerprinting",
    )

    @field_validator("path")
    @classmethod
    def path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value
