"""Schema bases: unknown fields are rejected in both directions."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Response DTO base, buildable from ORM rows."""

    model_config = ConfigDict(extra="forbid", from_attributes=True)


class StrictRequestModel(StrictModel):
    """Request DTO base; surrounding whitespace is trimmed from every string."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, validate_assignment=True)
