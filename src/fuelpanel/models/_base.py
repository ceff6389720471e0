"""Base model for price service payloads.

Every response model inherits from :class:`FuelBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* Frozen instances, so a resolved response can be shared read-only
  between the store and every view built from it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FuelBaseModel(BaseModel):
    """Base for price service models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
