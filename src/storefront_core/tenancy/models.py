"""
storefront_core.tenancy.models

Tenant domain models.

Responsibilities:
- `Tenant`: one merchant namespace as returned by the public store endpoints.
- `Location`: the host/query pair the resolver inspects.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Tenant(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str
    slug: str
    description: str | None = None
    logo: str | None = None
    status: str = "active"
    settings: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Location:
    host: str
    query: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_url(cls, url: str) -> Location:
        parsed = httpx.URL(url)
        return cls(host=parsed.host, query=dict(parsed.params))


# --- Module Notes -----------------------------------------------------------
# `Location` keeps the resolver independent from any particular web framework.
