"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Python attributes are snake_case, the JSON wire format is camelCase
- Request models define input validation
- Response models define output structure
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shortify.db.models import as_utc


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateURLRequest(CamelModel):
    """Request model for URL creation."""
    long_url: str = Field(..., description="The long URL to shorten")
    title: Optional[str] = Field(default=None, max_length=255)
    custom_slug: Optional[str] = Field(default=None, description="Requested slug")
    expires_at: Optional[datetime] = Field(default=None, description="Expiry timestamp")


class UpdateURLRequest(CamelModel):
    """
    Request model for lifecycle updates.

    Omitted fields are left unchanged; an explicit `expiresAt: null` clears the expiry.
    """
    disabled: Optional[bool] = None
    expires_at: Optional[datetime] = None


class URLResponse(CamelModel):
    """Response model describing a Url."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    slug: str
    long_url: str
    short_url: str
    title: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None
    disabled: bool
    creator_id: Optional[str] = None

    @field_validator("created_at", "expires_at")
    @classmethod
    def _attach_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class SummaryResponse(CamelModel):
    total_clicks: int
    unique_visitors: int


class TimeSeriesPoint(CamelModel):
    date: str = Field(..., description="UTC day, YYYY-MM-DD")
    count: int


class ReferrerCount(CamelModel):
    referrer: Optional[str] = Field(..., description="Referrer, null when none was sent")
    count: int


class DeviceCount(CamelModel):
    device_type: str
    count: int


class BrowserCount(CamelModel):
    browser: Optional[str]
    count: int


class OSCount(CamelModel):
    os: Optional[str]
    count: int
