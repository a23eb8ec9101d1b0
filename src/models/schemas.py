"""
Pydantic Models and Schemas
===========================

Core data models for render requests, measured geometry and API responses.
"""

from typing import Optional, Dict, Any, Literal
from datetime import datetime, timezone
import json

from pydantic import BaseModel, ConfigDict, Field


# Request Models
class RenderRequest(BaseModel):
    """Card render request.

    Only the fields the service interprets are declared; any other key is kept
    as an extra field and forwarded to the card page as a query parameter.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    icon: Optional[str] = Field(None, description="Icon image URL")
    content: Optional[str] = Field(None, description="Card body, Markdown or HTML")
    is_content_html: bool = Field(
        False, alias="isContentHtml", description="Treat content as raw HTML"
    )
    translate: Optional[str] = Field(None, description="Translation markup")
    use_loading_font: bool = Field(
        False, alias="useLoadingFont", description="Load web fonts before capture"
    )
    temp: str = Field("default", min_length=1, description="Card template CSS class")
    img_scale: Optional[float] = Field(
        None, alias="imgScale", gt=0, description="Screenshot scale factor"
    )
    switch_config: Optional[Any] = Field(
        None, alias="switchConfig", description="Template switches, forwarded as JSON"
    )

    def payload(self) -> Dict[str, Any]:
        """Return the request fields as received, keyed by their wire names."""
        return self.model_dump(by_alias=True, exclude_unset=True)

    def serialize(self) -> str:
        """Canonical JSON form of the request, used for cache keys."""
        return json.dumps(
            self.payload(), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
        )

    @property
    def card_selector(self) -> str:
        """CSS selector of the card element chosen by ``temp``."""
        return f".{self.temp}"


# Geometry Models
class BoundingBox(BaseModel):
    """On-screen rectangle of a rendered element."""

    x: float
    y: float
    width: float
    height: float


class Viewport(BaseModel):
    """Browser viewport dimensions."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


# Response Models
class CardSize(BaseModel):
    """Measured card dimensions in CSS pixels."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., ge=0, description="Card width")
    height: int = Field(..., ge=0, description="Card height")


class HealthStatus(BaseModel):
    """Health check status."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Overall status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp"
    )
    version: str = Field(..., description="Application version")
    browser_pool: Dict[str, Any] = Field(default_factory=dict, description="Browser pool state")
    cache: Dict[str, Any] = Field(default_factory=dict, description="Cache statistics")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp"
    )
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
