"""Session descriptor returned by the control plane."""

from pydantic import BaseModel, ConfigDict, Field


class SessionDescriptor(BaseModel):
    """Short-lived addressing and credentials scoping one streaming connection."""

    websocket_url: str = Field(..., min_length=1)
    websocket_id: str = Field(..., min_length=1)
    websocket_authorized_feature: str = Field(..., min_length=1)
    reconnect_delay: int = Field(..., ge=0)
    display_connect_filter: str | None = None
    default_version: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")

    @property
    def reconnect_interval(self) -> float:
        """Reconnect delay in seconds."""
        return float(self.reconnect_delay)
