"""Run configuration for a tailing session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..constants import DEFAULT_API_BASE_URL, REQUEST_LOGS_FEATURE, default_device_name
from .enums import OutputFormat


@dataclass(frozen=True)
class TailerConfig:
    """Immutable configuration supplied once per run.

    Attributes:
        api_key: Secret API key used to authorize the session
        api_base_url: Control-plane base URL
        device_name: Name sent to the control plane to identify this device
        output_format: Rendering mode for request log events
        no_wss: Force the unencrypted ``ws://`` scheme instead of ``wss://``
        websocket_feature: Feature the streaming session is scoped to
        log: Logger used by the tailer (module logger when omitted)
    """

    api_key: str
    api_base_url: str = DEFAULT_API_BASE_URL
    device_name: str = field(default_factory=default_device_name)
    output_format: OutputFormat = OutputFormat.HUMAN
    no_wss: bool = False
    websocket_feature: str = REQUEST_LOGS_FEATURE
    log: logging.Logger | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ValueError("api_key must not be empty")
        if not self.websocket_feature:
            raise ValueError("websocket_feature must not be empty")
        object.__setattr__(self, "output_format", OutputFormat.from_value(self.output_format))
        object.__setattr__(self, "api_base_url", self.api_base_url.rstrip("/"))

    @property
    def logger(self) -> logging.Logger:
        return self.log or logging.getLogger("laakhay.logtail")
