"""Inbound WebSocket message models.

Frames are JSON objects tagged by ``type``. Only ``request_log_event`` is
consumed by the tailer; ``webhook_event`` is recognized so it can be reported
as an unexpected variant instead of as a malformed frame.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.exceptions import MessageParseError, PayloadDecodeError


class RequestLogEvent(BaseModel):
    """One logged API request.

    ``request_log_id`` is the ``resp_`` id of the logged response, which is not
    the same as ``EventPayload.request_id`` (the ``req_`` id of the user's
    request as shown in the dashboard).
    """

    type: Literal["request_log_event"] = "request_log_event"
    event_payload: str
    request_log_id: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")


class WebhookEvent(BaseModel):
    """Webhook delivery forwarded over the same socket."""

    type: Literal["webhook_event"] = "webhook_event"
    event_payload: str = ""
    webhook_id: str = ""
    webhook_conversation_id: str = ""
    http_headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")


IncomingMessage = Annotated[Union[RequestLogEvent, WebhookEvent], Field(discriminator="type")]

_incoming_adapter: TypeAdapter[IncomingMessage] = TypeAdapter(IncomingMessage)


def parse_incoming_message(raw: str | bytes | dict[str, Any]) -> IncomingMessage:
    """Turn one inbound frame into a typed message.

    Raises:
        MessageParseError: If the frame is not JSON, not an object, or not a known variant
    """
    if isinstance(raw, dict):
        data: Any = raw
    else:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MessageParseError(f"Frame is not valid JSON: {e}", raw=raw) from e

    if not isinstance(data, dict):
        raise MessageParseError("Frame is not a JSON object", raw=raw if not isinstance(raw, dict) else None)

    try:
        return _incoming_adapter.validate_python(data)
    except ValidationError as e:
        raise MessageParseError(
            f"Unexpected message type {data.get('type')!r}: {e.error_count()} validation error(s)",
            raw=raw if not isinstance(raw, dict) else None,
        ) from e


class EventPayload(BaseModel):
    """Decoded ``event_payload`` of a request log event.

    Every field falls back to its zero value so a partial payload still renders.
    """

    created_at: str = ""
    method: str = ""
    request_id: str = ""
    status: int = 0
    url: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    @classmethod
    def from_json(cls, raw: str | bytes) -> EventPayload:
        """Decode a payload string.

        Raises:
            PayloadDecodeError: If the payload is malformed; ``partial`` holds
                whatever fields could still be decoded
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise PayloadDecodeError(f"Malformed payload: {e}", partial=cls()) from e

        if not isinstance(data, dict):
            raise PayloadDecodeError("Malformed payload: not a JSON object", partial=cls())

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise PayloadDecodeError(f"Malformed payload: {e}", partial=cls._salvage(data)) from e

    @classmethod
    def _salvage(cls, data: dict[str, Any]) -> EventPayload:
        """Keep the fields that validate on their own."""
        kept: dict[str, Any] = {}
        for name in cls.model_fields:
            if name not in data:
                continue
            try:
                cls.model_validate({name: data[name]})
            except ValidationError:
                continue
            kept[name] = data[name]
        return cls.model_validate(kept)
