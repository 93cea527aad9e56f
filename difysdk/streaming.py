"""Decoding of server-sent event streams from chat and workflow endpoints."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from difysdk.models import (
    ChatMessageStreamResponse,
    EventType,
    StreamingResponse,
    TTSMessage,
)

logger = logging.getLogger(__name__)

_CHAT_PREFIX = "data:"
_WORKFLOW_PREFIX = "data: "
_TTS_EVENTS = (EventType.TTS_MESSAGE.value, EventType.TTS_MESSAGE_END.value)


class StreamError(Exception):
    """Raised when a streamed response cannot be read or reports an error."""


class EventHandler(ABC):
    """Receives the events of a streamed workflow run."""

    @abstractmethod
    def handle_streaming_response(self, response: StreamingResponse) -> None:
        """Handle a workflow or node event."""

    @abstractmethod
    def handle_tts_message(self, message: TTSMessage) -> None:
        """Handle a chunk of synthesised speech."""


@dataclass
class DefaultEventHandler(EventHandler):
    """Passes events to optional callables; speech messages are dropped unless ``tts_handler`` is set."""

    stream_handler: Callable[[StreamingResponse], Any] | None = None
    tts_handler: Callable[[TTSMessage], Any] | None = None

    def handle_streaming_response(self, response: StreamingResponse) -> None:
        if self.stream_handler is not None:
            self.stream_handler(response)

    def handle_tts_message(self, message: TTSMessage) -> None:
        if self.tts_handler is not None:
            self.tts_handler(message)


def _text(line: str | bytes) -> str:
    if isinstance(line, bytes):
        return line.decode("utf-8")
    return line


def _event_name(obj: Any) -> str:
    if obj is None:
        return ""
    if not isinstance(obj, dict):
        raise TypeError(f"expected a JSON object, got {type(obj).__name__}")
    event = obj.get("event")
    if event is None:
        return ""
    if not isinstance(event, str):
        raise TypeError("event is not a string")
    return event


def iter_chat_events(lines: Iterable[str | bytes]) -> Iterator[ChatMessageStreamResponse]:
    """Yield chat stream events until ``message_end``.

    Lines not starting with ``data:`` are skipped. Raises StreamError on an
    undecodable event, on an ``error`` event, or if the stream ends before
    ``message_end``.
    """
    for raw in lines:
        line = _text(raw)
        if not line.startswith(_CHAT_PREFIX):
            continue
        payload = line[len(_CHAT_PREFIX):].rstrip("\r\n")
        try:
            obj = json.loads(payload)
            event = _event_name(obj)
            response = ChatMessageStreamResponse.from_dict(obj)
        except (ValueError, TypeError) as exc:
            raise StreamError(f"error unmarshalling event: {exc}") from exc
        if event == EventType.ERROR.value:
            raise StreamError("error streaming event: " + payload)
        if event == EventType.MESSAGE_END.value:
            return
        yield response
    raise StreamError("error reading line: stream ended before message_end")


def dispatch_workflow_events(lines: Iterable[str | bytes], handler: EventHandler) -> None:
    """Decode workflow stream lines and pass each event to ``handler``.

    Only lines starting with ``data: `` are considered; events that cannot be
    decoded are logged and skipped.
    """
    for raw in lines:
        line = _text(raw)
        if len(line) <= len(_WORKFLOW_PREFIX) or not line.startswith(_WORKFLOW_PREFIX):
            continue
        payload = line[len(_WORKFLOW_PREFIX):]
        try:
            obj = json.loads(payload)
            event = _event_name(obj)
        except (ValueError, TypeError) as exc:
            logger.warning("Error decoding event type: %s", exc)
            continue

        if event in _TTS_EVENTS:
            try:
                message = TTSMessage.from_dict(obj)
            except (ValueError, TypeError) as exc:
                logger.warning("Error decoding TTS message: %s", exc)
                continue
            handler.handle_tts_message(message)
        else:
            try:
                response = StreamingResponse.from_dict(obj)
            except (ValueError, TypeError) as exc:
                logger.warning("Error decoding streaming response: %s", exc)
                continue
            handler.handle_streaming_response(response)