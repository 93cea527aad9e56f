import json

import pytest

from difysdk.models import StreamingResponse, TTSMessage
from difysdk.streaming import (
    DefaultEventHandler,
    EventHandler,
    StreamError,
    dispatch_workflow_events,
    iter_chat_events,
)


def _data(obj, prefix="data: "):
    return prefix + json.dumps(obj) + "\n"


class _Recorder(EventHandler):
    def __init__(self):
        self.streams = []
        self.tts = []

    def handle_streaming_response(self, response):
        self.streams.append(response)

    def handle_tts_message(self, message):
        self.tts.append(message)


def test_chat_events_until_message_end():
    lines = [
        _data({"event": "message", "answer": "Hel", "conversation_id": "c1"}),
        "\n",
        _data({"event": "message", "answer": "lo", "conversation_id": "c1"}),
        _data({"event": "message_end"}),
        _data({"event": "message", "answer": "ignored"}),
    ]
    events = list(iter_chat_events(lines))
    assert [e.answer for e in events] == ["Hel", "lo"]
    assert all(e.conversation_id == "c1" for e in events)


def test_chat_events_accept_bytes_and_no_space():
    lines = [
        b'data:{"event": "message", "answer": "x", "created_at": 7}\n',
        b'data:{"event": "message_end"}\n',
    ]
    events = list(iter_chat_events(lines))
    assert len(events) == 1
    assert events[0].answer == "x"
    assert events[0].created_at == 7


def test_chat_events_skip_non_data_lines():
    lines = [
        "event: ping\n",
        ": comment\n",
        _data({"event": "message", "answer": "a"}),
        _data({"event": "message_end"}),
    ]
    assert [e.answer for e in iter_chat_events(lines)] == ["a"]


def test_chat_error_event_raises():
    lines = [
        _data({"event": "message", "answer": "a"}),
        _data({"event": "error", "message": "boom"}),
    ]
    events = iter_chat_events(lines)
    assert next(events).answer == "a"
    with pytest.raises(StreamError, match="error streaming event"):
        next(events)


def test_chat_invalid_json_raises():
    with pytest.raises(StreamError, match="error unmarshalling event"):
        list(iter_chat_events(["data: {not json\n"]))


def test_chat_stream_without_end_raises_after_events():
    received = []
    with pytest.raises(StreamError, match="error reading line"):
        for event in iter_chat_events([_data({"event": "message", "answer": "a"})]):
            received.append(event.answer)
    assert received == ["a"]


def test_workflow_events_routed_to_handler():
    lines = [
        _data({"event": "workflow_started", "task_id": "t1", "data": {"id": "run1"}}),
        _data({"event": "node_finished", "data": {"node_id": "n1", "index": 2}}),
        _data({"event": "tts_message", "message_id": "m1", "audio": "QUJD"}),
        _data({"event": "tts_message_end", "message_id": "m1"}),
        _data({"event": "workflow_finished", "data": {"status": "succeeded"}}),
    ]
    handler = _Recorder()
    dispatch_workflow_events(lines, handler)
    assert [r.event for r in handler.streams] == [
        "workflow_started",
        "node_finished",
        "workflow_finished",
    ]
    assert handler.streams[0].data.id == "run1"
    assert handler.streams[1].data.node_id == "n1"
    assert handler.streams[1].data.index == 2
    assert handler.streams[2].data.status == "succeeded"
    assert [m.event for m in handler.tts] == ["tts_message", "tts_message_end"]
    assert handler.tts[0].audio == "QUJD"


def test_workflow_bad_lines_are_skipped():
    lines = [
        "data: {broken\n",
        "data: [1, 2]\n",
        _data({"event": "node_started"}, prefix="data:"),
        "data: \n",
        "event: ping\n",
        _data({"event": "node_started", "data": {"title": "ok"}}),
    ]
    handler = _Recorder()
    dispatch_workflow_events(lines, handler)
    assert [r.data.title for r in handler.streams] == ["ok"]
    assert handler.tts == []


def test_default_handler_calls_stream_function():
    seen = []
    handler = DefaultEventHandler(seen.append)
    dispatch_workflow_events(
        [
            _data({"event": "node_started", "workflow_run_id": "w1"}),
            _data({"event": "tts_message", "audio": "QQ=="}),
        ],
        handler,
    )
    assert len(seen) == 1
    assert isinstance(seen[0], StreamingResponse)
    assert seen[0].workflow_run_id == "w1"


def test_default_handler_ignores_tts():
    seen = []
    handler = DefaultEventHandler(seen.append)
    assert handler.handle_tts_message(TTSMessage(audio="QQ==")) is None
    assert seen == []


def test_event_handler_is_abstract():
    with pytest.raises(TypeError):
        EventHandler()