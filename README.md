# difysdk

A small synchronous client for the Dify application API, built on `httpx`.
It covers:

- chat messages, both blocking and streamed (server-sent events)
- conversation listing and renaming
- message history and end-user feedback
- application parameters
- workflow runs, blocking and streamed, including TTS events

## Installation

```
pip install difysdk
```

## Setting up a client

Connection settings live in `difysdk.config.ClientConfig`:

- `host`: the base URL that request paths such as `/v1/chat-messages` are appended to
- `default_api_secret`: the secret sent as `Authorization: Bearer ...`
- `api_secret_key`: deprecated; used only when `default_api_secret` is empty
- `timeout`: seconds, passed to `httpx`
- `transport`: an optional `httpx.BaseTransport`

`ClientConfig.secret()` returns the secret that requests are sent with.

`difysdk.api.API` sends the requests. It builds its own `httpx.Client` from
the configuration, or uses one you pass as `client`. Used as a context
manager, it closes the client it created itself (never one you passed in).

```python
from difysdk.api import API
from difysdk.config import ClientConfig

config = ClientConfig(host="http://localhost", default_api_secret="secret", timeout=30)
with API(config) as api:
    ...
```

`api.with_secret(secret)` overrides the configured secret for that `API`
object and returns the object, so calls can be chained.

Every request carries `Cache-Control: no-cache` and
`Content-Type: application/json; charset=utf-8`.

## Chat

```python
from difysdk.models import ChatMessageRequest

request = ChatMessageRequest(query="Hello", user="user-1", inputs={})
reply = api.chat_messages(request)
print(reply.answer, reply.conversation_id)
```

`chat_messages` sends the request with `response_mode` set to `"blocking"`;
the request object you pass is left unchanged.

Streamed replies come back one `ChatMessageStreamResponse` at a time:

```python
for event in api.chat_messages_stream(request):
    print(event.answer, end="")
```

The iterator stops at the `message_end` event and closes the HTTP response
when it finishes. `difysdk.streaming.StreamError` is raised for an `error`
event, for a `data:` line that is not a valid JSON object, or when the stream
ends before `message_end`. Errors from the connection itself come through as
`httpx` exceptions.

`api.chat_messages_stream_raw(request)` returns the streaming
`httpx.Response` instead; its status is not checked, and the caller must
close it.

## Conversations and messages

```python
from difysdk.models import (
    ConversationsRequest,
    ConversationsRenamingRequest,
    MessagesRequest,
    MessagesFeedbacksRequest,
    Rating,
)

page = api.conversations(ConversationsRequest(user="user-1"))  # limit 20 when left at 0
api.conversations_renaming(
    ConversationsRenamingRequest(name="Trip plans", user="user-1", conversation_id=page.data[0].id)
)

history = api.messages(MessagesRequest(conversation_id=page.data[0].id, user="user-1"))
api.messages_feedbacks(
    MessagesFeedbacksRequest(user="user-1", message_id=history.data[0].id, rating=Rating.LIKE)
)
```

`messages` leaves out `first_id` when it is empty and `limit` when it is not
positive.

`conversations` and `parameters` need a user, and `messages_feedbacks` needs a
message id; leaving them empty raises `ValueError` before any request is sent.
A response with an unsuccessful status raises `difysdk.api.DifyAPIError`,
which carries `status_code`, `reason` and `body`.

## Application parameters

```python
from difysdk.models import ParametersRequest

params = api.parameters(ParametersRequest(user="user-1"))
print(params.opening_statement, params.user_input_form)
print(params.suggested_questions_after_answer_enabled, params.more_like_this_enabled)
```

## Workflows

```python
from difysdk.models import FileInput, WorkflowRequest

request = WorkflowRequest(
    user="user-1",
    inputs={"topic": "tides"},
    response_mode="blocking",
    files=[FileInput(type="image", transfer_method="remote_url", url="http://localhost/a.png")],
)
result = api.run_workflow(request)
print(result.data.status, result.data.outputs)
```

`run_workflow` raises `DifyAPIError` for any status other than 200, and also
when the body cannot be decoded.

For a streamed run, pass a callable that receives each
`difysdk.models.StreamingResponse` (or `None` to ignore them):

```python
request = WorkflowRequest(user="user-1", inputs={"topic": "tides"}, response_mode="streaming")
api.run_stream_workflow(request, lambda event: print(event.event, event.data.node_id))
```

TTS events (`tts_message`, `tts_message_end`) are dropped by this form. To
receive them, pass a `difysdk.streaming.DefaultEventHandler` with a
`tts_handler`, or subclass `difysdk.streaming.EventHandler` and implement
`handle_streaming_response` and `handle_tts_message`, then call
`api.run_stream_workflow_with_handler(request, handler)`. Only lines starting
with `data: ` are read; events that cannot be decoded are logged as warnings
on the `difysdk.streaming` logger and skipped.

## Stream parsing on its own

The parsing used by the client works on any iterable of `str` or `bytes`
lines:

- `difysdk.streaming.iter_chat_events(lines)` yields `ChatMessageStreamResponse`
  objects, with the same stopping and error rules as `chat_messages_stream`.
- `difysdk.streaming.dispatch_workflow_events(lines, handler)` passes workflow
  and TTS events to an `EventHandler`.

## Models

Requests and responses are dataclasses in `difysdk.models`. Requests have
`to_dict()`, responses have `from_dict(data)`; missing or `null` fields take
their defaults. `Rating` and `EventType` are string enums for feedback ratings
and stream event names.

## What it does not do

The package is a synchronous library only: it has no command-line tool and no
async client. It does not upload files; `FileInput.upload_file_id` must refer
to a file already uploaded by other means. It does not retry failed requests.