"""Client for the Dify application API."""

from __future__ import annotations

import dataclasses
import json
from types import TracebackType
from typing import Any, Callable, Iterator

import httpx

from difysdk.config import ClientConfig
from difysdk.models import (
    ChatMessageRequest,
    ChatMessageResponse,
    ChatMessageStreamResponse,
    ConversationsRenamingRequest,
    ConversationsRenamingResponse,
    ConversationsRequest,
    ConversationsResponse,
    MessagesFeedbacksRequest,
    MessagesFeedbacksResponse,
    MessagesRequest,
    MessagesResponse,
    ParametersRequest,
    ParametersResponse,
    StreamingResponse,
    WorkflowRequest,
    WorkflowResponse,
)
from difysdk.streaming import (
    DefaultEventHandler,
    EventHandler,
    dispatch_workflow_events,
    iter_chat_events,
)

_DEFAULT_CONVERSATION_LIMIT = 20


class DifyAPIError(Exception):
    """Raised when the API answers with an unsuccessful status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        super().__init__(f"API request failed with status {status_code} {reason}: {body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


def _status_error(response: httpx.Response) -> DifyAPIError:
    response.read()
    return DifyAPIError(response.status_code, response.reason_phrase, response.text)


class API:
    """Calls the application API endpoints with one client configuration."""

    def __init__(self, config: ClientConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(transport=config.transport, timeout=config.timeout)
        self._secret = ""

    def __enter__(self) -> API:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._owns_client:
            self._client.close()

    def with_secret(self, secret: str) -> API:
        """Use ``secret`` instead of the configured one; returns this API."""
        self._secret = secret
        return self

    def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Request:
        content = json.dumps(body).encode("utf-8") if body is not None else b""
        headers = {
            "Authorization": "Bearer " + (self._secret or self.config.secret()),
            "Cache-Control": "no-cache",
            "Content-Type": "application/json; charset=utf-8",
        }
        return self._client.build_request(
            method, self.config.host + path, content=content, headers=headers, params=params
        )

    def _send_json(self, request: httpx.Request) -> Any:
        response = self._client.send(request)
        if not response.is_success:
            raise _status_error(response)
        return response.json()

    def chat_messages(self, request: ChatMessageRequest) -> ChatMessageResponse:
        """Send a chat message and wait for the whole answer."""
        body = dataclasses.replace(request, response_mode="blocking").to_dict()
        data = self._send_json(self._request("POST", "/v1/chat-messages", body))
        return ChatMessageResponse.from_dict(data)

    def chat_messages_stream_raw(self, request: ChatMessageRequest) -> httpx.Response:
        """Send a chat message in streaming mode; the caller closes the response."""
        body = dataclasses.replace(request, response_mode="streaming").to_dict()
        return self._client.send(self._request("POST", "/v1/chat-messages", body), stream=True)

    def chat_messages_stream(
        self, request: ChatMessageRequest
    ) -> Iterator[ChatMessageStreamResponse]:
        """Send a chat message and return an iterator over the streamed events."""
        response = self.chat_messages_stream_raw(request)

        def events() -> Iterator[ChatMessageStreamResponse]:
            try:
                yield from iter_chat_events(response.iter_lines())
            finally:
                response.close()

        return events()

    def conversations(self, request: ConversationsRequest) -> ConversationsResponse:
        """List the user's conversations, 20 at a time unless a limit is given."""
        if not request.user:
            raise ValueError("ConversationsRequest.User Illegal")
        limit = request.limit or _DEFAULT_CONVERSATION_LIMIT
        params = {"last_id": request.last_id, "limit": str(limit), "user": request.user}
        data = self._send_json(self._request("GET", "/v1/conversations", params=params))
        return ConversationsResponse.from_dict(data)

    def conversations_renaming(
        self, request: ConversationsRenamingRequest
    ) -> ConversationsRenamingResponse:
        """Rename a conversation."""
        path = f"/v1/conversations/{request.conversation_id}/name"
        body = dataclasses.replace(request, conversation_id="").to_dict()
        data = self._send_json(self._request("POST", path, body))
        return ConversationsRenamingResponse.from_dict(data)

    def messages(self, request: MessagesRequest) -> MessagesResponse:
        """Fetch a page of a conversation's history, newest first."""
        params = {"conversation_id": request.conversation_id}
        if request.first_id:
            params["first_id"] = request.first_id
        if request.limit > 0:
            params["limit"] = str(request.limit)
        params["user"] = request.user
        data = self._send_json(self._request("GET", "/v1/messages", params=params))
        return MessagesResponse.from_dict(data)

    def messages_feedbacks(self, request: MessagesFeedbacksRequest) -> MessagesFeedbacksResponse:
        """Rate a message on behalf of an end user."""
        if not request.message_id:
            raise ValueError("MessagesFeedbacksRequest.MessageID Illegal")
        path = f"/v1/messages/{request.message_id}/feedbacks"
        body = dataclasses.replace(request, message_id="").to_dict()
        data = self._send_json(self._request("POST", path, body))
        return MessagesFeedbacksResponse.from_dict(data)

    def parameters(self, request: ParametersRequest) -> ParametersResponse:
        """Fetch the application's configured input parameters."""
        if not request.user:
            raise ValueError("ParametersRequest.User Illegal")
        data = self._send_json(
            self._request("GET", "/v1/parameters", params={"user": request.user})
        )
        return ParametersResponse.from_dict(data)

    def run_workflow(self, request: WorkflowRequest) -> WorkflowResponse:
        """Run a workflow and return its result."""
        response = self._client.send(self._request("POST", "/v1/workflows/run", request.to_dict()))
        try:
            if response.status_code != 200:
                raise _status_error(response)
            try:
                data = response.json()
                return WorkflowResponse.from_dict(data)
            except (ValueError, TypeError) as exc:
                raise DifyAPIError(
                    response.status_code, response.reason_phrase, f"failed to decode response: {exc}"
                ) from exc
        finally:
            response.close()

    def run_stream_workflow(
        self, request: WorkflowRequest, handler: Callable[[StreamingResponse], Any] | None
    ) -> None:
        """Run a workflow in streaming mode, passing each event to ``handler``."""
        self.run_stream_workflow_with_handler(request, DefaultEventHandler(handler))

    def run_stream_workflow_with_handler(
        self, request: WorkflowRequest, handler: EventHandler
    ) -> None:
        """Run a workflow in streaming mode, dispatching events to ``handler``."""
        http_request = self._request("POST", "/v1/workflows/run", request.to_dict())
        response = self._client.send(http_request, stream=True)
        try:
            if response.status_code != 200:
                raise _status_error(response)
            dispatch_workflow_events(response.iter_lines(), handler)
        finally:
            response.close()