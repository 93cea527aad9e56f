"""Request and response models for the Dify application API."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

_M = TypeVar("_M", bound="_Model")


class Rating(str, Enum):
    """Feedback an end user can give on a message."""

    LIKE = "like"
    DISLIKE = "dislike"


class EventType(str, Enum):
    """Event names found in streamed responses."""

    WORKFLOW_STARTED = "workflow_started"
    NODE_STARTED = "node_started"
    NODE_FINISHED = "node_finished"
    WORKFLOW_FINISHED = "workflow_finished"
    TTS_MESSAGE = "tts_message"
    TTS_MESSAGE_END = "tts_message_end"
    MESSAGE_END = "message_end"
    ERROR = "error"


def _mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _dict(raw: Any) -> dict[str, Any]:
    return dict(_mapping(raw))


def _list(raw: Any) -> list[Any]:
    return list(raw or [])


def _list_of(decode: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    return lambda raw: [decode(item) for item in raw or []]


def _enabled(raw: Any) -> bool:
    value = _mapping(raw).get("enabled")
    return False if value is None else value


def _opt(default: Any = "", *, omitempty: bool = False, key: str | None = None,
         decode: Callable[[Any], Any] | None = None, factory: Callable[[], Any] | None = None) -> Any:
    metadata = {"omitempty": omitempty, "key": key, "decode": decode}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


class _Model:
    """JSON encoding and decoding driven by the dataclass fields."""

    @classmethod
    def _decode(cls: type[_M], data: Any) -> _M:
        data = _mapping(data)
        values: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            raw = data.get(f.metadata.get("key") or f.name)
            decode = f.metadata.get("decode")
            if decode is not None:
                values[f.name] = decode(raw)
            elif raw is not None:
                values[f.name] = raw
        return cls(**values)

    def _encode(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            if f.metadata.get("omitempty") and not value:
                continue
            if isinstance(value, list):
                value = [item.to_dict() if isinstance(item, _Model) else item for item in value]
            body[f.metadata.get("key") or f.name] = value
        return body

    @classmethod
    def from_dict(cls: type[_M], data: Any) -> _M:
        """Build the model from a decoded JSON object."""
        return cls._decode(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object for this model."""
        return self._encode()


@dataclass
class ChatMessageRequest(_Model):
    query: str
    user: str
    inputs: dict[str, Any] = _opt(factory=dict)
    conversation_id: str = _opt(omitempty=True)
    response_mode: str = ""

    def to_dict(self) -> dict[str, Any]:
        return self._encode()


@dataclass
class ChatMessageResponse(_Model):
    id: str = ""
    answer: str = ""
    conversation_id: str = ""
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ChatMessageResponse:
        return cls._decode(data)


@dataclass
class ChatMessageStreamResponse(_Model):
    """One event of a streamed chat answer; ``data`` is left undecoded."""

    event: str = ""
    task_id: str = ""
    id: str = ""
    answer: str = ""
    created_at: int = 0
    conversation_id: str = ""
    data: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> ChatMessageStreamResponse:
        return cls._decode(data)


@dataclass
class ConversationsRequest(_Model):
    """A zero limit means the default of 20."""

    user: str
    last_id: str = ""
    limit: int = 0


@dataclass
class ConversationsDataResponse(_Model):
    id: str = ""
    name: str = ""
    inputs: dict[str, str] = _opt(factory=dict, decode=_dict)
    status: str = ""
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ConversationsDataResponse:
        return cls._decode(data)


@dataclass
class ConversationsResponse(_Model):
    limit: int = 0
    has_more: bool = False
    data: list[ConversationsDataResponse] = _opt(
        factory=list, decode=_list_of(ConversationsDataResponse.from_dict))

    @classmethod
    def from_dict(cls, data: Any) -> ConversationsResponse:
        return cls._decode(data)


@dataclass
class ConversationsRenamingRequest(_Model):
    name: str
    user: str
    conversation_id: str = _opt(omitempty=True)

    def to_dict(self) -> dict[str, Any]:
        return self._encode()


@dataclass
class ConversationsRenamingResponse(_Model):
    result: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ConversationsRenamingResponse:
        return cls._decode(data)


@dataclass
class MessagesFeedbacksRequest(_Model):
    user: str
    message_id: str = _opt(omitempty=True)
    rating: Rating | str = _opt(omitempty=True)

    def to_dict(self) -> dict[str, Any]:
        return self._encode()


@dataclass
class MessagesFeedbacksDataResponse(_Model):
    id: str = ""
    username: str = ""
    phone_number: str = ""
    avatar_url: str = ""
    display_name: str = ""
    conversation_id: str = ""
    last_active_at: int = 0
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> MessagesFeedbacksDataResponse:
        return cls._decode(data)


@dataclass
class MessagesFeedbacksResponse(_Model):
    has_more: bool = False
    data: list[MessagesFeedbacksDataResponse] = _opt(
        factory=list, decode=_list_of(MessagesFeedbacksDataResponse.from_dict))

    @classmethod
    def from_dict(cls, data: Any) -> MessagesFeedbacksResponse:
        return cls._decode(data)


@dataclass
class MessagesRequest(_Model):
    """Empty first_id and zero limit are not sent."""

    conversation_id: str
    user: str
    first_id: str = ""
    limit: int = 0


@dataclass
class MessagesDataResponse(_Model):
    id: str = ""
    conversation_id: str = ""
    inputs: dict[str, Any] = _opt(factory=dict, decode=_dict)
    query: str = ""
    answer: str = ""
    feedback: Any = None
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> MessagesDataResponse:
        return cls._decode(data)


@dataclass
class MessagesResponse(_Model):
    limit: int = 0
    has_more: bool = False
    data: list[MessagesDataResponse] = _opt(
        factory=list, decode=_list_of(MessagesDataResponse.from_dict))

    @classmethod
    def from_dict(cls, data: Any) -> MessagesResponse:
        return cls._decode(data)


@dataclass
class ParametersRequest(_Model):
    user: str


@dataclass
class ParametersResponse(_Model):
    opening_statement: str = ""
    suggested_questions: list[Any] = _opt(factory=list, decode=_list)
    suggested_questions_after_answer_enabled: bool = _opt(
        False, key="suggested_questions_after_answer", decode=_enabled)
    more_like_this_enabled: bool = _opt(False, key="more_like_this", decode=_enabled)
    user_input_form: list[dict[str, Any]] = _opt(factory=list, decode=_list_of(_dict))

    @classmethod
    def from_dict(cls, data: Any) -> ParametersResponse:
        return cls._decode(data)


@dataclass
class FileInput(_Model):
    """A workflow file, given by remote URL or by uploaded file id."""

    type: str
    transfer_method: str
    url: str = _opt(omitempty=True)
    upload_file_id: str = _opt(omitempty=True)

    def to_dict(self) -> dict[str, Any]:
        return self._encode()


@dataclass
class WorkflowRequest(_Model):
    user: str
    inputs: dict[str, Any] = _opt(factory=dict)
    response_mode: str = ""
    files: list[FileInput] = _opt(factory=list, omitempty=True)

    def to_dict(self) -> dict[str, Any]:
        return self._encode()


@dataclass
class WorkflowRunData(_Model):
    id: str = ""
    workflow_id: str = ""
    status: str = ""
    outputs: dict[str, Any] = _opt(factory=dict, decode=_dict)
    error: str | None = None
    elapsed_time: float = 0.0
    total_tokens: int = 0
    total_steps: int = 0
    created_at: int = 0
    finished_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> WorkflowRunData:
        return cls._decode(data)


@dataclass
class WorkflowResponse(_Model):
    workflow_run_id: str = ""
    task_id: str = ""
    data: WorkflowRunData = _opt(factory=WorkflowRunData, decode=WorkflowRunData.from_dict)

    @classmethod
    def from_dict(cls, data: Any) -> WorkflowResponse:
        return cls._decode(data)


@dataclass
class ExecutionMetadata(_Model):
    total_tokens: int = 0
    total_price: float = 0.0
    currency: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ExecutionMetadata:
        return cls._decode(data)


@dataclass
class StreamingData(_Model):
    id: str = ""
    workflow_id: str = ""
    node_id: str = ""
    node_type: str = ""
    title: str = ""
    index: int = 0
    predecessor_node_id: str = ""
    inputs: Any = None
    outputs: dict[str, Any] = _opt(factory=dict, decode=_dict)
    status: str = ""
    error: str = ""
    elapsed_time: float = 0.0
    execution_metadata: ExecutionMetadata = _opt(
        factory=ExecutionMetadata, decode=ExecutionMetadata.from_dict)
    created_at: int = 0
    finished_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> StreamingData:
        return cls._decode(data)


@dataclass
class StreamingResponse(_Model):
    """One event of a streamed workflow run."""

    event: str = ""
    task_id: str = ""
    workflow_run_id: str = ""
    sequence_number: int = 0
    data: StreamingData = _opt(factory=StreamingData, decode=StreamingData.from_dict)

    @classmethod
    def from_dict(cls, data: Any) -> StreamingResponse:
        return cls._decode(data)


@dataclass
class TTSMessage(_Model):
    """A chunk of synthesised speech; ``audio`` is base64-encoded."""

    event: str = ""
    task_id: str = ""
    message_id: str = ""
    audio: str = ""
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> TTSMessage:
        return cls._decode(data)