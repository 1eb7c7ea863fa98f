"""
Wire protocol frames.

Every frame is a JSON object with a 'type' discriminator. Inbound frames are
validated into one of the 'InboundEvent' models by 'parse_inbound'; anything
that does not fit (invalid JSON, a non-object, an unknown 'type', missing or
mistyped fields) comes back as None and is dropped by the router without a
reply. Outbound frames are built from the 'OutboundEvent' models and encoded
with 'encode()'.

The wire uses the reserved words 'from' and 'with' as field names, so those
fields carry a trailing underscore in Python and an alias on the wire.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from presence_toolkit.transcripts.base import TranscriptEntry

Name = Annotated[str, Field(min_length=1)]


class Frame(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)


# Inbound


class SetUsername(Frame):
    type: Literal["set_username"]
    username: str


class FriendRequest(Frame):
    type: Literal["friend_request"]
    to: Name


class FriendRequestResponse(Frame):
    type: Literal["friend_request_response"]
    from_: Name = Field(alias="from")
    accept: bool = False


class SendChatMessage(Frame):
    type: Literal["chat_message"]
    to: Name
    message: str


class TypingSignal(Frame):
    """Both 'typing' and 'stop_typing'; the type is forwarded unchanged."""

    type: Literal["typing", "stop_typing"]
    to: Name


class GetConversation(Frame):
    type: Literal["get_conversation"]
    with_: Name = Field(alias="with")


class AvatarUpdate(Frame):
    type: Literal["avatar_update"]
    avatar: str


InboundEvent = Annotated[
    SetUsername
    | FriendRequest
    | FriendRequestResponse
    | SendChatMessage
    | TypingSignal
    | GetConversation
    | AvatarUpdate,
    Field(discriminator="type"),
]

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_inbound(raw: str | bytes | dict[str, Any]) -> InboundEvent | None:
    """Validate one inbound frame, returning None when it is malformed."""
    try:
        if isinstance(raw, dict):
            return _inbound_adapter.validate_python(raw)
        return _inbound_adapter.validate_json(raw)
    except ValidationError:
        return None


# Outbound


class UsernameSet(Frame):
    type: Literal["username_set"] = "username_set"
    username: str


class ErrorNotice(Frame):
    type: Literal["error"] = "error"
    text: str


class FriendList(Frame):
    type: Literal["friend_list"] = "friend_list"
    friends: list[str]


class FriendRequestReceived(Frame):
    type: Literal["friend_request"] = "friend_request"
    from_: str = Field(alias="from")


class FriendRequestAccepted(Frame):
    type: Literal["friend_request_accepted"] = "friend_request_accepted"
    friend: str
    avatar: str | None = None


class ChatMessageDelivered(Frame):
    type: Literal["chat_message"] = "chat_message"
    from_: str = Field(alias="from")
    message: str


class TypingNotice(Frame):
    type: Literal["typing", "stop_typing"]
    from_: str = Field(alias="from")


class ConversationHistory(Frame):
    type: Literal["conversation_history"] = "conversation_history"
    with_: str = Field(alias="with")
    messages: list[TranscriptEntry]


class FriendAvatarUpdate(Frame):
    type: Literal["friend_avatar_update"] = "friend_avatar_update"
    friend: str
    avatar: str


OutboundEvent = (
    UsernameSet
    | ErrorNotice
    | FriendList
    | FriendRequestReceived
    | FriendRequestAccepted
    | ChatMessageDelivered
    | TypingNotice
    | ConversationHistory
    | FriendAvatarUpdate
)
