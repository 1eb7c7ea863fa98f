"""
Protocol router (Facade).

'Router' is the single entry point for inbound protocol events. It owns the
injected stores (connection registry, relationship graph, transcript store,
profile directory) and is the only component that touches more than one of
them per event. It never talks to a transport: each call to 'handle' returns
the list of 'Delivery' objects the caller should send, which keeps every event
handler deterministic and testable without sockets.

Connection lifecycle:

    'connect'     - open an anonymous connection and return its handle.
    'handle'      - process one raw inbound frame from that connection.
    'disconnect'  - release the connection and free its name.

A connection is Anonymous until its first successful 'set_username' and Named
afterwards; it never goes back to Anonymous while alive. Every event other than
'set_username' is ignored while the connection is Anonymous.

Events are processed one at a time under '_dispatch_lock', so no other event
can observe a half-applied change (for example a claimed name that the graph
does not know yet). Domain failures ('PresenceError') become an 'error' frame
addressed to the sender only; malformed frames are dropped without a reply.
"""

import asyncio
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel

from presence_toolkit.connections.base import ConnectionRegistry
from presence_toolkit.errors import AlreadyFriends, AvatarTooLarge, PresenceError, Unauthorized
from presence_toolkit.profiles.base import ProfileDirectory
from presence_toolkit.protocol.messages import (
    AvatarUpdate,
    ChatMessageDelivered,
    ConversationHistory,
    ErrorNotice,
    FriendAvatarUpdate,
    FriendList,
    FriendRequest,
    FriendRequestAccepted,
    FriendRequestReceived,
    FriendRequestResponse,
    GetConversation,
    InboundEvent,
    OutboundEvent,
    SendChatMessage,
    SetUsername,
    TypingNotice,
    TypingSignal,
    UsernameSet,
    parse_inbound,
)
from presence_toolkit.relationships.base import RelationshipGraph, RequestOutcome
from presence_toolkit.transcripts.base import TranscriptStore
from presence_toolkit.utils.ids import generate_uid

DEFAULT_MAX_AVATAR_BYTES = 256 * 1024


class IdentityStatus(StrEnum):
    """Whether a name has never been claimed, was claimed but is offline, or is online."""

    UNKNOWN = "unknown"
    KNOWN = "known"
    ONLINE = "online"


class Delivery(BaseModel):
    """An outbound frame addressed to one live connection."""

    connection_id: str
    event: OutboundEvent


class Router:
    def __init__(
        self,
        registry: ConnectionRegistry,
        graph: RelationshipGraph,
        transcripts: TranscriptStore,
        profiles: ProfileDirectory,
        history_requires_friendship: bool = True,
        max_avatar_bytes: int = DEFAULT_MAX_AVATAR_BYTES,
    ) -> None:
        self.registry = registry
        self.graph = graph
        self.transcripts = transcripts
        self.profiles = profiles
        self.history_requires_friendship = history_requires_friendship
        self.max_avatar_bytes = max_avatar_bytes
        self._dispatch_lock = asyncio.Lock()

    async def connect(self) -> str:
        connection_id = generate_uid()
        await self.registry.open(connection_id)
        logger.debug(f"Connection {connection_id} opened")
        return connection_id

    async def disconnect(self, connection_id: str) -> str | None:
        async with self._dispatch_lock:
            name = await self.registry.release(connection_id)
        logger.debug(f"Connection {connection_id} closed")
        return name

    async def identity_status(self, name: str) -> IdentityStatus:
        if await self.registry.resolve(name) is not None:
            return IdentityStatus.ONLINE
        if await self.graph.is_known(name):
            return IdentityStatus.KNOWN
        return IdentityStatus.UNKNOWN

    async def handle(self, connection_id: str, raw: str | bytes | dict) -> list[Delivery]:
        event = parse_inbound(raw)
        if event is None:
            logger.debug(f"Dropping malformed frame from connection {connection_id}")
            return []

        async with self._dispatch_lock:
            try:
                if isinstance(event, SetUsername):
                    try:
                        return await self._on_set_username(connection_id, event)
                    except KeyError:
                        logger.debug(f"Dropping 'set_username' for connection {connection_id} that is not open")
                        return []
                sender = await self.registry.identity_of(connection_id)
                if sender is None:
                    logger.debug(f"Ignoring {event.type!r} from anonymous connection {connection_id}")
                    return []
                return await self._dispatch(connection_id, sender, event)
            except PresenceError as exc:
                logger.info(f"Rejected {event.type!r} from connection {connection_id}: {exc.text}")
                return [Delivery(connection_id=connection_id, event=ErrorNotice(text=exc.text))]

    async def _dispatch(self, connection_id: str, sender: str, event: InboundEvent) -> list[Delivery]:
        match event:
            case FriendRequest():
                return await self._on_friend_request(sender, event)
            case FriendRequestResponse():
                return await self._on_friend_request_response(connection_id, sender, event)
            case SendChatMessage():
                return await self._on_chat_message(sender, event)
            case TypingSignal():
                return await self._on_typing(sender, event)
            case GetConversation():
                return await self._on_get_conversation(connection_id, sender, event)
            case AvatarUpdate():
                return await self._on_avatar_update(sender, event)
        return []

    async def _on_set_username(self, connection_id: str, event: SetUsername) -> list[Delivery]:
        claim = await self.registry.claim(connection_id, event.username)
        await self.graph.ensure_identity(claim.name)

        friends = await self.graph.friends_of(claim.name)
        pending = await self.graph.pending_for(claim.name)
        replies: list[OutboundEvent] = [UsernameSet(username=claim.name), FriendList(friends=friends)]
        replies.extend(FriendRequestReceived(from_=requester) for requester in pending)
        return [Delivery(connection_id=connection_id, event=reply) for reply in replies]

    async def _on_friend_request(self, sender: str, event: FriendRequest) -> list[Delivery]:
        outcome = await self.graph.request(sender, event.to)
        if outcome is RequestOutcome.DROPPED:
            return []
        if outcome is RequestOutcome.ALREADY_FRIENDS:
            raise AlreadyFriends()
        return await self._to_identity(event.to, FriendRequestReceived(from_=sender))

    async def _on_friend_request_response(
        self, connection_id: str, sender: str, event: FriendRequestResponse
    ) -> list[Delivery]:
        requester = event.from_
        if not await self.graph.respond(sender, requester, event.accept):
            return []

        deliveries = await self._to_identity(
            requester, FriendRequestAccepted(friend=sender, avatar=await self.profiles.avatar_of(sender))
        )
        deliveries.append(
            Delivery(
                connection_id=connection_id,
                event=FriendRequestAccepted(friend=requester, avatar=await self.profiles.avatar_of(requester)),
            )
        )
        return deliveries

    async def _on_chat_message(self, sender: str, event: SendChatMessage) -> list[Delivery]:
        if not await self.graph.are_friends(sender, event.to):
            raise Unauthorized()
        await self.transcripts.append(sender, event.to, sender, event.message)
        return await self._to_identity(event.to, ChatMessageDelivered(from_=sender, message=event.message))

    async def _on_typing(self, sender: str, event: TypingSignal) -> list[Delivery]:
        return await self._to_identity(event.to, TypingNotice(type=event.type, from_=sender))

    async def _on_get_conversation(self, connection_id: str, sender: str, event: GetConversation) -> list[Delivery]:
        partner = event.with_
        if self.history_requires_friendship and not await self.graph.are_friends(sender, partner):
            raise Unauthorized()
        messages = await self.transcripts.history(sender, partner)
        return [Delivery(connection_id=connection_id, event=ConversationHistory(with_=partner, messages=messages))]

    async def _on_avatar_update(self, sender: str, event: AvatarUpdate) -> list[Delivery]:
        if len(event.avatar.encode("utf-8")) > self.max_avatar_bytes:
            raise AvatarTooLarge()
        await self.profiles.set_avatar(sender, event.avatar)

        deliveries: list[Delivery] = []
        for friend in await self.graph.friends_of(sender):
            deliveries.extend(await self._to_identity(friend, FriendAvatarUpdate(friend=sender, avatar=event.avatar)))
        return deliveries

    async def _to_identity(self, name: str, event: OutboundEvent) -> list[Delivery]:
        """Address 'event' to the live connection of 'name', or to nobody when offline."""
        target = await self.registry.resolve(name)
        if target is None:
            return []
        return [Delivery(connection_id=target, event=event)]
