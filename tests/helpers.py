import json

from presence_toolkit.router.router import Delivery, Router


def wire(deliveries: list[Delivery]) -> list[tuple[str, dict]]:
    """Deliveries as (connection id, decoded JSON frame) pairs."""
    return [(delivery.connection_id, json.loads(delivery.event.encode())) for delivery in deliveries]


async def connect_as(router: Router, name: str) -> str:
    connection_id = await router.connect()
    await router.handle(connection_id, {"type": "set_username", "username": name})
    return connection_id


async def befriend(router: Router, requester_cid: str, requester: str, target_cid: str, target: str) -> None:
    await router.handle(requester_cid, {"type": "friend_request", "to": target})
    await router.handle(target_cid, {"type": "friend_request_response", "from": requester, "accept": True})
