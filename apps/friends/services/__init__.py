"""Services for the friend graph."""

from .friend_graph import (
    send_request,
    respond_to_request,
    list_friends,
    list_pending_requests,
    are_friends,
)

__all__ = [
    'send_request',
    'respond_to_request',
    'list_friends',
    'list_pending_requests',
    'are_friends',
]
