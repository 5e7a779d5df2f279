"""
Boundary layer data model(s).

The Service hands these to the router, which only has to know how to reach the listed connections.
(Decouples the domain layer from the transport: the domain never holds a socket.)
"""

from dataclasses import dataclass

from pydantic import BaseModel

# Type alias to make Delivery easier to read
ConnectionId = str


@dataclass(frozen=True)
class Delivery:
    """One outbound message and the connections it should be sent to."""

    recipients: tuple[ConnectionId, ...]
    message: BaseModel
