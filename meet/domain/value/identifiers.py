"""Strongly typed identifiers for Meet domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Assigned by the identity service, opaque string (e.g. Firebase uid)
UserId = NewType("UserId", str)

InvitationId = NewType("InvitationId", UUID)
MeetingId = NewType("MeetingId", UUID)
