"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict

from meet.domain.model import Invitation, Meeting, User
from meet.domain.value import (
    InvitationId,
    InvitationStatus,
    MeetingId,
    MeetingStatus,
    UserId,
)


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model."""
    return User(
        id=UserId(row["id"]),
        email=row["email"],
        display_name=row["display_name"],
        bio=row.get("bio"),
        avatar_url=row["avatar_url"],
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return user.model_dump()


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    return Invitation(
        id=InvitationId(row["id"]),
        sender_id=UserId(row["sender_id"]),
        sender_name=row["sender_name"],
        sender_avatar=row["sender_avatar"],
        receiver_id=UserId(row["receiver_id"]),
        receiver_name=row["receiver_name"],
        receiver_avatar=row["receiver_avatar"],
        title=row["title"],
        description=row.get("description"),
        proposed_time=row["proposed_time"],
        status=InvitationStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict."""
    data = invitation.model_dump()
    data["status"] = invitation.status.value
    return data


def row_to_meeting(row: Dict[str, Any]) -> Meeting:
    """Convert database row to Meeting domain model.

    Args:
        row: Database row as dict

    Returns:
        Meeting domain model
    """
    participants = row["participants"]
    names = row["participant_names"]
    return Meeting(
        id=MeetingId(row["id"]),
        title=row["title"],
        description=row.get("description"),
        participants=(UserId(participants[0]), UserId(participants[1])),
        participant_names=(names[0], names[1]),
        start_time=row["start_time"],
        end_time=row["end_time"],
        created_from=InvitationId(row["created_from"]),
        status=MeetingStatus(row["status"]),
        created_at=row["created_at"],
    )


def meeting_to_dict(meeting: Meeting) -> Dict[str, Any]:
    """Convert Meeting domain model to database dict."""
    data = meeting.model_dump()
    data["participants"] = list(meeting.participants)
    data["participant_names"] = list(meeting.participant_names)
    data["status"] = meeting.status.value
    return data
