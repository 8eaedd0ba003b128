"""Domain layer errors."""

from meet.domain.value import IdentityFailureReason, InvitationId, InvitationStatus


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Malformed or out-of-policy input, raised before any write."""

    pass


class InvalidTransitionError(DomainError):
    """Raised when an invitation status change is not allowed from its current state."""

    def __init__(
        self,
        invitation_id: InvitationId,
        current: InvitationStatus,
        requested: InvitationStatus,
    ):
        self.invitation_id = invitation_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invitation {invitation_id} is {current.value}, "
            f"cannot change to {requested.value}"
        )


class StoreUnavailableError(DomainError):
    """Read, write or subscribe failure against the document store."""

    pass


class MeetingCreationError(StoreUnavailableError):
    """The invitation was accepted but its meeting could not be written.

    Recoverable: the caller may retry meeting creation for the invitation.
    """

    def __init__(self, invitation_id: InvitationId, cause: str):
        self.invitation_id = invitation_id
        super().__init__(
            f"Invitation {invitation_id} was accepted but its meeting "
            f"was not created: {cause}"
        )


class IdentityError(DomainError):
    """Sign-up or sign-in failure reported by the identity service."""

    def __init__(self, reason: IdentityFailureReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason.value)


class NotAuthorizedError(DomainError):
    """Raised when a user acts on a resource they are not a party to."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to act on {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvariantViolationError(AssertionError):
    """The invitation state machine observed an impossible state.

    This is a programming error, not a user-facing failure.
    """

    pass
