"""Typed failures raised by the party_kit services.

Each error carries the HTTP status the API layer answers with, so a single
exception handler can translate them. Services never return None for a
missing resource; they raise NotFoundError instead.
"""


class PartyKitError(Exception):
    """Base class for every error a caller is expected to handle."""

    status_code = 500


class ValidationError(PartyKitError):
    """Malformed input: missing fields, bad values, invalid status change."""

    status_code = 400


class ForbiddenError(PartyKitError):
    """Caller does not own the resource, or the game is not playable."""

    status_code = 403


class NotFoundError(PartyKitError):
    """Unknown template, definition, pack, card, session or token."""

    status_code = 404


class ConflictError(PartyKitError):
    """Duplicate slug, protected resource, or room codes exhausted."""

    status_code = 409


class RoomCodeTaken(ConflictError):
    """A session with this room code already exists in storage."""


class GoneError(PartyKitError):
    """The session existed but has ended."""

    status_code = 410
