"""Typed failures returned by the battle service.

Every error carries a machine-readable ``code``, the HTTP status the
server maps it to, and a message. Callers can always tell an illegal
action (4xx) apart from a broken system (5xx).
"""

from typing import Any


class BattleServiceError(Exception):
    """Base class for all service failures."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "status_code": self.status_code}


class NotFound(BattleServiceError):
    """No session stored under the given id."""

    code = "BATTLE_NOT_FOUND"
    status_code = 404

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Battle {session_id} not found")


class Unauthorized(BattleServiceError):
    """Requester is not a participant of the session."""

    code = "PLAYER_NOT_AUTHORIZED"
    status_code = 403

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player {player_id} is not authorized for this battle")


class InvalidAction(BattleServiceError):
    code = "INVALID_ACTION"
    status_code = 400

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid action: {reason}")


class InvalidPhase(BattleServiceError):
    """Operation attempted against a battle that is already over."""

    code = "INVALID_BATTLE_STATE"
    status_code = 409

    def __init__(self, phase: str, reason: str = "Battle already concluded"):
        self.phase = phase
        super().__init__(f"{reason} (battle is in state {phase})")


class ValidationError(BattleServiceError):
    """Malformed roster or request on creation."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(f"Validation error: {message}")


class InternalError(BattleServiceError):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(f"Internal server error: {message}")


class StoreConflict(BattleServiceError):
    """A conditional write failed: duplicate create, missing record or stale version."""

    code = "STORE_CONFLICT"
    status_code = 409

    def __init__(self, session_id: str, reason: str):
        self.session_id = session_id
        self.reason = reason
        super().__init__(f"Conflicting write for battle {session_id}: {reason}")


class CollaboratorTimeout(BattleServiceError):
    """Turn processing did not finish in time; nothing was saved."""

    code = "COLLABORATOR_TIMEOUT"
    status_code = 503

    def __init__(self, seconds: float):
        self.seconds = seconds
        super().__init__(f"Battle processing timed out after {seconds:g}s; no changes were saved")
