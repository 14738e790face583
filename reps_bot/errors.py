from __future__ import annotations


class ChallengeError(Exception):
    """User-facing domain error; the message is shown to the user as is."""

    message = "Something went wrong with this challenge."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    @property
    def user_message(self) -> str:
        return str(self)


class LimitExceededError(ChallengeError):
    message = "You already have the maximum number of active challenges."


class AlreadyActiveError(ChallengeError):
    message = "You are already taking part in this challenge!"


class AlreadyValidatedError(ChallengeError):
    message = "This day is already validated!"


class NotFoundError(ChallengeError):
    message = "Not found."


class ChallengeNotActiveError(ChallengeError):
    message = "This challenge is no longer active."


class DataIntegrityError(Exception):
    """Stored data is corrupted or predates a migration; never retried."""


class DefinitionMissingError(DataIntegrityError):
    def __init__(self, challenge_id: str) -> None:
        super().__init__(f"No definition snapshot or catalog entry for challenge {challenge_id!r}")
        self.challenge_id = challenge_id
