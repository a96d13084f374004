"""Exception hierarchy for corpus loading, remote calls and model sync."""

from __future__ import annotations


class NLUSyncError(Exception):
    """Base class for every error raised by nlusync."""


class CorpusError(NLUSyncError):
    """A corpus file could not be read or validated."""


class CanonicalParseError(NLUSyncError):
    """A canonical utterance contains a malformed entity annotation."""

    def __init__(self, utterance: str, reason: str) -> None:
        self.utterance = utterance
        self.reason = reason
        super().__init__(f"Could not parse canonical utterance {utterance!r}: {reason}")


class GatewayError(NLUSyncError):
    """A request to the remote NLU provider failed.

    Attributes:
        status_code: HTTP status code, when a response was received
        detail: Structured error message returned by the provider, if any
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    @property
    def best_message(self) -> str:
        """Provider detail when available, otherwise the generic message."""
        return self.detail or str(self)


class AppNotFoundError(NLUSyncError):
    """The configured application could not be fetched from the provider."""

    def __init__(self, app_id: str, cause: str | None = None) -> None:
        self.app_id = app_id
        self.cause = cause
        message = f"Could not find app {app_id}"
        if cause:
            message = f"{message} ({cause})"
        super().__init__(message)


class UnsupportedEntityError(NLUSyncError):
    """An utterance references an entity type the provider cannot train."""

    def __init__(self, entity_type: str, reason: str) -> None:
        self.entity_type = entity_type
        self.reason = reason
        super().__init__(f"Unsupported entity {entity_type}: {reason}")


class TrainingError(NLUSyncError):
    """A submodel reported a failure while training."""

    def __init__(self, model_id: str, reason: str) -> None:
        self.model_id = model_id
        self.reason = reason
        super().__init__(f'Error training model "{model_id}", reason is "{reason}"')


class UnexpectedTrainingStateError(NLUSyncError):
    """Training did not acknowledge with a queued status."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"Expected training to be Queued but was: {status}")


class TrainingTimeoutError(NLUSyncError):
    """Training did not finish within the configured number of polls."""

    def __init__(self, attempts: int, progress: float) -> None:
        self.attempts = attempts
        self.progress = progress
        super().__init__(
            f"Training still running after {attempts} polls ({progress:.0%} complete)"
        )


class SyncCancelledError(NLUSyncError):
    """The sync was cancelled while waiting on the provider."""
