"""Training poll loop: start training, wait for every submodel, then publish."""

from __future__ import annotations

import threading
from typing import List, Optional, Protocol

from loguru import logger

from nlusync.errors import (
    SyncCancelledError,
    TrainingError,
    TrainingTimeoutError,
    UnexpectedTrainingStateError,
)
from nlusync.providers.luis_gateway import RemoteGateway
from nlusync.providers.models import SubmodelStatus, TrainingStatus


class CancellationToken:
    """Thread-safe cancellation flag that also wakes pending waits."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds; returns True if cancelled meanwhile."""
        return self._event.wait(timeout)


class Scheduler(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def wait(self, seconds: float) -> bool: ...


class PollScheduler:
    """Timed waits between polls that end early on cancellation."""

    def __init__(self, token: CancellationToken | None = None) -> None:
        self.token = token or CancellationToken()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def wait(self, seconds: float) -> bool:
        """Wait ``seconds``; returns True when the wait ended because of cancellation."""
        return self.token.wait(seconds)


def training_progress(submodels: List[SubmodelStatus]) -> float:
    """Fraction of submodels no longer in progress."""
    if not submodels:
        return 0.0
    in_progress = sum(1 for m in submodels if m.status == TrainingStatus.IN_PROGRESS)
    return (len(submodels) - in_progress) / len(submodels)


class ModelTrainer:
    """Drive a remote training job to completion and publish the result."""

    def __init__(
        self,
        gateway: RemoteGateway,
        version_id: str,
        *,
        scheduler: Scheduler | None = None,
        poll_interval: float = 1.0,
        max_poll_attempts: Optional[int] = None,
    ) -> None:
        self.gateway = gateway
        self.version_id = version_id
        self.scheduler = scheduler or PollScheduler()
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.progress_history: List[float] = []

    def train(self) -> None:
        """Start training and poll until every submodel has finished.

        Raises:
            UnexpectedTrainingStateError: If training is not acknowledged as queued
            TrainingError: As soon as any submodel reports a failure
            TrainingTimeoutError: If ``max_poll_attempts`` polls pass without completion
            SyncCancelledError: If the scheduler is cancelled before or during polling
            GatewayError: On transport failure
        """
        self.progress_history = []
        if self.scheduler.cancelled:
            raise SyncCancelledError("Sync cancelled before training started")

        status = self.gateway.start_training(self.version_id)
        if status != TrainingStatus.QUEUED:
            raise UnexpectedTrainingStateError(status.value)

        attempts = 0
        while True:
            submodels = self.gateway.poll_training(self.version_id)
            attempts += 1

            failed = next((m for m in submodels if m.status == TrainingStatus.FAIL), None)
            if failed is not None:
                raise TrainingError(failed.model_id, failed.failure_reason or "unknown")

            progress = training_progress(submodels)
            self.progress_history.append(progress)
            if progress >= 1.0:
                logger.debug("Model trained (100%)")
                return

            logger.debug(f"Training... {progress * 100:.0f}%")

            if self.max_poll_attempts is not None and attempts >= self.max_poll_attempts:
                raise TrainingTimeoutError(attempts, progress)

            if self.scheduler.wait(self.poll_interval):
                raise SyncCancelledError(
                    f"Training poll cancelled at {progress * 100:.0f}%"
                )

    def publish(self, *, is_staging: bool) -> None:
        if self.scheduler.cancelled:
            raise SyncCancelledError("Sync cancelled before publishing")

        slot = "staging" if is_staging else "production"
        logger.debug(f"Publishing version {self.version_id} to {slot}")
        self.gateway.publish(self.version_id, is_staging=is_staging)

    def train_and_publish(self, *, is_staging: bool = True) -> None:
        """Train, then publish only if training succeeded."""
        self.train()
        self.publish(is_staging=is_staging)
