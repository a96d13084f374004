"""Sync orchestration: detect staleness, rebuild, import, train, publish, record.

States of one run::

    idle -> checking_sync -> up_to_date
                          -> syncing -> building_payload -> deleting_old_version
                             -> importing -> training -> publishing
                             -> recording_success -> succeeded
    any step after building_payload -> failed | cancelled

The payload is built (app info included) before the old version is deleted, so
a construction error leaves the live remote version untouched. Construction
errors propagate to the caller; import, training and publish failures are
logged and reported in the returned :class:`SyncReport`.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from nlusync.corpus.canonical import CanonicalLabelExtractor, LabelExtractor
from nlusync.corpus.entities import EntityRegistry
from nlusync.corpus.source import CorpusSource, DirectoryCorpusSource
from nlusync.errors import (
    GatewayError,
    NLUSyncError,
    SyncCancelledError,
    TrainingError,
)
from nlusync.providers.luis_gateway import LuisGateway, RemoteGateway
from nlusync.sync.fingerprint import (
    FingerprintStore,
    JsonFingerprintStore,
    SyncFingerprint,
    compute_content_hash,
    needs_sync,
)
from nlusync.sync.payload import PayloadBuilder
from nlusync.sync.results import SyncReport, SyncState
from nlusync.sync.training import ModelTrainer, PollScheduler, Scheduler
from nlusync.sync.versions import RemoteVersionManager
from nlusync.utils.config import Config, SyncConfig


class SyncEngine:
    """Keep one remote model version in sync with the local corpus."""

    def __init__(
        self,
        corpus: CorpusSource,
        gateway: RemoteGateway,
        fingerprints: FingerprintStore,
        *,
        config: Optional[SyncConfig] = None,
        extractor: Optional[LabelExtractor] = None,
        registry: Optional[EntityRegistry] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or SyncConfig()
        self.corpus = corpus
        self.gateway = gateway
        self.fingerprints = fingerprints
        self.versions = RemoteVersionManager(gateway, self.config.version_id)
        self.builder = PayloadBuilder(
            extractor or CanonicalLabelExtractor(),
            registry or EntityRegistry(),
            version_id=self.config.version_id,
            schema_version=self.config.schema_version,
        )
        self.trainer = ModelTrainer(
            gateway,
            self.config.version_id,
            scheduler=scheduler or PollScheduler(),
            poll_interval=self.config.poll_interval_seconds,
            max_poll_attempts=self.config.max_poll_attempts,
        )

    @classmethod
    def from_config(cls, config: Config, *, scheduler: Optional[Scheduler] = None) -> "SyncEngine":
        """Wire the directory corpus, JSON fingerprint store and LUIS gateway from config."""
        registry = (
            EntityRegistry.from_yaml(config.corpus.entity_registry_path)
            if config.corpus.entity_registry_path
            else EntityRegistry()
        )
        return cls(
            DirectoryCorpusSource(config.corpus.intents_path),
            LuisGateway(config.luis),
            JsonFingerprintStore(config.corpus.fingerprint_path),
            config=config.sync,
            registry=registry,
            scheduler=scheduler,
        )

    def check(self) -> SyncReport:
        """Run change detection only; no remote mutation and no store write."""
        report = SyncReport()
        self._check(report)
        return report

    def sync(self) -> SyncReport:
        """Sync the remote model if it is stale.

        Returns:
            SyncReport describing the terminal state

        Raises:
            UnsupportedEntityError: If the corpus uses an entity the provider cannot train
            AppNotFoundError: If the remote app metadata cannot be fetched
            CanonicalParseError: If an utterance annotation is malformed
        """
        report = SyncReport()
        intents, remote_version = self._check(report)

        if not report.needs_sync:
            logger.debug("Model is up to date")
            report.advance(SyncState.UP_TO_DATE)
            return report

        logger.debug("The model needs to be updated")
        report.advance(SyncState.SYNCING)

        report.advance(SyncState.BUILDING_PAYLOAD)
        app_info = self.versions.get_app_info()
        payload = self.builder.build(intents, app_info)
        report.utterance_count = len(payload.utterances)

        if remote_version is not None:
            logger.debug("Deleting old version of the model")
            report.advance(SyncState.DELETING_OLD_VERSION)
            deleted = self.versions.delete_version()
            report.deleted_old_version = deleted.value
            if not deleted.ok:
                report.degraded.append(deleted.degraded)

        try:
            report.advance(SyncState.IMPORTING)
            report.imported_version = self.gateway.import_version(self.config.version_id, payload)

            report.advance(SyncState.TRAINING)
            self.trainer.train()

            report.advance(SyncState.PUBLISHING)
            self.trainer.publish(is_staging=not self.config.is_production)
            report.published = True
        except SyncCancelledError as e:
            logger.warning(f"Sync cancelled: {e}")
            report.error = str(e)
            report.advance(SyncState.CANCELLED)
            return report
        except TrainingError as e:
            logger.error(f"Could not sync the model. Error = {e}")
            report.error = str(e)
            report.failed_model_id = e.model_id
            report.failure_reason = e.reason
            report.advance(SyncState.FAILED)
            return report
        except GatewayError as e:
            logger.error(f"Could not sync the model. Error = {e.best_message}")
            report.error = e.best_message
            report.advance(SyncState.FAILED)
            return report
        except NLUSyncError as e:
            logger.error(f"Could not sync the model. Error = {e}")
            report.error = str(e)
            report.advance(SyncState.FAILED)
            return report
        finally:
            if SyncState.TRAINING in report.transitions:
                report.training_progress = list(self.trainer.progress_history)

        self._record_success(report)
        logger.info(f"Synced model [{report.imported_version}]")
        return report

    def _check(self, report: SyncReport):
        report.advance(SyncState.CHECKING_SYNC)
        intents = self.corpus.get_intents()
        report.intent_count = len(intents)
        report.content_hash = compute_content_hash(intents)

        lookup = self.versions.get_remote_version()
        if not lookup.ok:
            report.degraded.append(lookup.degraded)
        remote_version = lookup.value
        report.remote_timestamp_before = remote_version.last_modified if remote_version else None

        fingerprint = self.fingerprints.get(self.config.fingerprint_key)
        report.needs_sync = needs_sync(fingerprint, report.content_hash, remote_version)
        return intents, remote_version

    def _record_success(self, report: SyncReport) -> None:
        report.advance(SyncState.RECORDING_SUCCESS)

        lookup = self.versions.get_remote_version()
        if not lookup.ok:
            report.degraded.append(lookup.degraded)
        remote_version = lookup.value
        timestamp = remote_version.last_modified if remote_version else None
        if timestamp is None:
            logger.warning("Remote version timestamp unavailable; next run will resync")

        self.fingerprints.set(
            self.config.fingerprint_key,
            SyncFingerprint(content_hash=report.content_hash, remote_timestamp=timestamp),
        )
        report.remote_timestamp_after = timestamp
        report.fingerprint_written = True
        report.advance(SyncState.SUCCEEDED)
