"""Replication pipeline for a single announcement."""

from dataclasses import dataclass
from typing import Protocol

from ..codec import decode_announcement
from ..config import PolicyConfig
from ..errors import DecodeError, ResolutionError, TriggerError
from ..logging_config import get_logger
from ..metrics import IOutcomeRecorder
from ..models import DatasetManifest, Failed, Outcome, PipelineStage, Rejected, Succeeded
from ..policy import Deny, evaluate
from ..storage_network import IManifestResolver, IReplicationTrigger

logger = get_logger(__name__)


class IReplicationPipeline(Protocol):
    """Runs one announcement from raw payload to recorded outcome."""

    async def process(self, payload: bytes) -> Outcome:
        """Process a raw announcement payload."""
        ...


@dataclass
class _Execution:
    """Mutable state of one pipeline run."""

    stage: PipelineStage = PipelineStage.RECEIVED
    content_id: str | None = None
    manifest: DatasetManifest | None = None

    def context(self, **extra) -> dict:
        return {
            "context": {
                "content_id": self.content_id,
                "stage": self.stage.value,
                **extra,
            }
        }


class ReplicationPipeline:
    """Decode, resolve manifest, apply policy, trigger, record.

    Every execution ends with exactly one call to the recorder. Errors are
    terminal for the announcement and never retried.
    """

    def __init__(
        self,
        resolver: IManifestResolver,
        trigger: IReplicationTrigger,
        recorder: IOutcomeRecorder,
        policy: PolicyConfig,
    ):
        self._resolver = resolver
        self._trigger = trigger
        self._recorder = recorder
        self._policy = policy

    async def process(self, payload: bytes) -> Outcome:
        """Process a raw announcement payload and record its outcome."""
        execution = _Execution()

        try:
            outcome = await self._run(payload, execution)
        except Exception as e:
            # Programming faults stay inside this execution.
            logger.exception(
                "Unexpected error in replication pipeline",
                extra=execution.context(),
            )
            outcome = Failed(
                cause=f"internal error: {e}",
                stage=execution.stage,
                content_id=execution.content_id,
            )

        manifest = execution.manifest if isinstance(outcome, Succeeded) else None
        self._recorder.record(outcome, manifest)
        execution.stage = PipelineStage.RECORDED
        logger.debug("Recorded %s", type(outcome).__name__, extra=execution.context())
        return outcome

    async def _run(self, payload: bytes, execution: _Execution) -> Outcome:
        try:
            announcement = decode_announcement(payload)
        except DecodeError as e:
            logger.warning("Failed to decode announcement: %s", e, extra=execution.context())
            return Failed(cause=str(e), stage=execution.stage)

        execution.stage = PipelineStage.DECODED
        execution.content_id = content_id = announcement.request.content_id
        logger.info(
            "Received %s announcement for %s",
            announcement.kind.value,
            content_id,
            extra=execution.context(
                owner=announcement.request.owner,
                signer=announcement.signer,
                timestamp=announcement.timestamp,
            ),
        )

        try:
            manifest = await self._resolver.resolve_manifest(content_id)
        except ResolutionError as e:
            logger.warning(
                "Failed to fetch manifest: %s",
                e,
                extra=execution.context(kind=e.kind.value),
            )
            return Failed(cause=str(e), stage=execution.stage, content_id=content_id)

        execution.stage = PipelineStage.MANIFEST_RESOLVED
        execution.manifest = manifest

        decision = evaluate(manifest, self._policy)
        execution.stage = PipelineStage.POLICY_EVALUATED
        if isinstance(decision, Deny):
            logger.info(
                "Dataset too big %d > %d",
                decision.size_bytes,
                decision.max_size_bytes,
                extra=execution.context(),
            )
            return Rejected(
                content_id=content_id,
                reason=decision.reason,
                size_bytes=decision.size_bytes,
                max_size_bytes=decision.max_size_bytes,
            )

        try:
            await self._trigger.trigger_replication(content_id)
        except TriggerError as e:
            logger.warning(
                "Request to Codex failed: %s",
                e,
                extra=execution.context(status_code=e.status_code),
            )
            return Failed(cause=str(e), stage=execution.stage, content_id=content_id)

        execution.stage = PipelineStage.REPLICATION_TRIGGERED
        logger.info(
            "Replication of %s accepted (%d bytes)",
            content_id,
            manifest.dataset_size_bytes,
            extra=execution.context(),
        )
        return Succeeded(content_id=content_id)
