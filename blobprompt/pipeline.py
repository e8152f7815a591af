"""
PromptPipeline - submit a prompt as a blob, read it back, and complete it.
"""
import logging
from enum import Enum
from typing import Optional

from .client import BlobClient
from .completion import CompletionClient
from .exceptions import BlobMismatchError
from .models import Blob, PipelineResult
from .namespace import parse_namespace


class Stage(str, Enum):
    """Driver states. Transitions are linear; any failure ends in FAILED."""
    INIT = "init"
    NAMESPACE_DECODED = "namespace_decoded"
    BLOB_SUBMITTED = "blob_submitted"
    BLOB_FETCHED = "blob_fetched"
    COMPLETED = "completed"
    DONE = "done"
    FAILED = "failed"


# Human-readable name of the step that runs after each stage
NEXT_STEP = {
    Stage.INIT: "decode namespace",
    Stage.NAMESPACE_DECODED: "submit blob",
    Stage.BLOB_SUBMITTED: "fetch blob",
    Stage.BLOB_FETCHED: "complete prompt",
    Stage.COMPLETED: "report result",
}


class PromptPipeline:
    """
    Runs the blob round trip followed by one completion call.

    Errors are not caught: the first failure marks the pipeline FAILED,
    records where it happened in ``failed_stage`` and propagates unchanged.
    A blob that was already submitted is left on the network.
    """

    def __init__(
        self,
        blob_client: BlobClient,
        completion_client: CompletionClient,
        logger: Optional[logging.Logger] = None
    ):
        self.blob_client = blob_client
        self.completion_client = completion_client
        self.logger = logger or logging.getLogger(__name__)
        self.stage = Stage.INIT
        self.failed_stage: Optional[Stage] = None

    @property
    def failed_step(self) -> Optional[str]:
        """Name of the step that failed, if any"""
        if self.failed_stage is None:
            return None
        return NEXT_STEP.get(self.failed_stage)

    def _advance(self, stage: Stage) -> None:
        self.logger.debug(f"Pipeline {self.stage.value} -> {stage.value}")
        self.stage = stage

    def run(self, namespace_hex: str, prompt: str) -> PipelineResult:
        """
        Execute the pipeline once

        Args:
            namespace_hex: Hex-encoded namespace sub-ID
            prompt: Prompt text submitted as the blob payload

        Returns:
            Heights, links and texts produced along the way

        Raises:
            BlobPromptError: The first error raised by any step
        """
        if self.stage is not Stage.INIT:
            raise RuntimeError(f"pipeline already ran (stage: {self.stage.value})")

        try:
            namespace = parse_namespace(namespace_hex)
            self._advance(Stage.NAMESPACE_DECODED)

            payload = prompt.encode("utf-8", errors="surrogateescape")
            submitted, height = self.blob_client.submit(namespace, payload)
            self._advance(Stage.BLOB_SUBMITTED)

            fetched = self.blob_client.get(height, namespace, submitted.commitment)
            self._verify(submitted, fetched, height)
            self._advance(Stage.BLOB_FETCHED)
            self.logger.info(f"Fetched blob: {fetched.text}")

            answer = self.completion_client.complete(fetched.text)
            self._advance(Stage.COMPLETED)
            self.logger.info(f"Completion response: {answer}")
        except BaseException:
            self.failed_stage = self.stage
            self.stage = Stage.FAILED
            raise

        self._advance(Stage.DONE)
        return PipelineResult(
            height=height,
            explorer_link=self.blob_client.explorer_link(height),
            commitment_hex=submitted.commitment.hex(),
            fetched_text=fetched.text,
            response=answer,
        )

    @staticmethod
    def _verify(submitted: Blob, fetched: Blob, height: int) -> None:
        if fetched.namespace != submitted.namespace:
            raise BlobMismatchError(
                f"Fetched blob at height {height} has namespace {fetched.namespace.hex()}, "
                f"expected {submitted.namespace.hex()}"
            )
        if fetched.commitment != submitted.commitment:
            raise BlobMismatchError(
                f"Fetched blob at height {height} has commitment {fetched.commitment.hex()}, "
                f"expected {submitted.commitment.hex()}"
            )
        if fetched.data != submitted.data:
            raise BlobMismatchError(f"Fetched blob at height {height} does not match the submitted data")
