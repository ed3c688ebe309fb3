"""
Idempotent artifact publishing on top of an ObjectStore.
"""

import json
import logging
import time
from typing import Any, Mapping

from .data_models import Filing, PublishOutcome, StatementType
from .exceptions import ObjectStoreError
from .object_store import ObjectStore


logger = logging.getLogger(__name__)

FUNDAMENTALS_FOLDER = "Fundamentals"

CONTENT_TYPES = {
    "json": "application/json",
    "html": "text/html",
}


def get_content_type(extension: str) -> str:
    try:
        return CONTENT_TYPES[extension.lower().lstrip(".")]
    except KeyError:
        raise ValueError(f"Unsupported artifact extension: {extension}") from None


def artifact_key(filing: Filing, statement_type: StatementType, extension: str) -> str:
    """
    Build the object key of a statement artifact.

    Example:
        ``E00001/BS/E00001-S100TEST-BS-from-2023-04-01-to-2024-03-31.json``
    """
    code = statement_type.value
    return (
        f"{filing.filer_code}/{code}/"
        f"{filing.filer_code}-{filing.doc_id}-{code}"
        f"-from-{filing.period_start}-to-{filing.period_end}.{extension}"
    )


def fundamentals_key(filing: Filing) -> str:
    return (
        f"{filing.filer_code}/{FUNDAMENTALS_FOLDER}/"
        f"{filing.filer_code}-fundamentals"
        f"-from-{filing.period_start}-to-{filing.period_end}.json"
    )


def serialize_json(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


class ArtifactPublisher:
    """
    Publish artifacts at most once per key.

    The existence check and the write are not atomic; when two writers race
    on the same key the store keeps whichever write lands last, and both
    bodies are identical for the same filing.
    """

    def __init__(
        self,
        store: ObjectStore,
        retry_attempts: int = 3,
        backoff_seconds: float = 1.0,
    ):
        """
        Initialize publisher.

        Args:
            store: Destination object store
            retry_attempts: Extra attempts for a failed write
            backoff_seconds: Base delay, doubled after every failed attempt
        """
        self.store = store
        self.retry_attempts = max(0, retry_attempts)
        self.backoff_seconds = backoff_seconds

    def publish(self, key: str, body: bytes, content_type: str) -> PublishOutcome:
        """
        Write ``body`` under ``key`` unless an object already exists there.

        Returns:
            PUBLISHED when written, SKIPPED_EXISTING when the key was taken

        Raises:
            ObjectStoreError: If the store keeps failing after all retries
        """
        if self.store.head(key):
            logger.info(f"Skipped existing artifact: {key}")
            return PublishOutcome.SKIPPED_EXISTING

        self._put_with_retry(key, body, content_type)
        logger.info(f"Published artifact: {key}")
        return PublishOutcome.PUBLISHED

    def publish_json(self, key: str, payload: Mapping[str, Any]) -> PublishOutcome:
        return self.publish(key, serialize_json(payload), CONTENT_TYPES["json"])

    def publish_html(self, key: str, html_text: str) -> PublishOutcome:
        return self.publish(key, html_text.encode("utf-8"), CONTENT_TYPES["html"])

    def _put_with_retry(self, key: str, body: bytes, content_type: str) -> None:
        for attempt in range(self.retry_attempts + 1):
            try:
                self.store.put(key, body, content_type)
                return
            except ObjectStoreError as e:
                logger.warning(f"Write attempt {attempt + 1} failed for {key}: {e}")
                if attempt >= self.retry_attempts:
                    raise
                time.sleep(self.backoff_seconds * (2 ** attempt))
