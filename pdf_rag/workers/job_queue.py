"""
Job queue producer.

Publishes ingestion jobs to the Celery broker by task name, so producers do
not import the worker's task module.

Dependencies: celery, kombu
System role: Job Queue adapter (producer side)
"""

import logging

from celery import Celery
from kombu.exceptions import KombuError

from pdf_rag.core.document_processing.models import IngestionJob
from pdf_rag.core.exceptions import JobQueueError
from pdf_rag.workers import INGEST_TASK_NAME

logger = logging.getLogger(__name__)


class JobQueue:
    """Enqueue ingestion jobs."""

    def __init__(self, app: Celery, queue_name: str) -> None:
        """
        Initialize queue producer.

        Args:
            app: Celery application bound to the broker
            queue_name: Queue the ingestion worker consumes
        """
        self._app = app
        self._queue_name = queue_name

    def enqueue(self, job: IngestionJob) -> str:
        """
        Publish a job.

        Args:
            job: Ingestion job

        Returns:
            str: Task ID

        Raises:
            JobQueueError: Broker unavailable
        """
        try:
            result = self._app.send_task(
                INGEST_TASK_NAME,
                args=[job.model_dump(mode="json")],
                queue=self._queue_name,
            )
        except KombuError as e:
            logger.error(f"{__name__}:enqueue - {type(e).__name__}: {e}")
            raise JobQueueError(
                f"Failed to enqueue ingestion job: {e}",
                {"document_id": job.document_id},
            ) from e

        logger.info(
            f"{__name__}:enqueue - Job queued",
            extra={"document_id": job.document_id, "task_id": result.id},
        )
        return result.id
