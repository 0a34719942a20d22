"""
Document ingestion Celery task.

Task: ingest_document(payload)
Flow: validate payload -> IngestionPipeline.run -> result

Transient failures are retried with exponential backoff up to the
configured maximum; the last attempt lets the pipeline mark the document
FAILED. Malformed payloads are rejected without requeue.

Dependencies: celery, pdf_rag.core.document_processing, pdf_rag.dependencies
System role: Async document processing task (Job Queue consumer side)
"""

import asyncio
import logging
from typing import Any

from celery import Task
from celery.exceptions import Reject
from celery.signals import worker_process_init

from pdf_rag.core.document_processing.entrypoint import IngestionPipeline
from pdf_rag.core.document_processing.models import parse_job_payload
from pdf_rag.core.exceptions import PoisonMessageError, TransientError
from pdf_rag.dependencies import ServiceContainer
from pdf_rag.observability.correlation import correlation_scope
from pdf_rag.observability.logger import configure_logging
from pdf_rag.workers import INGEST_TASK_NAME, celery_app, celery_config, settings

logger = logging.getLogger(__name__)


@worker_process_init.connect
def _configure_worker_logging(**_kwargs) -> None:
    configure_logging(settings.log_level)


def handle_ingestion_message(
    pipeline: IngestionPipeline,
    body: Any,
    final_attempt: bool = True,
) -> dict:
    """
    Decode a queue message and run the pipeline for it.

    Args:
        pipeline: Ingestion pipeline
        body: Raw message body (dict or JSON)
        final_attempt: Whether the queue will retry on failure

    Returns:
        dict: JSON-serializable pipeline result

    Raises:
        PoisonMessageError: Body is not a valid ingestion job
        PdfRagException: Pipeline failure
    """
    job = parse_job_payload(body)
    with correlation_scope(job.document_id):
        result = asyncio.run(pipeline.run(job, final_attempt=final_attempt))
    return result.model_dump(mode="json")


class IngestionTask(Task):
    """Task base holding one service container per worker process."""

    _container: ServiceContainer | None = None

    @property
    def container(self) -> ServiceContainer:
        if self._container is None:
            self._container = ServiceContainer(use_null_pool=True)
        return self._container


@celery_app.task(
    bind=True,
    base=IngestionTask,
    name=INGEST_TASK_NAME,
    autoretry_for=(TransientError,),
    max_retries=celery_config.task_max_retries,
    retry_backoff=celery_config.task_retry_backoff,
    retry_backoff_max=celery_config.task_retry_backoff_max,
    retry_jitter=True,
    acks_late=True,
)
def ingest_document(self, payload: Any) -> dict:
    """
    Ingest one uploaded document.

    Args:
        payload: Serialized IngestionJob

    Returns:
        dict: Pipeline result
    """
    final_attempt = self.request.retries >= self.max_retries
    try:
        return handle_ingestion_message(
            self.container.ingestion_pipeline,
            payload,
            final_attempt=final_attempt,
        )
    except PoisonMessageError as e:
        logger.error(
            f"{__name__}:ingest_document - Rejecting malformed message",
            extra={"task_id": self.request.id, "details": e.details},
        )
        raise Reject(str(e), requeue=False) from e
