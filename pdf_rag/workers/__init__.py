"""
Celery workers module.

Background processing of document ingestion jobs. Late acknowledgement plus
a prefetch of one gives at-least-once delivery with at most
`worker_concurrency` jobs in flight per worker.

Dependencies: celery, pdf_rag.configs
System role: Background task processing
"""

from celery import Celery

from pdf_rag.configs import get_settings

INGEST_TASK_NAME = "pdf_rag.ingest_document"

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "pdf_rag",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["pdf_rag.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_default_queue=celery_config.queue_name,
    task_routes={INGEST_TASK_NAME: {"queue": celery_config.queue_name}},
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    worker_concurrency=celery_config.worker_concurrency,
)
