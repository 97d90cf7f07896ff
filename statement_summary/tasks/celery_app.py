"""Celery application and task definitions for statement processing."""

from typing import Any, Dict, Optional

from celery import Celery

from statement_summary.config.settings import (
    CELERY_TASK_SERIALIZER,
    CELERY_RESULT_SERIALIZER,
    CELERY_ACCEPT_CONTENT,
    CELERY_TIMEZONE,
    Settings,
    load_environment,
)
from statement_summary.service import StatementService
from statement_summary.tasks.events import extract_object_refs, handle_storage_event
from statement_summary.utils.exceptions import DeliveryError, PipelineStage, RetrievalError
from statement_summary.utils.logger import configure_logging, get_logger

# Worker process startup: load .env once and build settings from it
load_environment()
settings = Settings.from_env()
configure_logging(settings)

# Initialize Celery app
celery_app = Celery(
    "statement_summary",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    task_serializer=CELERY_TASK_SERIALIZER,
    result_serializer=CELERY_RESULT_SERIALIZER,
    accept_content=CELERY_ACCEPT_CONTENT,
    timezone=CELERY_TIMEZONE,
)

# Celery configuration
celery_app.conf.update(
    task_routes={
        "process_statement_object": {"queue": "statement_processing"},
        "process_storage_event": {"queue": "storage_events"},
    },
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    worker_max_tasks_per_child=1000,
)

logger = get_logger(__name__)

_TRANSIENT_ERRORS = {
    PipelineStage.RETRIEVE.value: RetrievalError,
    PipelineStage.DELIVER.value: DeliveryError,
}


def build_service() -> StatementService:
    """Create a fresh service for one task invocation."""
    return StatementService(settings)


@celery_app.task(bind=True, name="process_statement_object")
def process_statement_object(
    self,
    key: str,
    bucket: Optional[str] = None,
    recipient: Optional[str] = None
) -> Dict[str, Any]:
    """Summarize one S3 statement object and email the summary.

    Retrieval and delivery failures are retried up to ``MAX_RETRIES`` times;
    parse failures are final.

    Args:
        self: Celery task instance.
        key: Object key.
        bucket: Optional bucket name.
        recipient: Optional destination address.

    Returns:
        Dictionary with processing results.
    """
    result = build_service().process_object(key, bucket=bucket, recipient=recipient)

    error_class = _TRANSIENT_ERRORS.get(result.error_stage)
    if error_class is not None and self.request.retries < settings.max_retries:
        logger.warning(
            f"Retrying {result.source} (attempt {self.request.retries + 1}/{settings.max_retries})"
        )
        raise self.retry(
            countdown=settings.retry_delay_seconds,
            max_retries=settings.max_retries,
            exc=error_class(result.error_message),
        )

    payload = result.to_dict()
    payload["task_id"] = self.request.id
    payload["retries"] = self.request.retries
    return payload


@celery_app.task(name="process_storage_event")
def process_storage_event(event: Dict[str, Any], fan_out: bool = False) -> Dict[str, Any]:
    """Handle an S3 notification event.

    Args:
        event: Notification payload with a ``Records`` list.
        fan_out: Queue one ``process_statement_object`` task per object instead
            of processing them inline.

    Returns:
        Batch report, or the queued task ids when fanning out.
    """
    if fan_out:
        task_ids = [
            process_statement_object.delay(key, bucket=bucket).id
            for bucket, key in extract_object_refs(event)
        ]
        logger.info(f"Queued {len(task_ids)} statement tasks")
        return {"success": True, "queued": len(task_ids), "task_ids": task_ids}

    return handle_storage_event(event, build_service())
