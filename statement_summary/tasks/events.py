"""Parsing of S3 "object created" notification events."""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote_plus

from statement_summary.utils.logger import get_logger

logger = get_logger(__name__)

ObjectRef = Tuple[Optional[str], str]


def extract_object_refs(event: Dict[str, Any]) -> List[ObjectRef]:
    """List the ``(bucket, key)`` pairs named by a storage event.

    Keys arrive URL-encoded in S3 notifications and are decoded here.
    Records without an object key are logged and skipped.

    Args:
        event: Notification payload with a ``Records`` list.

    Returns:
        One pair per usable record, in record order. The bucket is None when
        the record does not name one.
    """
    refs = []
    for index, record in enumerate(event.get("Records") or []):
        s3_info = record.get("s3") or {}
        key = (s3_info.get("object") or {}).get("key")
        if not key:
            logger.warning(f"Skipping event record {index}: no object key")
            continue
        bucket = (s3_info.get("bucket") or {}).get("name")
        refs.append((bucket, unquote_plus(key)))
    return refs


def handle_storage_event(event: Dict[str, Any], service) -> Dict[str, Any]:
    """Summarize and deliver every statement named by a storage event.

    Each object is processed on its own; one failing object does not stop
    the others.

    Args:
        event: Notification payload with a ``Records`` list.
        service: ``StatementService`` used to process the objects.

    Returns:
        Batch report with per-object results.
    """
    refs = extract_object_refs(event)
    results = service.process_objects(refs)
    failed = [result for result in results if not result.success]

    for result in failed:
        logger.error(f"Statement {result.source} failed at {result.error_stage} stage: {result.error_message}")

    return {
        "success": not failed,
        "processed": len(results),
        "failed": len(failed),
        "results": [result.to_dict() for result in results],
    }
