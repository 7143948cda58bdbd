"""
Job document ingestion.

Accepts either an array of job objects or a single job object, named by
`job` or `id`. Entries in an array that lack a name, carry non-list
`dependencies`, `sources` or `targets`, or hold non-string list items are
skipped; a document that is not JSON, or has neither shape, raises
InvalidFormatError.
"""

import json
import logging
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError

from .core.errors import InvalidFormatError
from .core.types import JobRecord

logger = logging.getLogger(__name__)

LIST_FIELDS = ("dependencies", "sources", "targets")

# Mirrors the pipeline shown when no file has been loaded
SAMPLE_JOBS: List[dict] = [
    {
        "job": "Frontend Build",
        "dependencies": [],
        "sources": ["src/components", "src/styles"],
        "targets": ["dist/bundle.js", "dist/styles.css"],
        "color": "#3b82f6",
    },
    {
        "job": "Backend Build",
        "dependencies": [],
        "sources": ["src/api", "src/services"],
        "targets": ["dist/server.js"],
        "color": "#10b981",
    },
    {
        "job": "Run Tests",
        "dependencies": ["Frontend Build", "Backend Build"],
        "sources": ["tests/"],
        "targets": ["test-results.xml"],
        "color": "#f59e0b",
    },
    {
        "job": "Deploy Staging",
        "dependencies": ["Run Tests"],
        "sources": ["dist/"],
        "targets": ["staging.example.com"],
        "color": "#8b5cf6",
    },
    {
        "job": "Deploy Production",
        "dependencies": ["Deploy Staging"],
        "sources": ["dist/"],
        "targets": ["production.example.com"],
        "color": "#ef4444",
    },
]


def _job_name(item: dict) -> Any:
    return item.get("job") or item.get("id")


def _is_valid_entry(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    name = _job_name(item)
    if not isinstance(name, str) or not name:
        return False
    return all(isinstance(item.get(field), list) for field in LIST_FIELDS)


def _to_record(item: dict) -> JobRecord:
    try:
        return JobRecord.model_validate(item)
    except ValidationError as e:
        raise InvalidFormatError(f"Invalid job '{_job_name(item)}': {e}") from e


def parse_jobs(data: Any) -> List[JobRecord]:
    """
    Convert a decoded JSON document into job records.

    Args:
        data: A list of job objects or a single job object.

    Returns:
        List[JobRecord]: Records in document order.

    Raises:
        InvalidFormatError: If the document has neither accepted shape, or
            a single-object document is not a valid job.
    """
    if isinstance(data, list):
        records: List[JobRecord] = []
        for item in data:
            if not _is_valid_entry(item):
                continue
            try:
                records.append(JobRecord.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Rejected job '{_job_name(item)}': {e}")
        skipped = len(data) - len(records)
        if skipped:
            logger.warning(f"Skipped {skipped} malformed job entr{'y' if skipped == 1 else 'ies'}")
        return records

    if isinstance(data, dict) and _job_name(data):
        if not _is_valid_entry(data):
            raise InvalidFormatError(f"Invalid job '{_job_name(data)}': list fields required")
        return [_to_record(data)]

    raise InvalidFormatError("Invalid JSON structure")


def loads_jobs(text: str) -> List[JobRecord]:
    """Parse job records from a JSON string."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidFormatError(f"Failed to parse JSON: {e}") from e
    return parse_jobs(data)


def load_jobs(path: Path) -> List[JobRecord]:
    """Read and parse a JSON job file."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise InvalidFormatError(f"Failed to read file {path}: {e}") from e
    return loads_jobs(text)


def sample_jobs() -> List[JobRecord]:
    return parse_jobs(SAMPLE_JOBS)
