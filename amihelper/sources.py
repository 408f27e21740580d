"""
Parameter sources.

A source turns a parameter path such as "/aws/service/debian/release" into the
(name, value) pairs published under it. The live source talks to AWS Systems
Manager; the snapshot sources read a saved GetParametersByPath response from a
file or URL.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import boto3
import requests
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from .errors import LookupFailed
from .logger import get_logger
from .retry import Backoff, RetryError, retrying, should_retry_http_status
from .schema import validate_parameter

logger = get_logger()

LOOKUP_BACKOFF = Backoff(max_retries=3, base_delay=1.0, max_delay=10.0)
HTTP_TIMEOUT = 15

THROTTLING_CODES = {"Throttling", "ThrottlingException", "TooManyRequestsException"}

Pair = Tuple[str, str]


class TransientLookupError(Exception):
    """A lookup failure worth retrying (throttling, 5xx, rate limits)."""
    pass


def _log_retry(attempt: int, error: Exception, delay: float):
    logger.warning("Lookup failed, retrying", attempt=attempt, error=str(error), delay=delay)


def _under(name: str, path: str) -> bool:
    return name.startswith(path.rstrip("/") + "/")


def pairs_from_records(records: List[Dict[str, Any]], path: str) -> List[Pair]:
    """Valid (Name, Value) pairs from parameter records under ``path``.

    Invalid records are logged and skipped.
    """
    pairs = []
    for record in records:
        errors = validate_parameter(record)
        if errors:
            logger.warning("Skipping invalid parameter record", path=path, errors=errors)
            continue
        if _under(record["Name"], path):
            pairs.append((record["Name"], record["Value"]))
    return pairs


class ParameterSource:
    """Base class; subclasses implement fetch_records."""

    kind = "parameters"

    def fetch_records(self, path: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def get_pairs(self, path: str) -> List[Pair]:
        """Fetch, validate and return the pairs under a parameter path.

        Raises:
            LookupFailed: when the underlying source cannot be read
        """
        logger.record_lookup_attempt(path)
        try:
            records = self.fetch_records(path)
        except LookupFailed as e:
            cause = e.__cause__
            logger.record_lookup_failure(path, type(cause).__name__ if cause else "LookupFailed")
            logger.error(f"{self.kind.capitalize()} lookup failed", path=path, error=str(e))
            raise
        pairs = pairs_from_records(records, path)
        logger.record_lookup_success(path, len(pairs))
        logger.info(f"{self.kind.capitalize()} lookup complete", path=path, pairs=len(pairs))
        return pairs


@retrying(
    LOOKUP_BACKOFF,
    exceptions=(EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError, TransientLookupError),
    on_retry=_log_retry,
)
def _paginate_parameters(client, path: str) -> List[Dict[str, Any]]:
    records = []
    try:
        paginator = client.get_paginator("get_parameters_by_path")
        for page in paginator.paginate(Path=path, Recursive=True):
            records.extend(page.get("Parameters", []))
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in THROTTLING_CODES:
            raise TransientLookupError(str(e)) from e
        raise
    return records


class SsmParameterSource(ParameterSource):
    """Reads public parameters from AWS Systems Manager."""

    kind = "ssm"

    def __init__(self, region: str, client=None):
        """
        Raises:
            LookupFailed: no SSM client can be built for the region
        """
        self.region = region
        if client is None:
            try:
                client = boto3.client("ssm", region_name=region)
            except BotoCoreError as e:
                raise LookupFailed(f"Cannot create SSM client for region {region!r}: {e}") from e
        self.client = client

    def fetch_records(self, path: str) -> List[Dict[str, Any]]:
        try:
            return _paginate_parameters(self.client, path)
        except RetryError as e:
            raise LookupFailed(f"SSM lookup of {path} in {self.region} kept failing: {e}") from e
        except (ClientError, BotoCoreError) as e:
            raise LookupFailed(f"SSM lookup of {path} in {self.region} failed: {e}") from e


def _parameters_of(document: Any, origin: str) -> List[Dict[str, Any]]:
    if not isinstance(document, dict) or not isinstance(document.get("Parameters"), list):
        raise LookupFailed(f"Snapshot {origin} has no 'Parameters' list")
    return document["Parameters"]


class SnapshotFileSource(ParameterSource):
    """Reads a saved GetParametersByPath response from disk."""

    kind = "snapshot"

    def __init__(self, path: Path):
        self.path = Path(path)
        self._records: Optional[List[Dict[str, Any]]] = None

    def fetch_records(self, path: str) -> List[Dict[str, Any]]:
        if self._records is None:
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    document = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise LookupFailed(f"Cannot read snapshot {self.path}: {e}") from e
            self._records = _parameters_of(document, str(self.path))
        return self._records


@retrying(
    LOOKUP_BACKOFF,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, TransientLookupError),
    on_retry=_log_retry,
)
def _get_with_retry(url: str):
    resp = requests.get(url, timeout=HTTP_TIMEOUT)
    if should_retry_http_status(resp.status_code):
        raise TransientLookupError(f"HTTP {resp.status_code} from {url}")
    return resp


class SnapshotUrlSource(ParameterSource):
    """Fetches a saved GetParametersByPath response over HTTP."""

    kind = "snapshot"

    def __init__(self, url: str):
        self.url = url
        self._records: Optional[List[Dict[str, Any]]] = None

    def fetch_records(self, path: str) -> List[Dict[str, Any]]:
        if self._records is None:
            self._records = _parameters_of(self._download(), self.url)
        return self._records

    def _download(self) -> Any:
        try:
            resp = _get_with_retry(self.url)
            resp.raise_for_status()
            return resp.json()
        except RetryError as e:
            raise LookupFailed(f"Snapshot request kept failing: {e}") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            if status == 404:
                raise LookupFailed(f"Snapshot URL not found (404): {self.url}") from e
            raise LookupFailed(f"Snapshot request failed ({status}): {self.url}") from e
        except ValueError as e:
            raise LookupFailed(f"Snapshot {self.url} is not valid JSON: {e}") from e
        except requests.exceptions.RequestException as e:
            raise LookupFailed(f"Snapshot request error: {e}") from e


def source_for(snapshot: Optional[str], region: str) -> ParameterSource:
    """Snapshot source when one is named, live SSM lookups otherwise."""
    if snapshot:
        if snapshot.startswith(("http://", "https://")):
            return SnapshotUrlSource(snapshot)
        return SnapshotFileSource(Path(snapshot))
    return SsmParameterSource(region)
