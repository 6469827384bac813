"""Load Swagger documents from a URL, local file, or stdin.

This module handles all I/O for fetching the raw document and converting it
into a Python dictionary. It supports both JSON and YAML formats with
automatic format detection, and checks that the document declares Swagger
2.0, the only dialect the compiler understands.

The two public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`validate_swagger_version` -- Check and return the ``swagger``
  version string, rejecting OpenAPI 3.x and unversioned documents.

Any failure here raises :class:`~specgen.exceptions.RetrievalError`, which
aborts the run. No request is retried.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgen.exceptions import RetrievalError

_TIMEOUT = 30.0


def load_document(source: str) -> dict[str, Any]:
    """Load a Swagger document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        RetrievalError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read the document from stdin."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise RetrievalError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise RetrievalError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch the document from URL. Supports JSON and YAML responses.

    Args:
        url: The HTTP(S) URL to fetch.

    Returns:
        The parsed document dictionary.

    Raises:
        RetrievalError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise RetrievalError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise RetrievalError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load the document from a local file.

    The ``.json``, ``.yaml`` and ``.yml`` extensions select the parser;
    anything else falls back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RetrievalError(f"Document not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RetrievalError(f"Failed to read document {path}: {exc}") from exc

    if not content.strip():
        raise RetrievalError(f"Document is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Args:
        content: The raw string content.
        hint: Optional format hint ('json' or 'yaml').

    Returns:
        The parsed dictionary.

    Raises:
        RetrievalError: If the content cannot be parsed as either format, or
            does not hold an object at the top level.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise RetrievalError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_object(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        yaml_error = exc
    else:
        return _require_object(result)

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise RetrievalError(msg)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise RetrievalError(f"Document must be a JSON/YAML object (got {kind})")
    return result


def validate_swagger_version(document: dict[str, Any]) -> str:
    """Validate and return the Swagger version string.

    Supports Swagger 2.x. Raises RetrievalError for OpenAPI 3.x documents
    and documents without a version field.

    Args:
        document: The parsed document dictionary.

    Returns:
        The Swagger version string (e.g., '2.0').

    Raises:
        RetrievalError: If the version is missing or unsupported.
    """
    if "openapi" in document:
        raise RetrievalError(
            f"OpenAPI {document['openapi']} is not supported. "
            "Only Swagger 2.0 documents (tags/paths/definitions) are supported."
        )

    swagger_version = document.get("swagger")
    if swagger_version is None:
        raise RetrievalError("Missing 'swagger' field. Is this a Swagger 2.0 document?")

    version_str = str(swagger_version)
    if version_str.startswith("2."):
        return version_str

    raise RetrievalError(
        f"Unsupported Swagger version: {version_str}. Only Swagger 2.0 is supported."
    )
