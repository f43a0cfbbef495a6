"""Utility functions for reading raw schema documents.

Schema exports are read as bytes, not parsed JSON, because version
detection has to inspect which keys each collection object declares.
"""

from pathlib import Path
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoaderError(Exception):
    """Raised when a schema document cannot be read."""

    pass


def read_schema_file(file_path: str | Path) -> tuple[str, bytes]:
    """Read a schema export from a local file.

    Args:
        file_path: Path to the ``pb_schema.json`` export.

    Returns:
        Tuple of (source description, raw file content).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaLoaderError: If the file cannot be read.
    """
    file_path = Path(file_path)
    logger.debug("Reading schema from file: %s", file_path)

    if not file_path.exists():
        logger.error("Schema file not found: %s", file_path)
        raise FileNotFoundError(f"Schema file not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("Schema file does not have .json extension: %s", file_path)

    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.error("Error reading schema file %s: %s", file_path, e)
        raise SchemaLoaderError(f"Error reading schema file {file_path}: {e}") from e

    logger.info("Read %d bytes from %s", len(data), file_path)
    return str(file_path), data


def read_schema_url(url: str, timeout: int = 30) -> tuple[str, bytes]:
    """Fetch a schema export over HTTP.

    Args:
        url: URL serving the schema JSON.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, raw response body).

    Raises:
        SchemaLoaderError: If the URL is invalid or the request fails.
    """
    logger.debug("Fetching schema from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise SchemaLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise SchemaLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise SchemaLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "unknown"
        logger.error("HTTP error %s for URL: %s", status, url)
        raise SchemaLoaderError(f"HTTP error {status} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise SchemaLoaderError(f"Request error for URL {url}: {e}") from e

    content_type = response.headers.get("content-type", "").lower()
    if "application/json" not in content_type and not url.endswith(".json"):
        logger.warning("URL %s does not have JSON content type: %s", url, content_type)

    logger.info("Fetched %d bytes from %s", len(response.content), url)
    return url, response.content


def read_schema(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, bytes]:
    """Read a schema export from either a file or a URL.

    Args:
        file_path: Local schema file (mutually exclusive with url).
        url: Remote schema location (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, raw document bytes).

    Raises:
        SchemaLoaderError: If neither or both sources are given, or reading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if not file_path and not url:
        raise SchemaLoaderError("Either file_path or url must be provided")

    if file_path and url:
        raise SchemaLoaderError("Cannot specify both file_path and url")

    if file_path:
        return read_schema_file(file_path)
    return read_schema_url(url, timeout)
