"""Utility functions for loading the generator input document.

The compiler front-end hands its resolved schema over as a JSON document,
read from a local file, a URL or standard input.
"""

import json
import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class InputLoaderError(Exception):
    """Raised when the input document cannot be loaded."""

    pass


def is_url(source: str) -> bool:
    """Tell whether a source string looks like an HTTP(S) URL."""
    parsed_url = urlparse(str(source))
    return parsed_url.scheme in ("http", "https") and bool(parsed_url.netloc)


def load_input_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load the input document from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        InputLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Loading input from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info("Loaded input from %s", file_path)
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise InputLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise InputLoaderError(f"Error reading file {file_path}: {e}") from e


def load_input_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load the input document from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        InputLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Loading input from URL: %s", url)

    if not is_url(url):
        logger.error("Invalid URL format: %s", url)
        raise InputLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning("URL %s does not have JSON content type: %s", url, content_type)

        data = response.json()
        logger.info("Loaded input from %s", url)
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise InputLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise InputLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise InputLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise InputLoaderError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise InputLoaderError(f"Request error for URL {url}: {e}") from e


def load_input_from_stream(stream: TextIO = None) -> tuple[str, Any]:
    """Load the input document from a text stream (stdin by default)."""
    stream = stream or sys.stdin
    try:
        return "<stdin>", json.load(stream)
    except json.JSONDecodeError as e:
        raise InputLoaderError(f"Invalid JSON on standard input: {e}") from e


def load_input(source: str | Path, timeout: int = 30) -> tuple[str, Any]:
    """Load the input document from a file path or URL.

    Args:
        source: Local path or HTTP(S) URL.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed JSON data).
    """
    if isinstance(source, str) and is_url(source):
        return load_input_from_url(source, timeout)
    return load_input_from_file(source)
