"""Load YAML/JSON inputs from files, standard input or URLs."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Any, Callable, TextIO

import requests
import yaml

from dyffpack.core.models import InputFile
from dyffpack.core.path import KubernetesIdentity
from dyffpack.inputs.exceptions import InputError

logger = logging.getLogger(__name__)

STDIN_LOCATION = "-"
DEFAULT_URL_TIMEOUT_SECONDS = 30.0

RequestGet = Callable[..., Any]


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def load_input_file(
    location: str,
    *,
    stdin: TextIO | None = None,
    request_get: RequestGet | None = None,
    timeout_seconds: float = DEFAULT_URL_TIMEOUT_SECONDS,
) -> InputFile:
    """Load every document found at `location` (`-` means standard input)."""
    content = _read_content(
        location,
        stdin=stdin,
        request_get=request_get,
        timeout_seconds=timeout_seconds,
    )
    documents = parse_documents(content, location=location)
    logger.debug("loaded %d document(s) from %s", len(documents), location)
    return InputFile(
        location=location,
        documents=documents,
        identities=tuple(KubernetesIdentity.from_document(document) for document in documents),
    )


def load_input_files(
    from_location: str,
    to_location: str,
    *,
    stdin: TextIO | None = None,
    request_get: RequestGet | None = None,
) -> tuple[InputFile, InputFile]:
    if from_location == STDIN_LOCATION and to_location == STDIN_LOCATION:
        raise InputError("standard input can only be used for one of the inputs")
    return (
        load_input_file(from_location, stdin=stdin, request_get=request_get),
        load_input_file(to_location, stdin=stdin, request_get=request_get),
    )


def parse_documents(content: str, *, location: str) -> tuple[Any, ...]:
    try:
        documents = list(yaml.safe_load_all(content))
    except yaml.YAMLError as error:
        raise InputError(f"failed to parse {_display(location)}: {error}") from error

    non_empty = [document for document in documents if document is not None]
    if not non_empty:
        return (None,)
    return tuple(non_empty)


def _read_content(
    location: str,
    *,
    stdin: TextIO | None,
    request_get: RequestGet | None,
    timeout_seconds: float,
) -> str:
    if location == STDIN_LOCATION:
        stream = stdin if stdin is not None else sys.stdin
        try:
            return stream.read()
        except OSError as error:
            raise InputError(f"failed to read standard input: {error}") from error

    if is_url(location):
        get_fn = request_get or requests.get
        try:
            response = get_fn(location, timeout=timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as error:
            raise InputError(f"failed to fetch {location}: {error}") from error
        return response.text

    path = Path(location)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as error:
        raise InputError(f"file not found: {location}") from error
    except IsADirectoryError as error:
        raise InputError(f"input is a directory: {location}") from error
    except PermissionError as error:
        raise InputError(f"permission denied: {location}") from error
    except (OSError, UnicodeDecodeError) as error:
        raise InputError(f"cannot read {location}: {error}") from error


def _display(location: str) -> str:
    return "standard input" if location == STDIN_LOCATION else location
