"""Move the root of a loaded input to a path inside its document."""

from __future__ import annotations

import logging

from dyffpack.core.exceptions import PathLookupError, PathParseError
from dyffpack.core.models import InputFile
from dyffpack.core.path import KubernetesIdentity, grab, parse_path_string
from dyffpack.inputs.exceptions import ChangeRootError

logger = logging.getLogger(__name__)


def change_root(
    input_file: InputFile,
    path_string: str,
    *,
    use_go_patch_paths: bool = False,
    translate_list_to_documents: bool = False,
) -> InputFile:
    """Return a copy of `input_file` whose document is the value at `path_string`.

    With `translate_list_to_documents`, a list found at the path becomes the
    list of documents instead of a single list document.
    """
    if len(input_file.documents) != 1:
        raise ChangeRootError(
            f"change root for {input_file.label} is only possible with one document, "
            f"but it contains {len(input_file.documents)} documents"
        )

    try:
        path = parse_path_string(path_string)
        value = grab(input_file.documents[0], path)
    except (PathParseError, PathLookupError) as error:
        raise ChangeRootError(
            f"failed to change root of {input_file.label} to {path_string}: {error}"
        ) from error

    if translate_list_to_documents and isinstance(value, list):
        documents = tuple(value) if value else (None,)
    else:
        documents = (value,)

    display_path = path.to_string(use_go_patch_paths=use_go_patch_paths)
    note = f"YAML root was changed to {display_path}"
    logger.debug("%s: %s", input_file.label, note)
    return InputFile(
        location=input_file.location,
        documents=documents,
        identities=tuple(KubernetesIdentity.from_document(document) for document in documents),
        note=note,
    )
