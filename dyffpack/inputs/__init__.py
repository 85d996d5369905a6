"""Input loading and document root relocation."""

from dyffpack.inputs.chroot import change_root
from dyffpack.inputs.exceptions import ChangeRootError, InputError
from dyffpack.inputs.io import (
    STDIN_LOCATION,
    is_url,
    load_input_file,
    load_input_files,
    parse_documents,
)

__all__ = [
    "InputError",
    "ChangeRootError",
    "STDIN_LOCATION",
    "is_url",
    "load_input_file",
    "load_input_files",
    "parse_documents",
    "change_root",
]
