"""Structural paths that address values inside loaded YAML/JSON documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dyffpack.core.exceptions import PathLookupError, PathParseError

ROOT_LEVEL = "(root level)"

# Field names that identify entries of a named list, in lookup order.
IDENTIFIER_CANDIDATES: tuple[str, ...] = ("name", "key", "id")


@dataclass(frozen=True, slots=True)
class PathElement:
    """One step into a document: mapping key, list index or named list entry."""

    name: str | None = None
    key: str | None = None
    index: int | None = None

    def __post_init__(self) -> None:
        if self.index is not None:
            if self.name is not None or self.key is not None:
                raise ValueError("list index path element cannot carry a name")
            if self.index < 0:
                raise ValueError(f"list index must not be negative: {self.index}")
            return
        if self.name is None:
            raise ValueError("path element needs a name or an index")
        if self.key is not None and not self.key:
            raise ValueError("named entry identifier cannot be empty")

    @classmethod
    def mapping_key(cls, name: Any) -> "PathElement":
        return cls(name=str(name))

    @classmethod
    def list_index(cls, index: int) -> "PathElement":
        return cls(index=index)

    @classmethod
    def named_entry(cls, key: str, name: Any) -> "PathElement":
        return cls(name=str(name), key=key)

    @property
    def is_index(self) -> bool:
        return self.index is not None

    @property
    def is_named_entry(self) -> bool:
        return self.key is not None

    def go_patch(self) -> str:
        if self.is_index:
            return str(self.index)
        if self.is_named_entry:
            return f"{self.key}={self.name}"
        return str(self.name)

    def dot(self) -> str:
        if self.is_index:
            return str(self.index)
        return str(self.name)


@dataclass(frozen=True, slots=True)
class KubernetesIdentity:
    """apiVersion/kind/name triple (plus namespace) of a Kubernetes entity."""

    api_version: str
    kind: str
    name: str
    namespace: str | None = None

    @classmethod
    def from_document(cls, document: Any) -> "KubernetesIdentity | None":
        if not isinstance(document, dict):
            return None
        api_version = document.get("apiVersion")
        kind = document.get("kind")
        metadata = document.get("metadata")
        if not isinstance(api_version, str) or not isinstance(kind, str):
            return None
        if not isinstance(metadata, dict) or not isinstance(metadata.get("name"), str):
            return None
        namespace = metadata.get("namespace")
        return cls(
            api_version=api_version,
            kind=kind,
            name=metadata["name"],
            namespace=namespace if isinstance(namespace, str) and namespace else None,
        )

    def display_name(self) -> str:
        if self.namespace:
            return f"{self.api_version}/{self.kind}/{self.namespace}/{self.name}"
        return f"{self.api_version}/{self.kind}/{self.name}"

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
        }


@dataclass(frozen=True, slots=True)
class DocumentRef:
    """Reference to one document of a (possibly multi-document) input."""

    location: str
    index: int = 0
    document_count: int = 1
    kubernetes: KubernetesIdentity | None = None

    @property
    def label(self) -> str:
        return "stdin" if self.location == "-" else self.location

    def description(self) -> str:
        if self.kubernetes is not None:
            return self.kubernetes.display_name()
        if self.document_count > 1:
            return f"{self.label}#{self.index}"
        return self.label


@dataclass(frozen=True, slots=True, eq=False)
class Path:
    """Document-qualified structural address.

    Equality and hashing use the canonical go-patch rendering only, so a path
    parsed from a filter argument compares equal to a path produced by the
    comparison even though the parsed one carries no document reference.
    """

    elements: tuple[PathElement, ...] = ()
    document: DocumentRef | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def is_root(self) -> bool:
        return not self.elements

    def child(self, element: PathElement) -> "Path":
        return Path(elements=self.elements + (element,), document=self.document)

    def go_patch_style(self) -> str:
        if not self.elements:
            return "/"
        return "/" + "/".join(element.go_patch() for element in self.elements)

    def dot_style(self) -> str:
        if not self.elements:
            return ROOT_LEVEL
        return ".".join(element.dot() for element in self.elements)

    def to_string(self, *, use_go_patch_paths: bool = True) -> str:
        if use_go_patch_paths:
            return self.go_patch_style()
        return self.dot_style()

    def root_description(self) -> str:
        if self.document is None:
            return ""
        return self.document.description()

    def __str__(self) -> str:
        return self.go_patch_style()

    def __repr__(self) -> str:
        return f"Path({self.go_patch_style()!r}, document={self.root_description()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.go_patch_style() == other.go_patch_style()

    def __hash__(self) -> int:
        return hash(self.go_patch_style())


def parse_path_string(text: str, *, document: DocumentRef | None = None) -> Path:
    """Parse go-patch (`/a/name=x/0`) or dot style (`a.x.0`) path strings."""
    value = text.strip()
    if not value:
        raise PathParseError("path string is empty")
    if value == ROOT_LEVEL:
        return Path(document=document)
    if value.startswith("/"):
        elements = _parse_go_patch(value)
    else:
        elements = _parse_dot_style(value)
    return Path(elements=elements, document=document)


def _parse_go_patch(value: str) -> tuple[PathElement, ...]:
    if value == "/":
        return ()
    elements: list[PathElement] = []
    for segment in value[1:].split("/"):
        if not segment:
            raise PathParseError(f"empty segment in go-patch path: {value!r}")
        if segment.isdigit():
            elements.append(PathElement.list_index(int(segment)))
            continue
        key, separator, name = segment.partition("=")
        if separator:
            if not key or not name:
                raise PathParseError(f"invalid named entry {segment!r} in path {value!r}")
            elements.append(PathElement.named_entry(key, name))
        else:
            elements.append(PathElement.mapping_key(segment))
    return tuple(elements)


def _parse_dot_style(value: str) -> tuple[PathElement, ...]:
    elements: list[PathElement] = []
    for segment in value.split("."):
        if not segment:
            raise PathParseError(f"empty segment in dot-style path: {value!r}")
        if segment.isdigit():
            elements.append(PathElement.list_index(int(segment)))
        else:
            elements.append(PathElement.mapping_key(segment))
    return tuple(elements)


def grab(document: Any, path: Path) -> Any:
    """Return the value `path` points to inside `document`."""
    current = document
    for position, element in enumerate(path.elements):
        try:
            current = _step_into(current, element)
        except LookupError as error:
            walked = Path(elements=path.elements[: position + 1])
            raise PathLookupError(
                f"no value at {walked.go_patch_style()} ({error})"
            ) from error
    return current


def _step_into(node: Any, element: PathElement) -> Any:
    if element.index is not None:
        if isinstance(node, list):
            if element.index >= len(node):
                raise IndexError(f"list has {len(node)} entries")
            return node[element.index]
        if isinstance(node, dict):
            return _lookup_key(node, str(element.index))
        raise LookupError(f"cannot index into {type(node).__name__}")

    if element.is_named_entry:
        if not isinstance(node, list):
            raise LookupError(f"named entry requires a list, found {type(node).__name__}")
        for entry in node:
            if isinstance(entry, dict) and str(entry.get(element.key)) == element.name:
                return entry
        raise KeyError(f"no entry with {element.key}={element.name}")

    if isinstance(node, dict):
        return _lookup_key(node, str(element.name))
    if isinstance(node, list):
        # dot-style paths address named entries by identifier value only
        for entry in node:
            if not isinstance(entry, dict):
                continue
            for candidate in IDENTIFIER_CANDIDATES:
                if candidate in entry and str(entry[candidate]) == element.name:
                    return entry
        raise KeyError(f"no named entry {element.name!r}")
    raise LookupError(f"cannot look up {element.name!r} in {type(node).__name__}")


def _lookup_key(node: dict[Any, Any], name: str) -> Any:
    if name in node:
        return node[name]
    for key, value in node.items():
        if str(key) == name:
            return value
    raise KeyError(name)
