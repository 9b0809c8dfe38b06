"""Canonical identifier forms shared by every emitted name.

The same canonicalization is used for interface names, reference targets
and storage-group keys, so a schema named ``user-profile`` and a tag
``user_profile`` both become ``UserProfile``.

Function names:
  - declared operationId          -> camelCase of the id
  - GET  /users/profiles          -> getProfiles
  - POST /pets                    -> postPets
  - GET  /pets/{petId}            -> getPets
  - DELETE /                      -> deleteResource
"""

from __future__ import annotations

import re

DEFAULT_GROUP = "Default"

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _words(name: str) -> list[str]:
    return [w for w in _WORD_SPLIT.split(name) if w]


def to_pascal_case(name: str) -> str:
    """Upper-case the first letter of every word, keeping the rest as written."""
    return "".join(w[:1].upper() + w[1:] for w in _words(name))


def to_camel_case(name: str) -> str:
    """Convert to camelCase via the Pascal form."""
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def to_kebab_case(name: str) -> str:
    """Convert a canonical (Pascal) identifier to a file stem: UserProfile -> user-profile."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", to_pascal_case(name))
    return re.sub(r"([a-z\d])([A-Z])", r"\1-\2", s1).lower()


def is_identifier(name: str) -> bool:
    """Check whether a property name can be emitted unquoted."""
    return bool(_IDENTIFIER.match(name))


def to_identifier(name: str) -> str:
    """Map a parameter name to a usable argument name: pet-id -> petId."""
    if is_identifier(name):
        return name
    camel = to_camel_case(name)
    return camel if is_identifier(camel) else f"_{camel}"


def ref_name(ref: str) -> str:
    """Return the definition name a $ref pointer targets."""
    return ref.rstrip("/").split("/")[-1]


def group_key(tags: list[str]) -> str:
    """Storage-group key: the canonical first tag, or the default group."""
    if tags:
        key = to_pascal_case(tags[0])
        if key:
            return key
    return DEFAULT_GROUP


def synthesize_operation_id(method: str, path: str) -> str:
    """Build an operation id from method + path with non-alphanumerics stripped.

    Two paths differing only in punctuation synthesize the same id.
    """
    return f"{method.lower()}{_NON_ALNUM.sub('', path)}"


def _path_segments(path: str) -> list[str]:
    return [p for p in path.split("/") if p]


def is_path_param(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


def path_placeholders(path: str) -> list[str]:
    """Names of {param} placeholders in template order, without duplicates."""
    names: list[str] = []
    for name in re.findall(r"\{([^}/]+)\}", path):
        if name not in names:
            names.append(name)
    return names


def has_trailing_param(path: str) -> bool:
    """True when the last path segment is a {param} placeholder."""
    segments = _path_segments(path)
    return bool(segments) and is_path_param(segments[-1])


def build_function_name(method: str, path: str, operation_id: str | None = None) -> str:
    """Build the canonical function name for an operation.

    A declared operation id wins; otherwise the method is joined with the
    last non-parameter path segment.
    """
    if operation_id:
        name = to_camel_case(operation_id)
        if name:
            return name

    parts = [p for p in _path_segments(path) if not p.startswith("{")]
    resource = to_pascal_case(parts[-1]) if parts else ""
    return f"{method.lower()}{resource or 'Resource'}"
