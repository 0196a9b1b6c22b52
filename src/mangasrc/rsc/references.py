"""Resolution of ``$<id>`` placeholders pointing at separately streamed chunks."""

from __future__ import annotations

from dataclasses import dataclass
import re


@dataclass(frozen=True, slots=True)
class DirectReference:
    """Literal value, used as-is."""

    value: str


@dataclass(frozen=True, slots=True)
class IndirectReference:
    """Points at the text chunk labelled ``<chunk_id>:T<hex>,``."""

    chunk_id: str


@dataclass(frozen=True, slots=True)
class UnresolvedReference:
    """Indirect reference whose chunk is absent from the blob."""

    token: str


Reference = DirectReference | IndirectReference | UnresolvedReference


def parse_reference(token: str) -> DirectReference | IndirectReference:
    if not token.startswith("$") or len(token) < 2:
        return DirectReference(token)
    if token.startswith("$D"):
        return DirectReference(token[2:])
    return IndirectReference(token[1:])


def _chunk_pattern(chunk_id: str) -> re.Pattern[str]:
    # A chunk starts the blob, a line (real or still escaped) or its own pushed string.
    return re.compile(
        rf'(?:^|\n|\\n|"){re.escape(chunk_id)}:T[a-f0-9]+,(.*?)(?=\n[0-9]+:|\\n[0-9]+:|$|(?<!\\)")',
        re.DOTALL,
    )


def lookup_reference(blob: str, reference: Reference) -> DirectReference | UnresolvedReference:
    """Turn a reference into its literal value, or mark it unresolved."""

    if isinstance(reference, (DirectReference, UnresolvedReference)):
        return reference

    match = _chunk_pattern(reference.chunk_id).search(blob)
    if match is None:
        return UnresolvedReference(f"${reference.chunk_id}")

    payload = match.group(1).replace("\\n", "\n").replace('\\"', '"')
    return DirectReference(payload)


def resolve_reference(blob: str, token: str | None) -> str | None:
    """Resolve a field value that may be a reference token; plain strings pass through."""

    if token is None:
        return None

    resolved = lookup_reference(blob, parse_reference(token))
    if isinstance(resolved, UnresolvedReference):
        return None
    return resolved.value
