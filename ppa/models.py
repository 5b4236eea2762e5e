"""Record model for the credential store."""

import json
from dataclasses import dataclass
from typing import Iterable, Optional


FIELDS = ("name", "username", "password", "comments")


class DecodeError(Exception):
    """Raised when decrypted data is not a valid sequence of entries."""
    pass


@dataclass(frozen=True)
class Entry:
    """A single credential record."""

    name: str
    username: str
    password: str
    comments: str = ""

    def to_dict(self) -> dict:
        """Return the fields as a dict, in storage order."""
        return {field: getattr(self, field) for field in FIELDS}


def _same_name(a: str, b: str) -> bool:
    """Compare two names ignoring case."""
    return a.casefold() == b.casefold()


def serialize(entries: Iterable[Entry]) -> bytes:
    """
    Encode entries as a compact UTF-8 JSON array.

    Keys are written in field order and non-ASCII text is kept as-is,
    so the output is byte-for-byte deterministic for a given list.

    Args:
        entries: Entries in display order

    Returns:
        UTF-8 encoded JSON, ``b"[]"`` for no entries
    """
    payload = [entry.to_dict() for entry in entries]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def deserialize(data: bytes) -> list[Entry]:
    """
    Decode the output of serialize() back into entries.

    Args:
        data: UTF-8 JSON bytes

    Returns:
        List of entries in stored order

    Raises:
        DecodeError: If the data is not a JSON array of entry objects
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DecodeError(f"Store content is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise DecodeError("Store content is not a list of entries")

    entries = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise DecodeError(f"Entry {index} is not an object")
        for field in FIELDS:
            if not isinstance(item.get(field), str):
                raise DecodeError(f"Entry {index} has a missing or invalid '{field}'")
        entries.append(Entry(**{field: item[field] for field in FIELDS}))

    return entries


def find_entry(entries: Iterable[Entry], name: str) -> Optional[Entry]:
    """Return the first entry whose name matches case-insensitively."""
    for entry in entries:
        if _same_name(entry.name, name):
            return entry
    return None


def remove_entries(entries: Iterable[Entry], name: str) -> list[Entry]:
    """Return a new list without any entry whose name matches case-insensitively."""
    return [entry for entry in entries if not _same_name(entry.name, name)]


def fuzzy_match(name: str, term: str) -> bool:
    """
    Check whether every character of term appears in name, in order.

    Smart case: a term with an upper-case letter is compared
    case-sensitively, otherwise case is ignored. An empty term matches
    everything.
    """
    if term == term.lower():
        name, term = name.casefold(), term.casefold()
    remaining = iter(name)
    return all(char in remaining for char in term)


def search_entries(entries: Iterable[Entry], term: Optional[str] = None) -> list[Entry]:
    """Filter entries by fuzzy name match, keeping stored order."""
    if not term:
        return list(entries)
    return [entry for entry in entries if fuzzy_match(entry.name, term)]
