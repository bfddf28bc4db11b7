"""
Tolerant decoder from flat Sentinel reply maps to typed records.

A record is always produced: a missing key or a value that fails coercion
leaves that attribute at its zero value and decoding moves on to the next
field.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from sentinel_audit.types.records import FieldKind, FieldSpec

log = logging.getLogger(__name__)

T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?[0-9]+")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_int(raw: Any) -> Optional[int]:
    """Base-10 signed 64-bit integer or None; no whitespace, underscores or other bases."""
    if raw is None:
        return None
    text = raw if isinstance(raw, str) else str(raw)
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text, 10)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def _coerce(spec: FieldSpec, raw: Optional[str]) -> Any:
    if spec.kind is FieldKind.STRING:
        return "" if raw is None else str(raw)
    if raw is None or raw == "":
        return spec.kind.zero()
    value = parse_int(raw)
    if value is None:
        log.debug("unable to coerce %s=%r to %s", spec.key, raw, spec.kind.value)
        return spec.kind.zero()
    if spec.kind is FieldKind.BOOLEAN:
        return value > 0
    return value


def decode_record(record_type: Type[T], mapping: Mapping[str, str]) -> T:
    values: Dict[str, Any] = {}
    for spec in record_type.FIELDS:  # type: ignore[attr-defined]
        values[spec.name] = _coerce(spec, mapping.get(spec.key))
    return record_type(**values)


def decode_records(record_type: Type[T], mappings: Iterable[Mapping[str, str]]) -> List[T]:
    return [decode_record(record_type, mapping) for mapping in mappings]


def pair_flat_reply(items: Sequence[Any]) -> Dict[str, str]:
    """Turn ``[k1, v1, k2, v2, ...]`` into a mapping; an unpaired trailing key is dropped."""
    out: Dict[str, str] = {}
    for idx in range(0, len(items) - 1, 2):
        out[_text(items[idx])] = _text(items[idx + 1])
    return out


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return "" if value is None else str(value)


__all__ = ["decode_record", "decode_records", "pair_flat_reply", "parse_int"]
