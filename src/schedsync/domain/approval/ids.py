"""Validation of proposal identifiers coming from the operator surface."""

from __future__ import annotations

from collections.abc import Iterable

from schedsync.domain.errors import ValidationError


def parse_proposal_id(value: object) -> int:
    """Return ``value`` as a positive integer id or raise ``ValidationError``."""

    if isinstance(value, bool):
        raise ValidationError(f"Invalid proposal id: {value!r}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise ValidationError(f"Invalid proposal id: {value!r}")
    if parsed <= 0:
        raise ValidationError(f"Invalid proposal id: {value!r}")
    return parsed


def parse_proposal_ids(values: object) -> list[int]:
    """De-duplicate ``values`` preserving order, dropping malformed entries.

    Raises ``ValidationError`` when ``values`` is not a collection of ids or
    when none of them is usable.
    """

    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValidationError("A list of proposal ids is required")

    seen: set[int] = set()
    parsed: list[int] = []
    for value in values:
        try:
            proposal_id = parse_proposal_id(value)
        except ValidationError:
            continue
        if proposal_id in seen:
            continue
        seen.add(proposal_id)
        parsed.append(proposal_id)

    if not parsed:
        raise ValidationError("No valid proposal ids")
    return parsed
