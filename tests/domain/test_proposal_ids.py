from __future__ import annotations

import pytest

from schedsync.domain.approval import parse_proposal_id, parse_proposal_ids
from schedsync.domain.errors import ValidationError


def test_parse_proposal_id_accepts_ints_and_digit_strings() -> None:
    assert parse_proposal_id(3) == 3
    assert parse_proposal_id(" 12 ") == 12


@pytest.mark.parametrize("value", [0, -1, "0", "1e3", "٣", True, 2.0, b"1"])
def test_parse_proposal_id_rejects(value: object) -> None:
    with pytest.raises(ValidationError):
        parse_proposal_id(value)


def test_parse_proposal_ids_dedupes_and_drops_malformed() -> None:
    assert parse_proposal_ids(["3", 1, "x", 3, None, "1", 2]) == [3, 1, 2]


def test_parse_proposal_ids_accepts_any_iterable() -> None:
    assert parse_proposal_ids(iter((5, 4))) == [5, 4]
