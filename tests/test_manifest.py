from __future__ import annotations

import pytest

from scripts.reclaim.errors import MalformedRowError, ManifestError
from scripts.reclaim.manifest import parse_manifest
from scripts.reclaim.models import ReclaimRequest


def test_header_is_always_skipped() -> None:
    rows = parse_manifest(["alice-mannequin,bob-real", "carol-mannequin,carol-real"])

    assert [r.request for r in rows] == [
        ReclaimRequest(mannequin_login="carol-mannequin", target_login="carol-real"),
    ]
    assert rows[0].line_number == 2


def test_header_only_manifest_yields_no_rows() -> None:
    assert parse_manifest(["source,target"]) == []


def test_empty_manifest_is_structural_error() -> None:
    with pytest.raises(ManifestError):
        parse_manifest([])


def test_extra_columns_and_whitespace_are_ignored() -> None:
    rows = parse_manifest(["source,target,note", " alice-mannequin , bob-real ,left in 2021"])

    assert rows[0].request == ReclaimRequest(mannequin_login="alice-mannequin", target_login="bob-real")
    assert rows[0].request.mannequin_id is None


def test_quoted_fields_are_unquoted() -> None:
    rows = parse_manifest(["source,target", '"alice-mannequin","bob-real"'])

    assert rows[0].request.target_login == "bob-real"


def test_malformed_rows_are_isolated() -> None:
    rows = parse_manifest([
        "source,target",
        "alice-mannequin",
        "",
        "dave-mannequin,",
        "erin-mannequin,erin-real",
    ])

    assert [r.line_number for r in rows] == [2, 3, 4, 5]
    assert [r.error is not None for r in rows] == [True, True, True, False]
    assert isinstance(rows[0].error, MalformedRowError)
    assert rows[0].error.line_number == 2
    assert rows[3].request.mannequin_login == "erin-mannequin"


def test_oversized_field_fails_only_its_row() -> None:
    rows = parse_manifest(["source,target", "a" * 200_000 + ",b", "alice-mannequin,bob-real"])

    assert len(rows) == 2
    assert isinstance(rows[0].error, MalformedRowError)
    assert rows[0].error.line_number == 2
    assert "field larger than field limit" in rows[0].error.message
    assert rows[1].request == ReclaimRequest(mannequin_login="alice-mannequin", target_login="bob-real")
