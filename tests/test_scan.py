"""Tests for the resumable single-section scans."""

from __future__ import annotations

import pytest

from proftree import (
    InvalidHandle,
    NoRelation,
    NoSection,
    ScanState,
    find_relation,
    find_subsection,
    iter_relations,
    iter_subsections,
)


def test_relation_scan_resumes_over_interleaved_siblings(section):
    section.add("a", "noise")
    section.add("x", "1")
    section.add("x")  # a subsection, not a relation
    section.add("w", "noise")
    section.add("x", "2")
    section.add("y", "noise")
    section.add("x", "3")

    state = ScanState()
    got = [find_relation(section, "x", state)]
    while state:
        got.append(find_relation(section, "x", state))

    assert got == [("x", "1"), ("x", "2"), ("x", "3")]
    with pytest.raises(NoRelation):
        find_relation(section, "x", state)


def test_state_looks_ahead(section):
    section.add("x", "1")
    section.add("x", "2")

    state = ScanState()
    find_relation(section, "x", state)
    assert state
    find_relation(section, "x", state)
    assert not state


def test_no_match_clears_state(section):
    section.add("a", "1")
    state = ScanState()
    with pytest.raises(NoRelation):
        find_relation(section, "zzz", state)
    assert not state


def test_wildcard_relation_scan(section):
    section.add("b", "2")
    section.add("a", "1")
    section.add("c")
    assert list(iter_relations(section)) == [("a", "1"), ("b", "2")]


def test_subsection_scan(section):
    first = section.add("realm")
    section.add("realm", "not a section")
    second = section.add("realm")

    state = ScanState()
    assert find_subsection(section, "realm", state) == ("realm", first)
    assert find_subsection(section, "realm", state) == ("realm", second)
    assert not state
    with pytest.raises(NoSection):
        find_subsection(section, "realm", state)


def test_iter_helpers_on_empty_section(section):
    assert list(iter_relations(section, "x")) == []
    assert list(iter_subsections(section, "x")) == []


def test_stale_state_rejected(section):
    section.add("x", "1")
    section.add("x", "2")
    state = ScanState()
    find_relation(section, "x", state)
    section.remove("x")
    with pytest.raises(InvalidHandle):
        find_relation(section, "x", state)


def test_used_up_state_keeps_raising_until_cleared(section):
    section.add("x", "1")
    section.add("x", "2")

    state = ScanState()
    find_relation(section, "x", state)
    find_relation(section, "x", state)
    assert state.exhausted
    for _ in range(2):
        with pytest.raises(NoRelation):
            find_relation(section, "x", state)

    state.clear()
    assert not state.exhausted
    assert find_relation(section, "x", state) == ("x", "1")


def test_missed_scan_marks_state_exhausted(section):
    section.add("a")
    state = ScanState()
    with pytest.raises(NoSection):
        find_subsection(section, "b", state)
    assert state.exhausted
    section.add("b")
    with pytest.raises(NoSection):
        find_subsection(section, "b", state)
