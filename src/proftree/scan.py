# -*- encoding: utf-8 -*-
# @File   : scan.py
# @Time   : 2024/10/13 00:18:02
# @Author : Kariko Lin

"""Resumable scans over the direct children of one section.

    ```python
    state = ScanState()
    name, value = find_relation(section, 'kdc', state)
    while state:  # there's guaranteed to be another match.
        name, value = find_relation(section, 'kdc', state)
    ```

Once used up, the state keeps raising `NoRelation` / `NoSection`
until `clear()` is called on it.

For a single source this is all you need,
merging several sources is `NodeIterator`'s job.
"""

from typing import Iterator

from .errors import NoRelation, NoSection
from .node import ProfileNode, check_node

__all__ = [
    'ScanState',
    'find_relation', 'find_subsection',
    'iter_relations', 'iter_subsections'
]


class ScanState:
    """Opaque resume point of a scan.

    Fresh, holding the next node known to match, or exhausted.
    Only a state holding a node is truthy.
    """

    def __init__(self) -> None:
        self._node: ProfileNode | None = None
        self._exhausted = False

    def __bool__(self) -> bool:
        return self._node is not None

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def clear(self) -> None:
        """Start over from the first child on the next call."""
        self._node = None
        self._exhausted = False


def _matches(p: ProfileNode, name: str | None, want_section: bool) -> bool:
    return (name is None or p.name == name) and p.is_section == want_section


def _scan(
    section: ProfileNode, name: str | None,
    state: ScanState, want_section: bool
) -> ProfileNode | None:
    check_node(section)
    if state._exhausted:
        return None
    p = state._node
    if p is not None:
        check_node(p)
    else:
        p = section.first_child

    while p is not None and not _matches(p, name, want_section):
        p = p.next
    if p is None:
        state._node = None
        state._exhausted = True
        return None

    # found one. now look ahead for another, so that
    # a non-empty state always means one more match.
    nxt = p.next
    while nxt is not None and not _matches(nxt, name, want_section):
        nxt = nxt.next
    state._node = nxt
    state._exhausted = nxt is None
    return p


def find_relation(
    section: ProfileNode, name: str | None, state: ScanState
) -> tuple[str, str]:
    """Next relation named `name` (any name if None) in `section`.

    Raises `NoRelation` once nothing (more) matches.
    """
    p = _scan(section, name, state, False)
    if p is None:
        raise NoRelation(f'{name!r} in [{section.name}]')
    return p.name, p.value  # type: ignore[return-value]


def find_subsection(
    section: ProfileNode, name: str | None, state: ScanState
) -> tuple[str, ProfileNode]:
    """Next subsection named `name` (any name if None) in `section`.

    Raises `NoSection` once nothing (more) matches.
    """
    p = _scan(section, name, state, True)
    if p is None:
        raise NoSection(f'{name!r} in [{section.name}]')
    return p.name, p


def iter_relations(
    section: ProfileNode, name: str | None = None
) -> Iterator[tuple[str, str]]:
    state = ScanState()
    try:
        item = find_relation(section, name, state)
    except NoRelation:
        return
    yield item
    while state:
        yield find_relation(section, name, state)


def iter_subsections(
    section: ProfileNode, name: str | None = None
) -> Iterator[tuple[str, ProfileNode]]:
    state = ScanState()
    try:
        item = find_subsection(section, name, state)
    except NoSection:
        return
    yield item
    while state:
        yield find_subsection(section, name, state)
