# -*- encoding: utf-8 -*-
# @File   : iterator.py
# @Time   : 2024/10/13 15:27:51
# @Author : Kariko Lin

"""General purpose iterator over every node matching a name path,
merged across a chain of config sources.

Sources are consulted in order. Within a source, results follow
sibling order. A `final` section on the path means
sources after the current one are never consulted.

Sources may get reloaded between two `advance()` calls.
Every source carries a generation counter for that:
once it moves, the iterator drops its node handle,
resolves the path again in the new tree and skips
as many matches as it has already returned from that source.
That is only exact if nothing *before* that point was removed
by the reload. Otherwise an entry may get skipped.
"""

import logging
from enum import Enum, auto
from typing import Iterator, NamedTuple, Sequence

from .abstract import ConfigSource
from .consts import ITER_MAGIC, ErrorCode, IterFlag
from .errors import BadNameSet, InvalidHandle, OutOfMemory
from .node import ProfileNode, check_node

__all__ = ['IterState', 'IterResult', 'NodeIterator']


class IterState(Enum):
    RESOLVING_PATH = auto()
    SCANNING = auto()
    STALE_RECOVERY = auto()
    EXHAUSTED = auto()


class IterResult(NamedTuple):
    node: ProfileNode
    name: str
    value: str | None


class NodeIterator:
    def __init__(
        self,
        source: ConfigSource | None,
        names: Sequence[str] | None,
        flags: IterFlag = IterFlag.NONE
    ) -> None:
        """Iterate `names` across `source` and every source after it.

        Unless `IterFlag.LIST_SECTION` is given, the last name is
        the one to match inside the resolved section, with `""`
        meaning any name. Otherwise all names are sections to walk.
        """
        if names is None:
            raise BadNameSet('no name path given')
        try:
            names = list(names)
        except MemoryError as e:
            raise OutOfMemory('copying the name path') from e
        flags = IterFlag(flags) & ~IterFlag.FINAL_SEEN
        if flags & IterFlag.LIST_SECTION:
            self._path, self._name = names, None
        else:
            if not names:
                raise BadNameSet('a relation name is required')
            self._path, self._name = names[:-1], names[-1] or None

        self._magic = ITER_MAGIC
        self._flags = flags
        self._source = source
        self._generation = 0
        self._node: ProfileNode | None = None
        self._num = 0
        self._skip = 0
        self._state = IterState.RESOLVING_PATH

    @property
    def state(self) -> IterState:
        return self._state

    @property
    def source(self) -> ConfigSource | None:
        return self._source

    @property
    def final_seen(self) -> bool:
        return bool(self._flags & IterFlag.FINAL_SEEN)

    def advance(self) -> IterResult | None:
        """Return the next match, or None once everything is consumed.

        The call returning None also closes the iterator,
        so calling `advance()` again raises `InvalidHandle`.
        """
        if self._magic != ITER_MAGIC:
            raise InvalidHandle(repr(self), ErrorCode.MAGIC_ITERATOR)

        if (self._state is IterState.SCANNING
                and self._source is not None
                and self._source.generation != self._generation):
            self._state = IterState.STALE_RECOVERY

        while True:
            match self._state:
                case IterState.STALE_RECOVERY:
                    self._recover()
                case IterState.RESOLVING_PATH:
                    self._resolve()
                case IterState.SCANNING:
                    if (ret := self._scan()) is not None:
                        return ret
                case IterState.EXHAUSTED:
                    self.close()
                    return None

    def _recover(self) -> None:
        logging.debug(
            f'{self!r}: source reloaded '
            f'(generation {self._generation} -> {self._source.generation}), '
            f'skipping {self._num} returned entries.')
        self._flags &= ~IterFlag.FINAL_SEEN
        self._skip = self._num
        self._node = None
        self._state = IterState.RESOLVING_PATH

    def _resolve(self) -> None:
        if self._source is None or self._flags & IterFlag.FINAL_SEEN:
            self._state = IterState.EXHAUSTED
            return

        section: ProfileNode | None = self._source.root
        for name in self._path:
            for p in section.children():
                if p.name == name and p.is_section:
                    break
            else:
                section = None
                break
            section = p
            if p.final:
                self._flags |= IterFlag.FINAL_SEEN

        if section is None:
            # fine, sources are all optional.
            self._next_source()
            return
        self._generation = self._source.generation
        self._node = section.first_child
        self._state = IterState.SCANNING

    def _qualifies(self, p: ProfileNode) -> bool:
        if self._name is not None and p.name != self._name:
            return False
        if self._flags & IterFlag.SECTIONS_ONLY and not p.is_section:
            return False
        if self._flags & IterFlag.RELATIONS_ONLY and p.is_section:
            return False
        return True

    def _scan(self) -> IterResult | None:
        p = self._node
        while p is not None:
            check_node(p)
            if self._qualifies(p):
                if self._skip <= 0:
                    break
                self._skip -= 1
            p = p.next

        if p is None:
            self._next_source()
            return None

        self._num += 1
        self._node = p.next
        if self._node is None:
            self._next_source()
        return IterResult(p, p.name, p.value)

    def _next_source(self) -> None:
        self._source = self._source.next if self._source else None
        self._node = None
        self._num = self._skip = 0
        self._state = IterState.RESOLVING_PATH

    def close(self) -> None:
        """Release the iterator. Safe to call more than once."""
        if self._magic != ITER_MAGIC:
            return
        self._magic = 0
        self._source = None
        self._node = None
        self._state = IterState.EXHAUSTED

    def __iter__(self) -> Iterator[IterResult]:
        return self

    def __next__(self) -> IterResult:
        if self._magic != ITER_MAGIC:
            raise StopIteration
        ret = self.advance()
        if ret is None:
            raise StopIteration
        return ret

    def __enter__(self) -> 'NodeIterator':
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def __repr__(self) -> str:
        path = [*self._path, self._name or '*']
        return f'<NodeIterator {".".join(path)} ({self._state.name})>'
