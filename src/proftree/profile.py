# -*- encoding: utf-8 -*-
# @File   : profile.py
# @Time   : 2024/10/14 01:12:58
# @Author : Kariko Lin

import logging
from typing import Sequence

from .abstract import ConfigSource
from .consts import NO_STRINGS, YES_STRINGS, IterFlag
from .errors import BadBoolean, BadInteger, NoRelation
from .iterator import NodeIterator
from .source import FileSource

__all__ = ['Profile']

_MISSING = object()


class Profile:
    """An ordered chain of config sources, the first one wins.

        ```python
        prof = Profile.from_files('/etc/krb5.conf', '~/.krb5.conf')
        prof.get_values(['realms', 'EXAMPLE.COM', 'kdc'])
        ```
    """

    def __init__(self, *sources: ConfigSource) -> None:
        self._sources = list(sources)
        for this, after in zip(self._sources, self._sources[1:]):
            this.next = after
        if self._sources:
            self._sources[-1].next = None

    @classmethod
    def from_files(cls, *filenames: str, encoding: str | None = None) -> 'Profile':
        """Load every readable file as a source, in the given order.

        Unreadable ones are skipped with a warning.
        Syntax errors are NOT skipped.
        """
        sources: list[ConfigSource] = []
        for i in filenames:
            try:
                sources.append(FileSource(i, encoding))
            except OSError as e:
                logging.warning(f"Profile file skipped:\n  {e}")
        return cls(*sources)

    @property
    def sources(self) -> Sequence[ConfigSource]:
        return tuple(self._sources)

    def refresh(self, force: bool = False) -> list[ConfigSource]:
        """Reload the file sources changed on disk. Returns the reloaded."""
        return [
            i for i in self._sources
            if isinstance(i, FileSource) and i.refresh(force)
        ]

    def iterate(
        self, names: Sequence[str], flags: IterFlag = IterFlag.NONE
    ) -> NodeIterator:
        return NodeIterator(
            self._sources[0] if self._sources else None, names, flags)

    def get_values(self, names: Sequence[str]) -> list[str]:
        """All relation values at `names`, across every source in order."""
        with self.iterate(names, IterFlag.RELATIONS_ONLY) as it:
            ret = [i.value for i in it]
        if not ret:
            raise NoRelation('.'.join(names))
        return ret  # type: ignore[return-value]

    def get_value(self, names: Sequence[str], default=_MISSING) -> str:
        """The first relation value at `names`."""
        with self.iterate(names, IterFlag.RELATIONS_ONLY) as it:
            for i in it:
                return i.value  # type: ignore[return-value]
        if default is _MISSING:
            raise NoRelation('.'.join(names))
        return default

    def get_boolean(self, names: Sequence[str], default=_MISSING) -> bool:
        val = self.get_value(names, None)
        if val is None:
            if default is _MISSING:
                raise NoRelation('.'.join(names))
            return default
        if val.lower() in YES_STRINGS:
            return True
        if val.lower() in NO_STRINGS:
            return False
        raise BadBoolean(f'{".".join(names)} = {val}')

    def get_integer(self, names: Sequence[str], default=_MISSING) -> int:
        val = self.get_value(names, None)
        if val is None:
            if default is _MISSING:
                raise NoRelation('.'.join(names))
            return default
        try:
            return int(val, 10)
        except ValueError as e:
            raise BadInteger(f'{".".join(names)} = {val}') from e

    def get_subsection_names(self, names: Sequence[str]) -> list[str]:
        """Names of the subsections inside the section at `names`."""
        return self.__list_names(names, IterFlag.SECTIONS_ONLY)

    def get_relation_names(self, names: Sequence[str]) -> list[str]:
        """Names of the relations inside the section at `names`."""
        return self.__list_names(names, IterFlag.RELATIONS_ONLY)

    def __list_names(self, names: Sequence[str], kind: IterFlag) -> list[str]:
        ret: dict[str, None] = {}
        with self.iterate(names, IterFlag.LIST_SECTION | kind) as it:
            for i in it:
                ret.setdefault(i.name, None)
        return list(ret.keys())

    def __repr__(self) -> str:
        return f'<Profile {[str(getattr(i, "name", i)) for i in self._sources]}>'
