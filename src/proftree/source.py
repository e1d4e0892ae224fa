# -*- encoding: utf-8 -*-
# @File   : source.py
# @Time   : 2024/10/13 19:44:20
# @Author : Kariko Lin

import logging
import os

from .abstract import ConfigSource
from .node import ProfileNode, check_node, create_node
from .parser import ProfileParser

__all__ = ['TreeSource', 'FileSource']


class TreeSource(ConfigSource):
    """A source living in memory only.

    Use `reload()` to swap in a whole new tree.
    """

    def __init__(
        self, root: ProfileNode | None = None, name: str = '<memory>'
    ) -> None:
        super().__init__()
        if root is None:
            root = create_node('root')
        check_node(root)
        self._name = name
        self._root = root
        self._generation = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def root(self) -> ProfileNode:
        return self._root

    @property
    def generation(self) -> int:
        return self._generation

    def reload(self, root: ProfileNode) -> None:
        """Replace the whole tree. The old one gets destroyed."""
        check_node(root)
        old, self._root = self._root, root
        self._generation += 1
        if old is not root:
            old.destroy()
        logging.info(f'{self._name} reloaded, generation {self._generation}.')

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self._name} @{self._generation}>'


class FileSource(TreeSource):
    """A source backed by a profile file on disk.

    Nothing gets re-read until `refresh()` is called.
    """

    def __init__(self, filename: str, encoding: str | None = None) -> None:
        self._parser = ProfileParser(filename, encoding)
        # stat first, so that a write racing with our read
        # gets picked up by the next refresh.
        self._mtime = os.stat(filename).st_mtime_ns
        super().__init__(self._parser.read(), filename)

    @property
    def filename(self) -> str:
        return self._parser.filename

    def refresh(self, force: bool = False) -> bool:
        """Re-read the file if it changed since the last read.

        Returns whether the tree got replaced.
        May raise `OSError` or `ProfileSyntaxError`,
        in which case the current tree stays as is.
        """
        mtime = os.stat(self.filename).st_mtime_ns
        if not force and mtime == self._mtime:
            return False
        root = self._parser.read()
        self._mtime = mtime
        self.reload(root)
        return True
