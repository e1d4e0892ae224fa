# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/09/08 20:22:30
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from .node import ProfileNode

T = TypeVar('T')


class FileHandler(Generic[T], metaclass=ABCMeta):
    def __init__(self, filename: str, encoding: str | None = None) -> None:
        self._fn = filename
        self._codec = encoding

    @property
    def filename(self) -> str:
        return self._fn

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._fn


class ConfigSource(metaclass=ABCMeta):
    """One origin tree in a priority ordered chain of sources.

    Whoever swaps `root` MUST bump `generation`,
    since iterators compare it to tell their node handles went stale.
    """

    def __init__(self) -> None:
        self._next: ConfigSource | None = None

    @property
    @abstractmethod
    def root(self) -> 'ProfileNode':
        raise NotImplementedError

    @property
    @abstractmethod
    def generation(self) -> int:
        raise NotImplementedError

    @property
    def next(self) -> 'ConfigSource | None':
        """The source with the next lower priority."""
        return self._next

    @next.setter
    def next(self, source: 'ConfigSource | None') -> None:
        self._next = source
