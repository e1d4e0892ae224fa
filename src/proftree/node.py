# -*- encoding: utf-8 -*-
# @File   : node.py
# @Time   : 2024/10/12 21:03:44
# @Author : Kariko Lin

"""The profile parse tree.

Each node is either a *section* (`value is None`, may own children)
or a *relation* (a string value, never any children).

Children of a section are kept in a doubly linked sibling chain,
sorted by name, while same-named entries stay in insertion order.
e.g. adding `b, a, b, c` gives `a, b(1st), b(2nd), c`.
"""

from typing import Iterator

from .consts import NODE_MAGIC, ErrorCode
from .errors import (
    BadGroupLevel,
    BadLinkList,
    BadNameSet,
    BadParentPtr,
    InvalidHandle,
    NoRelation,
    NoSection,
    NotASection,
    OutOfMemory,
    SectionWithValue,
)

__all__ = ['ProfileNode', 'create_node', 'check_node']


class ProfileNode:
    """A single element of the profile tree.

    `parent`, `first_child`, `prev`, `next` and `group_level`
    are maintained by `add()` and `remove()`.
    Touch them by hand only if you are going to `verify()` afterwards.
    """

    def __init__(self, name: str, value: str | None = None) -> None:
        _check_name(name)
        self._magic = NODE_MAGIC
        self._name = name
        self._value = value
        self._final = False
        self.group_level = 0
        self.parent: ProfileNode | None = None
        self.first_child: ProfileNode | None = None
        self.prev: ProfileNode | None = None
        self.next: ProfileNode | None = None

    @property
    def name(self) -> str:
        check_node(self)
        return self._name

    @property
    def value(self) -> str | None:
        check_node(self)
        return self._value

    @property
    def is_section(self) -> bool:
        check_node(self)
        return self._value is None

    @property
    def alive(self) -> bool:
        return self._magic == NODE_MAGIC

    @property
    def final(self) -> bool:
        """Whether matching this section stops searching further sources."""
        check_node(self)
        return self._final

    @final.setter
    def final(self, flag: bool) -> None:
        check_node(self)
        self._final = bool(flag)

    def get_parent(self) -> 'ProfileNode | None':
        check_node(self)
        return self.parent

    def children(self) -> Iterator['ProfileNode']:
        check_node(self)
        p = self.first_child
        while p is not None:
            # fetch next first, in case the caller removes `p`.
            nxt = p.next
            yield p
            p = nxt

    def destroy(self) -> None:
        """Release this node and all of its descendants.

        Calling it again on a destroyed node does nothing.
        Note it does *not* unlink the node from its parent, see `remove()`.
        """
        if self._magic != NODE_MAGIC:
            return
        # no recursion, the parser accepts any nesting depth.
        stack = [self]
        while stack:
            node = stack.pop()
            child = node.first_child
            while child is not None:
                if child._magic == NODE_MAGIC:
                    stack.append(child)
                child = child.next
            node.first_child = node.parent = node.prev = node.next = None
            node._magic = 0

    def add(self, name: str, value: str | None = None) -> 'ProfileNode':
        """Add a relation (or a subsection, if `value` is None) here.

        The new node goes *after* the last child whose name
        equals or precedes `name`, since order matters.
        """
        check_node(self)
        _check_name(name)
        if self._value is not None:
            raise NotASection(f'[{self._name}] holds a value')

        last, p = None, self.first_child
        while p is not None:
            if p._name > name:
                break
            last, p = p, p.next

        new = create_node(name, value)
        new.group_level = self.group_level + 1
        new.parent = self
        new.prev, new.next = last, p
        if p is not None:
            p.prev = new
        if last is not None:
            last.next = new
        else:
            self.first_child = new
        return new

    def remove(self, name: str, section: bool = False) -> int:
        """Remove every direct child named `name` of the requested kind.

        Returns how many nodes got removed. Raises `NoSection`
        (or `NoRelation`) if nothing of that name and kind is here.
        """
        check_node(self)
        doomed = [
            p for p in self.children()
            if p._name == name and p.is_section == section
        ]
        if not doomed:
            raise (NoSection if section else NoRelation)(
                f'{name!r} in [{self._name}]')
        for p in doomed:
            self._unlink(p)
            p.destroy()
        return len(doomed)

    def _unlink(self, p: 'ProfileNode') -> None:
        if p.prev is not None:
            p.prev.next = p.next
        else:
            self.first_child = p.next
        if p.next is not None:
            p.next.prev = p.prev
        p.prev = p.next = p.parent = None

    def verify(self) -> None:
        """Check the representation invariants of the whole subtree.

        Raises the first violation found. If anything is raised here,
        there's a bug somewhere, most probably in this module.
        """
        check_node(self)
        stack = [self]
        while stack:
            node = stack.pop()
            if node._value is not None and node.first_child is not None:
                raise SectionWithValue(repr(node))

            kids: list[ProfileNode] = []
            last, p = None, node.first_child
            while p is not None:
                check_node(p)
                if p.prev is not last:
                    raise BadLinkList(f'{p!r} in {node!r}')
                if last is not None and last.next is not p:
                    raise BadLinkList(f'{last!r} in {node!r}')
                if p.group_level != node.group_level + 1:
                    raise BadGroupLevel(repr(p))
                if p.parent is not node:
                    raise BadParentPtr(repr(p))
                kids.append(p)
                last, p = p, p.next
            # depth first, in sibling order.
            stack.extend(reversed(kids))

    def __repr__(self) -> str:
        if self._magic != NODE_MAGIC:
            return f'<dead node {self._name!r}>'
        if self._value is not None:
            return f'{self._name} = {self._value!r}'
        return '[%s]%s { .level = %d }' % (
            self._name, '*' if self._final else '', self.group_level)


def create_node(name: str, value: str | None = None) -> ProfileNode:
    try:
        return ProfileNode(name, value)
    except MemoryError as e:
        raise OutOfMemory(f'creating node {name!r}') from e


def _check_name(name: object) -> None:
    if not isinstance(name, str) or not name:
        raise BadNameSet(f'bad node name {name!r}')


def check_node(node: ProfileNode | None) -> None:
    if not isinstance(node, ProfileNode) or node._magic != NODE_MAGIC:
        raise InvalidHandle(repr(node), ErrorCode.MAGIC_NODE)
