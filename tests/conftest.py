"""Test setup for proftree."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from proftree import ProfileNode, TreeSource, create_node  # noqa: E402


def build_tree(spec: dict) -> ProfileNode:
    """Build a tree from nested dicts.

    A list value adds one relation per item, a dict adds a subsection,
    and the key ``"*"`` marks the enclosing section final.
    """
    root = create_node("root")
    _fill(root, spec)
    return root


def _fill(section: ProfileNode, spec: dict) -> None:
    for name, entry in spec.items():
        if name == "*":
            section.final = bool(entry)
        elif isinstance(entry, dict):
            _fill(section.add(name), entry)
        elif isinstance(entry, list):
            for value in entry:
                section.add(name, value)
        else:
            section.add(name, entry)


def chain(*roots: ProfileNode) -> list[TreeSource]:
    sources = [TreeSource(r, name=f"src{i}") for i, r in enumerate(roots)]
    for this, after in zip(sources, sources[1:]):
        this.next = after
    return sources


@pytest.fixture
def section() -> ProfileNode:
    return create_node("section")


@pytest.fixture
def tree_factory():
    return build_tree


@pytest.fixture
def chain_factory():
    return chain
