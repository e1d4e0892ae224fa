# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/12 20:38:17
# @Author : Kariko Lin

import logging

from .abstract import ConfigSource, FileHandler
from .consts import ErrorCode, IterFlag
from .errors import (
    BadBoolean,
    BadGroupLevel,
    BadInteger,
    BadLinkList,
    BadNameSet,
    BadParentPtr,
    InvalidHandle,
    NoRelation,
    NoSection,
    NotASection,
    NotFound,
    OutOfMemory,
    ProfileError,
    ProfileSyntaxError,
    SectionWithValue,
    StructureError,
)
from .iterator import IterResult, IterState, NodeIterator
from .node import ProfileNode, create_node
from .parser import ProfileParser, ProfileYamlParser
from .profile import Profile
from .scan import (
    ScanState,
    find_relation,
    find_subsection,
    iter_relations,
    iter_subsections,
)
from .source import FileSource, TreeSource

__all__ = [
    'ProfileNode', 'create_node',
    'ScanState', 'find_relation', 'find_subsection',
    'iter_relations', 'iter_subsections',
    'NodeIterator', 'IterFlag', 'IterState', 'IterResult',
    'ConfigSource', 'TreeSource', 'FileSource', 'FileHandler',
    'ProfileParser', 'ProfileYamlParser', 'Profile',
    'ErrorCode', 'ProfileError', 'OutOfMemory', 'InvalidHandle',
    'NotASection', 'StructureError', 'SectionWithValue', 'BadLinkList',
    'BadGroupLevel', 'BadParentPtr', 'NotFound', 'NoRelation', 'NoSection',
    'BadNameSet', 'BadBoolean', 'BadInteger', 'ProfileSyntaxError',
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
