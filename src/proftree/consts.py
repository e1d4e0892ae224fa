# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/12 20:41:09
# @Author : Kariko Lin

from enum import Enum, IntFlag

# live markers. a destroyed node / iterator drops its marker to 0.
NODE_MAGIC = 0x50524F46  # 'PROF'
ITER_MAGIC = 0x49544552  # 'ITER'


class ErrorCode(str, Enum):
    GENERIC = 'Profile library error'
    NO_MEMORY = 'Out of memory'
    MAGIC_NODE = 'Profile node has an invalid magic number'
    MAGIC_ITERATOR = 'Profile iterator has an invalid magic number'
    ADD_NOT_SECTION = 'Attempt to add a relation to a node that is not a section'
    SECTION_WITH_VALUE = 'A profile section header has a non-empty value'
    BAD_LINK_LIST = 'Invalid sibling list in profile section'
    BAD_GROUP_LVL = 'Profile node has the wrong group level'
    BAD_PARENT_PTR = 'Profile node has a bad parent pointer'
    NO_RELATION = 'Profile relation not found'
    NO_SECTION = 'Profile section not found'
    BAD_NAMESET = 'Invalid profile name set'
    SECTION_NOTOP = 'Profile section header not at top level'
    SECTION_SYNTAX = 'Syntax error in profile section header'
    RELATION_SYNTAX = 'Syntax error in profile relation'
    EXTRA_CBRACE = 'Extra closing brace in profile'
    MISSING_OBRACE = 'Missing open brace in profile'
    MISSING_CBRACE = 'Missing close brace at end of profile'
    BAD_YAML = 'Malformed profile YAML document'
    BAD_BOOLEAN = 'Invalid boolean value'
    BAD_INTEGER = 'Invalid integer value'


class IterFlag(IntFlag):
    """Flags accepted by `NodeIterator`.

    - `LIST_SECTION`: every name is a section on the path,
    and everything inside the resolved section gets listed.
    - `SECTIONS_ONLY` / `RELATIONS_ONLY`: filter results by kind.
    """
    NONE = 0
    LIST_SECTION = 0x0001
    SECTIONS_ONLY = 0x0002
    RELATIONS_ONLY = 0x0004
    # internal. set once a `final` section got traversed.
    FINAL_SEEN = 0x0100


# strings accepted by `Profile.get_boolean()`.
YES_STRINGS = ('y', 'yes', 'true', 't', '1', 'on')
NO_STRINGS = ('n', 'no', 'false', 'nil', '0', 'off')
