# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/10/12 20:52:30
# @Author : Kariko Lin

from .consts import ErrorCode


class ProfileError(Exception):
    """Base of everything raised by `proftree`.

    `code` tells what went wrong, and the optional detail tells where.
    Subclasses narrow it down.
    """
    code = ErrorCode.GENERIC

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(
            self.code.value if detail is None
            else f'{self.code.value}: {detail}')


class OutOfMemory(ProfileError, MemoryError):
    code = ErrorCode.NO_MEMORY


class InvalidHandle(ProfileError):
    """A node or iterator got destroyed (or never was one of ours)."""
    code = ErrorCode.MAGIC_NODE

    def __init__(
        self, detail: str | None = None,
        code: ErrorCode = ErrorCode.MAGIC_NODE
    ) -> None:
        self.code = code
        super().__init__(detail)


class NotASection(ProfileError):
    code = ErrorCode.ADD_NOT_SECTION


# only `ProfileNode.verify()` raises these.
class StructureError(ProfileError):
    code = ErrorCode.BAD_LINK_LIST


class SectionWithValue(StructureError):
    code = ErrorCode.SECTION_WITH_VALUE


class BadLinkList(StructureError):
    code = ErrorCode.BAD_LINK_LIST


class BadGroupLevel(StructureError):
    code = ErrorCode.BAD_GROUP_LVL


class BadParentPtr(StructureError):
    code = ErrorCode.BAD_PARENT_PTR


class NotFound(ProfileError, LookupError):
    code = ErrorCode.NO_RELATION


class NoRelation(NotFound):
    code = ErrorCode.NO_RELATION


class NoSection(NotFound):
    code = ErrorCode.NO_SECTION


class BadNameSet(ProfileError, ValueError):
    """Empty node name, or a path the iterator cannot work with."""
    code = ErrorCode.BAD_NAMESET


class BadBoolean(ProfileError, ValueError):
    code = ErrorCode.BAD_BOOLEAN


class BadInteger(ProfileError, ValueError):
    code = ErrorCode.BAD_INTEGER


class ProfileSyntaxError(ProfileError):
    """To record errors when reading profile files."""

    def __init__(
        self, code: ErrorCode,
        lineno: int | None = None, filename: str | None = None
    ) -> None:
        self.code = code
        self.lineno = lineno
        self.filename = filename
        where = None
        if lineno is not None:
            where = f'{filename or "<stream>"}, line {lineno}'
        elif filename is not None:
            where = filename
        super().__init__(where)
