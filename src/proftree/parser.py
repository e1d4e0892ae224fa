# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/13 17:02:36
# @Author : Kariko Lin

"""Profile file readers and writers.

The text format looks like this:

    ```
    # comments start with '#' or ';', on their own lines.
    # a trailing '*' after ']' or '}' marks that section final.
    [libdefaults]
        default_realm = EXAMPLE.COM
    [realms]*
        EXAMPLE.COM = {
            kdc = kdc1.example.com
            kdc = kdc2.example.com
        }*
    ```

Every `[section]` ends up as a child of a node named `root`.
Repeated headers of one section within a file get merged.
"""

from io import StringIO, TextIOBase
from typing import Any
from warnings import warn

import chardet
import yaml

from .abstract import FileHandler
from .consts import ErrorCode
from .errors import ProfileError, ProfileSyntaxError
from .node import ProfileNode, check_node, create_node

__all__ = ['ProfileParser', 'ProfileYamlParser']

ROOT_NAME = 'root'

_ESCAPES = {'n': '\n', 't': '\t', 'b': '\b'}


def _unquote(val: str) -> str:
    ret: list[str] = []
    i = 1
    while i < len(val) and val[i] != '"':
        ch = val[i]
        if ch == '\\' and i + 1 < len(val):
            i += 1
            ch = _ESCAPES.get(val[i], val[i])
        ret.append(ch)
        i += 1
    return ''.join(ret)


def _quote(val: str) -> str:
    if (val and val == val.strip() and not val.startswith('{')
            and not any(c in val for c in '"\\\n\t\b')):
        return val
    val = (val.replace('\\', '\\\\').replace('"', '\\"')
           .replace('\n', '\\n').replace('\t', '\\t').replace('\b', '\\b'))
    return f'"{val}"'


class ProfileParser(FileHandler[ProfileNode]):
    @staticmethod
    def readstream(buf: TextIOBase, filename: str | None = None) -> ProfileNode:
        """Parse a decoded text stream into a new tree.

        If nothing special, just call `self.read()`.
        """
        root = create_node(ROOT_NAME)
        try:
            ProfileParser._parse(root, buf, filename)
        except Exception:
            root.destroy()
            raise
        return root

    @staticmethod
    def _parse(
        root: ProfileNode, buf: TextIOBase, filename: str | None
    ) -> None:
        section: ProfileNode | None = None
        stack: list[ProfileNode] = []  # currently open `{`
        pending: tuple[ProfileNode, str] | None = None  # `name =` w/o value
        lineno = 0

        def error(code: ErrorCode) -> ProfileSyntaxError:
            return ProfileSyntaxError(code, lineno, filename)

        for lineno, line in enumerate(buf, 1):
            line = line.strip()
            if not line or line[0] in '#;':
                continue

            if pending is not None:
                if line != '{':
                    raise error(ErrorCode.MISSING_OBRACE)
                parent, name = pending
                stack.append(parent.add(name))
                pending = None
                continue

            if line[0] == '[':
                if stack:
                    raise error(ErrorCode.SECTION_NOTOP)
                end = line.find(']')
                name = line[1:end].strip() if end > 0 else ''
                if not name:
                    raise error(ErrorCode.SECTION_SYNTAX)
                rest = line[end + 1:].strip()
                if rest not in ('', '*'):
                    raise error(ErrorCode.SECTION_SYNTAX)
                section = next(
                    (p for p in root.children()
                     if p.name == name and p.is_section), None)
                if section is None:
                    section = root.add(name)
                if rest == '*':
                    section.final = True
                continue

            if line[0] == '}':
                if not stack:
                    raise error(ErrorCode.EXTRA_CBRACE)
                rest = line[1:].strip()
                if rest not in ('', '*'):
                    raise error(ErrorCode.RELATION_SYNTAX)
                node = stack.pop()
                if rest == '*':
                    node.final = True
                continue

            parent = stack[-1] if stack else section
            key, sep, val = line.partition('=')
            key, val = key.strip(), val.strip()
            if parent is None or not sep or len(key.split()) != 1:
                raise error(ErrorCode.RELATION_SYNTAX)
            if val == '{':
                stack.append(parent.add(key))
            elif not val:
                # the brace is allowed on the next line.
                pending = (parent, key)
            elif val[0] == '"':
                parent.add(key, _unquote(val))
            else:
                parent.add(key, val)

        if pending is not None:
            raise error(ErrorCode.MISSING_OBRACE)
        if stack:
            raise error(ErrorCode.MISSING_CBRACE)

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec = {'encoding': 'utf-8'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except UnicodeDecodeError:
            buf = raw.decode('gbk')
        return StringIO(buf)

    def read(self) -> ProfileNode:
        """Read the profile file this parser points to.

        When `encoding` isn't given, `open()` falls back to system default,
        and when that goes wrong, `chardet` takes over.
        """
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp, self._fn)
        except UnicodeDecodeError:
            return self.readstream(self._decode_file(self._fn), self._fn)

    @staticmethod
    def dumps(root: ProfileNode, *, indent: str = '\t',
              blank_lines: int = 1) -> str:
        check_node(root)
        lines: list[str] = []
        for p in root.children():
            if not p.is_section:
                warn(f'Relation "{p.name}" is outside of any section, '
                     'it cannot be written and will be dropped.')
                continue
            if lines:
                lines.extend([''] * blank_lines)
            lines.append(f'[{p.name}]' + ('*' if p.final else ''))
            ProfileParser._dump_section(p, 1, indent, lines)
        return '\n'.join(lines) + '\n' if lines else ''

    @staticmethod
    def _dump_section(
        section: ProfileNode, depth: int, indent: str, lines: list[str]
    ) -> None:
        # an explicit stack, as `_parse` has no limit on nesting either.
        stack = [(section, section.children(), depth)]
        while stack:
            this, kids, level = stack[-1]
            p = next(kids, None)
            if p is None:
                stack.pop()
                if stack:  # the outermost one is a `[section]`.
                    lines.append(
                        f'{indent * (level - 1)}}}' + ('*' if this.final else ''))
                continue
            pad = indent * level
            if len(p.name.split()) != 1 or '=' in p.name:
                warn(f'"{p.name}" in [{this.name}] '
                     'will not read back as the same name.')
            if p.is_section:
                lines.append(f'{pad}{p.name} = {{')
                stack.append((p, p.children(), level + 1))
            else:
                lines.append(f'{pad}{p.name} = {_quote(p.value)}')

    def write(
        self, instance: ProfileNode, *,
        indent: str = '\t', blank_lines: int = 1
    ) -> None:
        """Save the tree under `instance` to the profile file."""
        text = self.dumps(instance, indent=indent, blank_lines=blank_lines)
        with open(self._fn, 'w', encoding=self._codec or 'utf-8') as fp:
            fp.write(text)

    def __str__(self) -> str:
        return f'profile: {super().__str__()} ({self._codec})'


class ProfileYamlParser(FileHandler[ProfileNode]):
    """YAML form of a profile tree.

        ```yaml
        realms:
        - EXAMPLE.COM:
          - '*': true
            kdc: [kdc1.example.com, kdc2.example.com]
        ```

    Each name maps to the list of its entries in order;
    a string is a relation, a mapping is a subsection,
    and the key `'*'` marks that subsection final.
    Scalars other than strings (say `yes`, `42`) come back as their `str()`.
    """

    FINAL_KEY = '*'

    def __init__(self, filename: str, encoding: str = 'utf-8') -> None:
        super().__init__(filename, encoding)

    @classmethod
    def to_data(cls, section: ProfileNode) -> dict[str, Any]:
        check_node(section)
        ret: dict[str, Any] = {}
        stack = [(section, ret)]
        while stack:
            node, out = stack.pop()
            if node.final:
                out[cls.FINAL_KEY] = True
            for p in node.children():
                if p.is_section:
                    sub: dict[str, Any] = {}
                    stack.append((p, sub))
                    out.setdefault(p.name, []).append(sub)
                else:
                    out.setdefault(p.name, []).append(p.value)
        return ret

    @classmethod
    def from_data(cls, data: Any, section: ProfileNode | None = None) -> ProfileNode:
        if section is None:
            section = create_node(ROOT_NAME)
        stack = [(data, section)]
        while stack:
            this, node = stack.pop()
            if this is None:
                continue
            if not isinstance(this, dict):
                raise ProfileSyntaxError(ErrorCode.BAD_YAML)
            for name, entries in this.items():
                if name == cls.FINAL_KEY:
                    node.final = bool(entries)
                    continue
                if not isinstance(entries, list):
                    entries = [entries]
                for i in entries:
                    if i is None or isinstance(i, dict):
                        stack.append((i, node.add(str(name))))
                    else:
                        node.add(str(name), str(i))
        return section

    def read(self) -> ProfileNode:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            try:
                data = yaml.load(fp, yaml.FullLoader)
            except yaml.YAMLError as e:
                raise ProfileSyntaxError(
                    ErrorCode.BAD_YAML, filename=self._fn) from e
        root = create_node(ROOT_NAME)
        try:
            return self.from_data(data, root)
        except ProfileError:
            root.destroy()
            raise

    def write(self, instance: ProfileNode) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(
                self.to_data(instance), fp,
                allow_unicode=True, sort_keys=False)
