"""Tests for the profile text and YAML readers/writers."""

from __future__ import annotations

import io
import textwrap

import pytest

from proftree import (
    ErrorCode,
    ProfileParser,
    ProfileSyntaxError,
    ProfileYamlParser,
    ScanState,
    find_subsection,
    iter_relations,
)

SAMPLE = textwrap.dedent(
    """\
    # site defaults
    [libdefaults]
        default_realm = EXAMPLE.COM
        dns_lookup_kdc = true

    ; realms are final here
    [realms]*
        EXAMPLE.COM = {
            kdc = kdc1.example.com
            kdc = kdc2.example.com
            admin_server = kdc1.example.com
        }*
        OTHER.ORG =
        {
            kdc = "  spaced \\"quoted\\" \\t value"
        }

    [libdefaults]
        forwardable = yes
    """
)


def parse(text: str):
    return ProfileParser.readstream(io.StringIO(text))


def subsection(section, name):
    return find_subsection(section, name, ScanState())[1]


def test_parses_sections_relations_and_final_markers():
    root = parse(SAMPLE)
    root.verify()

    assert [p.name for p in root.children()] == ["libdefaults", "realms"]
    libdefaults = subsection(root, "libdefaults")
    assert list(iter_relations(libdefaults)) == [
        ("default_realm", "EXAMPLE.COM"),
        ("dns_lookup_kdc", "true"),
        ("forwardable", "yes"),
    ]

    realms = subsection(root, "realms")
    assert realms.final
    example = subsection(realms, "EXAMPLE.COM")
    assert example.final
    assert [v for _, v in iter_relations(example, "kdc")] == [
        "kdc1.example.com", "kdc2.example.com"]
    assert example.group_level == 2


def test_quoted_values_and_brace_on_next_line():
    realms = subsection(parse(SAMPLE), "realms")
    other = subsection(realms, "OTHER.ORG")
    assert not other.final
    assert list(iter_relations(other)) == [("kdc", '  spaced "quoted" \t value')]


@pytest.mark.parametrize(
    "text, code, lineno",
    [
        ("k = v\n", ErrorCode.RELATION_SYNTAX, 1),
        ("[a\n", ErrorCode.SECTION_SYNTAX, 1),
        ("[]\n", ErrorCode.SECTION_SYNTAX, 1),
        ("[a] junk\n", ErrorCode.SECTION_SYNTAX, 1),
        ("[a]\n  b = {\n  [c]\n", ErrorCode.SECTION_NOTOP, 3),
        ("[a]\n}\n", ErrorCode.EXTRA_CBRACE, 2),
        ("[a]\n  b = {\n  c = d\n", ErrorCode.MISSING_CBRACE, 3),
        ("[a]\n  b =\n  c = d\n", ErrorCode.MISSING_OBRACE, 3),
        ("[a]\n  no equals sign\n", ErrorCode.RELATION_SYNTAX, 2),
    ],
)
def test_syntax_errors(text, code, lineno):
    with pytest.raises(ProfileSyntaxError) as exc:
        parse(text)
    assert exc.value.code is code
    assert exc.value.lineno == lineno


def test_read_and_write_file(tmp_path):
    src = tmp_path / "krb5.conf"
    src.write_text(SAMPLE, encoding="utf-8")
    root = ProfileParser(str(src), "utf-8").read()

    out = tmp_path / "out.conf"
    ProfileParser(str(out)).write(root)
    again = ProfileParser(str(out), "utf-8").read()

    assert ProfileYamlParser.to_data(again) == ProfileYamlParser.to_data(root)
    assert "[realms]*" in out.read_text(encoding="utf-8")


def test_read_falls_back_to_detection(tmp_path):
    src = tmp_path / "gbk.conf"
    text = "[a]\n" + "  k = 中文配置文件的值\n" * 20 + "  note = 这是一个用于测试编码检测的配置文件\n"
    src.write_bytes(text.encode("gbk"))
    root = ProfileParser(str(src), "utf-8").read()
    section = subsection(root, "a")
    assert [v for _, v in iter_relations(section, "k")] == ["中文配置文件的值"] * 20


def test_dumps_quotes_when_needed():
    root = parse("[a]\n  k = \"\"\n  s = \" x\"\n  p = plain\n")
    text = ProfileParser.dumps(root, indent="  ")
    assert '  k = ""' in text
    assert '  s = " x"' in text
    assert "  p = plain" in text


def test_dumps_warns_about_top_level_relations():
    root = parse("[a]\n  k = v\n")
    root.add("loose", "v")
    with pytest.warns(UserWarning):
        text = ProfileParser.dumps(root)
    assert "loose" not in text


def test_yaml_round_trip(tmp_path):
    root = parse(SAMPLE)
    path = tmp_path / "profile.yaml"
    ProfileYamlParser(str(path)).write(root)
    again = ProfileYamlParser(str(path)).read()

    again.verify()
    assert ProfileYamlParser.to_data(again) == ProfileYamlParser.to_data(root)
    realms = subsection(again, "realms")
    assert realms.final
    assert subsection(realms, "EXAMPLE.COM").final


def test_yaml_rejects_non_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ProfileSyntaxError) as exc:
        ProfileYamlParser(str(path)).read()
    assert exc.value.code is ErrorCode.BAD_YAML


def test_yaml_syntax_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("a: [unclosed\n", encoding="utf-8")
    with pytest.raises(ProfileSyntaxError):
        ProfileYamlParser(str(path)).read()


def _deep_text(depth: int, close: bool = True) -> str:
    return (
        "[a]\n" + "n = {\n" * depth + "k = v\n"
        + ("}\n" * depth if close else "")
    )


def test_deep_nesting_round_trips_without_recursion():
    depth = 2000
    root = parse(_deep_text(depth))
    root.verify()

    again = parse(ProfileParser.dumps(root))
    again.verify()

    node = subsection(again, "a")
    for _ in range(depth):
        node = subsection(node, "n")
    assert list(iter_relations(node)) == [("k", "v")]

    rebuilt = ProfileYamlParser.from_data(ProfileYamlParser.to_data(root))
    rebuilt.verify()

    root.destroy()
    assert not root.alive


def test_deep_nesting_syntax_error_cleans_up():
    with pytest.raises(ProfileSyntaxError) as exc:
        parse(_deep_text(2000, close=False))
    assert exc.value.code is ErrorCode.MISSING_CBRACE
