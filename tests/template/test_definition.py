from __future__ import annotations

import pytest

from helmls.errors import MalformedTemplateError
from helmls.template import Location, check_blocks, resolve_definition, token_at

ENV_TEMPLATE = [
    "{{- range $key, $val := .Values.env }}",
    "- name: {{ $key }}",
    "  {{- if $val }}",
    "  value: {{ $val }}",
    "  {{- end }}",
    "{{- end }}",
    "other: {{ $val }}",
]


def test_resolves_range_value_on_next_line() -> None:
    lines = ["{{ range $k, $v := .Values.list }}", "{{ $v }}"]
    assert resolve_definition(lines, 1, 3) == Location(0, 13, 15)


def test_cursor_anywhere_inside_the_token() -> None:
    lines = ["{{ range $k, $v := .Values.list }}", "{{ $v }}"]
    assert resolve_definition(lines, 1, 4) == Location(0, 13, 15)
    assert resolve_definition(lines, 1, 5) == Location(0, 13, 15)


def test_resolves_key_and_value_inside_nested_block() -> None:
    assert resolve_definition(ENV_TEMPLATE, 1, 12) == Location(0, 10, 14)
    assert resolve_definition(ENV_TEMPLATE, 3, 13) == Location(0, 16, 20)


def test_variable_is_not_found_after_range_end() -> None:
    assert resolve_definition(ENV_TEMPLATE, 6, 11) is None


def test_undefined_variable_is_not_found() -> None:
    assert resolve_definition(["{{ $undefined }}"], 0, 4) is None


def test_shadowed_variable_resolves_to_innermost_declaration() -> None:
    lines = [
        "{{ range $i, $item := .Values.outer }}",
        "{{ range $j, $item := $item.children }}",
        "{{ $item }}",
        "{{ end }}",
        "{{ $item }}",
        "{{ end }}",
    ]
    assert resolve_definition(lines, 2, 4) == Location(1, 13, 18)
    assert resolve_definition(lines, 4, 4) == Location(0, 13, 18)


def test_outer_variable_visible_in_else_branch() -> None:
    lines = [
        "{{ range $k, $v := .Values.list }}",
        "{{ if $v }}",
        "{{ else }}",
        "{{ $k }}",
    ]
    assert resolve_definition(lines, 3, 3) == Location(0, 9, 11)


def test_declaration_on_cursor_line_is_ignored() -> None:
    assert resolve_definition(["{{ range $k, $v := .x }}{{ $v }}"], 0, 27) is None


def test_missing_token_boundary_is_not_found() -> None:
    lines = ["{{ range $k, $v := .x }}", "{{ $v}}", "$v"]
    assert resolve_definition(lines, 1, 3) is None
    assert resolve_definition(lines, 2, 1) is None


def test_cursor_past_document_is_not_found() -> None:
    assert resolve_definition(["{{ $v }}"], 5, 0) is None


def test_unbalanced_prefix_is_malformed() -> None:
    with pytest.raises(MalformedTemplateError):
        resolve_definition(["{{ end }}", "{{ $v }}"], 1, 3)


def test_token_at_boundaries() -> None:
    assert token_at("{{ $v }}", 3) == (3, 5)
    assert token_at("{{ $v }}", 5) == (3, 5)
    assert token_at("{{ $v }}", 0) is None
    assert token_at("{{  }}", 3) is None
    assert token_at("a\t$v\tb", 3) == (2, 4)
    assert token_at("{{ $v }}", 99) is None


def test_check_blocks_reports_unclosed_blocks() -> None:
    problems = check_blocks(["{{ if .a }}", "{{ with .b }}", "{{ end }}"])
    assert len(problems) == 1
    assert problems[0].line == 0
    assert problems[0].column == 3
    assert "never closed" in problems[0].message


def test_check_blocks_reports_first_stray_end() -> None:
    problems = check_blocks(["{{ end }}", "{{ end }}"])
    assert len(problems) == 1
    assert problems[0].line == 0


def test_check_blocks_accepts_balanced_document() -> None:
    assert check_blocks(ENV_TEMPLATE) == []


def test_define_before_range_does_not_break_resolution() -> None:
    lines = [
        '{{- define "x" -}}',
        "{{- end }}",
        "{{ range $k, $v := .a }}",
        "{{ $v }}",
    ]
    assert resolve_definition(lines, 3, 3) == Location(2, 13, 15)


def test_check_blocks_reports_unclosed_define() -> None:
    problems = check_blocks(['{{ define "x" }}', "body"])
    assert len(problems) == 1
    assert "define block is never closed" in problems[0].message
