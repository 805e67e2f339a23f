import pytest

from envview.config.models import EngineConfig
from envview.engine.grammar import TagKind
from envview.engine.parsers import (
    assignment_key,
    parse_allowed_values,
    parse_assignments,
    parse_modes,
    parse_template,
    parse_value_constraints,
    serialize_assignment,
    strip_comment_markers,
)
from envview.engine.sections import sectionize


def _groups(lines, kind, config):
    return sectionize(lines, config).of(kind)


def test_parse_assignments_follows_dotenv_conventions() -> None:
    parsed = parse_assignments([
        'A="quoted value"',
        "B='single'",
        "C=plain # trailing comment",
        "export D=exported",
        "E=",
        "# comment",
        "",
    ])
    assert parsed == {"A": "quoted value", "B": "single", "C": "plain", "D": "exported", "E": ""}


def test_parse_assignments_does_not_interpolate() -> None:
    parsed = parse_assignments(["HOST=example.com", "URL=https://${HOST}/api"])
    assert parsed["URL"] == "https://${HOST}/api"


def test_parse_assignments_accepts_crlf_terminator() -> None:
    assert parse_assignments(["A=1", "B=2"], "\r\n") == {"A": "1", "B": "2"}


def test_assignment_key() -> None:
    assert assignment_key("PORT=3000") == "PORT"
    assert assignment_key("  export HOST = x") == "HOST"
    assert assignment_key("# PORT=3000") is None
    assert assignment_key("") is None


@pytest.mark.parametrize(
    "value",
    [
        "plain",
        "",
        "with spaces inside",
        "  padded  ",
        "a # not a comment",
        '"already quoted"',
        "'single'",
        "it's",
        "back\\slash",
        "multi\nline",
        "tab\tinside",
        "https://example.com/?q=1&r=2",
        "héllo",
    ],
)
def test_serialize_assignment_round_trips(value: str) -> None:
    line = serialize_assignment("KEY", value)
    assert "\n" not in line
    assert parse_assignments([line]) == {"KEY": value}


def test_serialize_assignment_leaves_simple_values_unquoted() -> None:
    assert serialize_assignment("PORT", "8080") == "PORT=8080"


def test_strip_comment_markers() -> None:
    assert strip_comment_markers("  // PORT=1", "/#") == "PORT=1"
    assert strip_comment_markers("## a, b", "/#") == "a, b"
    assert strip_comment_markers("PORT=1", "/#") == "PORT=1"


def test_parse_template_values_and_positions(sample_lines, engine_config: EngineConfig) -> None:
    result = parse_template(_groups(sample_lines, TagKind.TEMPLATE, engine_config), engine_config)
    assert result.tag_index == 1
    assert list(result.values.items()) == [
        ("APP_NAME", "demo"),
        ("PORT", "3000"),
        ("LOG_LEVEL", "info"),
        ("API_URL", "https://api.dev.example.com"),
    ]
    assert result.line_indices == {"APP_NAME": 2, "PORT": 3, "LOG_LEVEL": 4, "API_URL": 5}
    assert result.diagnostics == []


def test_parse_template_without_tag_is_empty(engine_config: EngineConfig) -> None:
    result = parse_template([], engine_config)
    assert result.values == {}
    assert result.tag_index is None


def test_parse_template_reports_unassigned_keys(engine_config: EngineConfig) -> None:
    lines = ["// @env-template", "A=1", "FLAG", "B=2"]
    result = parse_template(_groups(lines, TagKind.TEMPLATE, engine_config), engine_config)
    assert result.values == {"A": "1", "B": "2"}
    assert [d.kind for d in result.diagnostics] == ["unassigned_key"]


def test_parse_template_ignores_duplicate_blocks(engine_config: EngineConfig) -> None:
    lines = ["// @env-template", "A=1", "// @env-template", "B=2"]
    result = parse_template(_groups(lines, TagKind.TEMPLATE, engine_config), engine_config)
    assert result.values == {"A": "1"}
    assert [d.kind for d in result.diagnostics] == ["duplicate_template"]
    assert result.diagnostics[0].line_index == 2


def test_parse_modes(sample_lines, engine_config: EngineConfig) -> None:
    result = parse_modes(_groups(sample_lines, TagKind.MODE, engine_config), engine_config)
    assert list(result.modes) == [("env", "dev"), ("env", "prod"), ("logging", "quiet")]
    prod = result.modes[("env", "prod")]
    assert dict(prod.values) == {
        "PORT": "8080",
        "API_URL": "https://api.example.com",
        "APP_NAME": "renamed",
    }
    assert prod.identifier == "env.prod"
    assert prod.line_index == 11


def test_parse_modes_skips_comment_words(engine_config: EngineConfig) -> None:
    lines = ["// @env-mode:env.prod", "// production settings", "// PORT=8080", "// LOG"]
    result = parse_modes(_groups(lines, TagKind.MODE, engine_config), engine_config)
    assert dict(result.modes[("env", "prod")].values) == {"PORT": "8080"}


def test_parse_modes_discards_only_malformed_group(engine_config: EngineConfig) -> None:
    lines = [
        "// @env-mode:broken",
        "// PORT=1",
        "// @env-mode:env.prod",
        "// PORT=8080",
    ]
    result = parse_modes(_groups(lines, TagKind.MODE, engine_config), engine_config)
    assert list(result.modes) == [("env", "prod")]
    assert [d.kind for d in result.diagnostics] == ["malformed_tag"]
    assert result.diagnostics[0].line_index == 0


def test_parse_modes_merges_repeated_groups(engine_config: EngineConfig) -> None:
    lines = [
        "// @env-mode:env.prod",
        "// PORT=8080",
        "// HOST=a",
        "// @env-mode:env.prod",
        "// HOST=b",
    ]
    result = parse_modes(_groups(lines, TagKind.MODE, engine_config), engine_config)
    assert dict(result.modes[("env", "prod")].values) == {"PORT": "8080", "HOST": "b"}


def test_parse_allowed_values() -> None:
    assert parse_allowed_values(["// a", "// b"], "/#") == ("a", "b")
    assert parse_allowed_values(["// a, b,", "//", "# c ,d"], "/#") == ("a", "b", "c", "d")
    assert parse_allowed_values([], "/#") == ()


def test_value_group_with_listed_values_defaults_to_select(engine_config: EngineConfig) -> None:
    lines = ["// @env-value:(MODE)", "// a", "// b"]
    result = parse_value_constraints(_groups(lines, TagKind.VALUE, engine_config), engine_config)
    constraint = result.constraints["MODE"]
    assert constraint.kind == "select"
    assert constraint.values == ("a", "b")
    assert constraint.flags == frozenset()


def test_value_group_without_values_defaults_to_text(engine_config: EngineConfig) -> None:
    lines = ["// @env-value:NAME(disabled)"]
    result = parse_value_constraints(_groups(lines, TagKind.VALUE, engine_config), engine_config)
    constraint = result.constraints["NAME"]
    assert constraint.kind == "text"
    assert constraint.disabled
    assert not constraint.constant


def test_value_group_explicit_kind_wins(engine_config: EngineConfig) -> None:
    lines = ["// @env-value:DEBUG(boolean)", "// true, false"]
    result = parse_value_constraints(_groups(lines, TagKind.VALUE, engine_config), engine_config)
    assert result.constraints["DEBUG"].kind == "boolean"
    assert result.constraints["DEBUG"].values == ("true", "false")


def test_value_group_attaches_same_record_to_all_keys(engine_config: EngineConfig) -> None:
    lines = ["// @env-value:(HOST,REPLICA_HOST)(select disabled)", "// a.example.com, b.example.com"]
    result = parse_value_constraints(_groups(lines, TagKind.VALUE, engine_config), engine_config)
    assert result.constraints["HOST"] is result.constraints["REPLICA_HOST"]


def test_value_group_malformed_payload_is_reported(engine_config: EngineConfig) -> None:
    lines = ["// @env-value:()", "// a", "// @env-value:B", "// x"]
    result = parse_value_constraints(_groups(lines, TagKind.VALUE, engine_config), engine_config)
    assert list(result.constraints) == ["B"]
    assert [d.kind for d in result.diagnostics] == ["malformed_tag"]
