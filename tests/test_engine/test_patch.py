import pytest

from envview.config.models import EngineConfig
from envview.engine import load
from envview.engine.errors import PatchAlignmentError
from envview.engine.grammar import TagKind
from envview.engine.model import PatchInstruction
from envview.engine.patch import apply_patch, generate_patch, locate_tag


def test_locate_tag(sample_lines, engine_config: EngineConfig) -> None:
    assert locate_tag(sample_lines, engine_config) == 1
    assert locate_tag(sample_lines, engine_config, TagKind.MODE) == 7
    assert locate_tag(sample_lines, engine_config, TagKind.OVERWRITTEN) is None


def test_locate_tag_skips_malformed_lines(engine_config: EngineConfig) -> None:
    assert locate_tag(["// @env-oops", "// @env-template"], engine_config) == 1


def test_generate_patch_replaces_lines_after_tag(sample_lines, engine_config: EngineConfig) -> None:
    template = {
        "APP_NAME": "demo",
        "PORT": "8080",
        "LOG_LEVEL": "warn",
        "API_URL": "https://api.example.com",
    }
    patch = generate_patch(sample_lines, template, config=engine_config)
    assert patch == [
        PatchInstruction(2, "APP_NAME=demo"),
        PatchInstruction(3, "PORT=8080"),
        PatchInstruction(4, "LOG_LEVEL=warn"),
        PatchInstruction(5, "API_URL=https://api.example.com"),
    ]


def test_generate_patch_quotes_values_when_needed() -> None:
    lines = ["// @env-template", "GREETING=hi"]
    (instruction,) = generate_patch(lines, {"GREETING": "hello # world"}, tag_index=0)
    assert instruction.new_text == 'GREETING="hello # world"'


def test_generate_patch_for_empty_template() -> None:
    assert generate_patch(["no tags"], {}) == []


def test_generate_patch_refuses_misaligned_lines() -> None:
    lines = ["// @env-template", "A=1", "# note", "B=2"]
    with pytest.raises(PatchAlignmentError) as exc_info:
        generate_patch(lines, {"A": "1", "B": "3"}, tag_index=0)
    assert exc_info.value.key == "B"
    assert exc_info.value.line_index == 2


def test_generate_patch_refuses_reordered_lines() -> None:
    lines = ["// @env-template", "B=2", "A=1"]
    with pytest.raises(PatchAlignmentError):
        generate_patch(lines, {"A": "1", "B": "2"}, tag_index=0)


def test_generate_patch_without_tag_raises(engine_config: EngineConfig) -> None:
    with pytest.raises(PatchAlignmentError):
        generate_patch(["A=1"], {"A": "2"}, config=engine_config)


def test_generate_patch_requires_config_to_locate_tag() -> None:
    with pytest.raises(ValueError, match="tag_index or config"):
        generate_patch(["// @env-template", "A=1"], {"A": "2"})


def test_generate_patch_locates_tag_with_custom_config() -> None:
    config = EngineConfig(comment_prefix="#", tag_namespace="cfg")
    lines = ["# @env-template", "# @cfg-template", "A=1"]
    assert generate_patch(lines, {"A": "2"}, config=config) == [PatchInstruction(2, "A=2")]


def test_apply_patch_changes_only_targeted_lines(sample_lines, engine_config: EngineConfig) -> None:
    model = load(sample_lines)
    template = dict(model.template, PORT="8080")
    patched = apply_patch(sample_lines, generate_patch(sample_lines, template, config=engine_config))

    assert len(patched) == len(sample_lines)
    changed = [i for i, (old, new) in enumerate(zip(sample_lines, patched)) if old != new]
    # API_URL loses its redundant quotes
    assert changed == [3, 5]
    assert patched[3] == "PORT=8080"
    assert load(patched).template == template


def test_patched_document_round_trips(sample_lines, engine_config: EngineConfig) -> None:
    model = load(sample_lines)
    template = dict(model.template, APP_NAME="a value with spaces", LOG_LEVEL="")
    patched = apply_patch(sample_lines, generate_patch(sample_lines, template, config=engine_config))
    assert load(patched).template == template
