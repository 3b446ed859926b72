"""Tests for loading policy rules from YAML."""

from __future__ import annotations

from pathlib import Path

import pytest

from texprep.core.resolver import InvalidPolicyConfig
from texprep.io.rules_io import load_rules, load_rules_file, rule_from_dict
from texprep.models.policy import DEFAULT_PLATFORMS, NPOTScale, PolicyRule


class TestRuleFromDict:
    def test_defaults(self) -> None:
        rule = rule_from_dict({}, default_name="base")
        assert rule == PolicyRule(name="base")
        assert rule.platform_patterns == DEFAULT_PLATFORMS
        assert rule.max_texture_size == 4096
        assert rule.npot_scale is NPOTScale.TO_NEAREST
        assert rule.compression_quality == 50

    def test_name_from_data_wins(self) -> None:
        assert rule_from_dict({"name": "explicit"}, default_name="stem").name == "explicit"

    def test_single_string_becomes_tuple(self) -> None:
        rule = rule_from_dict({"platform_patterns": "Android"})
        assert rule.platform_patterns == ("Android",)

    def test_enum_names(self) -> None:
        rule = rule_from_dict({"npot_scale": "ToSmaller", "compression_quality": "Fast"})
        assert rule.npot_scale is NPOTScale.TO_SMALLER
        assert rule.compression_quality == 0

    def test_npot_none_string(self) -> None:
        assert rule_from_dict({"npot_scale": "None"}).npot_scale is NPOTScale.NONE

    def test_numeric_quality(self) -> None:
        assert rule_from_dict({"compression_quality": 75}).compression_quality == 75

    def test_unknown_npot(self) -> None:
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            rule_from_dict({"name": "r", "npot_scale": "Sideways"})
        assert exc_info.value.field == "npot_scale"

    def test_bad_number(self) -> None:
        with pytest.raises(InvalidPolicyConfig):
            rule_from_dict({"max_texture_size": "huge"})

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            (False, False),
            ("false", False),
            ("no", False),
            ("Off", False),
            ("", False),
            ("yes", True),
            ("ON", True),
            (1, True),
            (0, False),
        ],
    )
    def test_bool_coercion(self, value: object, expected: bool) -> None:
        rule = rule_from_dict({"force_preprocess": value, "force_linear": value})
        assert rule.force_preprocess is expected
        assert rule.force_linear is expected

    @pytest.mark.parametrize("value", ["maybe", 2, 0.5, None, ["true"]])
    def test_bad_bool(self, value: object) -> None:
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            rule_from_dict({"name": "r", "enable_read_write": value})
        assert exc_info.value.field == "enable_read_write"

    def test_whole_float_size_accepted(self) -> None:
        assert rule_from_dict({"max_texture_size": 1024.0}).max_texture_size == 1024
        assert rule_from_dict({"max_texture_size": "2048"}).max_texture_size == 2048

    @pytest.mark.parametrize("value", [1000.7, float("inf"), float("nan"), "1e400"])
    def test_fractional_or_non_finite_size_rejected(self, value: object) -> None:
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            rule_from_dict({"name": "r", "max_texture_size": value})
        assert exc_info.value.field == "max_texture_size"

    def test_non_string_pattern_rejected(self) -> None:
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            rule_from_dict({"name": "r", "platform_patterns": ["Android", 1, None]})
        assert exc_info.value.field == "platform_patterns"

    def test_not_a_mapping(self) -> None:
        with pytest.raises(InvalidPolicyConfig):
            rule_from_dict(["Android"], default_name="oops")

    def test_unknown_keys_ignored(self) -> None:
        rule = rule_from_dict({"name": "r", "colour": "blue"})
        assert rule.name == "r"


class TestLoadRules:
    def test_load_rules_key(self, rules_file: str) -> None:
        rules = load_rules(rules_file)
        assert [r.name for r in rules] == ["mobile", "desktop"]
        mobile = rules[0]
        assert mobile.platform_patterns == ("Android", "iOS")
        assert mobile.skip_format_patterns == ("ASTC",)
        assert mobile.native_res_multiplier == 0.5
        assert mobile.compression_quality == 100
        assert mobile.npot_scale is NPOTScale.TO_LARGER
        assert rules[1].force_linear

    def test_single_mapping_uses_file_stem(self, tmp_path: Path) -> None:
        path = tmp_path / "Mobile_UI.yaml"
        path.write_text("platform_patterns: [iOS]\nmax_texture_size: 512\n")
        rules = load_rules_file(path)
        assert len(rules) == 1
        assert rules[0].name == "Mobile_UI"
        assert rules[0].max_texture_size == 512

    def test_unnamed_list_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "set.yml"
        path.write_text("- sort_order: 1\n- sort_order: 2\n")
        assert [r.name for r in load_rules(path)] == ["set[0]", "set[1]"]

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_rules(path) == []

    def test_directory_sorted(self, tmp_path: Path) -> None:
        root = tmp_path / "rules"
        (root / "nested").mkdir(parents=True)
        (root / "b.yml").write_text("name: b\n")
        (root / "a.yaml").write_text("name: a\n")
        (root / "nested" / "c.yml").write_text("name: c\n")
        (root / "notes.txt").write_text("name: ignored\n")
        assert [r.name for r in load_rules(root)] == ["a", "b", "c"]

    def test_invalid_pattern_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("name: bad\nplatform_patterns: ['[unclosed']\n")
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            load_rules(path)
        assert exc_info.value.rule_name == "bad"

    def test_invalid_pattern_loaded_without_validation(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yml"
        path.write_text("name: bad\nplatform_patterns: ['[unclosed']\n")
        rules = load_rules(path, validate=False)
        assert rules[0].platform_patterns == ("[unclosed",)

    def test_unparseable_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yml"
        path.write_text("rules: [unterminated\n")
        with pytest.raises(InvalidPolicyConfig):
            load_rules(path)

    def test_quoted_booleans_keep_skip_enabled(self, tmp_path: Path) -> None:
        path = tmp_path / "quoted.yml"
        path.write_text(
            "name: quoted\n"
            "skip_format_patterns: [ASTC]\n"
            "force_preprocess: 'false'\n"
            "force_linear: 'no'\n"
        )
        (rule,) = load_rules(path)
        assert rule.force_preprocess is False
        assert rule.force_linear is False

    @pytest.mark.parametrize("value", [".inf", ".nan"])
    def test_non_finite_multiplier_rejected(self, tmp_path: Path, value: str) -> None:
        path = tmp_path / "mult.yml"
        path.write_text(f"name: mult\nnative_res_multiplier: {value}\n")
        with pytest.raises(InvalidPolicyConfig) as exc_info:
            load_rules(path)
        assert exc_info.value.field == "native_res_multiplier"

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.yml")
