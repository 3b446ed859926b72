"""Load policy rules from YAML files or a directory of YAML files."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from texprep.core.resolver import InvalidPolicyConfig, validate_rule
from texprep.models.policy import CompressionQuality, NPOTScale, PolicyRule

logger = logging.getLogger(__name__)

RULE_EXTENSIONS = (".yml", ".yaml")

_TUPLE_FIELDS = ("platform_patterns", "match_paths", "ignore_paths", "skip_format_patterns")
_BOOL_FIELDS = ("force_preprocess", "enable_read_write", "force_linear")


def _as_tuple(name: str, key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                raise InvalidPolicyConfig(
                    name, f"pattern must be a string, got {item!r}", key, pattern=repr(item)
                )
        return tuple(value)
    raise InvalidPolicyConfig(name, f"expected a list of strings, got {type(value).__name__}", key)


_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off", "")


def _as_bool(name: str, key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
    raise InvalidPolicyConfig(name, f"expected a boolean, got {value!r}", key)


def _as_npot(name: str, value: Any) -> NPOTScale:
    if isinstance(value, NPOTScale):
        return value
    text = str(value).strip()
    for member in NPOTScale:
        if text.lower() in (member.value.lower(), member.name.lower()):
            return member
    choices = ", ".join(m.value for m in NPOTScale)
    raise InvalidPolicyConfig(
        name, f"unknown value {value!r} (expected one of {choices})", "npot_scale"
    )


def _as_quality(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidPolicyConfig(
            name, f"expected a number or name, got {value!r}", "compression_quality"
        )
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key in CompressionQuality.__members__:
            return CompressionQuality[key].value
        if key.isdigit():
            return int(key)
    raise InvalidPolicyConfig(name, f"unknown value {value!r}", "compression_quality")


def _as_float(name: str, key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidPolicyConfig(name, f"expected a number, got {value!r}", key)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidPolicyConfig(name, f"expected a number, got {value!r}", key) from exc


def _as_int(name: str, key: str, value: Any) -> int:
    """Whole numbers only; 1024.0 is accepted, 1000.7 and inf are not."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = _as_float(name, key, value)
    if not math.isfinite(number) or not number.is_integer():
        raise InvalidPolicyConfig(name, f"expected a whole number, got {value!r}", key)
    return int(number)


def rule_from_dict(data: Any, default_name: str = "") -> PolicyRule:
    """Build a PolicyRule from a parsed YAML mapping. Unknown keys are ignored."""
    if not isinstance(data, dict):
        raise InvalidPolicyConfig(
            default_name, f"rule must be a mapping, got {type(data).__name__}"
        )

    name = str(data.get("name") or default_name)
    kwargs: dict[str, Any] = {"name": name}

    for key, value in data.items():
        if key == "name":
            continue
        if key not in PolicyRule.__dataclass_fields__:
            logger.debug("Ignoring unknown key %r in rule %r", key, name)
            continue
        if key in _TUPLE_FIELDS:
            kwargs[key] = _as_tuple(name, key, value)
        elif key in _BOOL_FIELDS:
            kwargs[key] = _as_bool(name, key, value)
        elif key == "npot_scale":
            kwargs[key] = _as_npot(name, value)
        elif key == "compression_quality":
            kwargs[key] = _as_quality(name, value)
        elif key in ("sort_order", "max_texture_size"):
            kwargs[key] = _as_int(name, key, value)
        elif key == "native_res_multiplier":
            kwargs[key] = _as_float(name, key, value)
        else:
            kwargs[key] = str(value)

    return PolicyRule(**kwargs)


def _rules_from_document(doc: Any, stem: str) -> list[PolicyRule]:
    if doc is None:
        return []
    if isinstance(doc, dict) and "rules" in doc:
        doc = doc["rules"] or []
    if isinstance(doc, dict):
        return [rule_from_dict(doc, default_name=stem)]
    if isinstance(doc, list):
        if len(doc) == 1:
            return [rule_from_dict(doc[0], default_name=stem)]
        return [rule_from_dict(item, default_name=f"{stem}[{i}]") for i, item in enumerate(doc)]
    raise InvalidPolicyConfig(stem, f"unexpected document type {type(doc).__name__}")


def load_rules_file(path: str | Path) -> list[PolicyRule]:
    """Load the rules in one YAML file, in file order."""
    path = Path(path)
    with open(path) as f:
        try:
            doc = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidPolicyConfig(path.stem, f"unparseable YAML: {exc}") from exc
    return _rules_from_document(doc, path.stem)


def discover_rule_files(root: str | Path) -> list[Path]:
    """YAML files under root, sorted by path."""
    root = Path(root)
    found = [p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in RULE_EXTENSIONS]
    found.sort()
    return found


def load_rules(path: str | Path, validate: bool = True) -> list[PolicyRule]:
    """Load rules from a YAML file or every YAML file in a directory.

    Directory files are read in sorted path order, which fixes the tie-break
    order between rules sharing a sort_order.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules path not found: {path}")

    files = discover_rule_files(path) if path.is_dir() else [path]
    rules: list[PolicyRule] = []
    for file in files:
        loaded = load_rules_file(file)
        logger.debug("Loaded %d rule(s) from %s", len(loaded), file)
        rules.extend(loaded)

    if validate:
        for rule in rules:
            validate_rule(rule)

    if not rules:
        logger.info("No policy rules found in %s", path)
    return rules
