"""Texture policy resolution: rule selection and target-settings computation.

Both entry points are pure functions of their inputs. The rule sequence is
caller-owned and never mutated or cached here, so the same rules may be
shared across threads.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Iterable, Optional, Sequence

from texprep.models.policy import AssetContext, PolicyRule
from texprep.models.texture import PlatformOverride, ResolvedSettings, TextureFacts

logger = logging.getLogger(__name__)

Predicate = Callable[[PolicyRule, Optional[AssetContext]], bool]

_PATTERN_FIELDS = ("platform_patterns", "match_paths", "ignore_paths", "skip_format_patterns")


class InvalidPolicyConfig(ValueError):
    """A policy rule is malformed (bad regex, out-of-range value, bad structure)."""

    def __init__(
        self,
        rule_name: str,
        reason: str,
        field: str = "",
        pattern: str | None = None,
    ) -> None:
        self.rule_name = rule_name
        self.reason = reason
        self.field = field
        self.pattern = pattern
        if pattern is not None:
            msg = f"rule {rule_name!r}: invalid pattern {pattern!r} in {field}: {reason}"
        elif field:
            msg = f"rule {rule_name!r}: {field}: {reason}"
        else:
            msg = f"rule {rule_name!r}: {reason}"
        super().__init__(msg)


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n. Returns 0 for n <= 0."""
    if n <= 0:
        return 0
    return 1 << (n - 1).bit_length()


def _compile(rule: PolicyRule, field: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPolicyConfig(rule.name, str(exc), field=field, pattern=pattern) from exc


def _first_match(rule: PolicyRule, field: str, patterns: Iterable[str], text: str) -> str | None:
    """Return the first pattern found in text, compiling lazily in list order."""
    for pattern in patterns:
        if _compile(rule, field, pattern).search(text):
            return pattern
    return None


def path_filter(rule: PolicyRule, context: AssetContext | None) -> bool:
    """Default applicability check on the asset path. No context means applicable."""
    if context is None:
        return True
    path = context.asset_path
    if _first_match(rule, "ignore_paths", rule.ignore_paths, path) is not None:
        return False
    if not rule.match_paths:
        return True
    return _first_match(rule, "match_paths", rule.match_paths, path) is not None


def validate_rule(rule: PolicyRule) -> None:
    """Check every pattern and numeric bound of a rule up front."""
    for field in _PATTERN_FIELDS:
        for pattern in getattr(rule, field):
            _compile(rule, field, pattern)
    if not math.isfinite(rule.native_res_multiplier) or rule.native_res_multiplier < 0:
        raise InvalidPolicyConfig(
            rule.name,
            f"must be a finite number >= 0, got {rule.native_res_multiplier}",
            field="native_res_multiplier",
        )
    if rule.max_texture_size < 1:
        raise InvalidPolicyConfig(
            rule.name, f"must be >= 1, got {rule.max_texture_size}", field="max_texture_size"
        )
    if not 0 <= rule.compression_quality <= 100:
        raise InvalidPolicyConfig(
            rule.name,
            f"must be within 0-100, got {rule.compression_quality}",
            field="compression_quality",
        )
    if not rule.platform_patterns:
        logger.warning("Rule %r has no platform patterns and can never match.", rule.name)


def order_rules(
    rules: Sequence[PolicyRule],
    context: AssetContext | None = None,
    predicate: Predicate | None = None,
) -> list[PolicyRule]:
    """Applicable rules in evaluation order (stable by sort_order)."""
    check = predicate or path_filter
    applicable = [r for r in rules if check(r, context)]
    return sorted(applicable, key=lambda r: r.sort_order)


def select_rule(
    rules: Sequence[PolicyRule],
    facts: TextureFacts,
    context: AssetContext | None = None,
    predicate: Predicate | None = None,
) -> PolicyRule | None:
    """Pick the first applicable rule whose platform patterns match facts.platform_name.

    Rules are stable-sorted by sort_order, so equal orders keep input order.
    Returns None when nothing matches; callers leave the asset untouched.
    """
    for rule in order_rules(rules, context, predicate):
        hit = _first_match(rule, "platform_patterns", rule.platform_patterns, facts.platform_name)
        if hit is not None:
            return rule
    return None


def compute_settings(rule: PolicyRule, facts: TextureFacts) -> ResolvedSettings | None:
    """Compute target import settings, or None if the current format is already acceptable."""
    if not rule.force_preprocess:
        skip = _first_match(
            rule, "skip_format_patterns", rule.skip_format_patterns, facts.current_format_name
        )
        if skip is not None:
            logger.info(
                "Skipping preprocess. Current format matching skip regex: '%s' (%s)",
                skip,
                facts.name,
            )
            return None

    native_size = next_power_of_two(max(facts.native_width, facts.native_height))
    scaled = round(native_size * rule.native_res_multiplier)
    target_size = min(scaled, rule.max_texture_size)
    target_format = rule.rgba_format if facts.has_alpha else rule.rgb_format

    return ResolvedSettings(
        target_size=target_size,
        target_format=target_format,
        compression_quality=int(rule.compression_quality),
        force_linear=rule.force_linear,
        enable_read_write=rule.enable_read_write,
        npot_scale=rule.npot_scale,
        applied_platforms=tuple(rule.platform_patterns),
        rule_name=rule.name,
    )


def resolve(
    rules: Sequence[PolicyRule],
    facts: TextureFacts,
    context: AssetContext | None = None,
    predicate: Predicate | None = None,
) -> ResolvedSettings | None:
    """Select a rule and compute its settings in one step, logging each decision."""
    if not rules:
        logger.info("No policy rules available.")
        return None

    rule = select_rule(rules, facts, context, predicate)
    if rule is None:
        logger.debug("No rule matches platform %r for %s", facts.platform_name, facts.name)
        return None

    logger.info(
        "Processing: %s | Native size: %d | Current format: %s",
        facts.name,
        next_power_of_two(max(facts.native_width, facts.native_height)),
        facts.current_format_name,
    )
    logger.info("Using: %s", rule.name)

    settings = compute_settings(rule, facts)
    if settings is None:
        return None

    if settings.enable_read_write:
        logger.info("Enabling Read/Write.")
    if settings.force_linear:
        logger.info("Forcing linear.")
    logger.info(
        "Setting: %d | Format: %s | %s", settings.target_size, settings.target_format, facts.name
    )
    return settings


def expand_overrides(settings: ResolvedSettings) -> list[PlatformOverride]:
    """One identical override block per platform the rule targets."""
    return [
        PlatformOverride(
            name=platform,
            max_texture_size=settings.target_size,
            format=settings.target_format,
            compression_quality=settings.compression_quality,
        )
        for platform in settings.applied_platforms
    ]
