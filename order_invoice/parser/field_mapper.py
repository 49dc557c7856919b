"""
Field Mapper Module

This module maps normalized order text to named fields using the
declarative rule table in rules.py.

Architecture:
1. Build the rule table from extraction settings
2. Evaluate every rule against the text, independently
3. On a miss, try the rule's alternative, then its fallback
4. Record how each field was obtained (pattern, alternative, fallback)

Why isolation matters:
The flattened text has no schema. Field order, spacing and even presence
vary between orders. One rule failing, or even raising, must never stop
the others from running, so each rule is evaluated inside its own guard
and its fallback is applied on any failure.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from ..config import ExtractionSettings
from .normalizers import format_amount, parse_amount, parse_quantity
from .rules import ExtractionRule, build_rules


# Mutable intermediate: field name -> string value, partially populated
ExtractedFields = dict[str, str]


@dataclass
class ExtractedField:
    """
    Result of extracting a single field from text.
    """
    name: str                           # Field name
    value: Optional[str]                # Extracted or fallback value
    raw_value: str                      # Original matched text
    method: str                         # pattern, alternative, fallback, not_found
    rule: str                           # Rule that produced the value
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if the field has a value (matched or defaulted)."""
        return self.value is not None

    @property
    def is_fallback(self) -> bool:
        return self.method == 'fallback'


class FieldMapper:
    """
    Extracts order fields from normalized text.

    Usage:
        mapper = FieldMapper()
        fields = mapper.extract("Order #1001 15 March 2024 $45.00 × 2")
        print(fields['order_number'], fields['unit_price'])
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        rules: Optional[tuple[ExtractionRule, ...]] = None,
    ):
        """
        Initialize field mapper.

        Args:
            settings: Extraction settings used to build the default rule table
            rules: Explicit rule table (overrides settings)
        """
        self.settings = settings or ExtractionSettings()
        self.rules = rules if rules is not None else build_rules(self.settings)

    def extract(self, text: str) -> ExtractedFields:
        """
        Extract all fields as a plain name -> value mapping.

        Fields whose rule missed without a fallback are absent.
        """
        return {
            result.name: result.value
            for result in self.extract_fields(text)
            if result.is_valid
        }

    def extract_fields(self, text: str) -> list[ExtractedField]:
        """
        Evaluate every rule and return one ExtractedField per field.

        Args:
            text: Normalized order text

        Returns:
            List of ExtractedField objects, in rule table order
        """
        if not text:
            logger.warning("Empty text provided for field extraction; using fallbacks")
            text = ''

        results = []
        for rule in self.rules:
            for result in self.extract_rule(text, rule):
                results.append(result)
                if result.method in ('pattern', 'alternative'):
                    logger.debug(f"Extracted {result.name}: '{result.value}' ({result.method})")
                elif result.is_fallback:
                    logger.debug(f"Fallback for {result.name}: '{result.value}'")
                else:
                    logger.debug(f"No value for {result.name}")
        return results

    def extract_rule(self, text: str, rule: ExtractionRule) -> list[ExtractedField]:
        """
        Evaluate one rule: pattern, then alternative, then fallback.

        Any exception inside the rule is logged and treated as a miss.
        """
        for candidate, method in ((rule, 'pattern'), (rule.alternative, 'alternative')):
            if candidate is None:
                continue
            try:
                matched = self._try_rule(text, candidate)
            except Exception as e:
                logger.warning(f"Rule '{candidate.name}' failed: {e}")
                matched = None
            if matched is not None:
                values, raw_value = matched
                found = [
                    ExtractedField(
                        name=name,
                        value=values[name],
                        raw_value=raw_value,
                        method=method,
                        rule=candidate.name,
                    )
                    for name in rule.fields
                    if name in values
                ]
                return found + self._fallback_fields(rule, exclude=values)

        return self._fallback_fields(rule)

    def _try_rule(
        self,
        text: str,
        rule: ExtractionRule,
    ) -> Optional[tuple[dict[str, str], str]]:
        """
        Match a single rule's pattern and convert its captures.

        Returns (values, matched text), or None when the pattern misses or a
        capture fails validation (empty, unparseable amount, bad quantity).
        """
        match = rule.pattern.search(text)
        if not match:
            return None

        values = {}
        for name, group in rule.groups.items():
            captured = match.group(group)
            if captured is None:
                return None

            value = captured.strip()
            transform = rule.transforms.get(name)
            if transform:
                value = transform(value)

            if name in rule.amounts:
                amount = parse_amount(value)
                if amount is None:
                    logger.debug(f"Rule '{rule.name}': '{value}' is not a valid amount")
                    return None
                value = format_amount(amount)
            elif name in rule.quantities:
                quantity = parse_quantity(value)
                if quantity is None:
                    logger.debug(f"Rule '{rule.name}': '{value}' is not a valid quantity")
                    return None
                value = str(quantity)

            if not value:
                return None
            values[name] = value

        values.update(rule.constants)
        return values, match.group(0)

    def _fallback_fields(
        self,
        rule: ExtractionRule,
        exclude: Optional[dict[str, str]] = None,
    ) -> list[ExtractedField]:
        """Fallback values for every field the rule declares but did not match."""
        exclude = exclude or {}
        fallback = rule.fallback or {}
        results = []
        for name in rule.fields:
            if name in exclude:
                continue
            if name in fallback:
                results.append(ExtractedField(
                    name=name,
                    value=fallback[name],
                    raw_value='',
                    method='fallback',
                    rule=rule.name,
                ))
            else:
                results.append(ExtractedField(
                    name=name,
                    value=None,
                    raw_value='',
                    method='not_found',
                    rule=rule.name,
                    warnings=[f"Could not extract '{name}'"],
                ))
        return results

    def get_extraction_summary(self, results: list[ExtractedField]) -> dict:
        """
        Summarize which fields matched and which fell back.
        """
        matched = [r.name for r in results if r.method in ('pattern', 'alternative')]
        return {
            'total_fields': len(results),
            'matched_count': len(matched),
            'matched': matched,
            'fallbacks': [r.name for r in results if r.is_fallback],
            'missing': [r.name for r in results if not r.is_valid],
            'warnings': [w for r in results for w in r.warnings],
            'fields': {
                r.name: {'value': r.value, 'method': r.method, 'rule': r.rule}
                for r in results
            },
        }


def extract_fields_from_text(
    text: str,
    settings: Optional[ExtractionSettings] = None,
) -> ExtractedFields:
    """
    Convenience function to extract fields from normalized text.
    """
    return FieldMapper(settings=settings).extract(text)
