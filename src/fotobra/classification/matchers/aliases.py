"""Keyword-group alias rules resolving discipline, service and work-front."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

from ..lexicon import load_alias_rules
from ..normalize import normalize_text
from ..schemas import FIELDS, AliasMatch, AliasRule

LOGGER = logging.getLogger(__name__)

__all__ = ["AliasRuleMatcher", "apply_alias_rules", "build_haystack"]


def build_haystack(*parts: Optional[str]) -> str:
    """Normalise and space-join every non-empty text source."""

    return " ".join(token for token in (normalize_text(part) for part in parts) if token)


class AliasRuleMatcher:
    """Evaluate the static alias table against a normalised haystack.

    A rule fires when every token of ``match`` is a substring of the haystack.
    For each field the highest ``priority`` rule that targets it wins; equal
    priorities resolve to the rule declared first. The ordering is made
    explicit by a stable sort on ``(-priority, declaration index)``.
    """

    def __init__(self, rules: Optional[Sequence[AliasRule]] = None) -> None:
        table = tuple(rules) if rules is not None else load_alias_rules()
        indexed = sorted(enumerate(table), key=lambda item: (-item[1].priority, item[0]))
        self._ordered: Tuple[AliasRule, ...] = tuple(rule for _, rule in indexed)

    def __len__(self) -> int:
        return len(self._ordered)

    @staticmethod
    def _fires(rule: AliasRule, haystack: str) -> bool:
        return all(token in haystack for token in rule.match)

    def match_haystack(self, haystack: str) -> AliasMatch:
        """Return the per-field winners for an already normalised haystack."""

        if not haystack:
            return AliasMatch()

        winners: Dict[str, str] = {}
        scores: Dict[str, int] = {}
        rules: Dict[str, Tuple[str, ...]] = {}
        for rule in self._ordered:
            pending = [field for field in FIELDS if field not in winners and rule.target(field)]
            if not pending or not self._fires(rule, haystack):
                continue
            for field in pending:
                winners[field] = rule.target(field)  # type: ignore[assignment]
                scores[field] = rule.priority
                rules[field] = rule.match
            if len(winners) == len(FIELDS):
                break

        result = AliasMatch(
            **winners,
            score=max(scores.values(), default=0),
            field_scores=scores,
            rules=rules,
        )
        if winners:
            LOGGER.debug("aliases.match", extra={"winners": winners, "score": result.score})
        return result

    def apply(
        self,
        folder_path: Optional[str] = None,
        filename: Optional[str] = None,
        ocr_text: Optional[str] = None,
    ) -> AliasMatch:
        return self.match_haystack(build_haystack(folder_path, filename, ocr_text))


_DEFAULT: Dict[str, object] = {"rules": None, "matcher": None}


def _default_matcher() -> AliasRuleMatcher:
    # Rebuilt whenever the configured table changes (tests, FOTOBRA_ALIASES_PATH).
    rules = load_alias_rules()
    if _DEFAULT["rules"] is not rules:
        _DEFAULT["rules"] = rules
        _DEFAULT["matcher"] = AliasRuleMatcher(rules)
    return _DEFAULT["matcher"]  # type: ignore[return-value]


def apply_alias_rules(
    folder_path: Optional[str] = None,
    filename: Optional[str] = None,
    ocr_text: Optional[str] = None,
    *,
    matcher: Optional[AliasRuleMatcher] = None,
) -> AliasMatch:
    """Run the alias table over folder path, filename and OCR text combined."""

    return (matcher or _default_matcher()).apply(folder_path, filename, ocr_text)
