"""Keyword matching logic (core domain)."""

from __future__ import annotations

from typing import Sequence, Tuple


def fold_case(text: str) -> str:
    """Locale-independent case fold used for case-insensitive matching."""

    return text.casefold()


def matches(line: str, keywords: Sequence[str], case_sensitive: bool) -> bool:
    """Return True if any keyword is a substring of ``line``.

    Keywords are tried in the given order and the first hit wins.
    """

    if not keywords:
        return False

    if case_sensitive:
        return any(keyword in line for keyword in keywords)

    folded = fold_case(line)
    return any(fold_case(keyword) in folded for keyword in keywords)


class KeywordMatcher:
    """Pre-folds keywords once so the per-line check stays cheap."""

    def __init__(self, keywords: Sequence[str], case_sensitive: bool) -> None:
        self.case_sensitive = case_sensitive
        self._keywords: Tuple[str, ...] = tuple(
            keywords if case_sensitive else (fold_case(keyword) for keyword in keywords)
        )

    @property
    def keywords(self) -> Tuple[str, ...]:
        return self._keywords

    def __call__(self, line: str) -> bool:
        if not self._keywords:
            return False

        text = line if self.case_sensitive else fold_case(line)
        for keyword in self._keywords:
            if keyword in text:
                return True
        return False
