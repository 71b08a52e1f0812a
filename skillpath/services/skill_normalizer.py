from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from skillpath.data.vocabulary import EXCLUDED_TOOLS, SKILL_CATEGORIES, SYNONYMS


_NOISE_RE = re.compile(r"[._]")
_WS_RE = re.compile(r"\s+")

# Longest multi-word phrase considered when re-joining a whitespace-split list.
_MAX_PHRASE_TOKENS = 3


class SkillNormalizer:
    """Canonicalizes free-text skill mentions.

    `normalize` folds case and punctuation noise, resolves synonyms and drops excluded
    tooling. The result is idempotent: `normalize(normalize(x)) == normalize(x)`.
    """

    def __init__(
        self,
        synonyms: Mapping[str, str] | None = None,
        excluded: Iterable[str] | None = None,
        categories: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        raw_synonyms = SYNONYMS if synonyms is None else synonyms
        self._excluded = frozenset(EXCLUDED_TOOLS if excluded is None else excluded)
        self._synonyms: dict[str, str] = {}
        for alias, canonical in raw_synonyms.items():
            key = self.clean(alias)
            if key:
                self._synonyms[key] = self.clean(canonical)
        # Canonical values resolve to themselves so a second pass is a no-op.
        for canonical in list(self._synonyms.values()):
            self._synonyms.setdefault(canonical, canonical)
        self._categories = {
            name: tuple(members) for name, members in (SKILL_CATEGORIES if categories is None else categories).items()
        }
        # Longest keys first for greedy prefix matching.
        self._prefix_keys = sorted(self._synonyms, key=len, reverse=True)
        self._phrases = {key for key in self._synonyms if " " in key}

    @staticmethod
    def clean(raw: str) -> str:
        if not raw:
            return ""
        value = _NOISE_RE.sub("", raw.lower().strip())
        return _WS_RE.sub(" ", value).strip()

    def is_excluded(self, raw: str) -> bool:
        cleaned = self.clean(raw)
        return cleaned in self._excluded or cleaned.replace(" ", "") in self._excluded

    def normalize(self, raw: str) -> str:
        """Return the canonical skill for `raw`, or "" for empty input and excluded tools."""

        value = self.clean(raw)
        if not value or value in self._excluded:
            return ""

        canonical = self._synonyms.get(value)
        if canonical is not None:
            return "" if canonical in self._excluded else canonical

        no_spaces = value.replace(" ", "")
        canonical = self._synonyms.get(no_spaces)
        if canonical is not None:
            return "" if canonical in self._excluded else canonical

        if no_spaces in self._excluded:
            return ""
        return value

    def normalize_many(self, skills: Iterable[str]) -> list[str]:
        out: list[str] = []
        seen: set[str] = set()
        for skill in skills:
            norm = self.normalize(skill)
            if len(norm) > 1 and norm not in seen:
                seen.add(norm)
                out.append(norm)
        return out

    def split_concatenated(self, text: str) -> list[str]:
        """Greedy longest-prefix split of a delimiter-free run such as "javascriptpythonreact".

        Unmatched characters are skipped one at a time.
        """

        remaining = self.clean(text or "")
        found: list[str] = []
        i = 0
        while i < len(remaining):
            for key in self._prefix_keys:
                if remaining.startswith(key, i):
                    found.append(key)
                    i += len(key)
                    break
            else:
                i += 1
        return found

    def _split_whitespace(self, text: str) -> list[str]:
        tokens = [t for t in _WS_RE.split(text.strip()) if t]
        out: list[str] = []
        i = 0
        while i < len(tokens):
            for size in range(min(_MAX_PHRASE_TOKENS, len(tokens) - i), 1, -1):
                phrase = self.clean(" ".join(tokens[i : i + size]))
                if phrase in self._phrases:
                    out.append(phrase)
                    i += size
                    break
            else:
                out.append(tokens[i])
                i += 1
        return out

    def _split_text(self, text: str) -> list[str]:
        tokens = _WS_RE.split(text.strip())
        if "," in text:
            return [part.strip() for part in text.split(",")]
        if len(text) > 30 and len(tokens) < 10:
            return self.split_concatenated(text)
        if " " in text.strip() and len(tokens) >= 3:
            return self._split_whitespace(text)
        if len(text) > 20:
            return self.split_concatenated(text)
        return [text]

    def parse_and_normalize(self, value: str | Iterable[str] | None) -> set[str]:
        if not value:
            return set()
        if isinstance(value, str):
            parts = self._split_text(value)
        else:
            parts = [p for p in value if isinstance(p, str)]
        return set(self.normalize_many(p for p in parts if p))

    def category(self, skill: str) -> str | None:
        norm = self.normalize(skill)
        for name, members in self._categories.items():
            if norm in members:
                return name
        return None

    def are_equivalent(self, first: str, second: str) -> bool:
        return self.normalize(first) == self.normalize(second)

    def synonyms(self, skill: str) -> list[str]:
        norm = self.normalize(skill)
        if not norm:
            return []
        return sorted(alias for alias, canonical in self._synonyms.items() if canonical == norm and alias != norm)

    def known_terms(self) -> list[str]:
        """Every alias and canonical spelling, longest first."""

        return [key for key in self._prefix_keys if self._synonyms[key] not in self._excluded]

    def vocabulary(self) -> set[str]:
        """Canonical skills known to the synonym table, excluded tools removed."""

        return {c for c in self._synonyms.values() if c not in self._excluded}
