"""Map free-text subject tags onto the catalog category vocabulary."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .vocabulary import DEFAULT_CATEGORY, Category

# First match wins. "Historical fiction" resolves to Fiction, and so does
# "non-fiction" since it contains "fiction".
CATEGORY_RULES: list[tuple[tuple[str, ...], Category]] = [
    (("fiction", "novel"), Category.FICTION),
    (("science", "scientific"), Category.SCIENCE),
    (("history", "historical"), Category.HISTORY),
    (("technology", "computer", "programming"), Category.TECHNOLOGY),
    (("art", "music", "design"), Category.ARTS),
    (("non-fiction", "biography", "autobiography"), Category.NON_FICTION),
]


def subject_names(subjects: Iterable[object] | None) -> list[str]:
    """Flatten subjects given as strings or {"name": ...} mappings."""
    names: list[str] = []
    for subject in subjects or []:
        if isinstance(subject, str):
            name = subject
        elif isinstance(subject, Mapping):
            name = subject.get("name") or ""
        else:
            continue
        if isinstance(name, str) and name:
            names.append(name)
    return names


def classify_subjects(subjects: Iterable[object] | None) -> Category:
    """Return the first category whose keywords appear in the subject corpus."""
    corpus = " ".join(name.casefold() for name in subject_names(subjects))
    if not corpus:
        return DEFAULT_CATEGORY
    for keywords, category in CATEGORY_RULES:
        if any(keyword in corpus for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
