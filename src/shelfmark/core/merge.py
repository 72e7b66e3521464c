"""Fold external bibliographic data into a draft record."""

from __future__ import annotations

from dataclasses import replace

import structlog

from .classifier import classify_subjects
from .errors import InvalidIsbn
from .isbn import normalize_isbn
from .models import BibliographicRecord, DraftRecord

log = structlog.get_logger()


def merge_enrichment(draft: DraftRecord, external: BibliographicRecord) -> DraftRecord:
    """Return a new draft with non-empty external values layered on top.

    Inventory counts are never touched, and the ISBN of a draft that already
    has an id is kept as is.
    """
    changes: dict[str, object] = {}

    title = (external.title or "").strip()
    if title:
        changes["title"] = title

    authors = [a.strip() for a in external.authors if a and a.strip()]
    if authors:
        changes["author"] = ", ".join(authors)

    if draft.isbn_editable and external.isbn:
        try:
            changes["isbn"] = normalize_isbn(external.isbn)
        except InvalidIsbn:
            log.debug("merge_isbn_rejected", isbn=external.isbn)

    changes["category"] = classify_subjects(external.subjects)

    if external.published_year:
        changes["published_year"] = external.published_year
        changes["year_inferred"] = external.year_inferred

    log.debug("draft_enriched", isbn=external.isbn, fields=sorted(changes))
    return replace(draft, **changes)
