"""
Enrichment merge tests.

The merge layers non-empty external values over the draft and never alters
inventory counts.
"""

import dataclasses

from shelfmark.core.merge import merge_enrichment
from shelfmark.core.models import BibliographicRecord, DraftRecord
from shelfmark.core.validation import validation_error
from shelfmark.core.vocabulary import Category


def external(**changes):
    base = BibliographicRecord(
        isbn="9780441013593",
        title="Dune",
        authors=["Frank Herbert"],
        subjects=["Science fiction", "Deserts"],
        publish_date="1990",
        published_year=1990,
    )
    return dataclasses.replace(base, **changes)


def test_fills_fields(draft):
    merged = merge_enrichment(draft, external())
    assert merged.title == "Dune"
    assert merged.author == "Frank Herbert"
    assert merged.isbn == "9780441013593"
    assert merged.category == Category.FICTION
    assert merged.published_year == 1990
    assert merged.year_inferred is False


def test_inventory_untouched(draft):
    merged = merge_enrichment(draft, external())
    assert merged.total_copies == 5
    assert merged.available_copies == 3


def test_empty_title_keeps_draft(draft):
    assert merge_enrichment(draft, external(title="")).title == "Working title"
    assert merge_enrichment(draft, external(title="   ")).title == "Working title"


def test_authors_joined(draft):
    merged = merge_enrichment(draft, external(authors=["Ann", "", "Bob"]))
    assert merged.author == "Ann, Bob"


def test_no_authors_keeps_draft(draft):
    assert merge_enrichment(draft, external(authors=[])).author == "Someone"


def test_missing_year_keeps_draft(draft):
    merged = merge_enrichment(draft, external(published_year=None))
    assert merged.published_year == 2001


def test_inferred_year_is_flagged(draft):
    merged = merge_enrichment(draft, external(published_year=2024, year_inferred=True))
    assert merged.published_year == 2024
    assert merged.year_inferred is True


def test_no_subjects_resolves_to_others(draft):
    merged = merge_enrichment(draft.copy(category="History"), external(subjects=[]))
    assert merged.category == Category.OTHERS


def test_bad_isbn_keeps_draft(draft):
    merged = merge_enrichment(draft.copy(isbn="1234567890"), external(isbn="not-an-isbn"))
    assert merged.isbn == "1234567890"


def test_isbn_read_only_once_stored(draft):
    stored = draft.copy(id="abc", isbn="1234567890")
    merged = merge_enrichment(stored, external())
    assert merged.isbn == "1234567890"
    assert merged.id == "abc"
    assert merged.title == "Dune"


def test_inputs_not_mutated(draft):
    before = dataclasses.replace(draft)
    ext = external()
    merged = merge_enrichment(draft, ext)
    assert merged is not draft
    assert draft == before
    assert ext == external()


def test_merge_into_new_draft_is_valid():
    merged = merge_enrichment(DraftRecord.new(), external())
    assert validation_error(merged) is None
