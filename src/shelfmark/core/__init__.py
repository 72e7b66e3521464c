"""Catalog record model, enrichment pipeline and query engine."""

from .classifier import classify_subjects
from .errors import (
    CatalogError,
    Forbidden,
    InvalidIsbn,
    NotFound,
    TransportFailure,
    ValidationFailure,
)
from .fetcher import BookFetcher, extract_published_year
from .isbn import normalize_isbn
from .merge import merge_enrichment
from .models import BibliographicRecord, BookRecord, DraftRecord
from .query import FilterCriteria, filter_books, search_admin
from .service import CatalogService
from .session import Role, Session, require_admin
from .store import CatalogStore, HttpCatalogStore, InMemoryCatalogStore
from .validation import validate_record, validation_error
from .vocabulary import CATEGORIES, DEFAULT_CATEGORY, Category

__all__ = [
    "BibliographicRecord",
    "BookFetcher",
    "BookRecord",
    "CATEGORIES",
    "CatalogError",
    "CatalogService",
    "CatalogStore",
    "Category",
    "DEFAULT_CATEGORY",
    "DraftRecord",
    "FilterCriteria",
    "Forbidden",
    "HttpCatalogStore",
    "InMemoryCatalogStore",
    "InvalidIsbn",
    "NotFound",
    "Role",
    "Session",
    "TransportFailure",
    "ValidationFailure",
    "classify_subjects",
    "extract_published_year",
    "filter_books",
    "merge_enrichment",
    "normalize_isbn",
    "require_admin",
    "search_admin",
    "validate_record",
    "validation_error",
]
