# app/core/errors.py

"""
Fatal errors of an import pass.

Per-row problems never raise; they end up in the ImportReport.
"""


class CatalogImportError(Exception):
    """Base class for errors that abort a whole import."""


class SpreadsheetError(CatalogImportError):
    """The uploaded workbook could not be opened or read."""


class ConfigurationError(CatalogImportError):
    """A required setting (e.g. an API credential) is missing."""


class AIMatchError(CatalogImportError):
    """An AI batch request failed or returned an unusable reply."""
