# src/sitescan_report/core/errors.py


class SiteScanError(Exception):
    """Base class for fatal errors that abort a report run."""


class LoadError(SiteScanError):
    """The snapshot could not be fetched, read, or parsed."""


class IntegrityError(SiteScanError):
    """
    The snapshot violates an assumption the report depends on,
    e.g. the www cohort does not have exactly one home page.
    """


class InsufficientDataWarning(UserWarning):
    """A metric was evaluated over an empty cohort; the cell will be NaN."""
