from __future__ import annotations


class DashboardError(Exception):
    """Base class for dashboard failures."""


class LoadError(DashboardError):
    """The dataset could not be fetched, parsed or validated."""


class ExportError(DashboardError):
    """The export artifact could not be produced."""


class MissingKeyWarning(UserWarning):
    """A chart or KPI referenced a label the dataset does not carry."""
