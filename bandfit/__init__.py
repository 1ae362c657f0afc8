"""Fit a Gaussian band on a linear baseline to workbook columns, compare NG/OK results in charts, and model interactive chart zooming."""

__version__ = "0.1.0"