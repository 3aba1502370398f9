"""
ReportPager - paginated document export for continuously-rendered reports.

This package turns a cover capture plus one tall detail raster into a
fixed-page document without splitting tables, charts or photo cards
across page boundaries.
"""

__version__ = "0.1.0"
