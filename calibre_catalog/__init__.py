"""Application package root.

Read-only catalog layer over a calibre library (metadata.db). Custom column
browsing lives in `calibre_catalog.services.custom_columns`; the Flask
surface in `calibre_catalog.routes`.
"""

__all__ = [
]
