"""
Contentful to Sanity migration.

Exports a Contentful space, maps its content types to Sanity document
schemas and converts its entries to a Sanity NDJSON dataset.
"""

__version__ = "0.1.0"
