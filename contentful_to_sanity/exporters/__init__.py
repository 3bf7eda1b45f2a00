"""Exporters for Contentful spaces."""

from .base import BaseSpaceExporter
from .contentful_exporter import ContentfulSpaceExporter

__all__ = [
    "BaseSpaceExporter",
    "ContentfulSpaceExporter",
]
