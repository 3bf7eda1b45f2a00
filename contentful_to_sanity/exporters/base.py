"""Base space exporter interface."""

from abc import ABC, abstractmethod
import logging

from ..models.contentful import ExportBundle
from ..models.migration import ExportConfig

logger = logging.getLogger(__name__)


class BaseSpaceExporter(ABC):
    """
    Base class for space exporters.

    Exporters fetch the full content of a Contentful space and return it as
    an ExportBundle. Writing the export file is left to the caller; an
    exporter only writes downloaded asset files, under the configured
    export directory.
    """

    @abstractmethod
    def export(self, config: ExportConfig) -> ExportBundle:
        """
        Export a space.

        Args:
            config: Export configuration

        Returns:
            ExportBundle with every exported collection
        """
        pass
