"""Export orchestration and the export, schema and dataset actions."""

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigurationError, ExportDirectoryError
from .exporters.base import BaseSpaceExporter
from .exporters.contentful_exporter import ContentfulSpaceExporter
from .models.contentful import ExportBundle
from .models.migration import (
    DatasetOptions,
    ExportConfig,
    MigrationRun,
    MigrationStatus,
    SchemaOptions,
)
from .models.sanity import SanityDocumentDefinition
from .services.dataset_converter import DatasetConverter, write_ndjson
from .services.schema_mapper import SchemaMapper
from .services.schema_writer import write_schemas

logger = logging.getLogger(__name__)


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Create a directory and its parents, like `mkdir -p`.

    Raises:
        ExportDirectoryError: If the directory cannot be created
    """
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportDirectoryError(str(directory), e.strerror or str(e)) from e
    return directory


class ExportOrchestrator:
    """
    Runs a space export through an exporter.

    The exporter owns every network call. The orchestrator validates the
    configuration, prepares the export directory, hands `download_assets`
    through and guarantees the `assets` directory exists when assets were
    requested.
    """

    def __init__(self, config: ExportConfig, exporter: Optional[BaseSpaceExporter] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Export configuration
            exporter: Space exporter, the Contentful HTTP exporter by default
        """
        self.config = config
        self.exporter = exporter or ContentfulSpaceExporter()

    def run(self) -> ExportBundle:
        """
        Run the export.

        Returns:
            The exported bundle

        Raises:
            ConfigurationError: If the configuration is invalid
            ExportDirectoryError: If a directory cannot be created
        """
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(details="; ".join(errors))

        config = self.config.normalized()
        ensure_directory(config.export_dir)

        logger.info(
            f"Exporting space {config.space_id} ({config.environment_id}) to {config.export_dir}"
            f"{' with assets' if config.download_assets else ''}"
        )
        started_at = datetime.utcnow()

        bundle = self.exporter.export(config)

        if config.download_assets:
            ensure_directory(config.assets_dir)

        if config.save_file:
            bundle.save_to_json(str(config.export_path))
            logger.info(f"Saved export to {config.export_path}")

        duration = (datetime.utcnow() - started_at).total_seconds()
        logger.info(
            f"Exported {len(bundle.content_types)} content types, {len(bundle.entries)} entries "
            f"and {len(bundle.assets)} assets in {duration:.2f} seconds"
        )
        return bundle


def run_export(config: ExportConfig, exporter: Optional[BaseSpaceExporter] = None) -> ExportBundle:
    """Export a space, see ExportOrchestrator."""
    return ExportOrchestrator(config, exporter).run()


def run_schema(
    export_file: str,
    output_dir: Optional[str] = None,
    options: Optional[SchemaOptions] = None,
) -> List[SanityDocumentDefinition]:
    """
    Map every content type of an export file to a Sanity document definition.

    Args:
        export_file: Path to a saved export
        output_dir: Directory to write the definitions to, if any
        options: Mapping options

    Returns:
        Definitions in export order
    """
    bundle = ExportBundle.from_json_file(export_file)
    mapper = SchemaMapper(options)
    definitions = [mapper.map_content_type(ct, bundle) for ct in bundle.get_content_types()]

    if output_dir:
        write_schemas(definitions, output_dir)

    return definitions


def run_dataset(
    export_file: str,
    output_file: Optional[str] = None,
    options: Optional[DatasetOptions] = None,
) -> List[Dict[str, Any]]:
    """
    Convert the entries of an export file into Sanity documents.

    Args:
        export_file: Path to a saved export
        output_file: NDJSON file to write the documents to, if any
        options: Conversion options

    Returns:
        Documents in export order
    """
    bundle = ExportBundle.from_json_file(export_file)
    documents = DatasetConverter(bundle, options).convert()

    if output_file:
        write_ndjson(documents, output_file)

    return documents


class MigrationOrchestrator:
    """
    Orchestrates a complete migration.

    Handles:
    - Exporting the space
    - Mapping content types to Sanity schemas
    - Converting entries to a Sanity dataset
    - Progress tracking and reporting
    """

    def __init__(
        self,
        config: ExportConfig,
        schema_dir: Optional[str] = None,
        dataset_file: Optional[str] = None,
        schema_options: Optional[SchemaOptions] = None,
        dataset_options: Optional[DatasetOptions] = None,
        exporter: Optional[BaseSpaceExporter] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Export configuration; the export file is always saved
            schema_dir: Output directory for schemas, `<export_dir>/schemas` by default
            dataset_file: Output NDJSON file, `<export_dir>/dataset.ndjson` by default
            schema_options: Schema mapping options
            dataset_options: Dataset conversion options
            exporter: Space exporter
        """
        self.config = replace(config, save_file=True)
        export_dir = Path(config.export_dir)
        self.schema_dir = schema_dir or str(export_dir / "schemas")
        self.dataset_file = dataset_file or str(export_dir / "dataset.ndjson")
        self.schema_options = schema_options or SchemaOptions()
        self.dataset_options = dataset_options or DatasetOptions()
        self.exporter = exporter

        if config.download_assets and not self.dataset_options.assets_dir:
            self.dataset_options = replace(self.dataset_options, assets_dir=str(config.assets_dir))

        self.run: Optional[MigrationRun] = None

    def run_migration(self) -> MigrationRun:
        """
        Run export, schema and dataset in sequence.

        Returns:
            MigrationRun with results; a failed phase stops the run
        """
        self.run = MigrationRun(
            space_id=self.config.space_id,
            environment_id=self.config.environment_id,
        )
        self.run.started_at = datetime.utcnow()

        try:
            logger.info("=== PHASE 1: EXPORT ===")
            self.run.status = MigrationStatus.EXPORTING
            self._run_export()

            logger.info("=== PHASE 2: SCHEMA ===")
            self.run.status = MigrationStatus.MAPPING
            self._run_schema()

            logger.info("=== PHASE 3: DATASET ===")
            self.run.status = MigrationStatus.CONVERTING
            self._run_dataset()

            self.run.status = MigrationStatus.COMPLETED
            logger.info("=== MIGRATION COMPLETED ===")

        except Exception as e:
            logger.error(f"Migration failed during {self.run.status.value}: {e}")
            self.run.errors.append({
                "phase": self.run.status.value,
                "error": str(e),
                "error_type": type(e).__name__,
                "timestamp": datetime.utcnow().isoformat(),
            })
            self.run.status = MigrationStatus.FAILED

        finally:
            self.run.completed_at = datetime.utcnow()
            self._save_report()

        return self.run

    def _run_export(self):
        step = self.run.add_step("Export space")
        step.started_at = datetime.utcnow()
        try:
            bundle = run_export(self.config, self.exporter)
            self.run.export_file = str(self.config.normalized().export_path)
            step.items_processed = len(bundle.content_types) + len(bundle.entries) + len(bundle.assets)
            step.items_succeeded = step.items_processed
            step.status = MigrationStatus.COMPLETED
        except Exception as e:
            step.status = MigrationStatus.FAILED
            step.errors.append({"error": str(e)})
            raise
        finally:
            step.completed_at = datetime.utcnow()

    def _run_schema(self):
        step = self.run.add_step("Map content types")
        step.started_at = datetime.utcnow()
        try:
            definitions = run_schema(self.run.export_file, self.schema_dir, self.schema_options)
            self.run.schema_files = [str(Path(self.schema_dir) / f"{d.name}.json") for d in definitions]
            step.items_processed = len(definitions)
            step.items_succeeded = len(definitions)
            step.status = MigrationStatus.COMPLETED
        except Exception as e:
            step.status = MigrationStatus.FAILED
            step.errors.append({"error": str(e)})
            raise
        finally:
            step.completed_at = datetime.utcnow()

    def _run_dataset(self):
        step = self.run.add_step("Convert entries")
        step.started_at = datetime.utcnow()
        try:
            bundle = ExportBundle.from_json_file(self.run.export_file)
            converter = DatasetConverter(bundle, self.dataset_options)
            documents = converter.convert()
            write_ndjson(documents, self.dataset_file)

            self.run.dataset_file = self.dataset_file
            step.items_processed = len(bundle.entries)
            step.items_succeeded = len(documents)
            step.items_failed = len(bundle.entries) - len(documents)
            step.warnings = converter.warnings
            step.status = MigrationStatus.COMPLETED
        except Exception as e:
            step.status = MigrationStatus.FAILED
            step.errors.append({"error": str(e)})
            raise
        finally:
            step.completed_at = datetime.utcnow()

    def _save_report(self):
        """Save the migration report next to the export."""
        try:
            logs_dir = ensure_directory(Path(self.config.export_dir) / "logs")
        except ExportDirectoryError as e:
            logger.error(f"Cannot save migration report: {e}")
            return

        filepath = logs_dir / f"migration_report_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.json"
        with open(filepath, 'w') as f:
            json.dump(self.run.to_dict(), f, indent=2, default=str)
        logger.info(f"Saved migration report to {filepath}")


def run_batch(
    config: ExportConfig,
    schema_dir: Optional[str] = None,
    dataset_file: Optional[str] = None,
    schema_options: Optional[SchemaOptions] = None,
    dataset_options: Optional[DatasetOptions] = None,
    exporter: Optional[BaseSpaceExporter] = None,
) -> MigrationRun:
    """Run export, schema and dataset in sequence, see MigrationOrchestrator."""
    orchestrator = MigrationOrchestrator(
        config,
        schema_dir=schema_dir,
        dataset_file=dataset_file,
        schema_options=schema_options,
        dataset_options=dataset_options,
        exporter=exporter,
    )
    return orchestrator.run_migration()
