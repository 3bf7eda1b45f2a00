"""Command line interface for the Contentful to Sanity migration."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .errors import ContentfulToSanityError
from .models.migration import DatasetOptions, ExportConfig, SchemaOptions
from .orchestrator import run_batch, run_dataset, run_export, run_schema

logger = logging.getLogger(__name__)


def _add_export_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--space-id", help="Space ID (default: $CONTENTFUL_SPACE_ID)")
    parser.add_argument("--environment-id", help="Environment ID (default: $CONTENTFUL_ENVIRONMENT or master)")
    parser.add_argument("--management-token", help="Management API token (default: $CONTENTFUL_MANAGEMENT_TOKEN)")
    parser.add_argument("--access-token", help="Delivery API token (default: $CONTENTFUL_ACCESS_TOKEN)")
    parser.add_argument("--export-dir", default=".", help="Directory to export to")
    parser.add_argument("--export-file", help="Name of the export file")
    parser.add_argument("--download-assets", action="store_true", help="Download asset files")
    parser.add_argument("--include-drafts", action="store_true", help="Include draft entries and assets")
    parser.add_argument("--include-archived", action="store_true", help="Include archived entries and assets")
    parser.add_argument("--skip-content-model", action="store_true", help="Skip content types")
    parser.add_argument("--skip-content", action="store_true", help="Skip entries and assets")
    parser.add_argument("--skip-roles", action="store_true", help="Skip roles")
    parser.add_argument("--skip-webhooks", action="store_true", help="Skip webhooks")
    parser.add_argument("--skip-tags", action="store_true", help="Skip tags")
    parser.add_argument("--skip-editor-interfaces", action="store_true", help="Skip editor interfaces")


def _add_mapping_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--keep-markdown", action="store_true", help="Keep markdown text as markdown")
    parser.add_argument("--weak-refs", action="store_true", help="Use weak references")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="contentful-to-sanity",
        description="Migrate a Contentful space to Sanity",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Export a space
    export_parser = subparsers.add_parser("export", help="Export a Contentful space")
    _add_export_arguments(export_parser)
    export_parser.add_argument("--no-save-file", action="store_true", help="Do not write the export file")

    # Map content types
    schema_parser = subparsers.add_parser("schema", help="Map content types to Sanity schemas")
    schema_parser.add_argument("--export-file", required=True, help="Path to a saved export")
    schema_parser.add_argument("--output-dir", help="Directory to write schema files to")
    _add_mapping_arguments(schema_parser)

    # Convert entries
    dataset_parser = subparsers.add_parser("dataset", help="Convert entries to a Sanity NDJSON dataset")
    dataset_parser.add_argument("--export-file", required=True, help="Path to a saved export")
    dataset_parser.add_argument("--output", required=True, help="NDJSON file to write")
    dataset_parser.add_argument("--assets-dir", help="Directory holding downloaded asset files")
    dataset_parser.add_argument("--include-drafts", action="store_true", help="Include draft entries")
    dataset_parser.add_argument("--locale", help="Locale to read field values from")
    _add_mapping_arguments(dataset_parser)

    # Export, map and convert
    batch_parser = subparsers.add_parser("batch", help="Run export, schema and dataset in sequence")
    _add_export_arguments(batch_parser)
    _add_mapping_arguments(batch_parser)
    batch_parser.add_argument("--locale", help="Locale to read field values from")
    batch_parser.add_argument("--schema-dir", help="Directory to write schema files to")
    batch_parser.add_argument("--dataset-file", help="NDJSON file to write")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    commands = {
        "export": export_space,
        "schema": map_schemas,
        "dataset": convert_dataset,
        "batch": batch_migration,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 2

    try:
        return command(args)
    except ContentfulToSanityError as e:
        logger.error(str(e))
        return 1


def _export_config(args) -> ExportConfig:
    return ExportConfig.from_env(
        export_dir=args.export_dir,
        space_id=args.space_id,
        environment_id=args.environment_id,
        management_token=args.management_token,
        access_token=args.access_token,
        export_file=args.export_file,
        save_file=not getattr(args, "no_save_file", False),
        download_assets=args.download_assets,
        include_drafts=args.include_drafts,
        include_archived=args.include_archived,
        skip_content_model=args.skip_content_model,
        skip_content=args.skip_content,
        skip_roles=args.skip_roles,
        skip_webhooks=args.skip_webhooks,
        skip_tags=args.skip_tags,
        skip_editor_interfaces=args.skip_editor_interfaces,
    )


def export_space(args) -> int:
    """Export a space to a JSON file."""
    config = _export_config(args)
    bundle = run_export(config)

    print(f"Content types: {len(bundle.content_types)}")
    print(f"Entries: {len(bundle.entries)}")
    print(f"Assets: {len(bundle.assets)}")
    if config.save_file:
        print(f"Saved to: {config.normalized().export_path}")
    return 0


def map_schemas(args) -> int:
    """Map the content types of an export to Sanity schemas."""
    options = SchemaOptions(
        keep_markdown=args.keep_markdown,
        weak_refs=args.weak_refs,
    )
    definitions = run_schema(args.export_file, args.output_dir, options)

    if args.output_dir:
        print(f"Wrote {len(definitions)} schemas to {args.output_dir}")
    else:
        print(json.dumps([d.to_dict() for d in definitions], indent=2))
    return 0


def convert_dataset(args) -> int:
    """Convert the entries of an export to an NDJSON dataset."""
    options = DatasetOptions(
        locale=args.locale,
        keep_markdown=args.keep_markdown,
        weak_refs=args.weak_refs,
        include_drafts=args.include_drafts,
        assets_dir=args.assets_dir,
    )
    documents = run_dataset(args.export_file, args.output, options)

    print(f"Wrote {len(documents)} documents to {args.output}")
    return 0


def batch_migration(args) -> int:
    """Run export, schema and dataset in sequence."""
    config = _export_config(args)
    dataset_options = DatasetOptions(
        locale=args.locale,
        keep_markdown=args.keep_markdown,
        weak_refs=args.weak_refs,
        include_drafts=args.include_drafts,
    )

    result = run_batch(
        config,
        schema_dir=args.schema_dir,
        dataset_file=args.dataset_file,
        schema_options=dataset_options.schema_options,
        dataset_options=dataset_options,
    )

    print("\n" + "=" * 60)
    print("MIGRATION COMPLETE")
    print("=" * 60)
    print(f"Status: {result.status.value}")
    for step in result.steps:
        print(f"{step.name}: {step.status.value} ({step.items_succeeded}/{step.items_processed})")
    if result.duration_seconds:
        print(f"Duration: {result.duration_seconds:.2f} seconds")

    return 0 if not result.errors else 1


if __name__ == "__main__":
    sys.exit(main())
