"""Migration configuration and execution models."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime
from pathlib import Path
import os
import uuid


class MigrationStatus(str, Enum):
    """Status of a migration run."""
    PENDING = "pending"
    EXPORTING = "exporting"
    MAPPING = "mapping"
    CONVERTING = "converting"
    COMPLETED = "completed"
    FAILED = "failed"


# Contentful CLI option names accepted alongside the snake_case ones
_CAMEL_CASE_KEYS = {
    "spaceId": "space_id",
    "exportDir": "export_dir",
    "managementToken": "management_token",
    "accessToken": "access_token",
    "environmentId": "environment_id",
    "saveFile": "save_file",
    "contentFile": "export_file",
    "exportFile": "export_file",
    "downloadAssets": "download_assets",
    "includeDrafts": "include_drafts",
    "includeArchived": "include_archived",
    "skipContentModel": "skip_content_model",
    "skipContent": "skip_content",
    "skipRoles": "skip_roles",
    "skipWebhooks": "skip_webhooks",
    "skipTags": "skip_tags",
    "skipEditorInterfaces": "skip_editor_interfaces",
    "pageSize": "page_size",
}


@dataclass
class ExportConfig:
    """Configuration for exporting a Contentful space."""
    space_id: str
    export_dir: str = "."

    # Credentials
    management_token: Optional[str] = None
    access_token: Optional[str] = None
    environment_id: str = "master"

    # Output
    save_file: bool = True
    export_file: Optional[str] = None
    download_assets: bool = False

    # Content selection
    include_drafts: bool = False
    include_archived: bool = False
    skip_content_model: bool = False
    skip_content: bool = False
    skip_roles: bool = False
    skip_webhooks: bool = False
    skip_tags: bool = False
    skip_editor_interfaces: bool = False

    # API options
    management_host: str = "api.contentful.com"
    delivery_host: str = "cdn.contentful.com"
    page_size: int = 100
    timeout: float = 30.0
    retry_config: Dict[str, Any] = field(default_factory=lambda: {
        "max_retries": 3,
        "backoff_factor": 2.0,
    })

    @property
    def export_file_name(self) -> str:
        """Name of the JSON file the export is saved to."""
        return self.export_file or f"contentful-export-{self.space_id}-{self.environment_id}.json"

    @property
    def export_path(self) -> Path:
        return Path(self.export_dir) / self.export_file_name

    @property
    def assets_dir(self) -> Path:
        """Directory downloaded asset files are written to."""
        return Path(self.export_dir) / "assets"

    @property
    def uses_management_api(self) -> bool:
        return bool(self.management_token)

    def normalized(self) -> "ExportConfig":
        """Return a copy with an absolute export directory."""
        return replace(
            self,
            export_dir=str(Path(self.export_dir).expanduser().resolve()),
            download_assets=bool(self.download_assets),
            retry_config=dict(self.retry_config),
        )

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of validation error messages
        """
        errors = []

        if not self.space_id:
            errors.append("Space ID is required")

        if not self.management_token and not self.access_token:
            errors.append("A management token or an access token is required")

        if not self.export_dir:
            errors.append("Export directory is required")

        if not self.environment_id:
            errors.append("Environment ID is required")

        if self.export_file and os.sep in self.export_file:
            errors.append(f"Export file must be a file name, not a path: {self.export_file}")

        if self.page_size <= 0 or self.page_size > 1000:
            errors.append("Page size must be between 1 and 1000")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation. Tokens are left out."""
        return {
            "space_id": self.space_id,
            "export_dir": self.export_dir,
            "environment_id": self.environment_id,
            "save_file": self.save_file,
            "export_file": self.export_file_name,
            "download_assets": self.download_assets,
            "include_drafts": self.include_drafts,
            "include_archived": self.include_archived,
            "skip_content_model": self.skip_content_model,
            "skip_content": self.skip_content,
            "skip_roles": self.skip_roles,
            "skip_webhooks": self.skip_webhooks,
            "skip_tags": self.skip_tags,
            "skip_editor_interfaces": self.skip_editor_interfaces,
            "page_size": self.page_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportConfig":
        """Create from dictionary representation, accepting camelCase keys."""
        data = {_CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}

        return cls(
            space_id=data.get("space_id", ""),
            export_dir=data.get("export_dir", "."),
            management_token=data.get("management_token"),
            access_token=data.get("access_token"),
            environment_id=data.get("environment_id", "master"),
            save_file=data.get("save_file", True),
            export_file=data.get("export_file"),
            download_assets=data.get("download_assets", False),
            include_drafts=data.get("include_drafts", False),
            include_archived=data.get("include_archived", False),
            skip_content_model=data.get("skip_content_model", False),
            skip_content=data.get("skip_content", False),
            skip_roles=data.get("skip_roles", False),
            skip_webhooks=data.get("skip_webhooks", False),
            skip_tags=data.get("skip_tags", False),
            skip_editor_interfaces=data.get("skip_editor_interfaces", False),
            page_size=data.get("page_size", 100),
        )

    @classmethod
    def from_env(cls, export_dir: str = ".", **overrides: Any) -> "ExportConfig":
        """Create from CONTENTFUL_* environment variables."""
        data = {
            "space_id": os.environ.get("CONTENTFUL_SPACE_ID", ""),
            "management_token": os.environ.get("CONTENTFUL_MANAGEMENT_TOKEN"),
            "access_token": os.environ.get("CONTENTFUL_ACCESS_TOKEN"),
            "environment_id": os.environ.get("CONTENTFUL_ENVIRONMENT", "master"),
            "export_dir": export_dir,
        }
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.from_dict(data)


@dataclass
class SchemaOptions:
    """Options for mapping content types to Sanity schemas."""
    keep_markdown: bool = False
    weak_refs: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keep_markdown": self.keep_markdown,
            "weak_refs": self.weak_refs,
        }


@dataclass
class DatasetOptions:
    """Options for converting entries to Sanity documents."""
    locale: Optional[str] = None
    keep_markdown: bool = False
    weak_refs: bool = False
    include_drafts: bool = False
    assets_dir: Optional[str] = None  # Local asset files instead of remote URLs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locale": self.locale,
            "keep_markdown": self.keep_markdown,
            "weak_refs": self.weak_refs,
            "include_drafts": self.include_drafts,
            "assets_dir": self.assets_dir,
        }

    @property
    def schema_options(self) -> SchemaOptions:
        """Schema options matching this conversion."""
        return SchemaOptions(
            keep_markdown=self.keep_markdown,
            weak_refs=self.weak_refs,
        )


@dataclass
class MigrationStep:
    """A single step in a migration process."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    status: MigrationStatus = MigrationStatus.PENDING
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    items_processed: int = 0
    items_succeeded: int = 0
    items_failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "items_processed": self.items_processed,
            "items_succeeded": self.items_succeeded,
            "items_failed": self.items_failed,
            "errors": self.errors,
            "warnings": self.warnings,
        }

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


@dataclass
class MigrationRun:
    """A complete export, schema and dataset run."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    space_id: str = ""
    environment_id: str = ""
    status: MigrationStatus = MigrationStatus.PENDING

    # Timing
    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Progress
    steps: List[MigrationStep] = field(default_factory=list)
    current_step: Optional[str] = None

    # Outputs
    export_file: Optional[str] = None
    schema_files: List[str] = field(default_factory=list)
    dataset_file: Optional[str] = None

    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "space_id": self.space_id,
            "environment_id": self.environment_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "steps": [s.to_dict() for s in self.steps],
            "current_step": self.current_step,
            "export_file": self.export_file,
            "schema_files": self.schema_files,
            "dataset_file": self.dataset_file,
            "errors": self.errors,
        }

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def add_step(self, name: str) -> MigrationStep:
        """Add a new step to the run."""
        step = MigrationStep(name=name)
        self.steps.append(step)
        self.current_step = step.id
        return step
