import copy
import json
from pathlib import Path

import pytest

from contentful_to_sanity.exporters.base import BaseSpaceExporter
from contentful_to_sanity.models.contentful import ExportBundle

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeExporter(BaseSpaceExporter):
    """Records the configurations it was called with and returns a fixed bundle."""

    def __init__(self, bundle=None, create_assets_dir=False, error=None):
        self.bundle = bundle or ExportBundle()
        self.create_assets_dir = create_assets_dir
        self.error = error
        self.calls = []

    def export(self, config):
        self.calls.append(config)
        if self.error:
            raise self.error
        if self.create_assets_dir and config.download_assets:
            (Path(config.export_dir) / "assets").mkdir(parents=True, exist_ok=True)
        return self.bundle


@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR / "asset_fields.json"


@pytest.fixture
def export_data(fixture_path):
    with open(fixture_path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def bundle(export_data) -> ExportBundle:
    return ExportBundle.from_dict(copy.deepcopy(export_data))


@pytest.fixture
def fake_exporter(bundle) -> FakeExporter:
    return FakeExporter(bundle)


@pytest.fixture
def exporter_factory():
    return FakeExporter
