import json

import pytest

from contentful_to_sanity import cli
from contentful_to_sanity.models.migration import MigrationRun, MigrationStatus, SchemaOptions


def test_schema_command(fixture_path, tmp_path):
    output_dir = tmp_path / "schemas"

    code = cli.main(["schema", "--export-file", str(fixture_path), "--output-dir", str(output_dir)])

    assert code == 0
    with open(output_dir / "index.json", encoding="utf-8") as f:
        assert json.load(f) == {"types": ["mediaPage", "person"]}


def test_schema_command_prints_definitions(fixture_path, capsys):
    code = cli.main(["schema", "--export-file", str(fixture_path), "--keep-markdown"])

    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    assert [d["name"] for d in printed] == ["mediaPage", "person"]


def test_dataset_command(fixture_path, tmp_path):
    output = tmp_path / "dataset.ndjson"

    code = cli.main(["dataset", "--export-file", str(fixture_path), "--output", str(output)])

    assert code == 0
    assert len(output.read_text(encoding="utf-8").splitlines()) == 2


def test_export_command_without_credentials(tmp_path, monkeypatch):
    for name in ("CONTENTFUL_SPACE_ID", "CONTENTFUL_MANAGEMENT_TOKEN", "CONTENTFUL_ACCESS_TOKEN"):
        monkeypatch.delenv(name, raising=False)

    code = cli.main(["export", "--export-dir", str(tmp_path)])

    assert code == 1


def test_export_command_passes_options(tmp_path, monkeypatch, fake_exporter):
    monkeypatch.setenv("CONTENTFUL_SPACE_ID", "space1")
    monkeypatch.setenv("CONTENTFUL_MANAGEMENT_TOKEN", "token")
    monkeypatch.setattr(cli, "run_export", lambda config: fake_exporter.export(config.normalized()))

    code = cli.main(["export", "--export-dir", str(tmp_path), "--download-assets", "--skip-roles"])

    assert code == 0
    config = fake_exporter.calls[0]
    assert config.space_id == "space1"
    assert config.download_assets is True
    assert config.skip_roles is True


def test_no_command(capsys):
    assert cli.main([]) == 2


def test_schema_command_has_no_locale(fixture_path):
    with pytest.raises(SystemExit):
        cli.main(["schema", "--export-file", str(fixture_path), "--locale", "de-DE"])


def test_batch_command_passes_mapping_options(tmp_path, monkeypatch):
    calls = {}

    def fake_run_batch(config, **kwargs):
        calls.update(kwargs)
        return MigrationRun(space_id=config.space_id, status=MigrationStatus.COMPLETED)

    monkeypatch.setattr(cli, "run_batch", fake_run_batch)

    code = cli.main([
        "batch", "--space-id", "space1", "--management-token", "token", "--export-dir", str(tmp_path),
        "--keep-markdown", "--weak-refs", "--locale", "de-DE",
    ])

    assert code == 0
    assert calls["schema_options"] == SchemaOptions(keep_markdown=True, weak_refs=True)
    assert calls["dataset_options"].locale == "de-DE"
