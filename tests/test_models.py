import os

from contentful_to_sanity.models.contentful import (
    ContentfulAsset,
    ContentfulField,
    ExportBundle,
    FieldKind,
    LinkType,
    local_asset_path,
)
from contentful_to_sanity.models.migration import DatasetOptions, ExportConfig, SchemaOptions
from contentful_to_sanity.models.sanity import SanityDocumentDefinition
from contentful_to_sanity.services.schema_mapper import map_bundle


class TestExportConfig:
    def test_defaults(self):
        config = ExportConfig(space_id="space1", management_token="token")

        assert config.download_assets is False
        assert config.save_file is True
        assert config.environment_id == "master"
        assert config.export_file_name == "contentful-export-space1-master.json"
        assert config.validate() == []

    def test_camel_case_keys(self):
        config = ExportConfig.from_dict({
            "spaceId": "space1",
            "exportDir": "/tmp/export",
            "managementToken": "token",
            "downloadAssets": True,
            "contentFile": "export.json",
        })

        assert config.space_id == "space1"
        assert config.export_dir == "/tmp/export"
        assert config.download_assets is True
        assert config.export_file == "export.json"

    def test_validation_errors(self):
        config = ExportConfig(space_id="", export_file=f"nested{os.sep}export.json", page_size=0)

        errors = config.validate()

        assert "Space ID is required" in errors
        assert "A management token or an access token is required" in errors
        assert len(errors) == 4

    def test_normalized_resolves_export_dir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = ExportConfig(space_id="space1", export_dir="out")

        normalized = config.normalized()

        assert normalized.export_dir == str(tmp_path.resolve() / "out")
        assert normalized.assets_dir == tmp_path.resolve() / "out" / "assets"
        assert config.export_dir == "out"

    def test_to_dict_omits_tokens(self):
        data = ExportConfig(space_id="space1", management_token="secret").to_dict()

        assert "management_token" not in data
        assert "secret" not in str(data)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CONTENTFUL_SPACE_ID", "env-space")
        monkeypatch.setenv("CONTENTFUL_MANAGEMENT_TOKEN", "env-token")
        monkeypatch.delenv("CONTENTFUL_ACCESS_TOKEN", raising=False)
        monkeypatch.delenv("CONTENTFUL_ENVIRONMENT", raising=False)

        config = ExportConfig.from_env(export_dir="out", environment_id=None, download_assets=True)

        assert config.space_id == "env-space"
        assert config.management_token == "env-token"
        assert config.environment_id == "master"
        assert config.download_assets is True

    def test_dataset_options_schema_options(self):
        options = DatasetOptions(keep_markdown=True, weak_refs=True, locale="de-DE", include_drafts=True)

        assert options.schema_options == SchemaOptions(keep_markdown=True, weak_refs=True)


class TestContentfulModels:
    def test_field_parsing(self):
        cf_field = ContentfulField.from_dict({
            "id": "gallery",
            "name": "Gallery",
            "type": "Array",
            "items": {"type": "Link", "linkType": "Asset", "validations": [{"linkMimetypeGroup": ["image"]}]},
        })

        assert cf_field.type == FieldKind.ARRAY
        assert cf_field.items.link_type == LinkType.ASSET
        assert cf_field.is_asset_link
        assert cf_field.mimetype_groups() == ["image"]

    def test_unknown_type_kept_as_string(self):
        cf_field = ContentfulField.from_dict({"id": "x", "name": "X", "type": "Hologram"})

        assert cf_field.type == "Hologram"
        assert not isinstance(cf_field.type, FieldKind)

    def test_asset_without_locales(self):
        asset = ContentfulAsset.from_dict({
            "sys": {"id": "asset1"},
            "fields": {
                "title": "Test Asset",
                "file": {
                    "url": "https://example.com/test.jpg",
                    "fileName": "test.jpg",
                    "contentType": "image/jpeg",
                },
            },
        })

        assert asset.get_title() == "Test Asset"
        assert asset.get_file("en-US").url == "https://example.com/test.jpg"
        assert asset.get_file("en-US").is_image

    def test_protocol_relative_asset_url(self, bundle):
        asset = bundle.get_assets()["doc1"]

        assert asset.get_file().absolute_url == "https://assets.ctfassets.net/space1/doc1/manual.pdf"
        assert not asset.get_file().is_image

    def test_bundle_helpers(self, bundle):
        assert bundle.default_locale == "en-US"
        assert bundle.content_type_ids() == ["mediaPage", "person"]
        assert bundle.get_content_type("person").display_field == "name"
        assert bundle.get_content_type("missing") is None
        assert bundle.get_editor_controls("person")["slug"]["widgetId"] == "slugEditor"

    def test_bundle_json_file(self, bundle, tmp_path):
        path = tmp_path / "export.json"

        bundle.save_to_json(str(path))
        loaded = ExportBundle.from_json_file(str(path))

        assert loaded.to_dict() == bundle.to_dict()

    def test_local_asset_path(self, tmp_path):
        path = local_asset_path(tmp_path, "https://images.ctfassets.net/space1/img1/test.jpg")

        assert path == tmp_path.resolve() / "images.ctfassets.net" / "space1" / "img1" / "test.jpg"

    def test_local_asset_path_outside_assets_dir(self, tmp_path):
        assets_dir = tmp_path / "assets"

        assert local_asset_path(assets_dir, "https://images.ctfassets.net/../../escape.txt") is None
        assert local_asset_path(assets_dir, "https://../x.txt") is None


class TestSanityModels:
    def test_definition_file(self, bundle, tmp_path):
        definition = map_bundle(bundle)[0]
        path = tmp_path / "mediaPage.json"

        definition.save_to_json(str(path))
        loaded = SanityDocumentDefinition.from_json_file(str(path))

        assert loaded.to_dict() == definition.to_dict()
        assert loaded.to_dict()["type"] == "document"
