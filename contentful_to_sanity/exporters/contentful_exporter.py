"""Space exporter for the Contentful Management and Delivery APIs."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import BaseSpaceExporter
from ..errors import ExportError
from ..models.contentful import ExportBundle, local_asset_path
from ..models.migration import ExportConfig

logger = logging.getLogger(__name__)


class ContentfulSpaceExporter(BaseSpaceExporter):
    """
    Exports a Contentful space over HTTP.

    Uses the Management API when a management token is configured and the
    Delivery API otherwise. The Delivery API only serves published content
    and has no editor interfaces, webhooks or roles; those collections stay
    empty in that case.

    Supports:
    - Paged fetching of every collection
    - Draft and archived entry filtering
    - Downloading asset files below `<export_dir>/assets`
    """

    # Collection key -> (endpoint, scope, skip flag)
    COLLECTIONS = {
        "content_types": ("/content_types", "environment", "skip_content_model"),
        "editor_interfaces": ("/editor_interfaces", "environment", "skip_editor_interfaces"),
        "locales": ("/locales", "environment", None),
        "tags": ("/tags", "environment", "skip_tags"),
        "entries": ("/entries", "environment", "skip_content"),
        "assets": ("/assets", "environment", "skip_content"),
        "webhooks": ("/webhook_definitions", "space", "skip_webhooks"),
        "roles": ("/roles", "space", "skip_roles"),
    }

    MANAGEMENT_ONLY = {"editor_interfaces", "webhooks", "roles"}

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize the exporter.

        Args:
            session: Custom requests session, created per export when omitted
        """
        self._session = session

    def _create_session(self, config: ExportConfig) -> requests.Session:
        """Create a requests session with retry logic."""
        session = requests.Session()

        retry_config = config.retry_config
        retries = Retry(
            total=retry_config.get("max_retries", 3),
            backoff_factor=retry_config.get("backoff_factor", 2.0),
            status_forcelist=[429, 500, 502, 503, 504],
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _base_url(self, config: ExportConfig, scope: str) -> str:
        host = config.management_host if config.uses_management_api else config.delivery_host
        url = f"https://{host}/spaces/{config.space_id}"
        if scope == "environment":
            url += f"/environments/{config.environment_id}"
        return url

    def _get_auth_headers(self, config: ExportConfig) -> Dict[str, str]:
        token = config.management_token or config.access_token
        return {"Authorization": f"Bearer {token}"}

    def export(self, config: ExportConfig) -> ExportBundle:
        """Export every collection of the configured space."""
        session = self._session or self._create_session(config)
        try:
            bundle = self._export_collections(session, config)
            if config.download_assets:
                self.download_assets(bundle, config, session)
        finally:
            if session is not self._session:
                session.close()

        return bundle

    def _export_collections(self, session: requests.Session, config: ExportConfig) -> ExportBundle:
        collections: Dict[str, List[Dict[str, Any]]] = {}

        for key, (endpoint, scope, skip_flag) in self.COLLECTIONS.items():
            if skip_flag and getattr(config, skip_flag):
                logger.debug(f"Skipping {key}")
                continue

            if key in self.MANAGEMENT_ONLY and not config.uses_management_api:
                logger.debug(f"Skipping {key}: not available from the Delivery API")
                continue

            url = f"{self._base_url(config, scope)}{endpoint}"
            params = {}
            if key in ("entries", "assets") and not config.uses_management_api:
                params["locale"] = "*"

            items = self._fetch_collection(session, config, url, params)
            if key in ("entries", "assets"):
                items = self._filter_published(items, config)

            collections[key] = items
            logger.info(f"Exported {len(items)} {key} from space {config.space_id}")

        return ExportBundle(**collections)

    def _fetch_collection(
        self,
        session: requests.Session,
        config: ExportConfig,
        url: str,
        params: Dict[str, Any],
    ) -> List[Dict[str, Any]]:
        """Fetch every page of a collection."""
        items: List[Dict[str, Any]] = []
        skip = 0

        while True:
            page_params = dict(params, skip=skip, limit=config.page_size)
            data = self._request(session, config, url, page_params)

            page = data.get("items", [])
            items.extend(page)
            skip += len(page)

            if not page or skip >= data.get("total", 0):
                break

        return items

    def _request(
        self,
        session: requests.Session,
        config: ExportConfig,
        url: str,
        params: Dict[str, Any],
    ) -> Dict[str, Any]:
        try:
            response = session.get(
                url,
                headers=self._get_auth_headers(config),
                params=params,
                timeout=config.timeout,
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            raise ExportError(
                f"Request to {url} failed",
                status_code=e.response.status_code if e.response is not None else None,
                response_body=e.response.text if e.response is not None else None,
            ) from e
        except requests.exceptions.RequestException as e:
            raise ExportError(f"Request to {url} failed", details=str(e)) from e

    def _filter_published(self, items: List[Dict[str, Any]], config: ExportConfig) -> List[Dict[str, Any]]:
        """Drop drafts and archived items unless configured otherwise."""
        result = []
        for item in items:
            sys = item.get("sys", {})
            if sys.get("archivedVersion") and not config.include_archived:
                continue
            if "version" in sys and not sys.get("publishedVersion") and not config.include_drafts:
                continue
            result.append(item)
        return result

    def download_assets(
        self,
        bundle: ExportBundle,
        config: ExportConfig,
        session: Optional[requests.Session] = None,
    ) -> int:
        """
        Download asset files, mirroring the CDN host and path.

        Failed downloads are logged and skipped.

        Returns:
            Number of files downloaded
        """
        owned_session = None
        if session is None and self._session is None:
            owned_session = self._create_session(config)
        session = session or self._session or owned_session

        assets_dir = config.assets_dir
        assets_dir.mkdir(parents=True, exist_ok=True)

        downloaded = 0
        failed = 0
        try:
            for asset in bundle.assets:
                asset_id = asset.get("sys", {}).get("id")
                for url in self._asset_urls(asset):
                    target = local_asset_path(assets_dir, url)
                    if target is None:
                        failed += 1
                        logger.warning(f"Skipping asset {asset_id}: {url} points outside {assets_dir}")
                        continue
                    try:
                        self._download_file(session, config, url, target)
                        downloaded += 1
                    except requests.exceptions.RequestException as e:
                        failed += 1
                        logger.warning(f"Failed to download asset {asset_id}: {e}")
        finally:
            if owned_session is not None:
                owned_session.close()

        logger.info(f"Downloaded {downloaded} asset files to {assets_dir} ({failed} failed)")
        return downloaded

    def _asset_urls(self, asset: Dict[str, Any]) -> List[str]:
        files = asset.get("fields", {}).get("file") or {}
        if "url" in files:
            files = {"_": files}

        urls = []
        for file_data in files.values():
            url = file_data.get("url") if isinstance(file_data, dict) else None
            if not url:
                continue
            if url.startswith("//"):
                url = f"https:{url}"
            if url not in urls:
                urls.append(url)
        return urls

    def _download_file(
        self,
        session: requests.Session,
        config: ExportConfig,
        url: str,
        target: Path,
    ) -> None:
        """Stream a file to `target`; a failed download leaves no file behind."""
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with session.get(url, stream=True, timeout=config.timeout) as response:
                response.raise_for_status()
                with open(target, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=65536):
                        f.write(chunk)
        except Exception:
            target.unlink(missing_ok=True)
            raise
