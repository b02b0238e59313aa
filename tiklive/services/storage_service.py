# tiklive/services/storage_service.py
import logging
import uuid
from pathlib import Path

import requests
from flask_babel import gettext as _
from werkzeug.utils import secure_filename

from .exceptions import GatewayError, ValidationFailed

log = logging.getLogger(__name__)

BUCKETS = ("company-logos", "avatars", "id-photos")


class ImageHostClient:
    """PICUI image host: multipart upload, bearer token, returns the public URL."""

    def __init__(self, api_url: str, api_key: str, timeout: int = 20):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout

    def upload(self, file_storage) -> str:
        file_storage.stream.seek(0)
        try:
            r = requests.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"},
                files={"file": (file_storage.filename, file_storage.stream, file_storage.mimetype)},
                data={"permission": "1"},
                timeout=self.timeout,
            )
            log.info("Image host upload status=%s", r.status_code)
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            log.exception("Image host upload failed: %s", e)
            raise GatewayError("Image upload failed.", details=str(e))

        url = ((data.get("data") or {}).get("links") or {}).get("url")
        if not data.get("status") or not url:
            log.error("Image host rejected upload | body=%s", data)
            raise GatewayError(data.get("message") or "Image upload failed.")
        return url


class ObjectStorage:
    """Bucketed file storage.

    Images go to the external image host when one is configured; otherwise they
    are written to ``<base_dir>/<bucket>/<subdir>/`` and served from /uploads.
    """

    def __init__(self, base_dir, allowed_exts, image_host: ImageHostClient | None = None,
                 public_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.allowed_exts = set(allowed_exts or ())
        self.image_host = image_host
        self.public_prefix = public_prefix.rstrip("/")

    @classmethod
    def from_config(cls, config, instance_path: str):
        base = Path(config.get("UPLOAD_FOLDER") or Path(instance_path) / "uploads").resolve()
        host = None
        if config.get("PICUI_API_KEY"):
            host = ImageHostClient(
                config["PICUI_API_URL"],
                config["PICUI_API_KEY"],
                timeout=config.get("GATEWAY_TIMEOUT", 20),
            )
        else:
            log.warning("PICUI_API_KEY not configured; uploads are stored locally.")
        return cls(base, config.get("ALLOWED_IMAGE_EXTENSIONS"), image_host=host)

    def allowed_ext(self, filename: str) -> bool:
        suffix = Path(filename).suffix.lower().lstrip(".")
        return bool(suffix) and suffix in self.allowed_exts

    def upload(self, file_storage, bucket: str, subdir: str = "") -> str:
        if bucket not in BUCKETS:
            raise ValueError(f"Unknown bucket: {bucket}")
        if not file_storage or not file_storage.filename:
            raise ValidationFailed(_("No file uploaded."))
        safe_name = secure_filename(file_storage.filename)
        if not safe_name or not self.allowed_ext(safe_name):
            raise ValidationFailed(_("Unsupported file type."), details=file_storage.filename)

        if self.image_host is not None:
            return self.image_host.upload(file_storage)
        return self._save_local(file_storage, bucket, subdir, safe_name)

    def _save_local(self, file_storage, bucket, subdir, safe_name) -> str:
        target_dir = self.base_dir / bucket / subdir if subdir else self.base_dir / bucket
        target_dir.mkdir(parents=True, exist_ok=True)

        dest = target_dir / f"{uuid.uuid4().hex[:10]}-{safe_name}"
        file_storage.save(dest)

        rel = dest.relative_to(self.base_dir).as_posix()
        log.info("Stored upload locally: %s", rel)
        return f"{self.public_prefix}/{rel}"
