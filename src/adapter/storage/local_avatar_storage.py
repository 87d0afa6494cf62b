"""Local-disk implementation of AvatarStorage."""

import time
from logging import getLogger
from pathlib import Path

logger = getLogger(__name__)

UPLOADS_URL_PREFIX = '/uploads'


class LocalAvatarStorage:
    """Writes avatars into ``upload_dir`` as ``<user_id>_<epoch_ms><ext>``.

    Files are served back by the ``/uploads`` static mount. Earlier uploads
    of the same user are left on disk.
    """

    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)

    def save(self, user_id: str, filename: str, data: bytes) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        ext = Path(filename).suffix.lower()
        stored_name = f"{user_id}_{int(time.time() * 1000)}{ext}"
        (self.upload_dir / stored_name).write_bytes(data)
        logger.info("Avatar stored", extra={"userId": user_id, "file": stored_name, "bytes": len(data)})
        return f"{UPLOADS_URL_PREFIX}/{stored_name}"
