"""Persistence of uploaded media files."""

import logging
import uuid
from pathlib import Path

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from scenecut.errors import WorkspaceError

logger = logging.getLogger(__name__)


class UploadStore:
    """Stores uploads under ``<work_dir>/uploads`` with a collision-proof prefix."""

    def __init__(self, work_dir: str | Path) -> None:
        self.location = (Path(work_dir) / "uploads").expanduser().resolve()
        try:
            self.location.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(f"Cannot create upload directory {self.location}: {e}") from e

    def store(self, upload: FileStorage) -> Path:
        """Save *upload* and return its absolute path.

        Raises ValueError for names that try to escape the upload directory.
        """
        filename = upload.filename or ""
        if ".." in filename:
            raise ValueError(f"Invalid file name: {filename}")
        cleaned = secure_filename(filename) or "upload"

        target = self.location / f"{uuid.uuid4().hex}_{cleaned}"
        upload.save(target)
        logger.info("Stored upload %s as %s", filename, target)
        return target
