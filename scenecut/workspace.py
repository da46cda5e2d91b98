"""Per-job output directories under the configured work root."""

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path

from scenecut.errors import WorkspaceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobWorkspace:
    """A directory owned by exactly one job."""

    base_dir: Path
    token: str

    def resolve(self, name: str) -> Path:
        return self.base_dir / name

    def discard(self) -> None:
        """Remove the directory and everything in it, ignoring errors."""
        logger.warning("Discarding workspace %s", self.base_dir)
        shutil.rmtree(self.base_dir, ignore_errors=True)


class Workspace:
    """Hands out unique directories and file names under *root*."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser().resolve()

    def _tokens(self):
        # Nanosecond wall clock; bumped on collision.
        token = time.time_ns()
        while True:
            yield str(token)
            token += 1

    def allocate(self, prefix: str = "scenes") -> JobWorkspace:
        """Create ``<root>/<prefix>_<token>/`` and return it.

        Raises WorkspaceError if the directory cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            for token in self._tokens():
                base_dir = self.root / f"{prefix}_{token}"
                try:
                    base_dir.mkdir()
                except FileExistsError:
                    continue
                logger.debug("Allocated workspace %s", base_dir)
                return JobWorkspace(base_dir=base_dir, token=token)
        except OSError as e:
            raise WorkspaceError(f"Cannot create workspace under {self.root}: {e}") from e

    def unique_name(self, prefix: str, suffix: str) -> Path:
        """Reserve ``<root>/<prefix>_<token><suffix>`` as an empty file and return it.

        Raises WorkspaceError if the file cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            for token in self._tokens():
                path = self.root / f"{prefix}_{token}{suffix}"
                try:
                    path.touch(exist_ok=False)
                except FileExistsError:
                    continue
                return path
        except OSError as e:
            raise WorkspaceError(f"Cannot create file under {self.root}: {e}") from e
