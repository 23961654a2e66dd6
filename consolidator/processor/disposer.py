import shutil
from enum import Enum
from pathlib import Path

from consolidator.logging.logger import Log
from consolidator.processor.exceptions import DisposalError


class DisposalAction(str, Enum):
    MOVE = "move"
    DELETE = "delete"
    KEEP = "keep"


class SourceDisposer:
    """Moves, deletes or keeps a case's source images once its PDFs are recorded."""

    def __init__(self, image_root: Path, backup_root: Path, action: str) -> None:
        self._image_root = image_root
        self._backup_root = backup_root
        try:
            self._action = DisposalAction(action.lower())
        except ValueError as exc:
            raise ValueError(
                f"Unknown image action '{action}'. "
                f"Choose from: {[a.value for a in DisposalAction]}"
            ) from exc

    @property
    def action(self) -> DisposalAction:
        return self._action

    def dispose(self, image_dir: Path) -> bool:
        """Apply the configured action to image_dir.

        Returns True when the images no longer live at image_dir.

        Raises:
            DisposalError: if the images cannot be moved or deleted.
        """
        if self._action is DisposalAction.KEEP:
            Log.debug(f"Keeping source images at {image_dir}")
            return False
        if self._action is DisposalAction.DELETE:
            self._delete(image_dir)
            return True
        self._move(image_dir)
        return True

    def backup_path(self, image_dir: Path) -> Path:
        """Mirror image_dir's position under the image root into the backup root."""
        try:
            relative = image_dir.relative_to(self._image_root)
        except ValueError as exc:
            raise DisposalError(
                f"Image set {image_dir} is not under image root {self._image_root}"
            ) from exc
        return self._backup_root / relative

    def _move(self, image_dir: Path) -> None:
        destination = self.backup_path(image_dir)
        if destination.exists():
            raise DisposalError(f"Backup destination already exists: {destination}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(image_dir), str(destination))
        except OSError as exc:
            raise DisposalError(f"Cannot move {image_dir} to {destination}: {exc}") from exc
        Log.info(f"Moved source images {image_dir} -> {destination}")

    def _delete(self, image_dir: Path) -> None:
        try:
            shutil.rmtree(image_dir)
        except FileNotFoundError:
            Log.warning(f"Source images already absent: {image_dir}")
            return
        except OSError as exc:
            raise DisposalError(f"Cannot delete {image_dir}: {exc}") from exc
        Log.info(f"Deleted source images {image_dir}")
