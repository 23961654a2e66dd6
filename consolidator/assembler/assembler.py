import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from PIL import Image

from consolidator.assembler.digests import file_digests
from consolidator.assembler.exceptions import (
    DocumentWriteError,
    EmptyImageSetError,
    ImageDrawError,
    ImageSetUnreadableError,
    NoReadableImagesError,
    StorageError,
)
from consolidator.assembler.models import CompositeDocument, Zone
from consolidator.logging.logger import Log
from consolidator.pdf.base import BasePdfWriter
from consolidator.pdf.exceptions import PdfRenderError, PdfWriteError
from consolidator.storage.shard_allocator import ShardAllocator

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".tif", ".tiff", ".bmp"})


def list_images(image_dir: Path) -> list[str]:
    """Return qualifying image file names directly under image_dir, sorted ascending.

    Raises:
        ImageSetUnreadableError: if the directory cannot be listed.
    """
    try:
        entries = list(image_dir.iterdir())
    except OSError as exc:
        raise ImageSetUnreadableError(f"Cannot read image set {image_dir}: {exc}") from exc
    return sorted(
        entry.name
        for entry in entries
        if entry.suffix.lower() in IMAGE_EXTENSIONS and entry.is_file()
    )


def probe_dimensions(image_path: Path) -> tuple[int, int]:
    """Read pixel width and height from the image header without decoding pixels."""
    with Image.open(image_path) as img:
        return img.size


class DocumentAssembler:
    """Turns one directory of page images into one stored PDF."""

    def __init__(
        self,
        allocator: ShardAllocator,
        writer_factory: Callable[[], BasePdfWriter],
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._allocator = allocator
        self._writer_factory = writer_factory
        self._clock = clock

    def assemble(self, image_dir: Path, case_id: str, zone: Zone) -> CompositeDocument:
        """Assemble every qualifying image in image_dir into one PDF.

        Images whose dimensions cannot be probed are skipped and reported in
        ``damaged_images``. Every image is probed before a storage folder is
        allocated, so nothing is allocated when no page can be drawn.

        Raises:
            ImageSetUnreadableError: if image_dir cannot be listed.
            EmptyImageSetError: if image_dir has no qualifying images.
            NoReadableImagesError: if every qualifying image is damaged.
            StorageError: if the storage folder cannot be created.
            ImageDrawError: if a probed image cannot be drawn.
            DocumentWriteError: if the file cannot be written or re-read.
        """
        names = list_images(image_dir)
        if not names:
            raise EmptyImageSetError(f"No images in {image_dir} for case {case_id}")

        pages: list[tuple[Path, int, int]] = []
        damaged: list[str] = []
        for name in names:
            image_path = image_dir / name
            try:
                width, height = probe_dimensions(image_path)
            except (OSError, ValueError, Image.DecompressionBombError) as exc:
                Log.warning(f"Cannot read image size, skipping page: {image_path}: {exc}")
                damaged.append(name)
                continue
            pages.append((image_path, width, height))
        if not pages:
            raise NoReadableImagesError(
                f"No readable images in {image_dir} for case {case_id}: {';'.join(damaged)}",
                tuple(damaged),
            )

        document_id = str(uuid.uuid4())
        allocation = self._allocator.allocate(document_id)
        try:
            allocation.storage_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Cannot create storage folder {allocation.storage_path}: {exc}"
            ) from exc

        file_path = allocation.storage_path / f"{document_id}.pdf"
        with self._writer_factory() as writer:
            for image_path, width, height in pages:
                try:
                    writer.add_image_page(image_path, float(width), float(height))
                except PdfRenderError as exc:
                    raise ImageDrawError(str(exc)) from exc

            page_count = writer.page_count
            try:
                writer.save(file_path)
            except PdfWriteError as exc:
                raise DocumentWriteError(str(exc)) from exc

        try:
            digests = file_digests(file_path)
        except OSError as exc:
            raise DocumentWriteError(f"Cannot re-read {file_path}: {exc}") from exc

        Log.info(
            f"Assembled {zone.name.lower()} zone of case {case_id}: {page_count} pages, "
            f"{len(damaged)} damaged, {digests.size_bytes} bytes -> {file_path}"
        )
        return CompositeDocument(
            document_id=document_id,
            case_id=case_id,
            zone=zone,
            storage_path=allocation.storage_path,
            shard_name=allocation.shard_name,
            file_path=file_path,
            page_count=page_count,
            size_bytes=digests.size_bytes,
            md5=digests.md5,
            sm3=digests.sm3,
            assembled_at=self._clock(),
            damaged_images=tuple(damaged),
        )
