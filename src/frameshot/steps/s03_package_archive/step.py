"""Step 03: Bundle extracted images into a single ZIP archive in memory."""

from __future__ import annotations

import io
import logging
import stat
import time
import zipfile
from typing import ClassVar

from frameshot.core.contracts import ExtractedImage
from frameshot.core.errors import PackagingError
from frameshot.core.step_base import BaseStep
from frameshot.utils.naming import deduplicate_names
from .config import PackageArchiveConfig
from .contracts import PackageArchiveInput, PackageArchiveOutput

logger = logging.getLogger(__name__)

_COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}

# Earliest timestamp the ZIP format can represent.
FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_MODE = (stat.S_IFREG | 0o644) << 16


class PackageArchiveStep(BaseStep[PackageArchiveInput, PackageArchiveOutput, PackageArchiveConfig]):
    name: ClassVar[str] = "package_archive"
    input_type: ClassVar = PackageArchiveInput
    output_type: ClassVar = PackageArchiveOutput
    config_type: ClassVar = PackageArchiveConfig
    error_type: ClassVar = PackagingError

    def validate_inputs(self, inputs: PackageArchiveInput) -> bool:
        nameless = [i for i, img in enumerate(inputs.images) if not img.filename]
        if nameless:
            logger.error(f"Images without a filename at positions {nameless}")
            return False
        return True

    def _entry_info(self, name: str, compression: int) -> zipfile.ZipInfo:
        date_time = FIXED_DATE_TIME if self.config.deterministic else time.localtime()[:6]
        info = zipfile.ZipInfo(name, date_time=date_time)
        info.external_attr = ENTRY_MODE
        info.compress_type = compression
        return info

    def run(self, inputs: PackageArchiveInput) -> PackageArchiveOutput:
        names = [img.filename for img in inputs.images]
        if self.config.deduplicate_names:
            names = deduplicate_names(names)
        elif len(set(names)) != len(names):
            logger.warning("Archive will contain duplicate entry names")

        compression = _COMPRESSION[self.config.compression]
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buffer, "w", compression=compression, compresslevel=self.config.compress_level
            ) as zf:
                for name, image in zip(names, inputs.images):
                    zf.writestr(
                        self._entry_info(name, compression),
                        image.data,
                        compresslevel=self.config.compress_level,
                    )
        except (OSError, ValueError, RuntimeError, MemoryError, zipfile.LargeZipFile) as exc:
            raise PackagingError(f"Could not build archive: {exc}") from exc

        data = buffer.getvalue()
        logger.info(f"Packed {len(names)} images into {len(data)} bytes")
        return PackageArchiveOutput(
            data=data,
            filename=self.config.archive_name,
            entry_count=len(names),
            entry_names=names,
        )


def package_archive(images: list[ExtractedImage], config: PackageArchiveConfig | None = None) -> bytes:
    """Return a ZIP archive holding every image under its filename. Raises PackagingError."""
    return PackageArchiveStep(config).execute(PackageArchiveInput(images=images)).data
