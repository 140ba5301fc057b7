"""
Feature folder source - one subfolder per logical document.

    docs/
        billing/
            readme.md       <- first markdown file (sorted) is the content
            invoice.png     <- images are listed in metadata
        export/
            ...
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

from vector_store.exceptions import ValidationError

from .models import SourceDocument

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".svg"}
MARKDOWN_MIME_TYPE = "text/markdown"


class FeatureFolderSource:
    def __init__(self, base_path: str | Path, feature: Optional[str] = None):
        self.base_path = Path(base_path)
        self.feature = feature

    def __iter__(self) -> Iterator[SourceDocument]:
        if not self.base_path.is_dir():
            raise ValidationError(f"Document folder not found: {self.base_path}")

        folders = sorted(p for p in self.base_path.iterdir() if p.is_dir())
        for folder in folders:
            if self.feature and folder.name != self.feature:
                continue
            yield self.read_folder(folder)

    @staticmethod
    def read_folder(folder: Path) -> SourceDocument:
        images = [
            {"filename": p.name, "path": str(p)}
            for p in sorted(folder.iterdir())
            if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
        ]
        metadata = {"feature": folder.name, "images": images}

        markdown_files = sorted(p for p in folder.glob("*.md") if p.is_file())
        if not markdown_files:
            return SourceDocument(identifier=folder.name, metadata=metadata)

        markdown_path = markdown_files[0]
        if len(markdown_files) > 1:
            logger.debug(f"{folder.name}: using {markdown_path.name}, ignoring {len(markdown_files) - 1} more")
        metadata["markdown_file"] = str(markdown_path)
        try:
            text = markdown_path.read_text(encoding="utf-8")
            file_size = markdown_path.stat().st_size
        except (UnicodeDecodeError, OSError) as e:
            logger.warning(f"Cannot read {markdown_path}: {e}")
            return SourceDocument(
                identifier=folder.name,
                metadata=metadata,
                file_path=str(markdown_path),
                error=str(e),
            )
        return SourceDocument(
            identifier=folder.name,
            text=text,
            metadata=metadata,
            file_path=str(markdown_path),
            file_size=file_size,
            mime_type=MARKDOWN_MIME_TYPE,
        )
