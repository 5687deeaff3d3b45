"""Media type resolution and upload handling."""

from pathlib import Path

from fastapi import UploadFile

from ..core.models import SourceDocument

# Declared types that carry no information about the payload
GENERIC_MEDIA_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

# Aliases some clients send instead of the registered type
MEDIA_TYPE_ALIASES: dict[str, str] = {
    "application/x-pdf": "application/pdf",
    "application/acrobat": "application/pdf",
    "image/jpg": "image/jpeg",
}

# File extensions as fallback
EXTENSION_TO_MEDIA_TYPE: dict[str, str] = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".webp": "image/webp",
}


def resolve_media_type(declared: str | None, filename: str | None = None) -> str:
    """
    Normalize a declared media type, falling back to the filename extension.

    Parameters such as "; charset=binary" are dropped and the type is
    lower-cased. A generic declaration (empty or octet-stream) is replaced by
    the type implied by the extension, if any.

    Returns:
        The resolved media type, or "" when nothing is known
    """
    media_type = (declared or "").split(";", 1)[0].strip().lower()
    media_type = MEDIA_TYPE_ALIASES.get(media_type, media_type)

    if media_type in GENERIC_MEDIA_TYPES and filename:
        ext = Path(filename).suffix.lower()
        return EXTENSION_TO_MEDIA_TYPE.get(ext, media_type)

    return media_type


class FileHandler:
    """Handle uploaded documents."""

    def __init__(self, max_size_bytes: int = 10 * 1024 * 1024):
        self.max_size_bytes = max_size_bytes

    async def read_upload(self, upload: UploadFile) -> SourceDocument:
        """
        Read an uploaded file into a SourceDocument.

        At most ``max_size_bytes + 1`` bytes are read so an oversized upload is
        detected without buffering all of it; the pipeline rejects it.

        Args:
            upload: FastAPI UploadFile

        Returns:
            SourceDocument with the declared media type and filename
        """
        content = await upload.read(self.max_size_bytes + 1)
        return SourceDocument(
            content=content,
            media_type=upload.content_type or "",
            filename=upload.filename or "",
        )
