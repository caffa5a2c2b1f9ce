"""
Avatar blob storage for the Formation Board application.

Avatars are opaque blobs addressed by a reference string. The local
implementation keeps one file per reference in a directory and serves them
under a URL prefix.
"""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..utils import new_record_id

logger = logging.getLogger(__name__)

_REF_PATTERN = re.compile(r"^[0-9a-f]{32}(\.[a-z0-9]{1,5})?$")


@dataclass(frozen=True)
class UploadHandle:
    """Where a client should write a new avatar blob."""
    ref: str
    path: str


class AvatarStorage(ABC):
    """Abstract blob storage for player avatars."""

    @abstractmethod
    def get_upload_target(self, extension: str = "") -> UploadHandle:
        pass

    @abstractmethod
    def resolve_avatar_url(self, ref: Optional[str]) -> Optional[str]:
        pass

    @abstractmethod
    def delete_avatar(self, ref: str) -> None:
        pass


class LocalAvatarStorage(AvatarStorage):
    """Avatar storage backed by a local directory."""

    def __init__(self, directory: str = "avatars", url_prefix: str = "/api/avatars"):
        """
        Initialize LocalAvatarStorage.

        Args:
            directory: Directory holding the avatar files
            url_prefix: URL prefix the web layer serves avatars from
        """
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def get_upload_target(self, extension: str = "") -> UploadHandle:
        """
        Reserve a reference for a new avatar.

        Args:
            extension: File extension of the upload, e.g. ".png" (optional)

        Returns:
            Handle with the new reference and the file path to write to
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        extension = extension.lower() if extension else ""
        if extension and not extension.startswith("."):
            extension = f".{extension}"
        ref = f"{new_record_id()}{extension}"
        if not _REF_PATTERN.match(ref):
            raise ValueError(f"Unsupported avatar extension: {extension}")
        return UploadHandle(ref=ref, path=str(self.directory / ref))

    def write_upload(self, ref: str, data: bytes) -> None:
        """Write the blob for a reserved reference."""
        path = self._path_for(ref)
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Stored avatar %s (%d bytes)", ref, len(data))

    def has_avatar(self, ref: str) -> bool:
        """Check whether a blob exists for a reference."""
        try:
            return self._path_for(ref).is_file()
        except ValueError:
            return False

    def resolve_avatar_url(self, ref: Optional[str]) -> Optional[str]:
        """Get the URL of an avatar, or None when there is no stored blob."""
        if not ref or not self.has_avatar(ref):
            return None
        return f"{self.url_prefix}/{ref}"

    def delete_avatar(self, ref: str) -> None:
        """Delete an avatar blob; deleting a missing blob is a no-op."""
        path = self._path_for(ref)
        if path.exists():
            path.unlink()
            logger.info("Deleted avatar %s", ref)

    def _path_for(self, ref: str) -> Path:
        if not _REF_PATTERN.match(ref or ""):
            raise ValueError(f"Invalid avatar reference: {ref}")
        return self.directory / ref
