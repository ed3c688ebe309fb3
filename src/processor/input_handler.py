"""
Payload handlers yielding the raw XBRL instance of a filing.
"""

import logging
import shutil
import tempfile
import uuid
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

from .exceptions import FilingPayloadError


logger = logging.getLogger(__name__)

PUBLIC_DOC_MARKER = "PublicDoc"
XBRL_SUFFIX = ".xbrl"


class FilingPayload(ABC):
    """Abstract base class for filing payloads."""

    @abstractmethod
    def validate(self) -> bool:
        """Validate the payload source."""
        pass

    @abstractmethod
    def read_bytes(self) -> bytes:
        """Return the decompressed XBRL instance document."""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Clean up temporary resources."""
        pass


class BytesPayload(FilingPayload):
    """Payload already held in memory."""

    def __init__(self, data: bytes):
        self.data = data

    def validate(self) -> bool:
        return bool(self.data)

    def read_bytes(self) -> bytes:
        if not self.data:
            raise FilingPayloadError("Filing payload is empty")
        return self.data

    def cleanup(self) -> None:
        """Release the in-memory document."""
        self.data = b""


class LocalFilePayload(FilingPayload):
    """Handler for a local ``.xbrl`` file."""

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)

    def validate(self) -> bool:
        return self.file_path.exists() and self.file_path.is_file()

    def read_bytes(self) -> bytes:
        try:
            return self.file_path.read_bytes()
        except OSError as exc:
            raise FilingPayloadError(f"Cannot read {self.file_path}: {exc}") from exc

    def cleanup(self) -> None:
        """No cleanup needed for local files."""
        pass


class ZipPayload(FilingPayload):
    """Handler for EDINET document archives.

    Only members under ``PublicDoc`` with the ``.xbrl`` extension are
    extracted; when several exist the last one in archive order is used.
    """

    def __init__(self, zip_path: Optional[str] = None, temp_dir: Optional[Path] = None):
        self.zip_path = Path(zip_path) if zip_path else None
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.extract_dir: Optional[Path] = None
        self.instance_file: Optional[Path] = None

    def validate(self) -> bool:
        """Validate ZIP file exists and is readable."""
        return (
            self.zip_path is not None
            and self.zip_path.exists()
            and zipfile.is_zipfile(self.zip_path)
        )

    def read_bytes(self) -> bytes:
        return self.extract().read_bytes()

    def extract(self) -> Path:
        """
        Extract the instance document and return its path.

        Raises:
            FilingPayloadError: If the archive is unreadable or has no instance
        """
        if self.instance_file and self.instance_file.exists():
            return self.instance_file

        if not self.validate():
            raise FilingPayloadError(f"Not a readable ZIP archive: {self.zip_path}")

        self.extract_dir = self.temp_dir / f"edinet_{uuid.uuid4().hex}"
        self.extract_dir.mkdir(parents=True, exist_ok=True)

        try:
            with zipfile.ZipFile(self.zip_path, "r") as zip_ref:
                for member in zip_ref.infolist():
                    if member.is_dir() or not is_instance_member(member.filename):
                        continue
                    target = self.extract_dir / PurePosixPath(member.filename).name
                    with zip_ref.open(member) as source, open(target, "wb") as dest:
                        shutil.copyfileobj(source, dest)
                    self.instance_file = target
        except zipfile.BadZipFile as exc:
            raise FilingPayloadError(f"Corrupt ZIP archive {self.zip_path}: {exc}") from exc

        if self.instance_file is None:
            raise FilingPayloadError(
                f"No {PUBLIC_DOC_MARKER} {XBRL_SUFFIX} document in {self.zip_path}"
            )

        logger.debug(f"Extracted {self.instance_file.name} from {self.zip_path}")
        return self.instance_file

    def cleanup(self) -> None:
        """Remove extracted files."""
        if self.extract_dir and self.extract_dir.exists():
            shutil.rmtree(self.extract_dir)
        self.extract_dir = None
        self.instance_file = None


def is_instance_member(name: str) -> bool:
    return PUBLIC_DOC_MARKER in name and PurePosixPath(name).suffix.lower() == XBRL_SUFFIX


def create_payload(input_path: str, temp_dir: Optional[Path] = None) -> FilingPayload:
    """Create the payload handler matching a local input path."""
    input_file = Path(input_path)

    if not input_file.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    if input_path.lower().endswith(".zip"):
        return ZipPayload(input_path, temp_dir)

    return LocalFilePayload(input_path)
