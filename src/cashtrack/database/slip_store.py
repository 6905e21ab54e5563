"""Blob store for deposit slip images.

Slips live under ``<root>/deposit_slips/<deposit_id>``; the URL handed back
after an upload is a ``file://`` URL that can be stored on the deposit and
later passed to :meth:`FileSlipStore.delete`.
"""

import base64
import binascii
import logging
import mimetypes
import re
from pathlib import Path
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

from cashtrack.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SLIP_FOLDER = "deposit_slips"

_DATA_URI = re.compile(r"^data:(?P<media>[^,;]*)(?P<params>(;[^,;]+)*),(?P<data>.*)$", re.DOTALL)


def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Decode a ``data:`` URI into (media type, payload bytes).

    Raises:
        ValidationError: If the text is not a well-formed data URI
    """
    match = _DATA_URI.match(data_uri.strip())
    if match is None:
        raise ValidationError("Deposit slip must be a data URI", field="deposit_slip")

    media_type = match.group("media") or "text/plain"
    params = match.group("params") or ""
    data = match.group("data")
    if params.endswith(";base64"):
        try:
            return media_type, base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Deposit slip has invalid base64 data: {e}", field="deposit_slip")
    return media_type, unquote_to_bytes(data)


def file_to_data_uri(path: Path) -> str:
    """Read an image file into a base64 data URI."""
    media_type = mimetypes.guess_type(str(path))[0] or "application/octet-stream"
    encoded = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


class FileSlipStore:
    """Filesystem-backed blob store for deposit slips."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def path_for(self, key: str) -> Path:
        """Path of the blob stored under ``key`` (a deposit ID)."""
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValidationError(f"Invalid slip key '{key}'", field="deposit_slip")
        return self.root / SLIP_FOLDER / key

    def upload_data_uri(self, key: str, data_uri: str) -> str:
        """Store a data URI under ``key`` and return its retrievable URL."""
        media_type, payload = decode_data_uri(data_uri)
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        logger.info("Stored deposit slip %s (%s, %d bytes)", key, media_type, len(payload))
        return path.as_uri()

    def _resolve_reference(self, reference: str) -> Path:
        if reference.startswith("file:"):
            path = Path(url2pathname(urlparse(reference).path)).resolve()
            if path.parent != (self.root / SLIP_FOLDER):
                raise ValidationError(f"Slip '{reference}' is outside the slip store", field="deposit_slip")
            return path
        return self.path_for(reference)

    def exists(self, reference: str) -> bool:
        """Whether a blob exists for a URL or key."""
        return self._resolve_reference(reference).is_file()

    def delete(self, reference: str) -> None:
        """Delete a blob by URL or key.

        Raises:
            NotFoundError: If no blob exists for the reference
        """
        path = self._resolve_reference(reference)
        if not path.is_file():
            raise NotFoundError(f"Deposit slip '{reference}' not found")
        path.unlink()
        logger.info("Deleted deposit slip %s", path.name)
