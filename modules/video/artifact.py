"""In-memory holder for a downloaded video."""

from __future__ import annotations

import io
from typing import Optional


class VideoArtifact:
    """Downloaded video bytes exposed as short-lived file objects.

    ``open()`` returns a fresh named ``BytesIO`` each time, which is what
    ``TeleBot.send_video`` uploads.  ``release()`` drops the buffer; the
    session calls it once a newer generation replaces this one.
    """

    def __init__(
        self,
        data: bytes,
        *,
        mime_type: str = "video/mp4",
        filename: str = "generated-video.mp4",
    ) -> None:
        self._data: Optional[bytes] = bytes(data)
        self.mime_type = mime_type
        self.filename = filename

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def size(self) -> int:
        return len(self._data or b"")

    def read(self) -> bytes:
        if self._data is None:
            raise ValueError("video artifact has been released")
        return self._data

    def open(self) -> io.BytesIO:
        buffer = io.BytesIO(self.read())
        buffer.name = self.filename
        return buffer

    def release(self) -> None:
        self._data = None

    def __repr__(self) -> str:
        state = "released" if self.released else f"{self.size} bytes"
        return f"<VideoArtifact {self.filename} {state}>"
