"""Veo video generation service.

This module wraps the long-running ``predictLongRunning`` operation of the
Generative Language API.  ``VideoService.generate_video`` drives one request
from submission to a downloaded :class:`VideoArtifact`:

    Idle -> Submitting -> Polling -> Finalizing -> Downloading -> Done

Any stage may end in ``Failed``; every failure reaches the caller as a
:class:`VideoGenerationError` whose ``kind`` tells which stage broke.

The API key is an explicit argument.  It is sent in the ``x-goog-api-key``
header for the operation calls and appended to the download link, and it is
masked out of every message this module raises or logs.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from config import VEO_API_URL, VEO_DOWNLOAD_TIMEOUT, VEO_MODEL, VEO_REQUEST_TIMEOUT
from utils import redact
from .artifact import VideoArtifact
from .settings import POLL_INTERVAL, VIDEO_FILENAME, VIDEO_MIME_TYPE


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class ErrorKind(str, enum.Enum):
    SUBMISSION_FAILED = "submission_failed"
    POLL_FAILED = "poll_failed"
    ARTIFACT_MISSING = "artifact_missing"
    DOWNLOAD_FAILED = "download_failed"
    UNKNOWN = "unknown"


class JobPhase(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    FINALIZING = "finalizing"
    DOWNLOADING = "downloading"
    DONE = "done"
    FAILED = "failed"


class VideoGenerationError(RuntimeError):
    """Raised when a video cannot be generated."""

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.body = body


@dataclass(frozen=True)
class JobHandle:
    """Snapshot of a remote operation as last reported by the service."""

    name: str
    done: bool = False
    response: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], *, fallback_name: str = "") -> "JobHandle":
        response = payload.get("response")
        error = payload.get("error")
        return cls(
            name=str(payload.get("name") or fallback_name or ""),
            done=bool(payload.get("done")),
            response=response if isinstance(response, dict) else None,
            error=error if isinstance(error, dict) else None,
        )


class VideoService:
    """Client for the Veo long-running video generation API."""

    _MODEL = VEO_MODEL
    _REQUEST_TIMEOUT = VEO_REQUEST_TIMEOUT
    _DOWNLOAD_TIMEOUT = VEO_DOWNLOAD_TIMEOUT
    _POLL_INTERVAL = POLL_INTERVAL
    _SAMPLE_COUNT = 1

    def __init__(self, api_key: str) -> None:
        key = (api_key or "").strip()
        if not key:
            raise VideoGenerationError("An API key is required to generate videos.")

        self._api_key = key
        self._base_url = VEO_API_URL.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "x-goog-api-key": self._api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "veo-studio-bot/1.0",
            }
        )
        self.phase = JobPhase.IDLE

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def generate_video(
        self,
        prompt: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> VideoArtifact:
        """Run one generation request to completion and return the video."""

        notify = on_progress or (lambda _message: None)

        try:
            notify("Initializing video generation...")
            handle = self.start_job(prompt)
            notify("Operation started. This may take a few minutes...")

            self._set_phase(JobPhase.POLLING)
            attempt = 0
            while not handle.done:
                attempt += 1
                notify(f"Processing... (Status check {attempt})")
                time.sleep(self._POLL_INTERVAL)
                handle = self.refresh_job(handle, attempt=attempt)

            self._set_phase(JobPhase.FINALIZING)
            notify("Finalizing video render...")
            video_uri = self.extract_video_uri(handle)

            self._set_phase(JobPhase.DOWNLOADING)
            notify("Downloading video data...")
            content, mime_type = self.download(video_uri)

            notify("Preparing local video file...")
            artifact = VideoArtifact(content, mime_type=mime_type, filename=VIDEO_FILENAME)
        except VideoGenerationError as exc:
            self._set_phase(JobPhase.FAILED)
            logger.error(
                "Video generation failed",
                extra={"kind": exc.kind.value, "status": exc.status, "error": str(exc)},
            )
            raise
        except Exception as exc:
            self._set_phase(JobPhase.FAILED)
            logger.exception("Unexpected error during video generation")
            detail = self._redact(str(exc)).strip()
            if detail:
                message = f"An error occurred: {detail}"
            else:
                message = "An unknown error occurred during video generation."
            raise VideoGenerationError(message, kind=ErrorKind.UNKNOWN) from exc

        self._set_phase(JobPhase.DONE)
        logger.info(
            "Video generated",
            extra={"operation": handle.name, "polls": attempt, "size": artifact.size},
        )
        return artifact

    def start_job(self, prompt: str) -> JobHandle:
        """Submit the prompt and return the handle of the new operation."""

        self._set_phase(JobPhase.SUBMITTING)
        payload: Dict[str, Any] = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": self._SAMPLE_COUNT},
        }

        logger.debug(
            "Submitting video generation job",
            extra={"model": self._MODEL, "prompt_length": len(prompt or "")},
        )
        data = self._request(
            "POST",
            f"/models/{self._MODEL}:predictLongRunning",
            json=payload,
            kind=ErrorKind.SUBMISSION_FAILED,
            context="Could not start video generation",
        )

        handle = JobHandle.from_payload(data)
        if not handle.name and not handle.done:
            raise VideoGenerationError(
                "Could not start video generation: the response did not include an operation name.",
                kind=ErrorKind.SUBMISSION_FAILED,
            )

        logger.info("Veo operation created", extra={"operation": handle.name, "done": handle.done})
        return handle

    def refresh_job(self, handle: JobHandle, *, attempt: int | None = None) -> JobHandle:
        """Fetch the latest state of ``handle`` and return it as a new handle."""

        context = f"Status check {attempt} failed" if attempt else "Status check failed"
        if not handle.name:
            raise VideoGenerationError(
                f"{context}: the operation has no name to poll.",
                kind=ErrorKind.POLL_FAILED,
            )

        data = self._request(
            "GET",
            f"/{handle.name.lstrip('/')}",
            kind=ErrorKind.POLL_FAILED,
            context=context,
        )
        refreshed = JobHandle.from_payload(data, fallback_name=handle.name)
        logger.debug("Operation %s done=%s", refreshed.name, refreshed.done)
        return refreshed

    def extract_video_uri(self, handle: JobHandle) -> str:
        """Return the download link of the first generated video."""

        if handle.error:
            reason = self._extract_error({"error": handle.error}) or "the operation failed"
            raise VideoGenerationError(
                f"Failed to retrieve video download link: {self._redact(reason)}",
                kind=ErrorKind.ARTIFACT_MISSING,
            )

        response = handle.response or {}
        result = response.get("generateVideoResponse")
        if not isinstance(result, dict):
            result = response

        samples = result.get("generatedSamples")
        if not isinstance(samples, list):
            samples = result.get("generatedVideos")

        uri = ""
        if isinstance(samples, list) and samples and isinstance(samples[0], dict):
            video = samples[0].get("video")
            if isinstance(video, dict):
                uri = self._normalise_text(video.get("uri"))

        if uri:
            return uri

        message = "Failed to retrieve video download link from the operation response."
        reasons = result.get("raiMediaFilteredReasons")
        if isinstance(reasons, list) and reasons:
            message = f"{message} {'; '.join(str(reason) for reason in reasons)}"
        logger.error("No video link in Veo response", extra={"operation": handle.name})
        raise VideoGenerationError(message, kind=ErrorKind.ARTIFACT_MISSING)

    def download(self, video_uri: str) -> Tuple[bytes, str]:
        """Fetch the video bytes; the key is appended to the link as ``key=``."""

        separator = "&" if "?" in video_uri else "?"
        url = f"{video_uri}{separator}key={self._api_key}"

        try:
            # The link already carries the key; keep the header off the
            # delivery host and any redirect target.
            response = self._send(
                "GET",
                url,
                timeout=self._DOWNLOAD_TIMEOUT,
                headers={"x-goog-api-key": None},
            )
        except requests.RequestException as exc:
            raise VideoGenerationError(
                f"Failed to download video file: {self._redact(str(exc))}",
                kind=ErrorKind.DOWNLOAD_FAILED,
            ) from exc

        status = response.status_code
        if not 200 <= status < 300:
            body = self._redact(getattr(response, "text", "") or "").strip()
            reason = self._normalise_text(getattr(response, "reason", ""))
            summary = f"{status} {reason}".strip()
            message = f"Failed to download video file: {summary}"
            if body:
                message = f"{message} - {body}"
            raise VideoGenerationError(
                message,
                kind=ErrorKind.DOWNLOAD_FAILED,
                status=status,
                body=body,
            )

        headers = getattr(response, "headers", None) or {}
        mime_type = str(headers.get("Content-Type") or "").split(";")[0].strip()
        return response.content, mime_type or VIDEO_MIME_TYPE

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_phase(self, phase: JobPhase) -> None:
        if phase is not self.phase:
            logger.debug("Video job phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _send(
        self,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        timeout: int | float | None = None,
        headers: Optional[Dict[str, Optional[str]]] = None,
    ) -> requests.Response:
        return self._session.request(
            method,
            url,
            json=json,
            headers=headers,
            timeout=timeout or self._REQUEST_TIMEOUT,
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        kind: ErrorKind,
        context: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = self._send(method, url, json=json)
        except requests.RequestException as exc:
            detail = self._redact(str(exc))
            logger.warning("Veo request failed", extra={"path": path, "error": detail})
            raise VideoGenerationError(f"{context}: {detail}", kind=kind) from exc

        if response.status_code >= 400:
            payload = self._safe_json(response, default={})
            body = self._redact(getattr(response, "text", "") or "")
            message = (
                self._extract_error(payload)
                or self._normalise_text(getattr(response, "reason", ""))
                or f"HTTP {response.status_code}"
            )
            raise VideoGenerationError(
                f"{context}: {self._redact(message)}",
                kind=kind,
                status=response.status_code,
                body=body,
            )

        payload = self._safe_json(response)
        if payload is None:
            raise VideoGenerationError(
                f"{context}: the service returned an unreadable response.",
                kind=kind,
                status=response.status_code,
            )
        return payload

    def _redact(self, text: Any) -> str:
        return redact(text, self._api_key)

    @staticmethod
    def _safe_json(
        response: requests.Response,
        default: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            parsed = response.json()
        except ValueError:
            return default

        if isinstance(parsed, dict):
            return parsed

        return default

    @classmethod
    def _extract_error(cls, payload: Dict[str, Any]) -> str:
        error = payload.get("error")
        if isinstance(error, dict):
            text = cls._normalise_text(error.get("message") or error.get("status"))
            if text:
                return text
        elif error:
            return cls._normalise_text(error)

        return cls._normalise_text(payload.get("message"))

    @staticmethod
    def _normalise_text(value: Any) -> str:
        if isinstance(value, str):
            return value.strip()
        if value is None:
            return ""
        return str(value).strip()
