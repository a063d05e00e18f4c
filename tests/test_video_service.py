"""Tests for the Veo video generation workflow."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from modules.video.service import (
    ErrorKind,
    JobHandle,
    JobPhase,
    VideoGenerationError,
    VideoService,
)


class DummyResponse:
    """Simple stand-in for ``requests.Response`` used in the tests."""

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        status_code: int = 200,
        *,
        content: bytes = b"",
        text: str = "",
        reason: str = "OK",
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.content = content
        self.text = text
        self.reason = reason
        self.headers = headers or {}

    def json(self) -> Dict[str, Any]:  # noqa: D401 - mimics ``requests.Response``
        """Return the JSON payload."""

        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def pending(name: str = "operations/op-1") -> DummyResponse:
    return DummyResponse({"name": name, "done": False})


def finished(uri: Optional[str] = "https://x/video?id=1", **extra: Any) -> DummyResponse:
    samples = [{"video": {"uri": uri}}] if uri else []
    result: Dict[str, Any] = {"generatedSamples": samples}
    result.update(extra)
    return DummyResponse(
        {"name": "operations/op-1", "done": True, "response": {"generateVideoResponse": result}}
    )


@pytest.fixture(autouse=True)
def sleeps(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    recorded: List[float] = []
    monkeypatch.setattr("modules.video.service.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch):
    """Queue responses for ``VideoService._send`` and record every call."""

    queue: List[Any] = []
    calls: List[tuple] = []

    def fake_send(self: VideoService, method: str, url: str, **_: Any) -> DummyResponse:  # noqa: ANN001
        calls.append((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(VideoService, "_send", fake_send)
    return queue, calls


def test_immediately_done_job_skips_polling(transport, sleeps) -> None:
    queue, calls = transport
    queue.extend([finished(), DummyResponse(content=b"\x00\x01", headers={"Content-Type": "video/mp4"})])
    progress: List[str] = []

    artifact = VideoService("k1").generate_video("a cat", progress.append)

    assert artifact.read() == b"\x00\x01"
    assert len(calls) == 2
    assert calls[0][0] == "POST" and calls[0][1].endswith(":predictLongRunning")
    assert calls[1] == ("GET", "https://x/video?id=1&key=k1")
    assert not any("Status check" in message for message in progress)
    assert sleeps == []


def test_single_poll_scenario(transport, sleeps) -> None:
    queue, calls = transport
    queue.extend([pending(), finished(), DummyResponse(content=b"\x00\x01")])
    progress: List[str] = []

    service = VideoService("k1")
    artifact = service.generate_video("a cat", progress.append)

    assert progress[:5] == [
        "Initializing video generation...",
        "Operation started. This may take a few minutes...",
        "Processing... (Status check 1)",
        "Finalizing video render...",
        "Downloading video data...",
    ]
    assert artifact.read() == b"\x00\x01"
    assert artifact.mime_type == "video/mp4"
    assert calls[1] == ("GET", f"{service._base_url}/operations/op-1")
    assert sleeps == [10.0]
    assert service.phase is JobPhase.DONE


def test_poll_messages_are_numbered_in_order(transport) -> None:
    queue, _ = transport
    queue.extend([pending(), pending(), pending(), finished(), DummyResponse(content=b"v")])
    progress: List[str] = []

    VideoService("k1").generate_video("a cat", progress.append)

    checks = [message for message in progress if "Status check" in message]
    assert checks == [f"Processing... (Status check {n})" for n in (1, 2, 3)]
    finalizing = progress.index("Finalizing video render...")
    assert progress.index("Operation started. This may take a few minutes...") < progress.index(checks[0])
    assert progress.index(checks[-1]) < finalizing < progress.index("Downloading video data...")


def test_empty_sample_list_is_artifact_missing(transport) -> None:
    queue, calls = transport
    queue.append(finished(uri=None))

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.ARTIFACT_MISSING
    assert len(calls) == 1


def test_missing_response_is_artifact_missing(transport) -> None:
    queue, calls = transport
    queue.append(DummyResponse({"name": "operations/op-1", "done": True}))

    service = VideoService("k1")
    with pytest.raises(VideoGenerationError) as excinfo:
        service.generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.ARTIFACT_MISSING
    assert service.phase is JobPhase.FAILED
    assert len(calls) == 1


def test_operation_error_is_reported_as_artifact_missing(transport) -> None:
    queue, _ = transport
    queue.append(
        DummyResponse(
            {"name": "operations/op-1", "done": True, "error": {"code": 3, "message": "prompt rejected"}}
        )
    )

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.ARTIFACT_MISSING
    assert "prompt rejected" in str(excinfo.value)


def test_filtered_output_reason_is_included(transport) -> None:
    queue, _ = transport
    queue.append(finished(uri=None, raiMediaFilteredReasons=["Unsafe content detected."]))

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    assert "Unsafe content detected." in str(excinfo.value)


def test_sdk_style_result_shape_is_accepted(transport) -> None:
    queue, calls = transport
    queue.extend(
        [
            DummyResponse(
                {
                    "name": "operations/op-2",
                    "done": True,
                    "response": {"generatedVideos": [{"video": {"uri": "https://x/files/abc"}}]},
                }
            ),
            DummyResponse(content=b"mp4"),
        ]
    )

    artifact = VideoService("k1").generate_video("a cat")

    assert artifact.read() == b"mp4"
    assert calls[1] == ("GET", "https://x/files/abc?key=k1")


def test_download_failure_carries_status_and_body(transport) -> None:
    queue, calls = transport
    queue.extend([finished(), DummyResponse(status_code=403, text="denied", reason="Forbidden")])

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    error = excinfo.value
    assert error.kind is ErrorKind.DOWNLOAD_FAILED
    assert error.status == 403
    assert error.body == "denied"
    assert "403" in str(error) and "denied" in str(error)
    assert len(calls) == 2


def test_submission_transport_error_keeps_original_text(transport) -> None:
    queue, calls = transport
    queue.append(requests.ConnectionError("connection refused"))
    progress: List[str] = []

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat", progress.append)

    assert excinfo.value.kind is ErrorKind.SUBMISSION_FAILED
    assert "connection refused" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
    assert len(calls) == 1
    assert progress == ["Initializing video generation..."]


def test_poll_http_error_is_poll_failed(transport) -> None:
    queue, _ = transport
    queue.extend(
        [
            pending(),
            DummyResponse({"error": {"code": 500, "message": "backend error"}}, status_code=500),
        ]
    )

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.POLL_FAILED
    assert excinfo.value.status == 500
    assert str(excinfo.value) == "Status check 1 failed: backend error"


def test_unreadable_submit_response_is_submission_failed(transport) -> None:
    queue, _ = transport
    queue.append(DummyResponse(None, text="<html>"))

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.SUBMISSION_FAILED


def test_api_key_is_masked_in_errors(transport) -> None:
    queue, _ = transport
    queue.extend(
        [
            finished(),
            requests.ConnectionError("Max retries exceeded with url: /video?id=1&key=secret-key-123"),
        ]
    )

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("secret-key-123").generate_video("a cat")

    assert excinfo.value.kind is ErrorKind.DOWNLOAD_FAILED
    assert "secret-key-123" not in str(excinfo.value)
    assert "key=***" in str(excinfo.value)


def test_unexpected_errors_are_wrapped_as_unknown(transport) -> None:
    def broken_sink(message: str) -> None:
        raise RuntimeError("sink broke")

    with pytest.raises(VideoGenerationError) as excinfo:
        VideoService("k1").generate_video("a cat", broken_sink)

    assert excinfo.value.kind is ErrorKind.UNKNOWN
    assert str(excinfo.value) == "An error occurred: sink broke"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_service_requires_an_api_key() -> None:
    with pytest.raises(VideoGenerationError):
        VideoService("   ")


def test_job_handle_from_payload_ignores_malformed_fields() -> None:
    handle = JobHandle.from_payload(
        {"done": True, "response": ["not", "a", "dict"], "error": "boom"},
        fallback_name="operations/previous",
    )

    assert handle == JobHandle(name="operations/previous", done=True)


def test_download_does_not_send_the_key_header(monkeypatch: pytest.MonkeyPatch) -> None:
    sent: List[requests.PreparedRequest] = []

    def fake_adapter_send(self, request, **_: Any) -> requests.Response:  # noqa: ANN001
        sent.append(request)
        response = requests.Response()
        response.status_code = 200
        response._content = b"mp4"
        response.headers["Content-Type"] = "video/mp4"
        response.url = request.url
        response.request = request
        return response

    monkeypatch.setattr(requests.adapters.HTTPAdapter, "send", fake_adapter_send)

    content, mime_type = VideoService("k1").download("https://x/video?id=1")

    assert (content, mime_type) == (b"mp4", "video/mp4")
    assert sent[0].url == "https://x/video?id=1&key=k1"
    assert "x-goog-api-key" not in sent[0].headers
