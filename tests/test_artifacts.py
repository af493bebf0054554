"""Tests for console capture, screenshots and the failure artifact recorder."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from gero_e2e.artifacts import ArtifactRecorder, is_noise, setup_console_capture, take_screenshot
from tests.fake_page import FakePage


def console(kind, text):
    return SimpleNamespace(type=kind, text=text)


def test_noise_filter():
    assert is_noise("DevTools listening on ws://127.0.0.1")
    assert is_noise("Unchecked runtime.lastError: extension context invalidated")
    assert not is_noise("TypeError: wallet is undefined")


def test_console_capture_logs_errors_and_warnings(caplog):
    page = FakePage()
    captured = setup_console_capture(page)

    with caplog.at_level(logging.DEBUG, logger="gero_e2e.page"):
        page.emit("console", console("error", "Failed to fetch"))
        page.emit("console", console("warning", "Deprecated API"))
        page.emit("console", console("log", "mounted"))
        page.emit("console", console("error", "DevTools failed to load source map"))
        page.emit("pageerror", SimpleNamespace(message="Uncaught ReferenceError"))

    assert captured == [
        ("error", "Failed to fetch"),
        ("warning", "Deprecated API"),
        ("log", "mounted"),
        ("pageerror", "Uncaught ReferenceError"),
    ]
    assert "[PAGE ERROR] Failed to fetch" in caplog.text
    assert "[PAGE WARN] Deprecated API" in caplog.text
    assert "[PAGE EXCEPTION] Uncaught ReferenceError" in caplog.text
    # Plain console output is only logged in debug mode
    assert "[PAGE] mounted" not in caplog.text


def test_console_capture_debug_mode(caplog):
    page = FakePage()
    setup_console_capture(page, debug=True)

    with caplog.at_level(logging.DEBUG, logger="gero_e2e.page"):
        page.emit("console", console("info", "wallet ready"))

    assert "[PAGE] wallet ready" in caplog.text


@pytest.mark.asyncio
async def test_take_screenshot_uses_safe_timestamped_name(tmp_path):
    path = await take_screenshot(FakePage(), "test_send[wallet 1]", tmp_path / "shots")

    assert path.parent == tmp_path / "shots"
    assert path.name.startswith("test_send-wallet-1-")
    assert path.suffix == ".png"
    assert path.exists()


def make_context():
    context = MagicMock()
    context.tracing.start = AsyncMock()
    context.tracing.stop = AsyncMock()
    return context


@pytest.mark.asyncio
async def test_recorder_keeps_artifacts_on_failure(tmp_path):
    context = make_context()
    recorder = ArtifactRecorder(context, tmp_path, "test_restore_wallet")

    await recorder.start()
    saved = await recorder.stop(FakePage(), failed=True)

    trace = tmp_path / "test_restore_wallet-trace.zip"
    assert saved[-1] == trace
    assert saved[0].suffix == ".png" and saved[0].exists()
    context.tracing.start.assert_awaited_once_with(screenshots=True, snapshots=True)
    context.tracing.stop.assert_awaited_once_with(path=str(trace))


@pytest.mark.asyncio
async def test_recorder_discards_trace_on_success(tmp_path):
    context = make_context()
    recorder = ArtifactRecorder(context, tmp_path, "test_create_wallet")

    await recorder.start()
    assert await recorder.stop(FakePage(), failed=False) == []

    context.tracing.stop.assert_awaited_once_with()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_recorder_video_cleanup(tmp_path):
    video_file = tmp_path / "video.webm"
    video_file.write_bytes(b"webm")
    page = FakePage()
    page.video = SimpleNamespace(path=AsyncMock(return_value=str(video_file)))
    no_video = FakePage()
    no_video.video = None
    recorder = ArtifactRecorder(make_context(), tmp_path, "test_send")

    await recorder.remember_videos([page, no_video])
    assert recorder.videos == [video_file]

    recorder.discard_videos()
    assert not video_file.exists()
    assert recorder.videos == []
