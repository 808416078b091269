import sys
import pathlib

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))
from types import SimpleNamespace

import pytest

import cartithyia.core.capture as capture
import cartithyia.core.frame as frame_mod
from cartithyia.core.config import Settings
from cartithyia.core.errors import FilesystemError, NotAFileError, SubprocessError
from cartithyia.core.validation import FrameRequest

JPEG = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"


def fake_ffmpeg(monkeypatch, stdout=JPEG, returncode=0, stderr=b""):
    calls = {"run": [], "which": []}

    def fake_which(name):
        calls["which"].append(name)
        return f"/usr/bin/{name}"

    def fake_run(cmd, stdin=None, capture_output=False):
        calls["run"].append(cmd)
        calls["stdin"] = stdin.read() if stdin is not None else None
        return SimpleNamespace(returncode=returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(capture.shutil, "which", fake_which)
    monkeypatch.setattr(capture.subprocess, "run", fake_run)
    return calls


def test_extract_frame_writes_jpeg(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"mp4-bytes")
    dst = tmp_path / "frame.jpg"
    calls = fake_ffmpeg(monkeypatch)

    size = frame_mod.extract_frame(FrameRequest(str(src), str(dst)))

    assert size == len(JPEG)
    assert dst.read_bytes() == JPEG
    assert calls["run"][0][1:] == [
        "-i", "pipe:0", "-vframes", "1", "-f", "image2", "-vcodec", "mjpeg", "pipe:1",
    ]
    assert calls["stdin"] == b"mp4-bytes"


def test_extract_frame_uses_configured_ffmpeg(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"x")
    calls = fake_ffmpeg(monkeypatch)

    frame_mod.extract_frame(
        FrameRequest(str(src), str(tmp_path / "f.jpg")), Settings(ffmpeg="ffmpeg6")
    )

    assert calls["which"] == ["ffmpeg6"]
    assert calls["run"][0][0] == "/usr/bin/ffmpeg6"


def test_directory_source_is_not_a_file(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.mkdir()
    calls = fake_ffmpeg(monkeypatch)

    with pytest.raises(NotAFileError, match="directory"):
        frame_mod.extract_frame(FrameRequest(str(src), str(tmp_path / "f.jpg")))

    assert calls["run"] == []


def test_missing_source_writes_nothing(tmp_path, monkeypatch):
    dst = tmp_path / "out.jpg"
    calls = fake_ffmpeg(monkeypatch)

    with pytest.raises(FilesystemError):
        frame_mod.extract_frame(FrameRequest(str(tmp_path / "missing.mp4"), str(dst)))

    assert not dst.exists()
    assert calls["run"] == []


def test_ffmpeg_failure_carries_stderr(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"garbage")
    dst = tmp_path / "out.jpg"
    fake_ffmpeg(monkeypatch, stdout=b"", returncode=1, stderr=b"moov atom not found\n")

    with pytest.raises(SubprocessError) as err:
        frame_mod.extract_frame(FrameRequest(str(src), str(dst)))

    assert err.value.returncode == 1
    assert "exited with status 1" in str(err.value)
    assert "moov atom not found" in str(err.value)
    assert not dst.exists()


def test_launch_failure_is_a_subprocess_error(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"x")
    fake_ffmpeg(monkeypatch)

    def boom(cmd, stdin=None, capture_output=False):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(capture.subprocess, "run", boom)

    with pytest.raises(SubprocessError, match="failed to launch"):
        frame_mod.extract_frame(FrameRequest(str(src), str(tmp_path / "f.jpg")))


def test_missing_ffmpeg(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"x")
    monkeypatch.setattr(capture.shutil, "which", lambda name: None)

    with pytest.raises(SubprocessError, match="not found in PATH"):
        frame_mod.extract_frame(FrameRequest(str(src), str(tmp_path / "f.jpg")))


def test_extract_frame_is_idempotent(tmp_path, monkeypatch):
    src = tmp_path / "clip.mp4"
    src.write_bytes(b"mp4")
    dst = tmp_path / "frame.jpg"
    fake_ffmpeg(monkeypatch)

    frame_mod.extract_frame(FrameRequest(str(src), str(dst)))
    first = dst.read_bytes()
    frame_mod.extract_frame(FrameRequest(str(src), str(dst)))

    assert dst.read_bytes() == first
