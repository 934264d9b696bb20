import io
import struct
import subprocess

import pytest
from PIL import Image

from screenshot2png.clipboard import factory
from screenshot2png.clipboard.base import ScreenshotClipboard, png_to_dib, png_to_tiff
from screenshot2png.clipboard.linux import LinuxClipboard


def png_bytes(mode: str = "RGB", size=(4, 3)) -> bytes:
    output = io.BytesIO()
    Image.new(mode, size, (10, 20, 30, 128) if mode == "RGBA" else (10, 20, 30)).save(output, "PNG")
    return output.getvalue()


def test_dib_has_no_file_header():
    dib = png_to_dib(png_bytes())

    header_size, width, height = struct.unpack("<Iii", dib[:12])
    assert header_size == 40
    assert (width, height) == (4, 3)


def test_dib_flattens_alpha():
    dib = png_to_dib(png_bytes("RGBA"))

    assert struct.unpack("<H", dib[14:16])[0] == 24


def test_tiff_keeps_pixels():
    png = png_bytes()

    with Image.open(io.BytesIO(png_to_tiff(png))) as tiff:
        assert tiff.format == "TIFF"
        assert tiff.convert("RGB").tobytes() == Image.open(io.BytesIO(png)).convert("RGB").tobytes()


def test_backend_errors_become_false():
    class Broken(ScreenshotClipboard):
        def _set_screenshot(self, png):
            raise OSError("clipboard locked")

    assert Broken().set_screenshot(b"png") is False


def test_factory_selects_platform(monkeypatch):
    monkeypatch.setattr(factory.platform, "system", lambda: "Linux")
    assert factory.get_clipboard_class() is LinuxClipboard

    monkeypatch.setattr(factory.platform, "system", lambda: "Plan9")
    with pytest.raises(NotImplementedError):
        factory.get_clipboard_class()


def test_linux_prefers_wl_copy_on_wayland(monkeypatch):
    runs = []
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-0")
    monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(subprocess, "run", lambda command, **kwargs: runs.append((command, kwargs)))

    assert LinuxClipboard().set_screenshot(b"png") is True
    assert runs[0][0] == ["wl-copy", "--type", "image/png"]
    assert runs[0][1]["input"] == b"png"


def test_linux_falls_back_to_xclip(monkeypatch):
    runs = []
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/xclip" if name == "xclip" else None)
    monkeypatch.setattr(subprocess, "run", lambda command, **kwargs: runs.append(command))

    assert LinuxClipboard().set_screenshot(b"png") is True
    assert runs == [["xclip", "-selection", "clipboard", "-t", "image/png"]]


def test_linux_without_tools(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda name: None)

    assert LinuxClipboard().set_screenshot(b"png") is False


def test_linux_command_failure(monkeypatch):
    def fail(command, **kwargs):
        raise subprocess.CalledProcessError(1, command)

    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setattr("shutil.which", lambda name: "/usr/bin/xclip")
    monkeypatch.setattr(subprocess, "run", fail)

    assert LinuxClipboard().set_screenshot(b"png") is False
