import asyncio
import base64
import logging
import sys
import types
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from conftest import data_uri, png_bytes
from content.resources import ResourceLoader, is_svg_markup, split_data_uri, temporary_svg_file
from errors import DecodeError

SVG = '<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"><rect width="4" height="4" fill="red"/></svg>'


@pytest.fixture
def fake_cairosvg(monkeypatch):
    """cairosvg 대신 호출 인자를 기록하고 PNG를 돌려주는 모듈."""
    module = types.ModuleType("cairosvg")
    module.calls = []
    module.error = None

    def svg2png(url=None, output_width=None, output_height=None, **kwargs):
        path = Path(url)
        module.calls.append({"path": path, "existed": path.exists(), "markup": path.read_text(encoding="utf-8"),
                             "size": (output_width, output_height)})
        if module.error:
            raise module.error
        return png_bytes((output_width or 4, output_height or 4), (0, 0, 255, 255))

    module.svg2png = svg2png
    monkeypatch.setitem(sys.modules, "cairosvg", module)
    return module


def test_decode_primary_data_uri():
    img = asyncio.run(ResourceLoader().decode_primary(data_uri((30, 20))))
    assert img.size == (30, 20)
    assert img.mode == "RGBA"


def test_decode_primary_bare_base64():
    encoded = base64.b64encode(png_bytes((7, 9))).decode("ascii")
    img = asyncio.run(ResourceLoader().decode_primary(encoded))
    assert img.size == (7, 9)



def test_decode_primary_applies_exif_orientation():
    exif = Image.Exif()
    exif[0x0112] = 6  # 시계 방향 90도 회전
    buf = BytesIO()
    Image.new("RGB", (30, 20), (255, 0, 0)).save(buf, format="JPEG", exif=exif.tobytes())
    encoded = "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")

    img = asyncio.run(ResourceLoader().decode_primary(encoded))
    assert img.size == (20, 30)
    assert img.mode == "RGBA"

@pytest.mark.parametrize(
    "encoded",
    [
        "",
        "   ",
        "data:image/png;base64,!!!!",
        "data:image/png;base64",
        "data:image/png;base64," + base64.b64encode(b"not an image").decode("ascii"),
        "data:image/png;base64," + base64.b64encode(png_bytes()[:40]).decode("ascii"),
        "definitely not base64 %%%",
    ],
)
def test_decode_primary_rejects_malformed(encoded):
    with pytest.raises(DecodeError):
        asyncio.run(ResourceLoader().decode_primary(encoded))


def test_decode_primary_rejects_non_string():
    with pytest.raises(DecodeError):
        asyncio.run(ResourceLoader().decode_primary(None))


def test_split_data_uri():
    assert split_data_uri("data:image/svg+xml,%3Csvg%3E") == ("image/svg+xml", b"<svg>")
    mime, data = split_data_uri("data:image/png;base64,aGk=")
    assert (mime, data) == ("image/png", b"hi")
    with pytest.raises(ValueError):
        split_data_uri("image/png;base64,aGk=")


def test_is_svg_markup():
    assert is_svg_markup("  <svg></svg>")
    assert is_svg_markup('<?xml version="1.0"?><svg/>')
    assert not is_svg_markup("https://example.com/logo.svg")


def test_temporary_svg_file_is_removed_on_error():
    with pytest.raises(RuntimeError):
        with temporary_svg_file(SVG) as path:
            assert path.read_text(encoding="utf-8") == SVG
            raise RuntimeError("boom")
    assert not path.exists()


def test_svg_logo_uses_temporary_file(fake_cairosvg):
    logo = asyncio.run(ResourceLoader().decode_logo(SVG, size=16))

    assert logo is not None
    assert logo.size == (16, 16)
    [call] = fake_cairosvg.calls
    assert call["existed"]
    assert call["markup"] == SVG
    assert call["size"] == (16, 16)
    assert not call["path"].exists()


def test_svg_logo_failure_releases_file_and_returns_none(fake_cairosvg, caplog):
    fake_cairosvg.error = ValueError("bad svg")
    with caplog.at_level(logging.WARNING, logger="content.resources"):
        logo = asyncio.run(ResourceLoader().decode_logo(SVG))

    assert logo is None
    [call] = fake_cairosvg.calls
    assert not call["path"].exists()
    assert "bad svg" in caplog.text


def test_svg_data_uri_logo(fake_cairosvg):
    uri = "data:image/svg+xml;base64," + base64.b64encode(SVG.encode("utf-8")).decode("ascii")
    logo = asyncio.run(ResourceLoader().decode_logo(uri, size=8))
    assert logo.size == (8, 8)
    assert fake_cairosvg.calls[0]["markup"] == SVG


def test_raster_data_uri_logo():
    logo = asyncio.run(ResourceLoader().decode_logo(data_uri((5, 5))))
    assert logo.size == (5, 5)


@pytest.mark.parametrize("spec", ["::not a url::", "ftp://example.com/logo.png", "", None])
def test_malformed_logo_is_not_fatal(spec, caplog):
    with caplog.at_level(logging.WARNING, logger="content.resources"):
        assert asyncio.run(ResourceLoader().decode_logo(spec)) is None
    assert caplog.records


def test_url_logo_is_fetched(monkeypatch):
    seen = []

    async def fake_fetch(self, url, timeout):
        seen.append((url, timeout))
        return png_bytes((12, 12))

    monkeypatch.setattr(ResourceLoader, "_fetch_url", fake_fetch)
    logo = asyncio.run(ResourceLoader().decode_logo("https://example.com/logo.png", timeout=3))

    assert logo.size == (12, 12)
    assert seen == [("https://example.com/logo.png", 3)]


def test_url_logo_fetch_error_is_not_fatal(monkeypatch):
    async def fake_fetch(self, url, timeout):
        raise ConnectionError("unreachable")

    monkeypatch.setattr(ResourceLoader, "_fetch_url", fake_fetch)
    assert asyncio.run(ResourceLoader().decode_logo("https://example.com/logo.png")) is None


def test_hung_logo_fetch_hits_deadline(monkeypatch, caplog):
    async def slow_fetch(self, url, timeout):
        await asyncio.sleep(10)
        return b""

    monkeypatch.setattr(ResourceLoader, "_fetch_url", slow_fetch)
    with caplog.at_level(logging.WARNING, logger="content.resources"):
        assert asyncio.run(ResourceLoader().decode_logo("https://example.com/logo.png", timeout=0.05)) is None
    assert "시간 초과" in caplog.text
