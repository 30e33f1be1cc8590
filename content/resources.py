"""이미지 리소스 모듈 — 원본 이미지와 푸터 로고(래스터 URL / 인라인 SVG)를 디코딩한다."""

import asyncio
import base64
import binascii
import contextlib
import logging
import os
import tempfile
from io import BytesIO
from pathlib import Path
from urllib.parse import unquote_to_bytes, urlsplit

from PIL import Image, ImageOps

from errors import DecodeError, LogoError

logger = logging.getLogger(__name__)

_SVG_MIME = "image/svg+xml"
_SVG_MARKERS = ("<svg", "<?xml")
_URL_SCHEMES = ("http", "https")


def is_svg_markup(spec: str) -> bool:
    """인라인 SVG 마크업인지 판별한다."""
    return spec.lstrip().lower().startswith(_SVG_MARKERS)


def split_data_uri(uri: str) -> tuple[str, bytes]:
    """data URI를 (MIME 타입, 바이트)로 나눈다. 형식이 틀리면 ValueError."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise ValueError("data URI 형식이 아닙니다")
    params = header[5:].split(";")
    mime = params[0].strip().lower() or "text/plain"
    if "base64" in (p.strip().lower() for p in params[1:]):
        return mime, base64.b64decode("".join(payload.split()), validate=True)
    return mime, unquote_to_bytes(payload)


def _open_image(data: bytes) -> Image.Image:
    """바이트를 RGBA 이미지로 디코딩한다 (픽셀까지 모두 읽음)."""
    img = Image.open(BytesIO(data))
    img.load()
    # 휴대폰 사진의 EXIF 회전 정보를 반영한다
    img = ImageOps.exif_transpose(img)
    return img.convert("RGBA")


def decode_image_data(encoded: str) -> Image.Image:
    """data URI 또는 순수 base64 문자열을 이미지로 디코딩한다."""
    try:
        if encoded.lstrip().lower().startswith("data:"):
            _, data = split_data_uri(encoded.strip())
        else:
            data = base64.b64decode("".join(encoded.split()), validate=True)
        if not data:
            raise DecodeError("이미지 데이터가 비어 있습니다")
        return _open_image(data)
    except DecodeError:
        raise
    except (binascii.Error, ValueError, OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"이미지 디코딩 실패: {e}") from e


@contextlib.contextmanager
def temporary_svg_file(markup: str):
    """SVG 마크업을 임시 파일로 쓰고 경로를 넘긴다. 나갈 때 항상 지운다."""
    fd, name = tempfile.mkstemp(prefix="card-logo-", suffix=".svg")
    path = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(markup)
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("임시 SVG 파일 해제: %s", path)


def rasterize_svg(markup: str, size: int | None = None) -> Image.Image:
    """SVG 마크업을 비트맵으로 변환한다."""
    import cairosvg

    with temporary_svg_file(markup) as path:
        png = cairosvg.svg2png(url=str(path), output_width=size, output_height=size)
    return _open_image(png)


def _describe(spec: str) -> str:
    """로그용으로 로고 지정 문자열을 줄인다."""
    spec = " ".join(str(spec).split())
    return spec if len(spec) <= 60 else spec[:57] + "..."


class ResourceLoader:
    """원본 이미지와 로고를 비동기로 디코딩한다.

    원본 이미지 실패는 DecodeError로 전체 작업을 중단시키지만,
    로고 실패는 경고만 남기고 None을 돌려준다.
    """

    def __init__(self, user_agent: str = "card-renderer"):
        self._user_agent = user_agent

    async def decode_primary(self, encoded_image: str, timeout: float = 10.0) -> Image.Image:
        """원본 이미지를 디코딩한다."""
        if not isinstance(encoded_image, str) or not encoded_image.strip():
            raise DecodeError("원본 이미지가 비어 있습니다")
        try:
            img = await asyncio.wait_for(asyncio.to_thread(decode_image_data, encoded_image), timeout)
        except asyncio.TimeoutError as e:
            raise DecodeError(f"원본 이미지 디코딩 시간 초과 ({timeout:.1f}s)") from e
        logger.debug("원본 이미지 디코딩: %dx%d", img.width, img.height)
        return img

    async def decode_logo(
        self,
        spec: str,
        timeout: float = 10.0,
        size: int | None = None,
    ) -> Image.Image | None:
        """로고를 디코딩한다. 실패하면 로그를 남기고 None."""
        try:
            return await asyncio.wait_for(self._load_logo(spec, size, timeout), timeout)
        except asyncio.TimeoutError:
            logger.warning("로고 로딩 시간 초과 (%.1fs): %s", timeout, _describe(spec))
        except LogoError as e:
            logger.warning("로고 처리 중 오류: %s", e)
        return None

    async def _load_logo(self, spec: str, size: int | None, timeout: float) -> Image.Image:
        if not isinstance(spec, str) or not spec.strip():
            raise LogoError("로고 지정이 비어 있습니다")
        try:
            if is_svg_markup(spec):
                return await asyncio.to_thread(rasterize_svg, spec, size)
            if spec.lstrip().lower().startswith("data:"):
                mime, data = split_data_uri(spec.strip())
                if mime == _SVG_MIME:
                    return await asyncio.to_thread(rasterize_svg, data.decode("utf-8"), size)
                return await asyncio.to_thread(_open_image, data)
            data = await self._fetch_url(spec.strip(), timeout)
            return await asyncio.to_thread(_open_image, data)
        except LogoError:
            raise
        except Exception as e:
            raise LogoError(f"{_describe(spec)}: {e}") from e

    async def _fetch_url(self, url: str, timeout: float) -> bytes:
        """http(s) URL에서 로고 바이트를 내려받는다."""
        import aiohttp

        parts = urlsplit(url)
        if parts.scheme.lower() not in _URL_SCHEMES or not parts.netloc:
            raise LogoError(f"지원하지 않는 로고 URL: {_describe(url)}")

        async with aiohttp.ClientSession(headers={"User-Agent": self._user_agent}) as session:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
                resp.raise_for_status()
                data = await resp.read()
        logger.debug("로고 다운로드: %s (%d bytes)", url, len(data))
        return data
