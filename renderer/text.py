"""폰트 모듈 — CSS 폰트 문자열을 Pillow 폰트로 해석한다."""

import logging
import os
import re
import sys as _sys

from PIL import ImageFont

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 14

# CSS 일반 계열 이름 — 시스템 폴백 폰트로 처리
_GENERIC_FAMILIES = {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"}

_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)(px|pt)(?:/\S+)?", re.IGNORECASE)


def _find_fallback(bold: bool = False) -> str:
    """OS에 맞는 폴백 폰트 경로를 반환한다."""
    candidates = []
    if _sys.platform == "win32":
        candidates = ["C:/Windows/Fonts/arialbd.ttf" if bold else "C:/Windows/Fonts/arial.ttf"]
    elif _sys.platform == "darwin":
        candidates = ["/System/Library/Fonts/Helvetica.ttc"]
    else:
        # Linux
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf" if bold else "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf" if bold else "/usr/share/fonts/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf" if bold else "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        ]
    for path in candidates:
        if os.path.exists(path):
            return path
    return ""


_FALLBACK_FONT = _find_fallback(bold=False)
_FALLBACK_BOLD = _find_fallback(bold=True)

# 폰트 캐시
_font_cache: dict[tuple[tuple[str, ...], int, bool], ImageFont.ImageFont | ImageFont.FreeTypeFont] = {}


def parse_css_font(font: str) -> tuple[int, tuple[str, ...], bool]:
    """'bold 14px Arial, sans-serif' 같은 CSS font 문자열을 (크기, 글꼴 목록, 굵게)로 나눈다."""
    match = _SIZE_RE.search(font or "")
    if not match:
        logger.warning("폰트 크기를 찾을 수 없음: %r (기본 %dpx 사용)", font, DEFAULT_FONT_SIZE)
        return DEFAULT_FONT_SIZE, (), False

    size = float(match.group(1))
    if match.group(2).lower() == "pt":
        size = size * 4 / 3
    prefix = font[:match.start()].lower().split()
    bold = any(tok in ("bold", "bolder") or (tok.isdigit() and int(tok) >= 600) for tok in prefix)

    families = tuple(
        name.strip().strip("'\"")
        for name in font[match.end():].split(",")
        if name.strip().strip("'\"")
    )
    return max(1, round(size)), families, bold


def _load_family(family: str, size: int, bold: bool) -> ImageFont.FreeTypeFont | None:
    """글꼴 이름으로 시스템 폰트를 찾는다. 못 찾으면 None."""
    compact = family.replace(" ", "")
    names = [f"{compact}-Bold", f"{compact}bd", family, compact] if bold else [family, compact]
    for name in names:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return None


def get_font(size: int, families: tuple[str, ...] = (), bold: bool = False):
    """폰트를 로드한다 (캐싱)."""
    key = (families, size, bold)
    if key in _font_cache:
        return _font_cache[key]

    font = None
    for family in families:
        if family.lower() in _GENERIC_FAMILIES:
            continue
        font = _load_family(family, size, bold)
        if font is not None:
            break

    if font is None:
        path = _FALLBACK_BOLD if bold else _FALLBACK_FONT
        if path:
            font = ImageFont.truetype(path, size)
        else:
            logger.debug("시스템 폰트 없음, Pillow 기본 폰트 사용")
            font = ImageFont.load_default(size)

    _font_cache[key] = font
    return font


def resolve_font(font: str):
    """CSS font 문자열에 맞는 Pillow 폰트를 반환한다."""
    size, families, bold = parse_css_font(font)
    return get_font(size, families, bold)

