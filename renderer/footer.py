"""푸터 합성 모듈 — 작업 이미지 오른쪽 아래에 로고와 텍스트를 직접 그린다."""

import logging

from PIL import Image, ImageChops, ImageDraw

from config import CardConfig, FooterConfig
from content.resources import ResourceLoader
from .layout import LogoBox, footer_layout
from .text import resolve_font

logger = logging.getLogger(__name__)


def footer_requested(config: CardConfig) -> bool:
    """푸터를 그릴 내용이 있는지 확인한다."""
    return config.enable_footer and bool(config.footer.text or config.footer.logo)


def _circle_mask(size: int) -> Image.Image:
    mask = Image.new("L", (size, size), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size - 1, size - 1), fill=255)
    return mask


def _draw_logo(surface: Image.Image, logo: Image.Image, box: LogoBox) -> None:
    """로고를 정사각형에 맞춰 줄이고 내접원으로 잘라 그린다."""
    size = max(1, round(box.size))
    if logo.mode != "RGBA":
        logo = logo.convert("RGBA")
    logo = logo.resize((size, size), Image.Resampling.LANCZOS)
    mask = ImageChops.multiply(logo.getchannel("A"), _circle_mask(size))
    surface.paste(logo, (round(box.x), round(box.y)), mask)


def _draw_text(surface: Image.Image, footer: FooterConfig, text_x: float, footer_y: float) -> None:
    """텍스트를 오른쪽·아래 정렬로 (text_x, footer_y)에 맞춰 그린다."""
    font = resolve_font(footer.font)
    # rd: 오른쪽 끝은 글자 진행폭 끝, 아래는 디센더 선
    ImageDraw.Draw(surface).text((text_x, footer_y), footer.text, font=font, fill=footer.color, anchor="rd")


def compose(surface: Image.Image, config: CardConfig, logo: Image.Image | None = None) -> Image.Image:
    """작업 이미지에 푸터를 그린다.

    로고를 먼저 그린다. 텍스트의 오른쪽 기준점이 로고 유무에 따라
    달라지기 때문이다. surface를 직접 수정하고 그대로 반환한다.
    """
    if not footer_requested(config):
        return surface

    footer = config.footer
    layout = footer_layout(surface.width, surface.height, footer, logo_drawn=logo is not None)
    if logo is not None:
        _draw_logo(surface, logo, layout.logo)
    if footer.text:
        _draw_text(surface, footer, layout.text_x, layout.footer_y)
    return surface


class FooterComposer:
    """로고 로딩과 푸터 그리기 순서를 관리한다."""

    def __init__(self, loader: ResourceLoader):
        self._loader = loader

    async def compose_footer(self, surface: Image.Image, config: CardConfig) -> Image.Image:
        if not footer_requested(config):
            return surface

        footer = config.footer
        logo = None
        if footer.logo:
            logo = await self._loader.decode_logo(
                footer.logo,
                timeout=config.logo_timeout,
                size=max(1, round(footer.logo_size)),
            )
            if logo is None:
                logger.info("로고 없이 푸터 텍스트만 그림")
        return compose(surface, config, logo)
