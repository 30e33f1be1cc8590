"""레이어 합성 모듈 — 그라데이션 배경 + 둥근 모서리 클립 + 작업 이미지."""

import logging

from PIL import Image

from config import CardConfig
from .canvas import Canvas
from .gradient import linear_gradient
from .path import rounded_rect_path

logger = logging.getLogger(__name__)


class CardCompositor:
    """푸터까지 그려진 작업 이미지를 최종 카드 이미지로 합성한다."""

    def render(self, working: Image.Image, config: CardConfig) -> Canvas:
        """합성된 캔버스를 반환한다.

        Args:
            working: 원본 이미지 (+ 푸터)가 그려진 작업 이미지
            config: 완전히 채워진 카드 설정

        Returns:
            (width + 2·padding, height + 2·padding) 크기의 캔버스
        """
        padding = round(config.padding)
        width = working.width + padding * 2
        height = working.height + padding * 2
        canvas = Canvas(width, height)

        # 배경 레이어
        gradient = linear_gradient((0, 0), (width, height), config.colors)
        canvas.fill(gradient.render((width, height)))

        # 둥근 모서리 클립을 먼저 만든 뒤 작업 이미지를 그린다
        path = rounded_rect_path(padding, padding, working.width, working.height, config.radius)
        canvas.paste(working, (padding, padding), clip=path.mask(canvas.size))

        logger.debug(
            "카드 합성: %dx%d (padding=%d, radius=%.1f, colors=%d)",
            width, height, padding, path.radius, len(config.colors),
        )
        return canvas

    def composite(self, working: Image.Image, config: CardConfig) -> str:
        """합성 결과를 PNG data URI로 반환한다."""
        return self.render(working, config).to_data_uri()
