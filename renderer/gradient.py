"""선형 그라데이션 배경 모듈."""

import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageColor

from errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearGradient:
    """start → end 축을 따라 stops 색을 보간하는 선형 그라데이션."""

    start: tuple[float, float]
    end: tuple[float, float]
    stops: tuple[tuple[float, tuple[int, int, int, int]], ...]

    @property
    def is_solid(self) -> bool:
        return len(self.stops) == 1

    def render(self, size: tuple[int, int]) -> Image.Image:
        """size 크기의 RGBA 그라데이션 이미지를 만든다."""
        width, height = size
        if self.is_solid:
            return Image.new("RGBA", size, self.stops[0][1])

        dx = self.end[0] - self.start[0]
        dy = self.end[1] - self.start[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            logger.debug("그라데이션 축 길이 0, 첫 색으로 채움")
            return Image.new("RGBA", size, self.stops[0][1])

        # 픽셀 중심을 축에 투영한 위치 t (0~1)
        X, Y = np.meshgrid(
            np.arange(width, dtype=np.float32) + 0.5,
            np.arange(height, dtype=np.float32) + 0.5,
        )
        Z = ((X - self.start[0]) * dx + (Y - self.start[1]) * dy) / length_sq
        Z = np.clip(Z, 0.0, 1.0)

        offsets = np.array([offset for offset, _ in self.stops], dtype=np.float32)
        colors = np.array([color for _, color in self.stops], dtype=np.float32)
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        for channel in range(4):
            values = np.interp(Z, offsets, colors[:, channel])
            pixels[:, :, channel] = np.round(values).astype(np.uint8)
        return Image.fromarray(pixels)


def gradient_offsets(count: int) -> list[float]:
    """count개 색의 균등 간격 스톱 위치. 색이 하나면 [0.0]."""
    if count < 1:
        raise ValidationError("그라데이션에는 최소 한 개의 색상이 필요합니다")
    if count == 1:
        return [0.0]
    return [i / (count - 1) for i in range(count)]


def linear_gradient(
    start: tuple[float, float],
    end: tuple[float, float],
    colors,
) -> LinearGradient:
    """colors를 균등 간격 스톱으로 배치한 선형 그라데이션을 만든다."""
    colors = list(colors)
    offsets = gradient_offsets(len(colors))
    stops = tuple(
        (offset, ImageColor.getcolor(color, "RGBA"))
        for offset, color in zip(offsets, colors)
    )
    return LinearGradient(start=tuple(start), end=tuple(end), stops=stops)
