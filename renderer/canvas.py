"""출력 캔버스 모듈 — 패딩이 포함된 RGBA 캔버스를 관리한다."""

import base64
from io import BytesIO

from PIL import Image, ImageChops

from errors import ValidationError

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


class Canvas:
    """한 번의 합성 동안만 쓰는 RGBA 출력 캔버스."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValidationError(f"캔버스를 만들 수 없습니다: {width}x{height}")
        self._image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def fill(self, background: Image.Image) -> None:
        """캔버스 전체를 배경 이미지로 채운다."""
        if background.mode != "RGBA":
            background = background.convert("RGBA")
        if background.size != self._image.size:
            background = background.resize(self._image.size)
        self._image = background.copy()

    def paste(self, layer: Image.Image, position: tuple = (0, 0), clip: Image.Image | None = None) -> None:
        """레이어를 캔버스 위에 합성한다 (알파 블렌딩).

        clip은 캔버스 크기의 L 마스크로, 0인 곳에는 아무것도 그리지 않는다.
        """
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        placed = _place(layer, position, self._image.size)
        if clip is not None:
            placed.putalpha(ImageChops.multiply(placed.getchannel("A"), clip))
        self._image = Image.alpha_composite(self._image, placed)

    def to_png(self) -> bytes:
        buf = BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_uri(self) -> str:
        """PNG data URI로 인코딩한다."""
        return PNG_DATA_URI_PREFIX + base64.b64encode(self.to_png()).decode("ascii")


def _place(layer: Image.Image, position: tuple, size: tuple[int, int]) -> Image.Image:
    """레이어를 캔버스 크기에 맞춰 지정 위치에 배치한다."""
    if layer.size == size and position == (0, 0):
        return layer.copy()
    result = Image.new("RGBA", size, (0, 0, 0, 0))
    result.paste(layer, position)
    return result
