"""푸터 레이아웃 모듈 — 이미지 오른쪽 아래 기준으로 로고·텍스트 위치를 계산한다."""

from dataclasses import dataclass

from config import FooterConfig


@dataclass(frozen=True)
class LogoBox:
    """로고가 차지하는 정사각형과 그 안에 내접하는 원."""

    x: float
    y: float
    size: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.size / 2, self.y + self.size / 2

    @property
    def radius(self) -> float:
        return self.size / 2


@dataclass(frozen=True)
class FooterLayout:
    footer_y: float
    logo: LogoBox | None
    text_x: float


def logo_box(width: int, height: int, footer: FooterConfig) -> LogoBox:
    """오른쪽 변이 width - margin, 아래 변이 footerY에 붙는 로고 영역."""
    footer_y = height - footer.margin
    right = width - footer.margin
    return LogoBox(x=right - footer.logo_size, y=footer_y - footer.logo_size, size=footer.logo_size)


def footer_layout(width: int, height: int, footer: FooterConfig, logo_drawn: bool) -> FooterLayout:
    """푸터 요소의 기준 좌표를 계산한다.

    텍스트의 오른쪽 끝은 로고가 그려졌으면 logoX - logoGap,
    아니면 width - margin 이다.
    """
    footer_y = height - footer.margin
    if logo_drawn:
        box = logo_box(width, height, footer)
        return FooterLayout(footer_y=footer_y, logo=box, text_x=box.x - footer.logo_gap)
    return FooterLayout(footer_y=footer_y, logo=None, text_x=width - footer.margin)
