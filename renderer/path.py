"""둥근 사각형 클립 경로 모듈."""

from dataclasses import dataclass

from PIL import Image, ImageDraw

# 모서리 곡선 하나를 근사하는 선분 수
CORNER_SEGMENTS = 16


@dataclass(frozen=True)
class RoundedRectPath:
    """닫힌 둥근 사각형 경계 (시계 방향 폴리곤)."""

    x: float
    y: float
    width: float
    height: float
    radius: float
    points: tuple[tuple[float, float], ...]

    def mask(self, size: tuple[int, int]) -> Image.Image:
        """경로 내부가 255인 L 모드 마스크를 만든다."""
        mask = Image.new("L", size, 0)
        if self.width > 0 and self.height > 0:
            ImageDraw.Draw(mask).polygon(self.points, fill=255)
        return mask


def _quad_curve(p0, ctrl, p1, segments: int) -> list[tuple[float, float]]:
    """2차 베지어 곡선을 선분 끝점 목록으로 펼친다 (시작점 제외)."""
    points = []
    for i in range(1, segments + 1):
        t = i / segments
        u = 1 - t
        x = u * u * p0[0] + 2 * u * t * ctrl[0] + t * t * p1[0]
        y = u * u * p0[1] + 2 * u * t * ctrl[1] + t * t * p1[1]
        points.append((x, y))
    return points


def clamp_radius(radius: float, width: float, height: float) -> float:
    """반지름을 짧은 변의 절반 이하로 제한한다."""
    return max(0.0, min(radius, width / 2, height / 2))


def rounded_rect_path(
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
    segments: int = CORNER_SEGMENTS,
) -> RoundedRectPath:
    """(x, y)에서 시작하는 width×height 둥근 사각형 경로를 만든다.

    좌상단 모서리 바로 뒤 (x + r, y)에서 출발해 시계 방향으로 돈다.
    각 모서리는 꼭짓점을 제어점으로 하는 2차 곡선이다.
    """
    r = clamp_radius(radius, width, height)
    right = x + width
    bottom = y + height

    points = [(x + r, y), (right - r, y)]
    if r > 0:
        points += _quad_curve((right - r, y), (right, y), (right, y + r), segments)
    points.append((right, bottom - r))
    if r > 0:
        points += _quad_curve((right, bottom - r), (right, bottom), (right - r, bottom), segments)
    points.append((x + r, bottom))
    if r > 0:
        points += _quad_curve((x + r, bottom), (x, bottom), (x, bottom - r), segments)
    points.append((x, y + r))
    if r > 0:
        # 마지막 곡선은 시작점으로 돌아오므로 끝점은 빼서 닫는다
        points += _quad_curve((x, y + r), (x, y), (x + r, y), segments)[:-1]

    return RoundedRectPath(x=x, y=y, width=width, height=height, radius=r, points=tuple(points))
