"""설정 파일 로더 및 카드 옵션 병합 모듈."""

import copy
import json
from dataclasses import dataclass
from pathlib import Path

from PIL import ImageColor

from errors import ValidationError

# 기본 설정 경로
_CONFIG_PATH = Path(__file__).parent / "config.json"

# 카드 옵션 기본값 — 호출자가 넘기지 않은 필드는 모두 여기서 채운다
DEFAULT_OPTIONS = {
    "padding": 80,
    "radius": 40,
    "colors": ["#ff6b6b", "#4ecdc4"],
    "enableFooter": False,
    "footer": {
        "text": None,
        "font": "14px Arial",
        "color": "black",
        "margin": 20,
        "logo": None,
        "logoSize": 16,
        "logoGap": 10,
    },
    "decodeTimeout": 10.0,
    "logoTimeout": 10.0,
}

# 기본값 — config.json에 누락된 키가 있을 때 사용
_DEFAULTS = {
    "card": DEFAULT_OPTIONS,
    "logging": {
        "level": "INFO",
    },
}

# snake_case 별칭 → camelCase 옵션 키
_ALIASES = {
    "enable_footer": "enableFooter",
    "decode_timeout": "decodeTimeout",
    "logo_timeout": "logoTimeout",
    "logo_size": "logoSize",
    "logo_gap": "logoGap",
}


def deep_merge(base: dict, override: dict) -> dict:
    """base 딕셔너리에 override 값을 병합한다 (깊은 병합).

    양쪽 값이 모두 딕셔너리일 때만 재귀한다. 리스트는 인덱스별로 섞지 않고
    통째로 교체한다. 입력 딕셔너리는 변경하지 않는다.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalize_keys(options: dict) -> dict:
    """snake_case 별칭 키를 camelCase로 바꾼다 (중첩 딕셔너리 포함)."""
    normalized = {}
    for key, value in options.items():
        if isinstance(value, dict):
            value = _normalize_keys(value)
        normalized[_ALIASES.get(key, key)] = value
    return normalized


@dataclass(frozen=True)
class FooterConfig:
    text: str | None
    font: str
    color: str
    margin: float
    logo: str | None
    logo_size: float
    logo_gap: float

    @classmethod
    def from_dict(cls, data: dict) -> "FooterConfig":
        return cls(
            text=data["text"],
            font=data["font"],
            color=data["color"],
            margin=data["margin"],
            logo=data["logo"],
            logo_size=data["logoSize"],
            logo_gap=data["logoGap"],
        )


@dataclass(frozen=True)
class CardConfig:
    """한 번의 호출 동안 변하지 않는, 완전히 채워진 카드 설정."""

    padding: float
    radius: float
    colors: tuple[str, ...]
    enable_footer: bool
    footer: FooterConfig
    decode_timeout: float
    logo_timeout: float

    @classmethod
    def from_dict(cls, data: dict) -> "CardConfig":
        colors = data["colors"]
        if isinstance(colors, str):
            colors = [colors]
        return cls(
            padding=data["padding"],
            radius=data["radius"],
            colors=tuple(colors),
            enable_footer=bool(data["enableFooter"]),
            footer=FooterConfig.from_dict(data["footer"]),
            decode_timeout=data["decodeTimeout"],
            logo_timeout=data["logoTimeout"],
        )

    def validate(self) -> None:
        """그리기 전에 설정값을 검사한다. 잘못되면 ValidationError."""
        for name, value in (
            ("padding", self.padding),
            ("radius", self.radius),
            ("footer.margin", self.footer.margin),
            ("footer.logoSize", self.footer.logo_size),
            ("footer.logoGap", self.footer.logo_gap),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ValidationError(f"{name}은(는) 0 이상의 숫자여야 합니다: {value!r}")

        for name, value in (
            ("decodeTimeout", self.decode_timeout),
            ("logoTimeout", self.logo_timeout),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ValidationError(f"{name}은(는) 양수여야 합니다: {value!r}")

        if not self.colors:
            raise ValidationError("colors에는 최소 한 개의 색상이 필요합니다")
        for color in (*self.colors, self.footer.color):
            try:
                ImageColor.getrgb(color)
            except (ValueError, AttributeError, TypeError) as e:
                raise ValidationError(f"알 수 없는 색상: {color!r}") from e


def resolve_options(options: dict | None = None) -> CardConfig:
    """호출자의 부분 옵션을 기본값 위에 병합하여 CardConfig를 만든다."""
    merged = deep_merge(copy.deepcopy(DEFAULT_OPTIONS), _normalize_keys(options or {}))
    if not isinstance(merged.get("footer"), dict):
        raise ValidationError(f"footer는 딕셔너리여야 합니다: {merged.get('footer')!r}")
    try:
        return CardConfig.from_dict(merged)
    except (KeyError, TypeError) as e:
        raise ValidationError(f"카드 옵션을 해석할 수 없습니다: {e}") from e


def load_config(path: Path | None = None) -> dict:
    """설정 파일을 읽어 딕셔너리로 반환한다.

    파일이 없으면 기본값을 사용한다.
    """
    config_path = path or _CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            user_config = json.load(f)
        return deep_merge(copy.deepcopy(_DEFAULTS), _normalize_keys(user_config))
    return copy.deepcopy(_DEFAULTS)
