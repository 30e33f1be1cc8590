"""카드 렌더링 진입점 — process() 와 명령행 실행."""

import argparse
import asyncio
import base64
import logging
import mimetypes
import sys
from pathlib import Path

from config import CardConfig, deep_merge, load_config, resolve_options
from content.resources import ResourceLoader
from errors import CardError
from renderer.canvas import PNG_DATA_URI_PREFIX
from renderer.footer import FooterComposer
from renderer.layers import CardCompositor

logger = logging.getLogger(__name__)


async def process(
    encoded_image: str,
    options: dict | None = None,
    loader: ResourceLoader | None = None,
) -> str:
    """이미지에 그라데이션 배경·둥근 모서리·푸터를 입혀 PNG data URI로 반환한다.

    원본 디코딩이 끝난 뒤에만 로고를 불러온다. 설정 오류는 ValidationError,
    원본 디코딩 실패는 DecodeError로 올라오고, 로고 실패는 로그만 남는다.
    """
    config: CardConfig = resolve_options(options)
    config.validate()

    loader = loader or ResourceLoader()
    image = await loader.decode_primary(encoded_image, timeout=config.decode_timeout)

    # 원본은 그대로 두고 복사본에 푸터를 그린다
    working = image.copy()
    working = await FooterComposer(loader).compose_footer(working, config)

    return CardCompositor().composite(working, config)


def _file_to_data_uri(path: Path) -> str:
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return f"data:{mime};base64," + base64.b64encode(path.read_bytes()).decode("ascii")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="이미지를 그라데이션 카드로 꾸민다.")
    parser.add_argument("input", type=Path, help="원본 이미지 파일")
    parser.add_argument("-o", "--output", type=Path, help="출력 PNG 경로 (기본: <input>_card.png)")
    parser.add_argument("--config", type=Path, help="설정 JSON 파일")
    parser.add_argument("--padding", type=float)
    parser.add_argument("--radius", type=float)
    parser.add_argument("--color", dest="colors", action="append", help="그라데이션 색 (여러 번 지정)")
    parser.add_argument("--text", help="푸터 텍스트 (지정하면 푸터 활성화)")
    parser.add_argument("--logo", help="푸터 로고 URL 또는 SVG 파일 경로")
    return parser.parse_args(argv)


def _cli_options(args: argparse.Namespace) -> dict:
    """명령행 인자를 카드 옵션 딕셔너리로 바꾼다."""
    options: dict = {}
    if args.padding is not None:
        options["padding"] = args.padding
    if args.radius is not None:
        options["radius"] = args.radius
    if args.colors:
        options["colors"] = args.colors
    footer: dict = {}
    if args.text:
        footer["text"] = args.text
    if args.logo:
        logo_path = Path(args.logo)
        footer["logo"] = logo_path.read_text(encoding="utf-8") if logo_path.suffix.lower() == ".svg" and logo_path.exists() else args.logo
    if footer:
        options["footer"] = footer
        options["enableFooter"] = True
    return options


def main(argv=None) -> int:
    args = _parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, str(config["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(message)s",
    )
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    options = deep_merge(config["card"], _cli_options(args))
    output = args.output or args.input.with_name(f"{args.input.stem}_card.png")

    try:
        result = asyncio.run(process(_file_to_data_uri(args.input), options))
    except CardError as e:
        logging.error("카드 생성 실패: %s", e)
        return 1

    output.write_bytes(base64.b64decode(result[len(PNG_DATA_URI_PREFIX):]))
    logging.info("저장됨: %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
