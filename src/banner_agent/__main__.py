"""
사용법:
  uv run python -m banner_agent --prompt "유기농 녹차 선물세트" --image ./example/product.png
  uv run python -m banner_agent --prompt "러닝화 신상품" --layout random --output banner.png
  uv run python -m banner_agent --list-layouts

배너를 한 장 생성해 output 디렉토리에 PNG로 저장하는 CLI 진입점.
"""
import argparse
import asyncio
import logging
import sys

from banner_agent.utils.http_client import configure_ssl_globally

# SSL 전역 패치 — 반드시 다른 import보다 먼저 실행
configure_ssl_globally()

from banner_agent.errors import BannerError  # noqa: E402
from banner_agent.layouts import (  # noqa: E402
    available_layouts,
    format_layout_name,
    get_random_layout,
)
from banner_agent.pipeline import BannerGenerator  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="banner-agent",
        description="제품 설명과 이미지로 1200×600 프로모션 배너를 생성합니다.",
    )
    parser.add_argument("--prompt", help="제품 설명 (예: '프리미엄 핸드드립 커피')")
    parser.add_argument("--image", help="제품 이미지 경로 또는 URL")
    parser.add_argument(
        "--layout",
        default=None,
        help="레이아웃 이름 또는 'random' (기본값: 설정의 default_layout)",
    )
    parser.add_argument("--output", default=None, help="저장할 파일 이름 (output_dir 기준)")
    parser.add_argument("--list-layouts", action="store_true", help="사용 가능한 레이아웃 목록 출력")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.list_layouts:
        for name in available_layouts():
            print(f"  {name:<16} {format_layout_name(name)}")
        return 0

    layout_name = args.layout
    if layout_name == "random":
        layout_name = get_random_layout().name
        print(f"🎲 랜덤 레이아웃: {format_layout_name(layout_name)}")

    generator = BannerGenerator()
    generator.initialize("bannerCanvas")

    try:
        ok = await generator.generate(args.image, args.prompt or "", layout_name)
    except BannerError as e:
        print(f"\n❌ {generator.describe_error(e)}")
        return 1

    if not ok:
        print(f"\n❌ {generator.describe_error(RuntimeError())}")
        return 1

    content = generator.last_content
    print(f"\n✓ 완료: '{content.main_heading}' ({generator.last_layout.name})")
    print(f"  무드: {content.design.style.mood}")

    if generator.download(args.output):
        print(f"\n💾 배너가 저장되었습니다: {generator.settings.output_dir}/")
        return 0
    print("\n⚠️ 저장할 배너가 없습니다.")
    return 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
