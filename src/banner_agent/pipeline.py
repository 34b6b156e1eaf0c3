"""
배너 생성 오케스트레이터

입력 검증 → 이미지 로드 → 콘텐츠 생성 → 레이아웃 결정 → 배경 패턴 생성 → 렌더링

콘텐츠/패턴 생성기는 실패해도 fallback 데이터를 반환하므로 파이프라인은 항상
렌더링까지 진행합니다. 이미지 로드 실패는 이미지 없이 계속하고, 그 외 예외는
로깅 후 False를 반환합니다.
"""
from __future__ import annotations

import asyncio
import logging
import random
import time
from pathlib import Path
from typing import Protocol

from banner_agent.agents.copywriter import generate_content
from banner_agent.agents.pattern_designer import generate_background_pattern
from banner_agent.agents.renderer import BannerRenderer
from banner_agent.config import Settings, get_settings
from banner_agent.errors import (
    GenerationInProgressError,
    ImageLoadError,
    PromptRequiredError,
    describe_error,
)
from banner_agent.layouts import get_layout
from banner_agent.models.content import GeneratedContent
from banner_agent.models.layout import LayoutTemplate
from banner_agent.models.pattern import PatternConfig
from banner_agent.utils.canvas import RenderTarget
from banner_agent.utils.image_utils import ImageSource, load_image

logger = logging.getLogger(__name__)

DEFAULT_SURFACE_ID = "bannerCanvas"


class BannerService(Protocol):
    def initialize(self, surface_id: str) -> bool: ...

    async def generate(
        self,
        image_file: ImageSource | None,
        prompt: str,
        layout_name: str | None = None,
    ) -> bool: ...

    def download(self, filename: str | None = None) -> bool: ...

    def describe_error(self, error: BaseException) -> str: ...


class BannerGenerator:
    """배너 생성 파사드. 한 번에 하나의 생성만 진행합니다."""

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.target: RenderTarget | None = None
        self.renderer: BannerRenderer | None = None
        self.last_content: GeneratedContent | None = None
        self.last_pattern: PatternConfig | None = None
        self.last_layout: LayoutTemplate | None = None
        self._busy = False

    @property
    def is_generating(self) -> bool:
        return self._busy

    def initialize(self, surface_id: str = DEFAULT_SURFACE_ID) -> bool:
        """렌더 타깃(1200×600)을 만듭니다."""
        self.target = RenderTarget(surface_id)
        self.renderer = BannerRenderer(self.target, rng=self.rng)
        logger.info("Render target '%s' initialized", surface_id)
        return True

    async def generate(
        self,
        image_file: ImageSource | None,
        prompt: str,
        layout_name: str | None = None,
    ) -> bool:
        """배너를 생성해 렌더 타깃에 그립니다.

        Raises:
            PromptRequiredError: 프롬프트가 비어 있음 (어떤 작업도 시작하지 않음)
            GenerationInProgressError: 다른 생성이 진행 중
        """
        if not prompt or not prompt.strip():
            raise PromptRequiredError()
        if self._busy:
            raise GenerationInProgressError()

        # await 이전에 점유해야 동시 호출이 모두 통과하지 않음
        self._busy = True
        try:
            if self.renderer is None:
                self.initialize()

            image = None
            if image_file is not None:
                try:
                    image = await load_image(image_file, self.settings)
                except ImageLoadError as exc:
                    logger.warning("Continuing without product image: %s", exc)

            logger.info("Step 1: generating content...")
            content_result = await generate_content(prompt, settings=self.settings)
            content = content_result.content
            if content_result.used_fallback:
                logger.info("Using fallback content (%s)", content_result.source.value)

            layout = get_layout(layout_name or self.settings.default_layout)
            await asyncio.sleep(self.settings.render_settle_delay)

            logger.info("Step 2: generating background pattern...")
            pattern_result = await generate_background_pattern(
                content.design.style,
                layout.background,
                settings=self.settings,
            )

            logger.info("Step 3: rendering banner...")
            self.renderer.render(layout, content, image=image, pattern=pattern_result.pattern)

            self.last_content = content
            self.last_pattern = pattern_result.pattern
            self.last_layout = layout
            logger.info("Banner generated with layout '%s'", layout.name)
            return True
        except Exception:
            logger.exception("Error generating banner")
            return False
        finally:
            self._busy = False

    def export_png(self) -> bytes | None:
        """현재 렌더 결과를 PNG bytes로 반환합니다. 렌더 결과가 없으면 None."""
        if self.target is None:
            return None
        return self.target.to_png_bytes()

    def download(self, filename: str | None = None) -> bool:
        """현재 렌더 결과를 output_dir 에 PNG로 저장합니다."""
        data = self.export_png()
        if data is None:
            logger.warning("Nothing rendered yet, skipping download")
            return False

        filename = filename or f"banner-{int(time.time() * 1000)}.png"
        path = Path(self.settings.output_dir) / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError:
            logger.exception("Failed to save banner to %s", path)
            return False
        logger.info("Banner saved to %s", path)
        return True

    def describe_error(self, error: BaseException) -> str:
        return describe_error(error)
