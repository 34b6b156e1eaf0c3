"""CLI 진입점 테스트"""
from unittest.mock import AsyncMock, patch

import pytest

from banner_agent.__main__ import main


@pytest.mark.asyncio
async def test_list_layouts(capsys):
    assert await main(["--list-layouts"]) == 0
    out = capsys.readouterr().out
    assert "modernAgency" in out
    assert "Vibrant Retail" in out


@pytest.mark.asyncio
async def test_missing_prompt_prints_user_message(capsys):
    assert await main([]) == 1
    assert "Please enter a product description." in capsys.readouterr().out


@pytest.mark.asyncio
async def test_failed_generation_exits_non_zero(capsys):
    with patch("banner_agent.__main__.BannerGenerator.generate", new=AsyncMock(return_value=False)):
        assert await main(["--prompt", "handmade soap"]) == 1
    assert "An unexpected error occurred." in capsys.readouterr().out
