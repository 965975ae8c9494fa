"""
Renders generated documents to PNG screenshots with headless Chromium.
"""
import asyncio
import time
import logging

from playwright.async_api import async_playwright

from config import settings
from config.device_presets import get_device_viewport, validate_device_name
from services.exceptions import ValidationError

logger = logging.getLogger(__name__)


class PreviewService:
    def __init__(self, timeout: int = None):
        self.timeout = timeout or settings.PREVIEW_TIMEOUT

    async def render(self, full_code: str, device: str = "desktop") -> bytes:
        """Render the document at the device viewport and return the screenshot bytes."""
        if not validate_device_name(device):
            raise ValidationError(f"Unknown device '{device}'")
        viewport = get_device_viewport(device)

        start_time = time.time()
        logger.info(f"Rendering preview for {device} ({viewport['width']}x{viewport['height']})")

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                await page.set_viewport_size({"width": viewport["width"], "height": viewport["height"]})
                await page.set_content(full_code, wait_until="networkidle", timeout=self.timeout * 1000)

                # Let CSS animations settle
                await asyncio.sleep(0.5)

                screenshot_bytes = await page.screenshot(
                    type="png",
                    clip={"x": 0, "y": 0, "width": viewport["width"], "height": viewport["height"]},
                )
            finally:
                await browser.close()

        render_time = time.time() - start_time
        logger.info(f"Preview rendered in {render_time:.2f}s, size: {len(screenshot_bytes)} bytes")
        return screenshot_bytes
