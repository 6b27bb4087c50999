"""SSD1306 OLED rendering via Pillow + luma.oled (full redraw per update)."""

import logging

from PIL import Image, ImageDraw, ImageFont

import config

logger = logging.getLogger(__name__)

DISPLAY_WIDTH = config.DISPLAY_WIDTH
DISPLAY_HEIGHT = config.DISPLAY_HEIGHT
ROW_HEIGHT = config.ROW_HEIGHT


def _load_font() -> ImageFont.ImageFont:
    """Load a small monospaced font, 6px wide, for a 21 column grid."""
    bdf_paths = [
        "/usr/share/fonts/X11/misc/6x10.pil",
        "/usr/local/share/fonts/6x10.pil",
    ]
    for path in bdf_paths:
        try:
            return ImageFont.load(path)
        except OSError:
            continue

    ttf_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    ]
    for path in ttf_paths:
        try:
            return ImageFont.truetype(path, 10)
        except OSError:
            continue

    logger.warning("No suitable font found, using Pillow default")
    return ImageFont.load_default()


class OledDisplay:
    def __init__(self):
        self._device = None
        self._font = _load_font()
        self._init_device()

    def _init_device(self) -> None:
        """Initialize the OLED over I2C."""
        try:
            from luma.core.interface.serial import i2c
            from luma.oled.device import ssd1306

            serial = i2c(port=config.I2C_PORT, address=config.I2C_ADDRESS)
            self._device = ssd1306(serial, width=DISPLAY_WIDTH, height=DISPLAY_HEIGHT)
            logger.info("OLED initialized (%dx%d @ 0x%02X)",
                        DISPLAY_WIDTH, DISPLAY_HEIGHT, config.I2C_ADDRESS)
        except ImportError:
            logger.warning("luma.oled not available — running in headless mode")
        except Exception as e:
            logger.error("Failed to initialize OLED: %s", e)

    def _render_to_image(self, lines: list[str]) -> Image.Image:
        """Blank frame, then one line per row at a fixed offset."""
        img = Image.new("1", (DISPLAY_WIDTH, DISPLAY_HEIGHT), 0)
        draw = ImageDraw.Draw(img)
        for i, line in enumerate(lines):
            draw.text((0, i * ROW_HEIGHT), line, font=self._font, fill=1)
        return img

    def _show_image(self, img: Image.Image) -> None:
        """Push a Pillow Image to the panel."""
        if self._device is None:
            return
        self._device.display(img)

    def show_lines(self, lines: list[str]) -> None:
        self._show_image(self._render_to_image(lines))

    def show_status(self, message: str) -> None:
        self.show_lines(["", message])

    def clear(self) -> None:
        """Blank the panel."""
        if self._device is None:
            return
        self._show_image(Image.new("1", (DISPLAY_WIDTH, DISPLAY_HEIGHT), 0))

    def shutdown(self) -> None:
        """Clear and power the panel down; failures are logged only."""
        try:
            self.clear()
            if self._device is not None:
                self._device.hide()
        except Exception:
            logger.exception("Failed to clear display on shutdown")
