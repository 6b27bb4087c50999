"""Pygame-based OLED emulator — shows exactly what the panel displays."""

import signal

import numpy as np
import pygame
from PIL import Image

import main
from display import DISPLAY_HEIGHT, DISPLAY_WIDTH, OledDisplay

# ── Configuration ─────────────────────────────────────────────────
SCALE = 6  # each OLED pixel becomes SCALE×SCALE screen pixels
PIXEL_COLOR = (120, 200, 255)  # blue-white SSD1306
GRID_COLOR = (15, 15, 15)
WINDOW_WIDTH = DISPLAY_WIDTH * SCALE
WINDOW_HEIGHT = DISPLAY_HEIGHT * SCALE


class EmulatedDisplay(OledDisplay):
    """OledDisplay subclass that renders to a pygame window instead of I2C."""

    def _init_device(self) -> None:
        pygame.init()
        self._screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("adsb-oled emulator")
        self._screen.fill((0, 0, 0))
        pygame.display.flip()

    def _show_image(self, img: Image.Image) -> None:
        """Draw the 1-bit frame as a scaled pixel grid."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                # Let the main thread run the normal shutdown sequence
                signal.raise_signal(signal.SIGINT)
                return

        arr = np.array(img.convert("L"))  # (64, 128)
        surface = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        surface.fill((0, 0, 0))
        for y in range(DISPLAY_HEIGHT):
            for x in range(DISPLAY_WIDTH):
                if arr[y, x]:
                    pygame.draw.rect(
                        surface, PIXEL_COLOR,
                        (x * SCALE + 1, y * SCALE + 1, SCALE - 1, SCALE - 1),
                    )
                else:
                    pygame.draw.rect(
                        surface, GRID_COLOR,
                        (x * SCALE, y * SCALE, SCALE, SCALE), 1,
                    )
        self._screen.blit(surface, (0, 0))
        pygame.display.flip()

    def clear(self) -> None:
        self._screen.fill((0, 0, 0))
        pygame.display.flip()

    def shutdown(self) -> None:
        self.clear()
        pygame.quit()


if __name__ == "__main__":
    main.main(display=EmulatedDisplay())
