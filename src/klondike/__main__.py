# __main__.py - entry point: python -m klondike
import logging
import os

import pygame

from klondike import common as C
from klondike.ui import KlondikeGameScene, invalidate_card_caches

logger = logging.getLogger(__name__)


def _allowed_keys_set():
    keys = ["K_ESCAPE", "K_n"]
    out = set()
    for n in keys:
        v = getattr(pygame, n, None)
        if isinstance(v, int):
            out.add(v)
    return out


def main():
    settings = C.load_settings()
    C.configure_logging(settings["log_level"])
    C.apply_card_settings(settings["card_size"])
    invalidate_card_caches()

    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()
    screen = pygame.display.set_mode((C.SCREEN_W, C.SCREEN_H))
    pygame.display.set_caption("Klondike")
    C.setup_fonts()
    clock = pygame.time.Clock()

    scene = KlondikeGameScene(seed=settings["seed"])
    allowed_keys = _allowed_keys_set()

    running = True
    while running:
        clock.tick(60)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
                continue
            # Only the game's own keys reach the scene
            if e.type == pygame.KEYDOWN and getattr(e, "key", None) not in allowed_keys:
                continue
            scene.handle_event(e)
            if scene.quit_requested:
                running = False
                break
        scene.draw(screen)
        pygame.display.flip()
    logger.info("exiting")
    pygame.quit()


if __name__ == "__main__":
    main()
