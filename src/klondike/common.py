# common.py - settings, layout constants and fonts shared by the pygame front end
import logging
import os
from typing import Mapping, Optional

import pygame

from klondike.cards import Rank
from klondike.table import TABLEAU_COUNT

logger = logging.getLogger(__name__)

# Defaults (may be overridden by environment variables)
_DEFAULT_SETTINGS = {
    "card_size": "Medium",   # Small | Medium | Large
    "seed": None,             # int for a reproducible deal
    "log_level": "WARNING",
}

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

_ENV_KEYS = {
    "card_size": "KLONDIKE_CARD_SIZE",
    "seed": "KLONDIKE_SEED",
    "log_level": "KLONDIKE_LOG_LEVEL",
}


def get_current_settings():
    return dict(_CURRENT_SETTINGS)


def load_settings(environ: Optional[Mapping[str, str]] = None):
    """Reset to defaults, then apply any KLONDIKE_* environment overrides."""
    global _CURRENT_SETTINGS
    env = os.environ if environ is None else environ
    settings = dict(_DEFAULT_SETTINGS)

    size = env.get(_ENV_KEYS["card_size"], "").strip().capitalize()
    if size in ("Small", "Medium", "Large"):
        settings["card_size"] = size

    raw_seed = env.get(_ENV_KEYS["seed"], "").strip()
    if raw_seed:
        try:
            settings["seed"] = int(raw_seed)
        except ValueError:
            logger.warning("ignoring non-integer %s=%r", _ENV_KEYS["seed"], raw_seed)

    level = env.get(_ENV_KEYS["log_level"], "").strip().upper()
    if level:
        settings["log_level"] = level

    _CURRENT_SETTINGS = settings
    return dict(settings)


def configure_logging(level: Optional[str] = None):
    name = (level or _CURRENT_SETTINGS["log_level"]).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _size_to_dims(size_name: str):
    size_name = (size_name or "Medium").capitalize()
    if size_name == "Small":
        return 75, 105
    if size_name == "Large":
        return 150, 210
    return 100, 140


def _layout_for(card_w, card_h):
    """Window size and tableau fan that fit seven columns of the tallest possible run."""
    fan_y = max(12, card_h * 5 // 28)
    w = PADDING + TABLEAU_COUNT * (card_w + PADDING)
    h = 2 * PADDING + card_h + (MAX_COLUMN_CARDS - 1) * fan_y + card_h + STATUS_H
    return w, h, fan_y


def apply_card_settings(size_name: str = None):
    global CARD_W, CARD_H, SCREEN_W, SCREEN_H, FAN_Y
    if size_name is not None:
        CARD_W, CARD_H = _size_to_dims(size_name)
        SCREEN_W, SCREEN_H, FAN_Y = _layout_for(CARD_W, CARD_H)
        _CURRENT_SETTINGS["card_size"] = size_name.capitalize()


# ---------- Configuration ----------
TABLE_BG = (2, 100, 40)
CARD_RADIUS = 10
PADDING = 25
STATUS_H = 40
# six face-down cards under a full King..Ace run
MAX_COLUMN_CARDS = TABLEAU_COUNT - 1 + len(Rank)

CARD_W, CARD_H = _size_to_dims(_CURRENT_SETTINGS["card_size"])
SCREEN_W, SCREEN_H, FAN_Y = _layout_for(CARD_W, CARD_H)

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
BLUE = (34, 96, 200)
LIGHT = (220, 220, 220)
SELECT = (150, 200, 255)
NOTICE = (255, 90, 90)

# Fonts are initialized via setup_fonts() AFTER pygame.init()
FONT_NAME = None
FONT_UI = None
FONT_TITLE = None
FONT_CORNER_RANK = None
FONT_CORNER_SUIT = None


def setup_fonts():
    global FONT_NAME, FONT_UI, FONT_TITLE, FONT_CORNER_RANK, FONT_CORNER_SUIT
    FONT_NAME = pygame.font.get_default_font()
    FONT_UI = pygame.font.SysFont(FONT_NAME, 22, bold=True)
    FONT_TITLE = pygame.font.SysFont(FONT_NAME, 120, bold=True)
    FONT_CORNER_RANK = pygame.font.SysFont(FONT_NAME, 26, bold=True)
    # Suit glyphs need a Unicode-capable font
    try:
        FONT_CORNER_SUIT = pygame.font.SysFont("Segoe UI Symbol", 24, bold=True)
    except Exception:
        FONT_CORNER_SUIT = pygame.font.SysFont(FONT_NAME, 24, bold=True)

