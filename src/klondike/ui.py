# ui.py - pygame scene: draws a table snapshot and turns clicks into controller events
import logging
from typing import Dict, Optional

import pygame

from klondike import common as C
from klondike.cards import BACK_ASSET_KEY, RANK_TO_TEXT, SUIT_SYMBOLS, Color, Suit, color_of
from klondike.controller import (
    BackgroundClicked,
    ClickEvent,
    FoundationClicked,
    InteractionController,
    StockClicked,
    TableauClicked,
    WasteClicked,
)
from klondike.table import FOUNDATION_COUNT, TABLEAU_COUNT, CardView, PileView

logger = logging.getLogger(__name__)

WIN_TEXT = "You win!"

_card_face_cache: Dict[str, pygame.Surface] = {}
_card_back_cache: Optional[pygame.Surface] = None


def invalidate_card_caches():
    global _card_face_cache, _card_back_cache
    _card_face_cache = {}
    _card_back_cache = None


# Pip outlines in a unit box centred on the origin, y pointing down
_PIP_PARTS = {
    Suit.DIAMOND: [("poly", [(0, -1), (0.7, 0), (0, 1), (-0.7, 0)])],
    Suit.HEART: [
        ("disc", (-0.45, -0.35), 0.48),
        ("disc", (0.45, -0.35), 0.48),
        ("poly", [(-0.9, -0.2), (0.9, -0.2), (0, 0.95)]),
    ],
    Suit.SPADE: [
        ("poly", [(0, -0.95), (0.9, 0.15), (-0.9, 0.15)]),
        ("disc", (-0.45, 0.2), 0.45),
        ("disc", (0.45, 0.2), 0.45),
        ("poly", [(0, 0.3), (0.3, 1), (-0.3, 1)]),
    ],
    Suit.CLUB: [
        ("disc", (0, -0.5), 0.4),
        ("disc", (0, 0), 0.2),
        ("disc", (-0.5, 0.15), 0.4),
        ("disc", (0.5, 0.15), 0.4),
        ("poly", [(0, 0), (0.3, 1), (-0.3, 1)]),
    ],
}


def draw_suit_shape(surface, center, suit, color, size=42):
    """Draw one large pip of `suit` fitting a size x size box around center."""
    cx, cy = center
    scale = size / 2

    def at(p):
        return round(cx + p[0] * scale), round(cy + p[1] * scale)

    for kind, *geom in _PIP_PARTS[suit]:
        if kind == "disc":
            origin, radius = geom
            pygame.draw.circle(surface, color, at(origin), max(1, round(radius * scale)))
        else:
            pygame.draw.polygon(surface, color, [at(p) for p in geom[0]])


def _blank_card():
    surf = pygame.Surface((C.CARD_W, C.CARD_H), pygame.SRCALPHA)
    rect = surf.get_rect()
    pygame.draw.rect(surf, C.WHITE, rect, border_radius=C.CARD_RADIUS)
    pygame.draw.rect(surf, C.BLACK, rect, width=3, border_radius=C.CARD_RADIUS)
    return surf


def get_back_surface():
    global _card_back_cache
    if _card_back_cache is None:
        surf = _blank_card()
        panel = surf.get_rect().inflate(-14, -14)
        pygame.draw.rect(surf, C.BLUE, panel, border_radius=C.CARD_RADIUS // 2)
        # diamond lattice, clipped to the panel
        surf.set_clip(panel.inflate(-4, -4))
        cell = max(8, C.CARD_W // 8)
        for row, y in enumerate(range(panel.top, panel.bottom + cell, cell)):
            shift = cell // 2 if row % 2 else 0
            for x in range(panel.left - cell + shift, panel.right + cell, cell):
                d = cell // 3
                pygame.draw.polygon(surf, C.LIGHT, [(x, y - d), (x + d, y), (x, y + d), (x - d, y)], 1)
        surf.set_clip(None)
        _card_back_cache = surf
    return _card_back_cache


def get_card_surface(card: CardView):
    if card.asset_key == BACK_ASSET_KEY:
        return get_back_surface()
    if card.asset_key in _card_face_cache:
        return _card_face_cache[card.asset_key]
    surf = _blank_card()
    color = C.RED if color_of(card.suit) is Color.RED else C.BLACK
    margin = 8
    rtxt = C.FONT_CORNER_RANK.render(RANK_TO_TEXT[card.rank], True, color)
    stxt = C.FONT_CORNER_SUIT.render(SUIT_SYMBOLS[card.suit], True, color)
    surf.blit(rtxt, (margin, margin))
    surf.blit(stxt, (margin, margin + rtxt.get_height() - 2))
    draw_suit_shape(surf, (C.CARD_W//2, C.CARD_H//2), card.suit, color, size=C.CARD_W//2)
    _card_face_cache[card.asset_key] = surf
    return surf


class PileSlot:
    """Screen placement of one pile; fan_y > 0 spreads cards downwards."""

    def __init__(self, x, y, fan_y=0):
        self.x, self.y = x, y
        self.fan_y = fan_y

    def rect_for_index(self, idx):
        return pygame.Rect(self.x, self.y + idx * self.fan_y, C.CARD_W, C.CARD_H)

    def hit(self, pos, count):
        """Index of the card under pos, -1 for the empty slot, None for a miss."""
        if count == 0 or self.fan_y == 0:
            if pygame.Rect(self.x, self.y, C.CARD_W, C.CARD_H).collidepoint(pos):
                return count - 1 if count else -1
            return None
        for i in reversed(range(count)):
            if self.rect_for_index(i).collidepoint(pos):
                return i
        return None

    def draw(self, screen, pile: PileView, top_only=False):
        if not pile.cards:
            pygame.draw.rect(screen, C.WHITE, (self.x, self.y, C.CARD_W, C.CARD_H),
                             width=1, border_radius=C.CARD_RADIUS)
            return
        cards = pile.cards[-1:] if top_only else pile.cards
        start = len(pile.cards) - len(cards)
        for i, c in enumerate(cards, start):
            r = self.rect_for_index(0 if top_only else i)
            screen.blit(get_card_surface(c), r.topleft)
            if c.selected:
                pygame.draw.rect(screen, C.SELECT, r, width=3, border_radius=C.CARD_RADIUS)


class KlondikeGameScene:
    def __init__(self, seed=None):
        self.controller = InteractionController(seed)
        self.quit_requested = False
        self.compute_layout()

    def compute_layout(self):
        step = C.CARD_W + C.PADDING
        self.stock_slot = PileSlot(C.PADDING, C.PADDING)
        self.waste_slot = PileSlot(C.PADDING + step, C.PADDING)
        self.foundation_slots = [PileSlot(C.PADDING + step * (3 + i), C.PADDING) for i in range(FOUNDATION_COUNT)]
        self.tableau_slots = [PileSlot(C.PADDING + step * i, C.PADDING * 2 + C.CARD_H, fan_y=C.FAN_Y)
                              for i in range(TABLEAU_COUNT)]

    def hit_test(self, pos) -> ClickEvent:
        view = self.controller.snapshot()
        if self.stock_slot.hit(pos, len(view.stock.cards)) is not None:
            return StockClicked()
        if self.waste_slot.hit(pos, len(view.waste.cards)) is not None:
            return WasteClicked()
        for i, slot in enumerate(self.foundation_slots):
            if slot.hit(pos, len(view.foundations[i].cards)) is not None:
                return FoundationClicked(i)
        for i, slot in enumerate(self.tableau_slots):
            hi = slot.hit(pos, len(view.tableau[i].cards))
            if hi is not None:
                return TableauClicked(i, None if hi == -1 else hi)
        return BackgroundClicked()

    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            event = self.hit_test(e.pos)
            logger.debug("click at %s -> %r", e.pos, event)
            self.controller.dispatch(event)
        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.controller.new_game()
            elif e.key == pygame.K_ESCAPE:
                self.quit_requested = True

    def draw(self, screen):
        screen.fill(C.TABLE_BG)
        view = self.controller.snapshot()

        self.stock_slot.draw(screen, view.stock, top_only=True)
        self.waste_slot.draw(screen, view.waste, top_only=True)
        for slot, pile in zip(self.foundation_slots, view.foundations):
            slot.draw(screen, pile, top_only=True)
        for slot, pile in zip(self.tableau_slots, view.tableau):
            slot.draw(screen, pile)

        # Status line
        sel = C.FONT_UI.render(view.selection_label, True, C.WHITE)
        screen.blit(sel, (10, C.SCREEN_H - sel.get_height() - 10))
        if view.notice:
            msg = C.FONT_UI.render(view.notice, True, C.NOTICE)
            screen.blit(msg, (C.SCREEN_W - msg.get_width() - 10, C.SCREEN_H - msg.get_height() - 10))
        if view.won:
            t = C.FONT_TITLE.render(WIN_TEXT, True, C.BLACK)
            screen.blit(t, (C.SCREEN_W//2 - t.get_width()//2, C.SCREEN_H//2 - t.get_height()//2))
