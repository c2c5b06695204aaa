import pygame
from config import (
    BG, WHITE, GRAY, CYAN, MAGENTA, GREEN, DIFFS, WIN_SCORE,
    TRAIL_ALPHA, NET_ALPHA, NET_W, NET_H, NET_GAP, GLOW_PADDLE, GLOW_BALL,
)
from core import Session


def glow(surf, rect, color, radius, layers=4):
    if radius <= 0:
        return
    for i in range(layers, 0, -1):
        pad = int(radius * i / layers)
        a = int(60 * (1 - i / (layers + 1)))
        g = pygame.Surface((rect.w + pad * 2, rect.h + pad * 2), pygame.SRCALPHA)
        pygame.draw.rect(g, (*color, a), g.get_rect(), border_radius=pad)
        surf.blit(g, (rect.x - pad, rect.y - pad))


def draw_rect(surf, x, y, w, h, color, glow_radius=GLOW_PADDLE):
    rect = pygame.Rect(int(x), int(y), int(w), int(h))
    glow(surf, rect, color, glow_radius)
    pygame.draw.rect(surf, color, rect)


def draw_circle(surf, x, y, r, color, glow_radius=GLOW_BALL):
    size = int(r + glow_radius) * 2
    g = pygame.Surface((size, size), pygame.SRCALPHA)
    c = size // 2
    for i in range(4, 0, -1):
        pygame.draw.circle(g, (*color, 18 * (5 - i)), (c, c), int(r + glow_radius * i / 4))
    surf.blit(g, (int(x) - c, int(y) - c))
    pygame.draw.circle(surf, color, (int(x), int(y)), int(r))


def draw_net(surf):
    w, h = surf.get_size()
    seg = pygame.Surface((NET_W, NET_H), pygame.SRCALPHA)
    seg.fill((*CYAN, NET_ALPHA))
    x = w // 2 - NET_W // 2
    for y in range(0, h, NET_H + NET_GAP):
        surf.blit(seg, (x, y))


def clear_with_trail(surf):
    veil = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
    veil.fill((*BG, TRAIL_ALPHA))
    surf.blit(veil, (0, 0))


def draw_game(surf, session: Session):
    clear_with_trail(surf)
    draw_net(surf)
    p, o, b = session.player, session.opponent, session.ball
    draw_rect(surf, p.x, p.y, p.width, p.height, CYAN)
    draw_rect(surf, o.x, o.y, o.width, o.height, MAGENTA)
    draw_circle(surf, b.x, b.y, b.radius, GREEN)


def draw_scores(surf, font, session: Session):
    w = surf.get_width()
    ply = font.render(f"{session.player.score}", True, CYAN)
    opp = font.render(f"{session.opponent.score}", True, MAGENTA)
    surf.blit(ply, ply.get_rect(center=(w // 4, 32)))
    surf.blit(opp, opp.get_rect(center=(w * 3 // 4, 32)))


def button(surf, font, rect, text, active=False):
    bg = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
    bg.fill((255, 255, 255, 26 if not active else 70))
    surf.blit(bg, rect.topleft)
    pygame.draw.rect(surf, CYAN if active else GRAY, rect, 2, border_radius=12)
    t = font.render(text, True, WHITE if active else (210, 210, 210))
    surf.blit(t, t.get_rect(center=rect.center))


def draw_overlay(surf, big, msg, color):
    w, h = surf.get_size()
    panel = pygame.Surface((w, h), pygame.SRCALPHA)
    panel.fill((0, 0, 0, 170))
    surf.blit(panel, (0, 0))
    if msg:
        t = big.render(msg, True, color)
        surf.blit(t, t.get_rect(center=(w // 2, h // 2 - 80)))


def menu_layout(size):
    """Button rects for the start and game over screens, keyed by action."""
    w, h = size
    bw, bh, gap = min(140, (w - 80) // 3), 38, 12
    row_w = bw * 3 + gap * 2
    x0 = w // 2 - row_w // 2
    rects = {}
    for i, name in enumerate(DIFFS):
        rects[name] = pygame.Rect(x0 + i * (bw + gap), h // 2 - 10, bw, bh)
    rects["start"] = pygame.Rect(w // 2 - 110, h // 2 + 50, 220, 44)
    return rects


def draw_start_screen(surf, big, small, difficulty, sound_on):
    draw_overlay(surf, big, "NEON PONG", CYAN)
    rects = menu_layout(surf.get_size())
    for name in DIFFS:
        button(surf, small, rects[name], name.upper(), active=(name == difficulty))
    button(surf, small, rects["start"], "START", active=True)
    hint = small.render(
        f"W/S or arrows, mouse or touch.  First to {WIN_SCORE}.  M sound: {'on' if sound_on else 'off'}",
        True, GRAY,
    )
    w, h = surf.get_size()
    surf.blit(hint, hint.get_rect(center=(w // 2, h - 30)))


def draw_game_over(surf, big, font, small, session: Session, player_won):
    if player_won:
        draw_overlay(surf, big, "You win!", GREEN)
    else:
        draw_overlay(surf, big, "Computer wins", MAGENTA)
    w, h = surf.get_size()
    line = font.render(f"{session.player.score} : {session.opponent.score}", True, WHITE)
    surf.blit(line, line.get_rect(center=(w // 2, h // 2 - 25)))
    rects = menu_layout(surf.get_size())
    button(surf, small, rects["start"], "PLAY AGAIN", active=True)
