import argparse
import logging

import pygame

from config import W, H, BG, FPS, DIFFS, DEFAULT_DIFFICULTY, compute_surface_size
from core import Session, MATCH_END, tick, start_match, restart_match
from fx import Presenter
from ui import draw_game, draw_scores, draw_start_screen, draw_game_over, menu_layout

logger = logging.getLogger(__name__)

KEY_NAMES = {
    pygame.K_w: "w",
    pygame.K_s: "s",
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
}

TIER_KEYS = {
    pygame.K_1: "easy",
    pygame.K_2: "medium",
    pygame.K_3: "hard",
}


class FrameLoop:
    """Calls frame() once per display refresh until it returns False."""

    def __init__(self, frame, fps=FPS, clock=None):
        self.frame = frame
        self.fps = fps
        self.clock = clock or pygame.time.Clock()
        self.frames = 0

    def run(self, max_frames=None):
        while max_frames is None or self.frames < max_frames:
            self.clock.tick(self.fps)
            self.frames += 1
            if self.frame() is False:
                break
        return self.frames


class App:
    def __init__(self, window, difficulty=DEFAULT_DIFFICULTY, presenter=None):
        self.window = window
        self.alive = True
        self.screen_state = "MENU"
        self.player_won = False
        self.presenter = presenter or Presenter()
        self.surface = pygame.Surface(compute_surface_size(window.get_width()))
        self.surface.fill(BG)
        w, h = self.surface.get_size()
        self.session = Session(w, h, difficulty=difficulty, listener=self.on_event)

        self.font = pygame.font.SysFont("consolas", 40)
        self.small = pygame.font.SysFont("consolas", 16)
        self.big = pygame.font.SysFont("consolas", 60)

    def on_event(self, ev):
        self.presenter.handle(ev)
        if ev.kind == MATCH_END:
            self.screen_state = "OVER"
            self.player_won = ev.player_won
            logger.info(f"match over {self.session.player.score}:{self.session.opponent.score}")

    def surface_offset(self):
        ww, wh = self.window.get_size()
        sw, sh = self.surface.get_size()
        return (ww - sw) // 2, (wh - sh) // 2

    def to_surface(self, pos):
        ox, oy = self.surface_offset()
        return pos[0] - ox, pos[1] - oy

    def resize(self, window_w):
        size = compute_surface_size(window_w)
        if size == self.surface.get_size():
            return
        self.surface = pygame.Surface(size)
        self.surface.fill(BG)
        self.session.resize(*size)
        logger.debug(f"surface resized to {size[0]}x{size[1]}")

    def begin(self):
        start_match(self.session)
        self.screen_state = "GAME"

    def again(self):
        restart_match(self.session)
        self.screen_state = "GAME"

    def choose(self, difficulty):
        self.session.set_difficulty(difficulty)
        logger.info(f"difficulty set to {difficulty}")

    def click(self, pos):
        x, y = self.to_surface(pos)
        rects = menu_layout(self.surface.get_size())
        if self.screen_state == "MENU":
            for name in DIFFS:
                if rects[name].collidepoint(x, y):
                    self.choose(name)
            if rects["start"].collidepoint(x, y):
                self.begin()
        elif self.screen_state == "OVER":
            if rects["start"].collidepoint(x, y):
                self.again()

    def handle(self, e):
        inputs = self.session.inputs
        if e.type == pygame.QUIT:
            self.alive = False

        elif e.type == pygame.VIDEORESIZE:
            self.resize(e.w)

        elif e.type == pygame.KEYDOWN:
            if e.key in KEY_NAMES:
                inputs.press(KEY_NAMES[e.key])
            elif e.key == pygame.K_ESCAPE:
                self.alive = False
            elif e.key == pygame.K_m:
                on = self.presenter.toggle_sound()
                logger.info(f"sound {'on' if on else 'off'}")
            elif e.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
                if self.screen_state == "MENU":
                    self.begin()
                elif self.screen_state == "OVER":
                    self.again()
            elif e.key in TIER_KEYS and self.screen_state == "MENU":
                self.choose(TIER_KEYS[e.key])

        elif e.type == pygame.KEYUP:
            if e.key in KEY_NAMES:
                inputs.release(KEY_NAMES[e.key])

        elif e.type == pygame.MOUSEMOTION:
            if getattr(e, "touch", False):
                return
            x, y = self.to_surface(e.pos)
            if self.surface.get_rect().collidepoint(x, y):
                self.session.move_player_to_pointer(y)

        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self.click(e.pos)

        elif e.type == pygame.FINGERDOWN:
            inputs.pointer_y = e.y * self.window.get_height()

        elif e.type == pygame.FINGERMOTION:
            if inputs.pointer_y is not None:
                y = e.y * self.window.get_height()
                self.session.nudge_player(y - inputs.pointer_y)
                inputs.pointer_y = y

        elif e.type == pygame.FINGERUP:
            inputs.pointer_y = None

    def render(self):
        draw_game(self.surface, self.session)
        view = self.surface.copy()
        draw_scores(view, self.font, self.session)
        if self.screen_state == "MENU":
            draw_start_screen(view, self.big, self.small, self.session.match.difficulty,
                              self.presenter.sound_enabled)
        elif self.screen_state == "OVER":
            draw_game_over(view, self.big, self.font, self.small, self.session, self.player_won)
        self.window.fill(BG)
        self.window.blit(view, self.surface_offset())

    def frame(self):
        for e in pygame.event.get():
            self.handle(e)
        tick(self.session)
        self.presenter.update()
        self.render()
        pygame.display.flip()
        return self.alive


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="neon-pong", description="Neon Pong against the computer")
    parser.add_argument("--difficulty", choices=list(DIFFS), default=DEFAULT_DIFFICULTY,
                        help="opponent and ball speed tier")
    parser.add_argument("--mute", action="store_true", help="start with sound and speech off")
    parser.add_argument("--no-speech", action="store_true", help="keep tones, skip spoken lines")
    parser.add_argument("--fps", type=int, default=FPS, help="frames per second")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    pygame.init()
    window = pygame.display.set_mode((W, H), pygame.RESIZABLE)
    pygame.display.set_caption("Neon Pong")

    presenter = Presenter(speech=not args.no_speech)
    if args.mute:
        presenter.toggle_sound()

    app = App(window, difficulty=args.difficulty, presenter=presenter)
    logger.info(f"starting at {args.difficulty}, {args.fps} fps")
    try:
        FrameLoop(app.frame, fps=args.fps).run()
    finally:
        presenter.close()
        pygame.quit()


if __name__ == "__main__":
    main()
