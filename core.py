import math
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from config import (
    W, H, PADDLE_W, PADDLE_H, PADDLE_SPEED, PADDLE_MARGIN, BALL_R,
    BALL_START_SPEED, BALL_START_VEL, SPIN_FACTOR, SPEEDUP, LAUNCH_SPREAD_DEG,
    WIN_SCORE, DEFAULT_DIFFICULTY, KEYS_UP, KEYS_DOWN, tier,
)
from ai import OpponentAI

PLAYER = "PLAYER"
OPPONENT = "OPPONENT"

WALL_HIT = "wall_hit"
PADDLE_HIT = "paddle_hit"
SCORE = "score"
MATCH_START = "match_start"
MATCH_END = "match_end"


@dataclass(frozen=True)
class Event:
    kind: str
    side: Optional[str] = None

    @property
    def player_won(self):
        return self.side == PLAYER


@dataclass
class Paddle:
    x: float
    y: float
    width: float = PADDLE_W
    height: float = PADDLE_H
    dy: float = 0.0
    score: int = 0

    @property
    def center(self):
        return self.y + self.height / 2

    def clamp_to(self, field_h):
        self.y = clamp(self.y, 0.0, field_h - self.height)


@dataclass
class Ball:
    x: float
    y: float
    radius: float = BALL_R
    dx: float = BALL_START_VEL[0]
    dy: float = BALL_START_VEL[1]
    speed: float = BALL_START_SPEED


@dataclass
class InputState:
    held: set = field(default_factory=set)
    pointer_y: Optional[float] = None

    def press(self, key):
        self.held.add(key)

    def release(self, key):
        self.held.discard(key)

    def is_held(self, key):
        return key in self.held

    def any_held(self, keys):
        return any(k in self.held for k in keys)


@dataclass
class MatchState:
    running: bool = False
    difficulty: str = DEFAULT_DIFFICULTY
    win_score: int = WIN_SCORE


def clamp(v, a, b):
    return max(a, min(b, v))


class Session:
    """Everything one running game owns: field size, entities, input and match flags.

    The engine is the only writer. Renderers and the presenter read it.
    """

    def __init__(self, width=W, height=H, difficulty=DEFAULT_DIFFICULTY,
                 rng: Optional[random.Random] = None,
                 listener: Optional[Callable[[Event], None]] = None):
        tier(difficulty)
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.listener = listener
        self.inputs = InputState()
        self.match = MatchState(difficulty=difficulty)
        self.ai = OpponentAI(difficulty)
        self.player = Paddle(PADDLE_MARGIN, height / 2 - PADDLE_H / 2)
        self.opponent = Paddle(width - PADDLE_MARGIN - PADDLE_W, height / 2 - PADDLE_H / 2)
        self.ball = Ball(width / 2, height / 2)
        self.events: List[Event] = []

    @property
    def running(self):
        return self.match.running

    def emit(self, kind, side=None):
        ev = Event(kind, side)
        self.events.append(ev)
        if self.listener is not None:
            self.listener(ev)
        return ev

    def set_difficulty(self, name):
        tier(name)
        self.match.difficulty = name
        self.ai.set_difficulty(name)

    def resize(self, width, height):
        self.width = width
        self.height = height
        self.opponent.x = width - PADDLE_MARGIN - self.opponent.width
        if not self.match.running:
            for p in (self.player, self.opponent):
                p.y = height / 2 - p.height / 2
            self.ball.x = width / 2
            self.ball.y = height / 2
        self.player.clamp_to(height)
        self.opponent.clamp_to(height)

    def move_player_to_pointer(self, pointer_y):
        self.player.y = pointer_y - self.player.height / 2
        self.player.clamp_to(self.height)

    def nudge_player(self, delta_y):
        self.player.y += delta_y
        self.player.clamp_to(self.height)


def reset_ball(session: Session):
    ball = session.ball
    rng = session.rng
    ball.x = session.width / 2
    ball.y = session.height / 2
    speed = tier(session.match.difficulty)["ball_speed"]
    angle = math.radians(rng.uniform(-LAUNCH_SPREAD_DEG, LAUNCH_SPREAD_DEG))
    direction = 1 if rng.random() > 0.5 else -1
    ball.dx = math.cos(angle) * speed * direction
    ball.dy = math.sin(angle) * speed
    ball.speed = speed


def start_match(session: Session):
    session.player.score = 0
    session.opponent.score = 0
    reset_ball(session)
    session.match.running = True
    session.emit(MATCH_START)


def restart_match(session: Session):
    session.player.score = 0
    session.opponent.score = 0
    reset_ball(session)
    session.match.running = True


def move_player(session: Session):
    p = session.player
    if session.inputs.any_held(KEYS_UP):
        p.y -= PADDLE_SPEED
    if session.inputs.any_held(KEYS_DOWN):
        p.y += PADDLE_SPEED
    p.clamp_to(session.height)


def wall_collide_ball(session: Session):
    ball = session.ball
    if ball.y - ball.radius < 0 or ball.y + ball.radius > session.height:
        ball.dy *= -1
        return True
    return False


def ball_touches(ball: Ball, p: Paddle):
    return (ball.x - ball.radius < p.x + p.width
            and ball.x + ball.radius > p.x
            and p.y < ball.y < p.y + p.height)


def deflect(ball: Ball, p: Paddle, direction):
    ball.dx = abs(ball.dx) * direction
    hit_pos = (ball.y - p.y) / p.height
    ball.dy = (hit_pos - 0.5) * SPIN_FACTOR
    ball.dx *= SPEEDUP
    ball.dy *= SPEEDUP
    ball.speed *= SPEEDUP


def check_score(session: Session):
    ball = session.ball
    if ball.x - ball.radius < 0:
        return OPPONENT
    if ball.x + ball.radius > session.width:
        return PLAYER
    return None


def award_point(session: Session, side):
    scorer = session.player if side == PLAYER else session.opponent
    scorer.score += 1
    session.emit(SCORE, side)
    reset_ball(session)
    if scorer.score >= session.match.win_score:
        session.match.running = False
        session.emit(MATCH_END, side)


def tick(session: Session):
    """Advance the match by one frame and return the events it produced."""
    session.events = []
    if not session.match.running:
        return session.events

    ball = session.ball

    move_player(session)
    session.ai.update(session.opponent, ball, session.height)

    ball.x += ball.dx
    ball.y += ball.dy

    if wall_collide_ball(session):
        session.emit(WALL_HIT)

    if ball_touches(ball, session.player):
        deflect(ball, session.player, 1)
        session.emit(PADDLE_HIT, PLAYER)

    if ball_touches(ball, session.opponent):
        deflect(ball, session.opponent, -1)
        session.emit(PADDLE_HIT, OPPONENT)

    side = check_score(session)
    if side is not None:
        award_point(session, side)

    return session.events
