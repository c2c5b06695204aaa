import math
import random

import pytest

from config import DIFFS, WIN_SCORE, PADDLE_SPEED
from core import (
    Session, Event, PLAYER, OPPONENT, WALL_HIT, PADDLE_HIT, SCORE, MATCH_START, MATCH_END,
    tick, start_match, restart_match, reset_ball,
)


def kinds(events):
    return [e.kind for e in events]


def assert_launch(session):
    b = session.ball
    speed = DIFFS[session.match.difficulty]["ball_speed"]
    assert b.x == session.width / 2
    assert b.y == session.height / 2
    assert math.hypot(b.dx, b.dy) == pytest.approx(speed)
    assert b.speed == pytest.approx(speed)
    assert abs(math.degrees(math.atan2(b.dy, abs(b.dx)))) <= 30 + 1e-9


def test_new_session_layout(session):
    assert session.player.x == 20
    assert session.opponent.x == 800 - 20 - 12
    assert session.player.y == session.opponent.y == 200
    assert (session.ball.x, session.ball.y) == (400, 250)
    assert not session.running


def test_unknown_difficulty_rejected():
    with pytest.raises(ValueError):
        Session(difficulty="insane")


def test_tick_is_noop_until_started(session):
    before = (session.ball.x, session.ball.y)
    assert tick(session) == []
    assert (session.ball.x, session.ball.y) == before


def test_start_match_emits_start_and_launches(session):
    seen = []
    session.listener = seen.append
    session.player.score = 3
    start_match(session)
    assert session.running
    assert session.player.score == 0
    assert seen == [Event(MATCH_START)]
    assert_launch(session)


def test_launch_direction_varies():
    s = Session(rng=random.Random(5))
    signs = set()
    for _ in range(50):
        reset_ball(s)
        assert_launch(s)
        signs.add(s.ball.dx > 0)
    assert signs == {True, False}


def test_keys_move_player_and_clamp(session):
    start_match(session)
    session.ball.x, session.ball.dx, session.ball.dy = 400, 0, 0
    session.inputs.press("ArrowUp")
    tick(session)
    assert session.player.y == 200 - PADDLE_SPEED
    for _ in range(100):
        tick(session)
    assert session.player.y == 0
    session.inputs.release("ArrowUp")
    session.inputs.press("S")
    for _ in range(100):
        tick(session)
    assert session.player.y == 500 - 100


def test_both_keys_cancel(session):
    start_match(session)
    session.ball.dx = session.ball.dy = 0
    session.inputs.press("w")
    session.inputs.press("s")
    tick(session)
    assert session.player.y == 200


def test_paddles_stay_in_bounds_under_random_input():
    s = Session(rng=random.Random(99))
    start_match(s)
    rng = random.Random(3)
    for _ in range(2000):
        s.inputs.held = set(rng.sample(["w", "s", "ArrowUp", "ArrowDown", "x"], rng.randint(0, 2)))
        tick(s)
        for p in (s.player, s.opponent):
            assert 0 <= p.y <= s.height - p.height
        if not s.running:
            start_match(s)


def test_wall_hit_inverts_dy(session):
    start_match(session)
    b = session.ball
    b.x, b.y, b.dx, b.dy = 400, 10, 1, -5
    events = tick(session)
    assert b.dy == 5
    assert kinds(events) == [WALL_HIT]


def test_midpoint_hit_is_flat_and_faster(session):
    start_match(session)
    b = session.ball
    b.x, b.y, b.dx, b.dy = 40, 250, -5, 0
    events = tick(session)
    assert kinds(events) == [PADDLE_HIT]
    assert events[0].side == PLAYER
    assert b.dy == pytest.approx(0)
    assert b.dx == pytest.approx(5 * 1.05)


def test_spin_follows_contact_point(session):
    start_match(session)
    b = session.ball
    b.x, b.y, b.dx, b.dy = 40, 210, -5, 0
    tick(session)
    assert b.dy == pytest.approx((10 / 100 - 0.5) * 10 * 1.05)
    assert b.dy < 0


def test_opponent_hit_sends_ball_left(session):
    start_match(session)
    o = session.opponent
    o.y = 200
    b = session.ball
    b.x, b.y, b.dx, b.dy = o.x - 4, 250, 4, 0
    events = tick(session)
    assert PADDLE_HIT in kinds(events)
    assert b.dx == pytest.approx(-4 * 1.05)


def test_ball_at_paddle_center_hits_once(session):
    start_match(session)
    p = session.player
    session.ball.x = p.x + p.width / 2
    session.ball.y = p.y + p.height / 2
    events = tick(session)
    assert session.ball.dx > 0
    assert kinds(events).count(PADDLE_HIT) == 1


def test_left_exit_scores_for_opponent(session):
    start_match(session)
    b = session.ball
    b.x, b.y, b.dx, b.dy = 10, 450, -5, 0
    events = tick(session)
    assert session.opponent.score == 1
    assert session.player.score == 0
    assert events == [Event(SCORE, OPPONENT)]
    assert_launch(session)


def test_right_exit_scores_for_player(session):
    start_match(session)
    session.opponent.y = 0
    b = session.ball
    b.x, b.y, b.dx, b.dy = 790, 450, 5, 0
    events = tick(session)
    assert session.player.score == 1
    assert events == [Event(SCORE, PLAYER)]


def test_reaching_win_score_ends_match(session):
    seen = []
    start_match(session)
    session.listener = seen.append
    session.opponent.score = WIN_SCORE - 1
    b = session.ball
    b.x, b.y, b.dx, b.dy = 10, 450, -5, 0
    events = tick(session)
    assert kinds(events) == [SCORE, MATCH_END]
    assert events[1].player_won is False
    assert seen == events
    assert not session.running
    assert tick(session) == []


def test_restart_resets_scores_not_paddles(session):
    start_match(session)
    session.player.score = WIN_SCORE
    session.opponent.score = 2
    session.match.running = False
    session.player.y = 37
    session.opponent.y = 120
    restart_match(session)
    assert session.running
    assert (session.player.score, session.opponent.score) == (0, 0)
    assert (session.player.y, session.opponent.y) == (37, 120)
    assert_launch(session)
    restart_match(session)
    assert (session.player.score, session.opponent.score) == (0, 0)


def test_thousand_easy_ticks_without_input():
    s = Session(difficulty="easy", rng=random.Random(2024))
    assert DIFFS["easy"] == {"ai_speed": 3.0, "ball_speed": 4.0}
    start_match(s)
    last = (0, 0)
    for _ in range(1000):
        tick(s)
        scores = (s.player.score, s.opponent.score)
        assert scores[0] >= last[0] and scores[1] >= last[1]
        assert max(scores) <= WIN_SCORE
        if max(scores) == WIN_SCORE:
            assert not s.running
        for p in (s.player, s.opponent):
            assert 0 <= p.y <= s.height - p.height
        last = scores


def test_set_difficulty_changes_tracker_and_launch(session):
    session.set_difficulty("hard")
    assert session.ai.ai_speed == 6.0
    start_match(session)
    assert math.hypot(session.ball.dx, session.ball.dy) == pytest.approx(6.5)
    with pytest.raises(ValueError):
        session.set_difficulty("nightmare")


def test_resize_idle_recenters(session):
    session.player.y = 0
    session.resize(560, 392)
    assert session.opponent.x == 560 - 20 - 12
    assert session.player.y == 392 / 2 - 50
    assert (session.ball.x, session.ball.y) == (280, 196)


def test_resize_mid_match_keeps_positions_but_clamps(session):
    start_match(session)
    session.player.y = 100
    session.opponent.y = 400
    session.ball.x, session.ball.y = 123, 45
    session.resize(560, 392)
    assert session.player.y == 100
    assert session.opponent.y == 392 - 100
    assert (session.ball.x, session.ball.y) == (123, 45)


def test_pointer_and_touch_moves_clamp(session):
    session.move_player_to_pointer(260)
    assert session.player.y == 210
    session.move_player_to_pointer(5)
    assert session.player.y == 0
    session.nudge_player(30)
    assert session.player.y == 30
    session.nudge_player(10_000)
    assert session.player.y == 400
