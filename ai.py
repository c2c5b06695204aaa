from config import DIFFS, AI_DEADBAND


class OpponentAI:
    """Tracks the ball's height, but only once it leaves a deadband around the paddle center."""

    def __init__(self, difficulty="medium", deadband=AI_DEADBAND):
        self.deadband = deadband
        self.set_difficulty(difficulty)

    def set_difficulty(self, difficulty):
        self.difficulty = difficulty
        cfg = DIFFS[difficulty]
        self.ai_speed = cfg["ai_speed"]

    def step(self, center, target_y):
        if center < target_y - self.deadband:
            return self.ai_speed
        if center > target_y + self.deadband:
            return -self.ai_speed
        return 0.0

    def update(self, paddle, ball, field_h):
        paddle.y += self.step(paddle.center, ball.y)
        paddle.clamp_to(field_h)
