W, H = 800, 500
MAX_W, MAX_H = 800, 500
NARROW_BREAKPOINT = 768
NARROW_MARGIN = 40
NARROW_ASPECT = 0.7

FPS = 60

BG = (0, 0, 0)
WHITE = (235, 235, 235)
GRAY = (130, 130, 130)
CYAN = (0, 243, 255)
MAGENTA = (255, 0, 255)
GREEN = (57, 255, 20)

TRAIL_ALPHA = 51
NET_ALPHA = 77
NET_W = 4
NET_H = 15
NET_GAP = 20
GLOW_PADDLE = 20
GLOW_BALL = 30

PADDLE_W = 12
PADDLE_H = 100
PADDLE_SPEED = 8
PADDLE_MARGIN = 20

BALL_R = 8
BALL_START_SPEED = 5.0
BALL_START_VEL = (5.0, 3.0)

AI_DEADBAND = 35
SPIN_FACTOR = 10
SPEEDUP = 1.05
LAUNCH_SPREAD_DEG = 30

WIN_SCORE = 5

DEFAULT_DIFFICULTY = "medium"

DIFFS = {
    "easy":   {"ai_speed": 3.0, "ball_speed": 4.0},
    "medium": {"ai_speed": 4.5, "ball_speed": 5.0},
    "hard":   {"ai_speed": 6.0, "ball_speed": 6.5},
}

KEYS_UP = ("w", "W", "ArrowUp")
KEYS_DOWN = ("s", "S", "ArrowDown")

TONE_GAIN = 0.3
TONE_GAIN_END = 0.01
SAMPLE_RATE = 44100

# (frequency Hz, duration s, delay ms)
CUE_WALL = ((220, 0.1, 0),)
CUE_PADDLE = ((440, 0.1, 0),)
CUE_SCORE = ((523, 0.2, 0), (659, 0.2, 100))
CUE_START = ((523, 0.15, 0), (659, 0.15, 100), (784, 0.2, 200))
CUE_WIN = ((523, 0.15, 0), (659, 0.15, 100), (784, 0.15, 200), (1047, 0.3, 300))
CUE_LOSE = ((392, 0.2, 0), (330, 0.2, 150), (262, 0.3, 300))

SPEECH_LANG = "en"
SPEECH_RATE = 170
SPEECH_START_DELAY_MS = 500
SPEECH_END_DELAY_MS = 800
SAY_START = "Game on! Good luck!"
SAY_WIN = "Well played, you won!"
SAY_LOSE = "Bad luck, you lost!"


def tier(name):
    if name not in DIFFS:
        raise ValueError(f"unknown difficulty {name!r}, expected one of {', '.join(DIFFS)}")
    return DIFFS[name]


def compute_surface_size(window_w):
    if window_w <= NARROW_BREAKPOINT:
        w = max(1, min(window_w - NARROW_MARGIN, MAX_W))
        return w, max(1, int(w * NARROW_ASPECT))
    return MAX_W, MAX_H
