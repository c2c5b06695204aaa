import logging
import queue
import threading

import numpy as np
import pygame
import pyttsx3

from config import (
    SAMPLE_RATE, TONE_GAIN, TONE_GAIN_END,
    CUE_WALL, CUE_PADDLE, CUE_SCORE, CUE_START, CUE_WIN, CUE_LOSE,
    SPEECH_LANG, SPEECH_RATE, SPEECH_START_DELAY_MS, SPEECH_END_DELAY_MS,
    SAY_START, SAY_WIN, SAY_LOSE,
)
from core import WALL_HIT, PADDLE_HIT, SCORE, MATCH_START, MATCH_END

logger = logging.getLogger(__name__)


def make_tone(freq, duration, sample_rate=SAMPLE_RATE, channels=2):
    """Sine tone with an exponential fade from TONE_GAIN down to TONE_GAIN_END."""
    n = max(1, int(sample_rate * duration))
    t = np.linspace(0, duration, n, False)
    gain = TONE_GAIN * (TONE_GAIN_END / TONE_GAIN) ** (t / duration)
    audio = np.int16(np.sin(2 * np.pi * freq * t) * gain * 32767)
    if channels > 1:
        audio = np.column_stack([audio] * channels)
    return audio


def find_voice(voices, lang):
    for v in voices:
        for code in getattr(v, "languages", None) or []:
            if isinstance(code, bytes):
                code = code.decode("utf-8", "ignore").lstrip("\x05")
            if str(code).lower().startswith(lang.lower()):
                return v
        if lang.lower() in str(getattr(v, "id", "")).lower():
            return v
    return None


class Speaker:
    """Text to speech on a background thread so the frame loop never waits on it."""

    def __init__(self, lang=SPEECH_LANG, rate=SPEECH_RATE):
        self.lang = lang
        self.rate = rate
        self.lines = queue.Queue()
        self.thread = None
        self.dead = False

    def start(self):
        if self.thread is not None:
            return
        self.thread = threading.Thread(target=self._loop, name="speaker", daemon=True)
        self.thread.start()

    def say(self, text):
        if self.dead:
            return
        self.start()
        self.lines.put(text)

    def _loop(self):
        try:
            engine = pyttsx3.init()
            engine.setProperty("rate", self.rate)
            voice = find_voice(engine.getProperty("voices"), self.lang)
            if voice is not None:
                engine.setProperty("voice", voice.id)
        except Exception as e:
            logger.warning(f"speech unavailable: {e}")
            self.dead = True
            while not self.lines.empty():
                self.lines.get_nowait()
            return
        while True:
            text = self.lines.get()
            if text is None:
                break
            try:
                engine.say(text)
                engine.runAndWait()
            except Exception as e:
                logger.warning(f"speech failed: {e}")

    def stop(self):
        if self.thread is not None:
            self.lines.put(None)


class Presenter:
    """Turns engine events into tones and spoken lines.

    Never touches the session. Cues with a delay are queued and fired by
    update(), which the frame loop calls once per frame.
    """

    def __init__(self, audio=True, speech=True, clock=None, speaker=None):
        self.sound_enabled = True
        self.clock = clock or pygame.time.get_ticks
        self.pending = []
        self.tones = {}
        self.mixer_ok = audio and self._init_mixer()
        self.speaker = speaker if speaker is not None else (Speaker() if speech else None)

    def _init_mixer(self):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            return bool(pygame.mixer.get_init())
        except Exception as e:
            logger.warning(f"audio unavailable: {e}")
            return False

    def toggle_sound(self):
        self.sound_enabled = not self.sound_enabled
        if not self.sound_enabled:
            self.pending = []
        return self.sound_enabled

    def schedule(self, delay_ms, fn, *args):
        self.pending.append((self.clock() + delay_ms, fn, args))

    def update(self):
        if not self.pending:
            return
        now = self.clock()
        due = [c for c in self.pending if c[0] <= now]
        self.pending = [c for c in self.pending if c[0] > now]
        for _, fn, args in sorted(due, key=lambda c: c[0]):
            fn(*args)

    def beep(self, freq, duration):
        if not (self.sound_enabled and self.mixer_ok):
            return
        key = (freq, duration)
        try:
            snd = self.tones.get(key)
            if snd is None:
                rate, _, channels = pygame.mixer.get_init()
                snd = pygame.sndarray.make_sound(make_tone(freq, duration, rate, channels).copy())
                self.tones[key] = snd
            snd.play()
        except Exception as e:
            logger.debug(f"tone {freq}Hz failed: {e}")

    def speak(self, text):
        if not self.sound_enabled or self.speaker is None:
            return
        self.speaker.say(text)

    def play_cue(self, cue):
        if not self.sound_enabled:
            return
        for freq, duration, delay in cue:
            if delay <= 0:
                self.beep(freq, duration)
            else:
                self.schedule(delay, self.beep, freq, duration)

    def on_wall_hit(self):
        self.play_cue(CUE_WALL)

    def on_paddle_hit(self):
        self.play_cue(CUE_PADDLE)

    def on_score(self):
        self.play_cue(CUE_SCORE)

    def on_match_start(self):
        self.play_cue(CUE_START)
        if self.sound_enabled:
            self.schedule(SPEECH_START_DELAY_MS, self.speak, SAY_START)

    def on_match_end(self, player_won):
        self.play_cue(CUE_WIN if player_won else CUE_LOSE)
        if self.sound_enabled:
            self.schedule(SPEECH_END_DELAY_MS, self.speak, SAY_WIN if player_won else SAY_LOSE)

    def handle(self, event):
        if event.kind == WALL_HIT:
            self.on_wall_hit()
        elif event.kind == PADDLE_HIT:
            self.on_paddle_hit()
        elif event.kind == SCORE:
            self.on_score()
        elif event.kind == MATCH_START:
            self.on_match_start()
        elif event.kind == MATCH_END:
            self.on_match_end(event.player_won)

    def close(self):
        self.pending = []
        if self.speaker is not None:
            self.speaker.stop()
