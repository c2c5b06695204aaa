import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import random

import pygame
import pytest

from core import Session


@pytest.fixture
def session():
    return Session(800, 500, difficulty="medium", rng=random.Random(1234))


@pytest.fixture
def pg():
    pygame.init()
    yield pygame
    pygame.quit()
