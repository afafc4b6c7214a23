# dispel_game.py
import logging

from config import LOG_LEVEL
from game.app import run_game

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_game()
