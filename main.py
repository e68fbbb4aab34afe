"""
Headless driver
===============
Runs the simulation core outside of any renderer.

    python main.py validate
    python main.py run --level 1 --seconds 20 --moves LLUURRDD --realtime

``run`` feeds one scripted direction per simulated second (L, R, U, D or ``.``
for "no new input") and logs every event. The loop steps the core once per
fixed quantum; with ``--realtime`` it accumulates wall-clock time through
``pygame.time.Clock`` first, otherwise it steps as fast as it can.
"""

import argparse
import logging
import sys

import pygame

from env.constants import FIXED_DT, FPS, LEFT, RIGHT, UP, DOWN, NONE, DEAD_DURATION
from env.board import BOARDS
from env.board_parser import parse_board, MalformedBoard
from env.board_validator import validate_board
from env.level_manager import LevelManager
from env.simulation import Simulation, PLAYER_KILLED, LEVEL_CLEAR

log = logging.getLogger("main")

MOVES = {"L": LEFT, "R": RIGHT, "U": UP, "D": DOWN, ".": NONE}
MAX_FRAME = 0.1


# ======================================================================
#  LOOP DO JOGO
# ======================================================================
class GameLoop:
    def __init__(self, level=1, moves="", lives=3):
        self.levels = LevelManager()
        self.sim = Simulation()
        self.level = level
        self.lives = lives
        self.moves = [MOVES[m] for m in moves.upper() if m in MOVES]
        self.elapsed = 0.0
        self.sim.add_listener(self._on_event)
        self.sim.load_level(self.levels.board_for_level(level), level)

    def desired_direction(self):
        second = int(self.elapsed)
        if second < len(self.moves):
            return self.moves[second]
        return NONE

    def _on_event(self, event):
        log.info("%-18s points=%-5d tile=%s combo=%d",
                 event.kind, event.points, event.tile, event.combo)

    def tick(self):
        events = self.sim.step(self.desired_direction(), FIXED_DT)
        self.elapsed += FIXED_DT
        kinds = {e.kind for e in events}

        # Fases fora do núcleo: morte e troca de nível
        if not self.sim.player.alive and PLAYER_KILLED not in kinds:
            if self.sim.player.death_timer >= DEAD_DURATION:
                self.lives -= 1
                if self.lives <= 0:
                    return False
                self.sim.reset_positions()
        if LEVEL_CLEAR in kinds:
            self.level += 1
            self.sim.load_level(self.levels.board_for_level(self.level), self.level)
        return True

    def run(self, seconds, realtime=False):
        if realtime:
            pygame.init()
        clock = pygame.time.Clock()
        accumulator = 0.0
        running = True
        while running and self.elapsed < seconds:
            if realtime:
                accumulator += min(clock.tick(FPS) / 1000, MAX_FRAME)
            else:
                accumulator += FIXED_DT
            while accumulator >= FIXED_DT and running:
                running = self.tick()
                accumulator -= FIXED_DT
        if realtime:
            pygame.quit()
        snap = self.sim.snapshot()
        print(f"Level {self.level}  lives {self.lives}  dots left {snap.dots_remaining}  "
              f"ghosts {', '.join(snap.ghost_modes)}")
        return snap


def validate_all():
    ok = True
    for definition in BOARDS:
        try:
            board = parse_board(definition)
        except MalformedBoard as e:
            print(f"{definition.name}: MALFORMED ({e})")
            ok = False
            continue
        result = validate_board(board)
        status = "OK" if result.valid else "INVALID"
        print(f"{definition.name}: {status} ({board.dot_count} dots, {len(board.warp_pairs)} warp pairs)")
        for err in result.errors:
            print(f"  error: {err}")
        for warn in result.warnings:
            print(f"  warning: {warn}")
        ok = ok and result.valid
    return ok


def build_parser():
    parser = argparse.ArgumentParser(description="Maze-chase simulation core")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("validate", help="parse and validate the built-in boards")
    run = sub.add_parser("run", help="run the simulation headless")
    run.add_argument("--level", type=int, default=1)
    run.add_argument("--seconds", type=float, default=30.0)
    run.add_argument("--moves", default="", help="one of L/R/U/D/. per simulated second")
    run.add_argument("--realtime", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    if args.command == "validate":
        return 0 if validate_all() else 1

    print("=" * 50)
    print(" Maze-chase simulation (headless)")
    print("=" * 50)
    GameLoop(args.level, args.moves).run(args.seconds, args.realtime)
    return 0


if __name__ == "__main__":
    sys.exit(main())
