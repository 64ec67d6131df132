# src/runner/game.py
import sys, argparse, logging, random
import pygame
from pygame import K_SPACE, K_UP, K_DOWN, K_ESCAPE

from .config import WIDTH, HEIGHT, FPS, SEED_DEFAULT, Dimensions, RunnerConfig
from .render import RunnerRenderer
from .runner import Runner
from .scheduler import MonotonicClock, PygameFrameScheduler

JUMP_KEYS = (K_SPACE, K_UP)
DUCK_KEYS = (K_DOWN,)


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Obstacle seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--manual", action="store_true",
                   help="Disable auto-start and auto-jump; play with the keyboard.")
    p.add_argument("--debug-boxes", action="store_true", help="Outline collision boxes.")
    p.add_argument("--width", type=int, default=WIDTH, help="Viewport width (narrower = slower start).")
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args()


def run():
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        seed = SEED_DEFAULT
    elif args.seed == -1:
        seed = random.randrange(0, 2**32 - 1)
    else:
        seed = args.seed

    pygame.init()
    pygame.display.set_caption("Dino Runner")
    dims = Dimensions(width=min(args.width, WIDTH), height=HEIGHT)
    screen = pygame.display.set_mode((dims.width, dims.height))

    scheduler = PygameFrameScheduler(FPS)
    runner = Runner(
        config=RunnerConfig(),
        dimensions=dims,
        clock=MonotonicClock(),
        scheduler=scheduler,
        seed=seed,
        autoplay=not args.manual,
    )
    renderer = RunnerRenderer(screen, debug_boxes=args.debug_boxes)

    def on_events():
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                scheduler.stop_loop()
            elif event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    scheduler.stop_loop()
                elif event.key in JUMP_KEYS:
                    runner.on_jump_pressed()
                elif event.key in DUCK_KEYS:
                    runner.on_duck_pressed()
            elif event.type == pygame.KEYUP:
                if event.key in JUMP_KEYS:
                    runner.on_jump_released()
                elif event.key in DUCK_KEYS:
                    runner.on_duck_released()
            elif event.type in (pygame.WINDOWFOCUSLOST, pygame.WINDOWMINIMIZED):
                runner.on_visibility_change(False)
            elif event.type in (pygame.WINDOWFOCUSGAINED, pygame.WINDOWRESTORED):
                runner.on_visibility_change(True)

    def on_frame():
        renderer.draw(runner)
        pygame.display.flip()

    runner.start()
    try:
        scheduler.run(on_events, on_frame)
    finally:
        print(f"Seed: {seed}   Runs: {runner.play_count}   Best: {runner.high_score}")
        pygame.quit()
    sys.exit(0)


if __name__ == "__main__":
    run()
