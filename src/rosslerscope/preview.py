"""
Interactive pygame preview.

Usage:
    rosslerscope-preview [options]

Keys:
    q / a   increase / decrease a
    w / s   increase / decrease b
    e / d   increase / decrease c
    r       reset parameters to defaults
    space   restart the drawing animation
    l       toggle looping
    esc     quit

Drag with the left mouse button to orbit, scroll to zoom.
"""

import argparse
import sys

import numpy as np
import pygame

from rosslerscope.app import AttractorApp
from rosslerscope.cli import add_parameter_arguments, build_config, configure_logging
from rosslerscope.core.session import ParamEvent

KEY_EVENTS = {
    pygame.K_q: ParamEvent("increment", "a"),
    pygame.K_a: ParamEvent("decrement", "a"),
    pygame.K_w: ParamEvent("increment", "b"),
    pygame.K_s: ParamEvent("decrement", "b"),
    pygame.K_e: ParamEvent("increment", "c"),
    pygame.K_d: ParamEvent("decrement", "c"),
    pygame.K_r: ParamEvent("reset"),
    pygame.K_SPACE: ParamEvent("restart"),
}


def caption(app: AttractorApp) -> str:
    """Window title echoing live (and pending committed) parameters."""
    live = app.session.live
    text = f"Rössler  a={live.a:.1f}  b={live.b:.1f}  c={live.c:.1f}"
    if app.session.dirty:
        text += "  (pending)"
    trajectory = app.trajectory
    if trajectory.drawable_length < len(trajectory):
        text += f"  diverged @ {trajectory.drawable_length}"
    return text


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """(H, W, 3) uint8 to a pygame Surface; pygame is (width, height) ordered."""
    return pygame.surfarray.make_surface(frame.swapaxes(0, 1))


def run(app: AttractorApp):
    cfg = app.cfg.scene
    pygame.init()
    screen = pygame.display.set_mode((cfg.width, cfg.height))
    clock = pygame.time.Clock()
    dragging = False
    last_caption = None

    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_l:
                        app.reveal.cfg.looping = not app.reveal.cfg.looping
                    elif event.key in KEY_EVENTS:
                        app.handle(KEY_EVENTS[event.key])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    dragging = True
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    dragging = False
                elif event.type == pygame.MOUSEMOTION and dragging:
                    dx, dy = event.rel
                    app.camera.rotate(dx, dy, cfg.height)
                elif event.type == pygame.MOUSEWHEEL:
                    app.camera.zoom(event.y)

            frame = app.render_frame()
            screen.blit(frame_to_surface(frame), (0, 0))
            pygame.display.flip()

            text = caption(app)
            if text != last_caption:
                pygame.display.set_caption(text)
                last_caption = text

            clock.tick(cfg.fps)
    finally:
        app.close()
        pygame.quit()


def main():
    parser = argparse.ArgumentParser(
        prog="rosslerscope-preview",
        description="Interactive Rössler attractor viewer",
    )
    parser.add_argument("--width", type=int, default=960, help="Window width (default: 960)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Frame rate cap (default: 60)")
    add_parameter_arguments(parser)
    parser.add_argument("--no-glow", action="store_true", help="Disable bloom (faster)")
    parser.add_argument("--no-vignette", action="store_true", help="Disable vignette")

    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        config = build_config(args, args.width, args.height, args.fps)
        app = AttractorApp(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    run(app)


if __name__ == "__main__":
    main()
