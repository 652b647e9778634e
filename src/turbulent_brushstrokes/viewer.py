"""
Turbulent Brushstrokes.

Copyright (c) 2026 Turbulent Brushstrokes contributors
SPDX-License-Identifier: MIT OR Apache-2.0
"""
import taichi as ti
import numpy as np
import time
from .brush import BrushstrokeEngine, SimParams

_GLOBAL_TAICHI_INITIALIZED = False

def _initialize_taichi_backend(arch: str):
    """Initializes the Taichi runtime with the best available backend."""
    global _GLOBAL_TAICHI_INITIALIZED
    if _GLOBAL_TAICHI_INITIALIZED:
        return

    # Strategy for selecting backend
    ti_arch = ti.cpu
    if arch == "gpu":
        if ti.core.with_cuda():
            ti_arch = ti.cuda
        elif ti.core.with_metal():
            ti_arch = ti.metal
        elif ti.core.with_vulkan():
            ti_arch = ti.vulkan
        else:
            ti_arch = ti.cpu
    elif arch == "vulkan":
        ti_arch = ti.vulkan
    elif arch == "metal":
        ti_arch = ti.metal
    elif arch == "cuda":
        ti_arch = ti.cuda

    print(f"[Viewer] Initializing Taichi with backend: {ti_arch}")
    ti.init(arch=ti_arch, offline_cache=True)
    _GLOBAL_TAICHI_INITIALIZED = True


def _to_canvas_image(rgb_u8: np.ndarray) -> np.ndarray:
    # Pillow rows run top-down; GGUI images are (x, y) with origin at BOTTOM-LEFT.
    return np.ascontiguousarray(rgb_u8[::-1].transpose(1, 0, 2), dtype=np.float32) / 255.0


def _save_screenshot(engine):
    path = f"brushstrokes_{int(time.time())}.png"
    engine.surface.save(path)
    print(f"[Viewer] Saved screenshot to {path}")


def launch_viewer():
    import argparse
    from dataclasses import fields

    parser = argparse.ArgumentParser(description="Turbulent Brushstrokes: Van Gogh flow-field animation")
    parser.add_argument("-W", "--width", type=int, default=1280, help="Canvas width (default: 1280)")
    parser.add_argument("-H", "--height", type=int, default=720, help="Canvas height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Target FPS cap (default: 60)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: wall clock)")
    parser.add_argument("--arch", type=str, default="gpu", help="Taichi backend: gpu, cpu, cuda, metal, vulkan")

    # Add SimParams as arguments automatically
    for f in fields(SimParams):
        if isinstance(f.default, tuple): continue # Skip range fields for CLI
        arg_name = f.name.replace('_', '-')
        parser.add_argument(f"--{arg_name}", type=type(f.default), default=f.default, help=f.metadata.get('help', ''))

    args = parser.parse_args()

    params = SimParams()
    for f in fields(SimParams):
        if hasattr(args, f.name):
            setattr(params, f.name, getattr(args, f.name))

    try:
        _initialize_taichi_backend(args.arch)
    except Exception as e:
        print(f"[Viewer] GPU Init failed: {e}. Falling back to CPU.")
        _initialize_taichi_backend("cpu")

    width, height = args.width, args.height
    engine = BrushstrokeEngine(width, height, params=params, seed=args.seed)

    window = ti.ui.Window("Turbulent Brushstrokes", (width, height))
    canvas = window.get_canvas()
    gui = window.get_gui()
    img = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))

    print("\n[Controls]")
    print(" - 1-5: Switch period (Nuenen, Paris, Arles, Starry Night, Almond)")
    print(" - Space: Pause/Resume")
    print(" - R: Reset particles")
    print(" - H: Hide/show info")
    print(" - S: Save Screenshot")
    print(" - Mouse: Stir the sky (Starry Night only)")

    last_cursor = None
    last_frame = time.time()
    last_stat_time = last_frame
    frames_since_stat = 0

    while window.running:
        frame_start = time.time()
        dt_ms = (frame_start - last_frame) * 1000.0
        last_frame = frame_start

        # Handle events
        for e in window.get_events(ti.ui.PRESS):
            if e.key == ti.ui.ESCAPE:
                window.running = False
            elif e.key == 's':
                _save_screenshot(engine)
            else:
                engine.key_pressed(e.key)

        # ti.ui.Window (GGUI) uses [0,1] with origin at BOTTOM-LEFT.
        mx, my = window.get_cursor_pos()
        cursor = (mx * width, (1.0 - my) * height)
        if cursor != last_cursor:
            if last_cursor is not None:
                engine.mouse_moved(*cursor)
            last_cursor = cursor

        shape = tuple(window.get_window_shape())
        if shape != (width, height) and shape[0] > 0 and shape[1] > 0:
            width, height = shape
            engine.resize(width, height)
            img = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))

        engine.step(dt_ms)

        img.from_numpy(_to_canvas_image(engine.surface.to_array()))
        canvas.set_image(img)

        info = engine.info()
        if info["show_info"]:
            with gui.sub_window("Period", 0.02, 0.02, 0.3, 0.14):
                gui.text(info["name"])
                gui.text(info["description"])
                if info["paused"]:
                    gui.text("PAUSED [Space]")
                gui.text("1-5 periods | R reset | H hide")

        window.show()
        frames_since_stat += 1

        # Performance stats monitor
        now = time.time()
        if now - last_stat_time > 2.0:
            fps_val = frames_since_stat / (now - last_stat_time)
            print(f"[Stats] FPS: {fps_val:.1f} | Particles: {len(engine.particles)} | Period: {info['period']}")
            frames_since_stat = 0
            last_stat_time = now

        # Enforce FPS cap to prevent resource hogging
        elapsed = time.time() - frame_start
        if elapsed < 1.0 / args.fps:
            time.sleep(1.0 / args.fps - elapsed)

if __name__ == "__main__":
    launch_viewer()
