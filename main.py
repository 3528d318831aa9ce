#!/usr/bin/env python3
"""
⬡ POLYGON EDITOR - HEADLESS DRIVER ⬡

Drives the editor engine without a UI: builds scenes, replays recorded
pointer events and reports the resulting geometry.

Usage:
    python main.py --demo 6                  # Drop 6 overlapping shapes and settle them
    python main.py --replay events.json      # Replay a recorded event script
    python main.py --demo 6 --save scene.png # Save a debug plot of the result

Event scripts are JSON lists of objects, applied in order:
    {"type": "add", "x": 0, "y": 0, "sides": 5, "width": 50, "height": 50}
    {"type": "mode", "mode": "vertex_edit"}
    {"type": "press", "x": 400, "y": 300, "button": "left"}
    {"type": "move", "x": 420, "y": 310}
    {"type": "release"}
    {"type": "wheel", "x": 400, "y": 300, "delta": 1}
"""

import argparse
import json
import logging
import os
import sys
import time

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)


# =============================================================================
# BANNER
# =============================================================================

BANNER = """
╔══════════════════════════════════════════════════════════════════════════════╗
║                                                                              ║
║   ⬡  POLYGON EDITOR - GEOMETRY & COLLISION ENGINE  ⬡                         ║
║                                                                              ║
║        /\\                 Shapes: 3-20 sided polygons                        ║
║       /  \\                Collisions: SAT + settling                         ║
║      /____\\               Mode: headless                                     ║
║                                                                              ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""


# =============================================================================
# WARMUP
# =============================================================================

def warmup_jit():
    """Warm up JIT compilation for all modules."""
    print("\n🔥 Warming up JIT compilation...")

    from core.transform import warmup as warmup_transform
    from core.bounding_box import warmup as warmup_bbox
    from core.polygon import warmup as warmup_polygon
    from core.collision import warmup as warmup_collision

    warmup_transform()
    warmup_bbox()
    warmup_polygon()
    warmup_collision()

    print("   ✅ JIT warmup complete!")


# =============================================================================
# REPORTING
# =============================================================================

def print_summary(editor):
    """Print a short report of the scene."""
    from core.bounding_box import compute_scene_bounds

    print(f"\n📊 Scene summary:")
    print(f"   Shapes: {editor.shape_count}")

    for shape_id in editor.shape_ids():
        x, y = editor.get_position(shape_id)
        print(f"     #{shape_id:<3d} {editor.get_name(shape_id):<10s} "
              f"pos=({x:8.2f}, {y:8.2f}) rot={editor.get_rotation(shape_id):7.2f}° "
              f"scale={editor.get_scale(shape_id):.2f} vertices={editor.vertex_count(shape_id)}")

    bounds = compute_scene_bounds(editor.world_polygons().values())
    if bounds is not None:
        min_x, min_y, max_x, max_y = bounds
        print(f"   Bounds: x=[{min_x:.2f}, {max_x:.2f}] y=[{min_y:.2f}, {max_y:.2f}]")

    overlaps = editor.find_overlaps()
    if overlaps:
        print(f"   ⚠️  {len(overlaps)} overlapping pairs:")
        for id_a, id_b, area in overlaps:
            print(f"     #{id_a} / #{id_b}: area {area:.4f}")
    else:
        print("   ✅ No overlaps")

    return overlaps


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_demo(args, editor):
    """Drop shapes on top of each other and let settling separate them."""
    count = args.demo
    print(f"\n🎯 Dropping {count} shapes near the origin")

    start_time = time.time()

    for i in range(count):
        sides = 3 + i % 6
        # Spacing well below the shape size so neighbours start overlapping
        shape_id = editor.add_shape(i * 30.0, (i % 2) * 20.0, sides, 50.0, 50.0)
        result = editor.settle(shape_id)
        status = "✅" if result.converged else "⚠️"
        print(f"   {status} #{shape_id} {editor.get_name(shape_id)}: "
              f"{result.passes} passes, {result.resolved} corrections")

    elapsed = time.time() - start_time
    print(f"\n⏱️  Settled in {elapsed * 1000:.1f} ms")


def apply_event(editor, event):
    """Apply one scripted event to the editor."""
    from editor.interaction import PointerButton, UIMode

    kind = event.get('type')

    if kind == 'add':
        return editor.add_shape(
            float(event.get('x', 0.0)),
            float(event.get('y', 0.0)),
            int(event.get('sides', editor.config.defaults.sides)),
            float(event.get('width', editor.config.defaults.width)),
            float(event.get('height', editor.config.defaults.height)),
        )
    if kind == 'mode':
        editor.ui_mode = UIMode(event['mode'])
        return True
    if kind == 'press':
        button = PointerButton(event.get('button', 'left'))
        return editor.press(float(event['x']), float(event['y']), button)
    if kind == 'move':
        return editor.move(float(event['x']), float(event['y']))
    if kind == 'release':
        return editor.release(event.get('x'), event.get('y'))
    if kind == 'wheel':
        return editor.wheel(float(event['x']), float(event['y']), float(event['delta']))

    raise ValueError(f"Unknown event type: {kind!r}")


def cmd_replay(args, editor):
    """Replay a JSON event script."""
    with open(args.replay, 'r') as f:
        events = json.load(f)

    if not isinstance(events, list):
        raise ValueError("Event script must be a JSON list")

    print(f"\n🎬 Replaying {len(events)} events from {args.replay}")

    for i, event in enumerate(events):
        result = apply_event(editor, event)
        logging.getLogger(__name__).debug("Event %d %s -> %s", i, event.get('type'), result)

    print(f"   Drag mode: {editor.drag_mode.value}")
    print(f"   Zoom: {editor.zoom:.3f}, offset: ({editor.offset[0]:.1f}, {editor.offset[1]:.1f})")


# =============================================================================
# MAIN
# =============================================================================

def build_parser():
    parser = argparse.ArgumentParser(
        description="⬡ Polygon editor headless driver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --demo 6                  # Settle 6 dropped shapes
    python main.py --replay events.json      # Replay pointer events
    python main.py --demo 4 --save out.png   # Save a debug plot
        """
    )

    # Commands
    cmd_group = parser.add_mutually_exclusive_group(required=True)
    cmd_group.add_argument('--demo', type=int, metavar='N', help='Drop N shapes and settle them')
    cmd_group.add_argument('--replay', type=str, metavar='PATH', help='Replay a JSON event script')

    # Options
    parser.add_argument('--width', type=float, default=None, help='Viewport width in pixels')
    parser.add_argument('--height', type=float, default=None, help='Viewport height in pixels')
    parser.add_argument('--no-collisions', action='store_true', help='Disable collision settling')
    parser.add_argument('--save', type=str, metavar='PATH', help='Save visualization to file')
    parser.add_argument('--no-warmup', action='store_true', help='Skip JIT warmup')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from editor.canvas import PolygonEditor

    print(BANNER)

    try:
        if not args.no_warmup:
            warmup_jit()

        editor = PolygonEditor(args.width, args.height)
        editor.collisions_enabled = not args.no_collisions

        if args.demo is not None:
            cmd_demo(args, editor)
        else:
            cmd_replay(args, editor)

        print_summary(editor)

        if args.save:
            import matplotlib
            matplotlib.use('Agg')
            from utils.visualization import save_scene
            save_scene(editor, args.save)

    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        sys.exit(1)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

    return editor


if __name__ == "__main__":
    main()
