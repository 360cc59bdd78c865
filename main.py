#!/usr/bin/env python3
"""Render an explosion from the project root.

Usage:
    uv run python main.py boom.wav [--preset explosion/presets/rumble.json]
"""

import sys

if __name__ == "__main__":
    from explosion.audio.render import main
    sys.exit(main())
