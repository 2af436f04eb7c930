#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Put the blueprint at ``photos/motive.jpg`` and the candidate photos in
``photos/inputphotos/``, then run:

    python main.py build

Or use the full CLI:

    python -m photo_collage.cli build --help
    python -m photo_collage.cli catalog --photos my_photos/
"""

from photo_collage.cli import app

if __name__ == "__main__":
    app()
