#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Put tiles under ``img/`` and the photograph at ``img/img-1.jpg``, then run:

    python main.py build

Or pick your own inputs:

    python -m tile_mosaic.cli build photo.jpg --tiles tiles/ --part-size 8
    python -m tile_mosaic.cli library tiles/
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()
