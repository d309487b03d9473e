#!/usr/bin/env python3
import argparse
import os
import sys
from typing import Tuple

import numpy as np
from PIL import Image

from palette_colors import ConfigError, parse_color, rgb_to_hex


def recolor_mask(image: Image.Image, rgb: Tuple[int, int, int]) -> Image.Image:
    """Recolor a black/white mask icon.

    Opaque pure white pixels become fully transparent, opaque pure black
    pixels take the target color, and every other pixel is left untouched.
    Returns a new RGBA image; the input image is not modified.
    """
    if len(rgb) != 3 or any(not 0 <= int(c) <= 255 for c in rgb):
        raise ValueError(f"Color components must be in 0..255, got {rgb}")

    if image.mode != 'RGBA':
        image = image.convert('RGBA')

    # np.array copies the pixel buffer
    data = np.array(image, dtype=np.uint8)
    color = data[:, :, :3]
    visible = data[:, :, 3] != 0

    white = visible & np.all(color == 255, axis=-1)
    black = visible & np.all(color == 0, axis=-1)

    data[white, 3] = 0
    data[black, :3] = np.array(rgb, dtype=np.uint8)

    return Image.fromarray(data)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Recolor a black/white mask icon to a single color.')
    parser.add_argument('--input', required=True, help='Source image')
    parser.add_argument('--output', required=True, help='Where to write the recolored image')
    parser.add_argument('--color', required=True, help='Target color as name:RRGGBB')
    args = parser.parse_args(argv)

    try:
        name, rgb = parse_color(args.color)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with Image.open(args.input) as img:
        img.load()
        recolored = recolor_mask(img, rgb)

    out_dir = os.path.dirname(args.output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    recolored.save(args.output)
    print(f"Wrote {args.output} ({name} {rgb_to_hex(rgb)})")
    return 0


if __name__ == '__main__':
    sys.exit(main())

# Run example: python mask_recolor.py --input icon.png --output icon_red.png --color red:ff0000
