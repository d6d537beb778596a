import os
from dataclasses import dataclass

import cv2
import numpy as np

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".webp")


@dataclass(frozen=True)
class Photo:
    """Opaque photo handle: a square BGR image plus where it came from."""

    name: str
    image: np.ndarray


def center_square(img, size=512):
    """Center-crop to a square and resize to size x size."""
    h, w = img.shape[:2]
    s = min(h, w)
    y0 = (h - s) // 2
    x0 = (w - s) // 2
    return cv2.resize(img[y0:y0 + s, x0:x0 + s], (size, size), interpolation=cv2.INTER_AREA)


def load_photo(path, size=512):
    img = cv2.imread(path, cv2.IMREAD_COLOR)
    if img is None:
        return None
    return Photo(name=os.path.basename(path), image=center_square(img, size))


def load_photos(paths, size=512):
    """Load the given files in order, skipping any that cannot be decoded."""
    photos = []
    for path in paths:
        photo = load_photo(path, size)
        if photo is None:
            print(f"[PY] WARNING: could not read photo '{path}', skipping.")
            continue
        photos.append(photo)
    return photos


def find_photos(directory):
    if not directory or not os.path.isdir(directory):
        return []
    names = sorted(os.listdir(directory))
    return [
        os.path.join(directory, n) for n in names if n.lower().endswith(IMAGE_EXTENSIONS)
    ]
