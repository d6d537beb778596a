import cv2
import numpy as np


class RasterTextSampler:
    """
    Samples points on the surface of extruded text.

    Glyphs are rasterized with an OpenCV Hershey font into a binary mask.
    The mask is the front/back face of a slab `depth` units thick and its
    outline is the side wall. Points are spread over the two faces and the
    wall in proportion to their areas. The geometry is centered on its
    bounding box and scaled so the inked height equals `size` world units.
    """

    def __init__(self, font=cv2.FONT_HERSHEY_TRIPLEX, pixels_per_unit=64, depth=0.2, weight=0.12):
        self.font = font
        # raster resolution only; world scale comes from the measured ink
        self.pixels_per_unit = pixels_per_unit
        self.depth = depth
        # stroke thickness relative to cap height
        self.weight = weight

    def rasterize(self, text, size):
        """Binary mask (uint8, 0/255) of the rendered text, tightly padded."""
        cap_px = max(1.0, size * self.pixels_per_unit)
        # getTextSize is only a first guess, its height varies between OpenCV releases
        (_, h1), _ = cv2.getTextSize(text, self.font, 1.0, 1)
        font_scale = cap_px / max(h1, 1)
        thickness = max(1, int(round(cap_px * self.weight)))

        (w, h), baseline = cv2.getTextSize(text, self.font, font_scale, thickness)
        pad = thickness + 2
        mask = np.zeros((h + baseline + 2 * pad, w + 2 * pad), dtype=np.uint8)
        cv2.putText(
            mask,
            text,
            (pad, pad + h),
            self.font,
            font_scale,
            255,
            thickness,
            cv2.LINE_AA,
        )
        _, mask = cv2.threshold(mask, 127, 255, cv2.THRESH_BINARY)
        return mask

    @staticmethod
    def ink_height(mask):
        """Height in pixels of the inked rows of a mask, 0 when blank."""
        rows = np.nonzero(mask.any(axis=1))[0]
        if len(rows) == 0:
            return 0
        return int(rows[-1] - rows[0] + 1)

    def sample(self, text, size, count, rng=None):
        rng = rng if rng is not None else np.random.default_rng()
        if count <= 0 or size <= 0 or not text.strip():
            return np.zeros((0, 3), dtype=float)

        mask = self.rasterize(text, size)
        ys, xs = np.nonzero(mask)
        if len(xs) == 0:
            return np.zeros((0, 3), dtype=float)

        # world units per pixel
        unit = size / self.ink_height(mask)

        kernel = np.ones((3, 3), dtype=np.uint8)
        outline = cv2.morphologyEx(mask, cv2.MORPH_GRADIENT, kernel) & mask
        ey, ex = np.nonzero(outline)

        # areas in pixel units
        face_area = 2.0 * len(xs)
        side_area = len(ex) * self.depth / unit
        n_side = rng.binomial(count, side_area / (face_area + side_area)) if len(ex) else 0
        n_face = count - n_side

        half = self.depth / 2.0
        fi = rng.integers(0, len(xs), n_face)
        face_z = np.where(rng.random(n_face) < 0.5, -half, half)
        si = rng.integers(0, len(ex), n_side) if n_side else np.zeros(0, dtype=int)
        side_z = (rng.random(n_side) - 0.5) * self.depth

        px = np.concatenate([xs[fi], ex[si]]).astype(float) + rng.random(count) - 0.5
        py = np.concatenate([ys[fi], ey[si]]).astype(float) + rng.random(count) - 0.5
        pz = np.concatenate([face_z, side_z])

        cx = (xs.min() + xs.max()) / 2.0
        cy = (ys.min() + ys.max()) / 2.0
        # image rows grow downward, world y grows upward
        return np.stack([(px - cx) * unit, -(py - cy) * unit, pz], axis=-1)
