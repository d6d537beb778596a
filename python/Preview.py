import math

import cv2
import numpy as np

from Distributions import GIFT_PALETTES
from helpers import rotation_y

# foliage gradient, bottom -> middle -> top (BGR)
FOLIAGE_DEEP = np.array([255, 51, 153], dtype=float)
FOLIAGE_MID = np.array([255, 200, 100], dtype=float)
FOLIAGE_TOP = np.array([200, 240, 255], dtype=float)
TEXT_GOLD = (60, 200, 255)
PLACEHOLDER = (17, 17, 17)
PANEL = (235, 235, 235)


def _smoothstep(e0, e1, x):
    t = np.clip((x - e0) / (e1 - e0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def foliage_colors(ratio):
    a = _smoothstep(0.0, 0.5, ratio)[:, None]
    b = _smoothstep(0.6, 1.0, ratio)[:, None]
    c = FOLIAGE_DEEP + (FOLIAGE_MID - FOLIAGE_DEEP) * a
    c = c + (FOLIAGE_TOP - c) * b
    return c.astype(np.uint8)


class PreviewRenderer:
    """
    Minimal software renderer for a RenderState: projects every particle
    through a pinhole camera built from the camera pose and splats it into
    an OpenCV image. Shading is deliberately flat.
    """

    def __init__(self, width=1280, height=720, fov_deg=50.0, near=0.5):
        self.width = width
        self.height = height
        self.near = near
        f = (height / 2.0) / math.tan(math.radians(fov_deg) / 2.0)
        self.camera_matrix = np.array(
            [[f, 0, width / 2.0], [0, f, height / 2.0], [0, 0, 1]], np.float32
        )
        self.dist_coeffs = np.zeros((5, 1), np.float32)
        self.focal = f

    # ---------- projection ----------
    def _extrinsics(self, pose):
        pos = np.asarray(pose.position, dtype=float)
        forward = pose.target - pos
        forward = forward / max(np.linalg.norm(forward), 1e-9)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right = right / max(np.linalg.norm(right), 1e-9)
        down = np.cross(forward, right)
        R = np.stack([right, down, forward])
        return R, -R @ pos

    def project(self, points, pose):
        """Returns (pixel xy int array, depth array) for the points in front of the camera."""
        if len(points) == 0:
            return np.zeros((0, 2), dtype=np.int32), np.zeros(0), np.zeros(0, dtype=bool)
        R, tvec = self._extrinsics(pose)
        depth = (points @ R.T + tvec)[:, 2]
        visible = depth > self.near
        if not visible.any():
            return np.zeros((0, 2), dtype=np.int32), np.zeros(0), visible
        rvec, _ = cv2.Rodrigues(R)
        pts2d, _ = cv2.projectPoints(
            points[visible].astype(np.float32), rvec, tvec.astype(np.float32),
            self.camera_matrix, self.dist_coeffs,
        )
        return pts2d.reshape(-1, 2).astype(np.int32), depth[visible], visible

    def _world(self, positions, render_state, in_tree, offset=None):
        if in_tree:
            return positions @ rotation_y(render_state.tree_rotation).T
        return positions + (offset if offset is not None else 0.0)

    # ---------- drawing ----------
    def _splat(self, frame, xy, colors):
        h, w = frame.shape[:2]
        inside = (xy[:, 0] >= 0) & (xy[:, 0] < w) & (xy[:, 1] >= 0) & (xy[:, 1] < h)
        frame[xy[inside, 1], xy[inside, 0]] = colors[inside] if colors.ndim == 2 else colors

    def render(self, render_state, inset=None, status=None):
        frame = np.full((self.height, self.width, 3), (5, 0, 2), dtype=np.uint8)
        pose = render_state.camera

        glow = np.zeros_like(frame)
        for cloud in render_state.clouds.values():
            world = self._world(cloud.positions, render_state, cloud.in_tree, cloud.offset)
            xy, _, visible = self.project(world, pose)
            if "ratio" in cloud.color:
                colors = foliage_colors(cloud.color["ratio"][visible])
            else:
                colors = np.array(TEXT_GOLD, dtype=np.uint8)
            self._splat(glow, xy, colors)
        # cheap bloom
        frame = cv2.add(frame, cv2.GaussianBlur(glow, (0, 0), 2.0))
        frame = cv2.add(frame, glow)

        for inst in render_state.instances.values():
            self._draw_instances(frame, inst, render_state)

        if inset is not None:
            ih, iw = inset.shape[:2]
            scale = 180.0 / max(ih, 1)
            small = cv2.resize(inset, (int(iw * scale), 180))
            frame[10:10 + small.shape[0], -10 - small.shape[1]:-10] = small

        if status:
            cv2.putText(frame, status, (10, self.height - 20), cv2.FONT_HERSHEY_SIMPLEX,
                        0.6, (200, 220, 255), 1, cv2.LINE_AA)
        return frame

    def _draw_instances(self, frame, inst, render_state):
        world = self._world(inst.positions, render_state, inst.in_tree)
        xy, depth, visible = self.project(world, render_state.camera)
        scales = np.asarray(inst.scales)[visible]
        idx = np.nonzero(visible)[0]
        kind = inst.color.get("kind")
        # far to near
        for j in np.argsort(-depth):
            x, y = int(xy[j, 0]), int(xy[j, 1])
            r = max(1, int(self.focal * scales[j] / depth[j]))
            if kind == "gift":
                box, ribbon = GIFT_PALETTES[int(inst.color["palette"][idx[j]])]
                half = max(1, r // 2)
                cv2.rectangle(frame, (x - half, y - 2 * half), (x + half, y), box, -1)
                cv2.line(frame, (x, y - 2 * half), (x, y), ribbon, max(1, half // 4))
            elif kind == "photo":
                self._draw_photo(frame, x, y, r, render_state.photo_bindings[idx[j]])
            elif kind == "star":
                cv2.drawMarker(frame, (x, y), inst.color["color"], cv2.MARKER_STAR, max(4, r), 2)
            else:
                cv2.circle(frame, (x, y), r, inst.color["color"], -1, cv2.LINE_AA)

    def _draw_photo(self, frame, x, y, r, photo):
        hw = max(2, int(r * 0.25))
        top, left = y - int(hw * 1.25), x - hw
        cv2.rectangle(frame, (left, top), (x + hw, y + int(hw * 1.25)), PANEL, -1)
        side = 2 * int(hw * 0.7)
        y0, x0 = top + max(1, hw // 5), x - side // 2
        fh, fw = frame.shape[:2]
        if side < 4 or y0 < 0 or x0 < 0 or y0 + side > fh or x0 + side > fw:
            return
        if photo is None:
            frame[y0:y0 + side, x0:x0 + side] = PLACEHOLDER
        else:
            frame[y0:y0 + side, x0:x0 + side] = cv2.resize(photo.image, (side, side))
