import numpy as np

import Distributions as dist
from CameraRig import CameraRig
from Choreographer import (
    Choreographer,
    CloudAnimator,
    GiftAnimator,
    OrnamentAnimator,
    PhotoAnimator,
    StarAnimator,
)
from MorphState import MorphState

# name, count, BGR color, kind, scale_base, emissive
ORNAMENT_LAYERS = (
    ("gold", 80, (0, 204, 255), "ball", 0.15, 0.5),
    ("purple", 60, (128, 0, 128), "ball", 0.12, 0.3),
    ("red", 40, (0, 0, 255), "ball", 0.08, 0.3),
    ("light_pink", 16, (85, 0, 255), "ball", 0.06, 3.5),
    ("light_green", 16, (85, 255, 0), "ball", 0.06, 3.5),
    ("light_blue", 16, (255, 85, 0), "ball", 0.06, 3.5),
    ("light_amber", 16, (0, 170, 255), "ball", 0.06, 3.5),
    ("candy", 40, (51, 51, 255), "candy", 0.15, 0.3),
    ("deer", 25, (55, 175, 212), "cone", 0.3, 0.2),
)

TEXT_LAYOUTS = {
    "wide": (
        {"text": "MERRY", "position": (-6.5, 0.0, 0.0), "size": 1.2, "density": 4000},
        {"text": "CHRISTMAS", "position": (8.5, 0.0, 0.0), "size": 1.2, "density": 4800},
    ),
    "compact": (
        {"text": "MERRY", "position": (0.0, 5.8, 0.0), "size": 0.6, "density": 2000},
        {"text": "CHRISTMAS", "position": (0.0, 4.8, 0.0), "size": 0.6, "density": 2400},
    ),
}


class SceneInitError(RuntimeError):
    """A scene asset (e.g. text geometry) could not be built."""


def classify_layout(width, height):
    """Portrait viewports get the compact layout."""
    return "compact" if width < height else "wide"


class Scene:
    """
    Owns every particle group plus the morph and camera state, and advances
    them together one tick at a time.
    """

    def __init__(self, cfg=None, sampler=None, viewport=(1280, 720), rng=None):
        self.cfg = cfg or {}
        scfg = self.cfg.get("scene", {})
        mcfg = self.cfg.get("morph", {})

        if rng is None:
            rng = np.random.default_rng(scfg.get("seed"))
        self.rng = rng

        layout = scfg.get("layout", "auto")
        self.layout = classify_layout(*viewport) if layout == "auto" else layout

        self.height = scfg.get("tree_height", dist.TREE_HEIGHT)
        self.width = scfg.get("tree_width", dist.TREE_WIDTH)

        self.morph = MorphState(rate=mcfg.get("rate", 2.0))
        self.camera = CameraRig(self.cfg)
        self.elapsed = 0.0

        clouds = [self._build_foliage(scfg.get("foliage", {}), mcfg)]
        clouds += self._build_text(scfg.get("text", {}), sampler, mcfg)

        instances = self._build_ornaments(scfg)
        photo_count = scfg.get("photos", {}).get("count", 48)
        instances.append(PhotoAnimator(
            dist.photo_group(photo_count, self.height, self.width, rng=rng)
        ))
        instances.append(StarAnimator(dist.star_group(self.height)))
        instances.append(GiftAnimator(
            dist.gift_group(scfg.get("gifts", {}).get("count", 140), self.height, self.width, rng=rng)
        ))

        self.choreographer = Choreographer(
            clouds, instances, photo_slots=photo_count, tree_spin=scfg.get("tree_spin", 0.1)
        )
        total = sum(len(a.group) for a in clouds + instances)
        print(f"[SCENE] Built {len(clouds) + len(instances)} groups, {total} particles ({self.layout} layout).")

    # ---------- construction ----------
    def _build_foliage(self, fcfg, mcfg):
        group = dist.foliage_group(
            fcfg.get("count", 9000),
            self.height,
            self.width,
            jitter=fcfg.get("jitter", 0.05),
            rng=self.rng,
        )
        return CloudAnimator(group, "foliage", uniform_lerp=mcfg.get("uniform_lerp", 0.1))

    def _build_text(self, tcfg, sampler, mcfg):
        entries = tcfg.get(self.layout, TEXT_LAYOUTS.get(self.layout, ()))
        if entries and sampler is None:
            from TextSampler import RasterTextSampler

            sampler = RasterTextSampler()

        scatter = tuple(tcfg.get("scatter_range", (8.0, 28.0)))
        animators = []
        for i, entry in enumerate(entries):
            text = entry.get("text", "")
            try:
                group = dist.text_group(
                    f"text{i}:{text}",
                    text,
                    sampler,
                    size=entry.get("size", 1.2),
                    density=entry.get("density", 2500),
                    scatter_range=scatter,
                    rng=self.rng,
                )
            except Exception as e:
                raise SceneInitError(f"could not build text '{text}': {e}") from e
            animators.append(CloudAnimator(
                group,
                "text",
                offset=entry.get("position", (0.0, 0.0, 0.0)),
                in_tree=False,
                uniform_lerp=mcfg.get("uniform_lerp", 0.1),
            ))
        return animators

    def _build_ornaments(self, scfg):
        layers = scfg.get("ornaments", ORNAMENT_LAYERS)
        variants = (False, True) if scfg.get("interior_ornaments", True) else (False,)
        animators = []
        for interior in variants:
            for layer in layers:
                name, count, color, kind, scale_base, emissive = layer
                prefix = "inner" if interior else "outer"
                group = dist.ornament_group(
                    f"{prefix}_{name}",
                    count,
                    interior=interior,
                    height=self.height,
                    width=self.width,
                    rng=self.rng,
                )
                animators.append(OrnamentAnimator(
                    group, scale_base, tuple(color), kind=kind, emissive=emissive
                ))
        return animators

    # ---------- runtime ----------
    def update_config(self, cfg):
        """Apply per-tick tunables; group geometry is fixed after construction."""
        if not cfg:
            return
        self.morph.rate = cfg.get("morph", {}).get("rate", self.morph.rate)
        self.camera.update_config(cfg)

    @property
    def progress(self):
        return self.morph.progress

    def advance(self, dt, signal, photos=()):
        """One tick: morph target from the gesture, camera, then every group."""
        self.elapsed += dt
        progress = self.morph.tick(signal.open, dt)
        pose = self.camera.update(signal, dt)
        return self.choreographer.step(
            progress,
            dt,
            self.elapsed,
            pose,
            photos=photos,
            orbit_controls_enabled=self.camera.orbit_controls_enabled,
        )
