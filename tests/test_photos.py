import cv2
import numpy as np

from PhotoLibrary import center_square, find_photos, load_photos


def test_center_square_crops_the_middle():
    img = np.zeros((100, 300, 3), dtype=np.uint8)
    img[:, 100:200] = 255
    out = center_square(img, size=64)
    assert out.shape == (64, 64, 3)
    assert out.min() == 255


def test_load_photos_skips_unreadable(tmp_path):
    good = tmp_path / "a.png"
    cv2.imwrite(str(good), np.full((40, 60, 3), 128, dtype=np.uint8))
    bad = tmp_path / "b.jpg"
    bad.write_bytes(b"not an image")
    (tmp_path / "notes.txt").write_text("hello")

    paths = find_photos(str(tmp_path))
    assert [p.rsplit("/", 1)[-1] for p in paths] == ["a.png", "b.jpg"]

    photos = load_photos(paths, size=32)
    assert [p.name for p in photos] == ["a.png"]
    assert photos[0].image.shape == (32, 32, 3)


def test_find_photos_without_directory():
    assert find_photos(None) == []
    assert find_photos("/definitely/not/here") == []
