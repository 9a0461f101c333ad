import cv2
import numpy as np
import pytest

from screenfind.core.errors import AssetNotFound, DecodeError
from screenfind.io.assets import AssetStore, decode_image, load_image
from screenfind.vision.matcher import ImageMatcher


@pytest.fixture
def store(tmp_path, noise_patch):
    cv2.imwrite(str(tmp_path / "button.png"), noise_patch)
    (tmp_path / "sub").mkdir()
    cv2.imwrite(str(tmp_path / "sub" / "icon.png"), noise_patch)
    (tmp_path / "broken.png").write_bytes(b"not a png")
    return AssetStore(tmp_path)


def test_get_and_names(store):
    assert store.get("button.png").startswith(b"\x89PNG")
    assert store.names() == ["broken.png", "button.png", "sub/icon.png"]


def test_missing_asset(store):
    with pytest.raises(AssetNotFound) as exc:
        store.get("nope.png")
    assert exc.value.name == "nope.png"
    assert "nope.png" in str(exc.value)


def test_names_cannot_escape_root(store):
    with pytest.raises(AssetNotFound):
        store.get("../outside.png")


def test_decode_roundtrip_is_bgr(store, noise_patch):
    img = load_image(store, "button.png")
    assert img.shape == (10, 10, 3)
    assert np.array_equal(img[:, :, 0], noise_patch)


@pytest.mark.parametrize("data", [b"", b"not a png"])
def test_decode_errors(data):
    with pytest.raises(DecodeError):
        decode_image(data)


def test_load_broken_asset(store):
    with pytest.raises(DecodeError):
        load_image(store, "broken.png")


def test_matcher_from_asset(store):
    m = ImageMatcher.from_asset(store, "sub/icon.png", equalize=False, blur=False)
    assert m.size == (10, 10)
