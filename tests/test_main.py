import logging

import cv2
import numpy as np
import pytest

from screenfind import main as cli
from screenfind.io import capture


@pytest.fixture(autouse=True)
def _isolate(monkeypatch):
    monkeypatch.setenv("SF_LOG_SESSION_DIR", "")
    for key in ("SF_SEARCH_REGION", "SEARCH_REGION", "SF_PRECISION", "PRECISION"):
        monkeypatch.delenv(key, raising=False)
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()
    for h in saved[0]:
        root.addHandler(h)
    root.setLevel(saved[1])


@pytest.fixture
def assets(tmp_path, scene, noise_patch):
    d = tmp_path / "assets"
    d.mkdir()
    cv2.imwrite(str(d / "patch.png"), noise_patch)
    cv2.imwrite(str(d / "screen.png"), scene)
    cv2.imwrite(str(d / "blank.png"), np.full((100, 100), 40, dtype=np.uint8))
    return d


def run(tmp_path, assets, *args):
    return cli.main([*args, "--assets", str(assets), "--config", str(tmp_path / "config.ini"), "--light"])


def test_prints_matches(tmp_path, assets, capsys):
    assert run(tmp_path, assets, "patch.png", "screen.png", "--precision", "0.9") == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 1
    assert out[0].startswith("left: 20, top: 30, precision: ")


def test_region_relative_and_absolute(tmp_path, assets, capsys):
    assert run(tmp_path, assets, "patch.png", "screen.png", "--region", "20,30,50,50") == 0
    assert capsys.readouterr().out.startswith("left: 0, top: 0,")
    assert run(tmp_path, assets, "patch.png", "screen.png", "--region", "20,30,50,50", "--absolute") == 0
    assert capsys.readouterr().out.startswith("left: 20, top: 30,")


def test_no_match_exit_status(tmp_path, assets, capsys):
    assert run(tmp_path, assets, "patch.png", "blank.png") == 1
    assert capsys.readouterr().out == ""


def test_missing_asset_exit_status(tmp_path, assets, capsys):
    assert run(tmp_path, assets, "patch.png", "missing.png") == 2
    assert "asset not found: missing.png" in capsys.readouterr().err


def test_target_required_without_screen(tmp_path, assets, capsys):
    assert run(tmp_path, assets, "patch.png") == 2
    assert "--screen" in capsys.readouterr().err


def test_bad_region_exit_status(tmp_path, assets):
    assert run(tmp_path, assets, "patch.png", "screen.png", "--region", "0,0,0,10") == 2


def test_screen_capture_target(tmp_path, assets, scene, monkeypatch, capsys):
    grabbed = []

    class FakeCapture:
        def grab(self, region=None):
            grabbed.append(region)
            return cv2.cvtColor(scene, cv2.COLOR_GRAY2BGR)

        def close(self):
            pass

    monkeypatch.setattr(capture, "ScreenCapture", FakeCapture)
    assert run(tmp_path, assets, "patch.png", "--screen") == 0
    assert grabbed == [None]
    assert capsys.readouterr().out.startswith("left: 20, top: 30,")


def test_debug_artifacts(tmp_path, assets):
    out_dir = tmp_path / "dbg"
    assert run(tmp_path, assets, "patch.png", "screen.png", "--debug-artifacts", str(out_dir)) == 0
    assert (out_dir / "match_surface.png").exists()
    assert (out_dir / "match_annotated.png").exists()


def test_config_supplies_defaults(tmp_path, assets, capsys):
    cfg = tmp_path / "config.ini"
    cfg.write_text("[DEFAULT]\nsearch_region = 20,30,50,50\nprecision = 0.95\n", encoding="utf-8")
    assert run(tmp_path, assets, "patch.png", "screen.png") == 0
    assert capsys.readouterr().out.startswith("left: 0, top: 0,")


def test_malformed_config_exit_status(tmp_path, assets, capsys):
    (tmp_path / "config.ini").write_text("[DEFAULT\nprecision = 0.9\n", encoding="utf-8")
    assert run(tmp_path, assets, "patch.png", "screen.png") == 2
    assert "error:" in capsys.readouterr().err


def test_default_pipeline_from_command_line(tmp_path, assets, capsys):
    argv = ["patch.png", "screen.png", "--assets", str(assets), "--config", str(tmp_path / "config.ini")]
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.startswith("left: 20, top: 30,")
