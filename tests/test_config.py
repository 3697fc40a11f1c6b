"""
Unit tests for layouts and run configuration.
"""

import json

import pytest

from hi3ex.config import (OcrConfig, Rect, RunConfig, check_layout, default_screens, load_screens,
                          parse_screens)
from hi3ex.errors import ConfigError


LAYOUT = {
    "screens": [
        {
            "name": "weapon",
            "tag": "WEAPON_SCREEN",
            "threshold": 0.95,
            "points": [[10, 20, "#FFDD47"], {"x": 30, "y": 40, "color": [0, 201, 255]}],
            "rois": [{"name": "weapon_name", "field": "Weapon", "rect": [5, 5, 50, 20],
                      "chain": ["invert", "contrast"]}],
            "save_frames": False,
        },
        {"name": "elf", "points": [[1, 1, "#000000"]]},
    ]
}


@pytest.mark.unit
class TestDefaultScreens:

    def test_priority_order_and_layout(self):
        screens = default_screens()
        assert [s.name for s in screens] == ["stigmata", "lineup"]
        stig = screens[0]
        assert stig.tag == "STIGMATA_SCREEN"
        assert stig.fingerprint.threshold == 0.97
        assert stig.fingerprint.points[0].color == (0xEE, 0x9A, 0xFF)
        assert stig.rois[0].rect == Rect(188, 912, 484, 72)
        assert stig.rois[0].chain == ("contrast", "invert", "grayscale")
        assert [r.rect.x for r in stig.rois[1:]] == [872, 1232, 1592]
        assert all(r.chain == ("invert", "contrast") for r in stig.rois[1:])
        assert screens[1].rois == ()

    def test_defaults_fit_canonical_resolution(self):
        check_layout(default_screens(), 1920, 1080)

    def test_defaults_do_not_fit_smaller_resolution(self):
        with pytest.raises(ConfigError):
            check_layout(default_screens(), 1280, 720)


@pytest.mark.unit
class TestLoadScreens:

    def test_load(self, tmp_path):
        path = tmp_path / "screens.json"
        path.write_text(json.dumps(LAYOUT), encoding="utf-8")
        weapon, elf = load_screens(path)
        assert weapon.fingerprint.threshold == 0.95
        assert weapon.fingerprint.points[0].color == (0xFF, 0xDD, 0x47)
        assert weapon.fingerprint.points[1].color == (0, 201, 255)
        assert weapon.rois[0].field == "Weapon"
        assert weapon.save_frames is False
        assert elf.tag == "ELF_SCREEN"
        assert elf.fingerprint.threshold == 0.97

    @pytest.mark.parametrize("data", [
        {},
        {"screens": [{"name": "x"}]},
        {"screens": [{"name": "x", "points": [[1, 1, "#FFF"]]}]},
        {"screens": [{"name": "x", "points": [[1, 1, [0, 0, 300]]]}]},
        {"screens": [{"name": "x", "points": [], "rois": [{"name": "r", "rect": [0, 0, 5, 5], "chain": ["blur"]}]}]},
        {"screens": [{"name": "x", "points": [], "rois": [{"name": "r", "rect": [0, 0, 0, 5]}]}]},
        {"screens": [{"name": "x", "points": []}, {"name": "x", "points": []}]},
    ])
    def test_invalid_layouts(self, data):
        with pytest.raises(ConfigError):
            parse_screens(data)

    def test_unreadable_files(self, tmp_path):
        with pytest.raises(ConfigError):
            load_screens(tmp_path / "missing.json")
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_screens(bad)


@pytest.mark.unit
class TestEnvConfig:

    def test_run_config_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HI3EX_OUTPUT_DIR", str(tmp_path))
        monkeypatch.setenv("HI3EX_SAVE_FRAMES", "0")
        monkeypatch.setenv("HI3EX_NO_PROGRESS", "1")
        cfg = RunConfig.from_env()
        assert cfg.output_dir == str(tmp_path)
        assert cfg.save_frames is False
        assert cfg.progress is False
        assert cfg.log_file == "Log.txt"
        assert [s.name for s in cfg.screens()] == ["stigmata", "lineup"]

    def test_screens_file_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "screens.json"
        path.write_text(json.dumps(LAYOUT), encoding="utf-8")
        monkeypatch.setenv("HI3EX_SCREENS", str(path))
        assert [s.name for s in RunConfig.from_env().screens()] == ["weapon", "elf"]

    def test_ocr_config_from_env(self, monkeypatch):
        monkeypatch.setenv("HI3EX_OCR_WORKERS", "3")
        monkeypatch.setenv("TESSDATA_DIR", "/data/tess")
        cfg = OcrConfig.from_env()
        assert (cfg.workers, cfg.tessdata_dir, cfg.lang, cfg.psm) == (3, "/data/tess", "eng", 6)
        monkeypatch.setenv("HI3EX_OCR_WORKERS", "many")
        with pytest.raises(ConfigError):
            OcrConfig.from_env()
