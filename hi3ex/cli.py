from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import OcrConfig, RunConfig
from .errors import Hi3exError
from .events import render_events, write_events_csv
from .ocr import TesseractEngine
from .timeline import process_video

logger = logging.getLogger("hi3ex")

def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hi3ex", description="Extract screen events from gameplay video.")
    ap.add_argument("video", help="path to the input video")
    return ap

def setup_logging(log_file: str) -> logging.Handler:
    # the diagnostic log is optional; an unwritable path just disables it
    try:
        handler: logging.Handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    return handler

def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    ap = _parser()

    try:
        run_cfg = RunConfig.from_env()
        ocr_cfg = OcrConfig.from_env()
    except Hi3exError as e:
        print(f"hi3ex: {e}", file=sys.stderr)
        return 1

    handler = setup_logging(run_cfg.log_file)
    try:
        if len(argv) != 1:
            logger.info("Expected 1 argument but got %d", len(argv))
            ap.print_usage(sys.stderr)
            return 0
        # "--" keeps a path such as "-clip.mp4" from being read as an option
        args = ap.parse_args(["--", *argv])

        try:
            screens = run_cfg.screens()
            engine = TesseractEngine(ocr_cfg)
        except Hi3exError as e:
            logger.error("%s", e)
            return 1
        logger.info("Initialized tesseract %s %s", engine.version, ocr_cfg.lang)

        try:
            result = process_video(args.video, screens, engine, run_cfg, ocr_workers=ocr_cfg.workers)
        except Hi3exError as e:
            logger.error("%s", e)
            return 1

        logger.info("Frames read: %d (skipped %d), screens entered: %d",
                    result.frames_read, result.frames_skipped, result.entries)
        for line in render_events(result.events):
            print(line)

        try:
            write_events_csv(result.events, Path(run_cfg.output_dir) / "events.csv")
        except OSError as e:
            logger.warning("Could not write events.csv: %s", e)
        return 0
    finally:
        logger.removeHandler(handler)
        handler.close()

if __name__ == "__main__":
    sys.exit(main())
