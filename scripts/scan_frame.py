import argparse
from pathlib import Path

import cv2

from hi3ex.config import RunConfig, load_screens, default_screens
from hi3ex.detector import ScreenDetectorBank
from hi3ex.frame import normalize_frame
from hi3ex.roi import draw_indicators, draw_rois

def main():
    ap = argparse.ArgumentParser(description="Print fingerprint scores for one frame and dump debug overlays.")
    ap.add_argument("--video", help="video to read the frame from")
    ap.add_argument("--image", help="still image instead of a video frame")
    ap.add_argument("--frame", type=int, default=0)
    ap.add_argument("--screens", default=None, help="JSON screen layout (defaults to the built-in one)")
    ap.add_argument("--out", default="out_scan")
    args = ap.parse_args()

    if args.image:
        fr = cv2.imread(args.image)
        if fr is None:
            raise SystemExit(f"cannot read image {args.image}")
    elif args.video:
        cap = cv2.VideoCapture(args.video)
        cap.set(cv2.CAP_PROP_POS_FRAMES, args.frame)
        ok, fr = cap.read()
        cap.release()
        if not ok:
            raise SystemExit("frame read failed")
    else:
        raise SystemExit("need --video or --image")

    cfg = RunConfig()
    frame = normalize_frame(fr, cfg.width, cfg.height)
    if frame is None:
        raise SystemExit("unsupported frame buffer")

    screens = load_screens(args.screens) if args.screens else default_screens()
    bank = ScreenDetectorBank(screens)
    for name, score in bank.scores(frame).items():
        print(f"{name:>12s}  {score:.4f}")
    hit = bank.classify(frame)
    print("classified:", hit.name if hit else None)

    out = Path(args.out); out.mkdir(parents=True, exist_ok=True)
    for s in screens:
        cv2.imwrite(str(out / f"{s.name}_points.png"), draw_indicators(frame, s))
        if s.rois:
            cv2.imwrite(str(out / f"{s.name}_rois.png"), draw_rois(frame, s))
    print(f"Overlays written to: {out.resolve()}")

if __name__ == "__main__":
    main()
