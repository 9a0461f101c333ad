"""Command-line entry point.

Loads a template asset, obtains a target (another asset or a live screen
capture), runs one matching call and prints every match. Settings come from
config.ini (see core.config) and can be overridden per run with flags.

Exit status: 0 when something matched, 1 when nothing did, 2 on failure.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config.vision import DEBUG_ARTIFACTS, DEFAULT_PRECISION
from .core.config import ConfigManager
from .core.errors import InvalidConfiguration, ScreenFindError
from .core.logging_setup import get_artifacts_dir, setup_logging
from .io.assets import AssetStore, load_image
from .vision.diagnostics import ArtifactObserver
from .vision.matcher import ImageMatcher
from .vision.region import MatchRegion
from .vision.results import ResultFilter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="screenfind", description="Find a template image inside a target image or the screen.")
    p.add_argument("template", help="template asset name")
    p.add_argument("target", nargs="?", help="target asset name (omit with --screen)")
    p.add_argument("--assets", help="asset directory (default: config assets_dir, else cwd)")
    p.add_argument("--screen", action="store_true", help="capture the primary monitor as target")
    p.add_argument("--precision", type=float, help="minimum score to accept a match")
    p.add_argument("--region", help="restrict search to left,top,width,height")
    p.add_argument("--width", type=int, help="resize template to this width")
    p.add_argument("--delta", help="duplicate filter window dx,dy")
    p.add_argument("--light", action="store_true", help="grayscale only (no equalize/blur)")
    p.add_argument("--color", action="store_true", help="correlate colour instead of grayscale")
    p.add_argument("--absolute", action="store_true", help="report coordinates outside the region")
    p.add_argument("--debug-artifacts", nargs="?", const="", default=None, metavar="DIR",
                   help="write surface/annotated images (default dir: session artifacts)")
    p.add_argument("--config", help="path to config.ini")
    p.add_argument("--log-level", help="override log level")
    return p


def _resolve(args: argparse.Namespace, cfg: ConfigManager) -> dict:
    precision = args.precision if args.precision is not None else cfg.get_float("precision", DEFAULT_PRECISION)

    region_text = args.region if args.region is not None else cfg.get("search_region", "")
    region = MatchRegion.parse(region_text) if region_text else None

    if args.delta:
        result_filter = ResultFilter.parse(args.delta)
    else:
        result_filter = ResultFilter(cfg.get_int("x_delta", 5), cfg.get_int("y_delta", 5))

    light = args.light
    return {
        "precision": precision,
        "region": region,
        "filter": result_filter,
        "use_gray": False if args.color else cfg.get_bool("use_gray", True),
        "equalize": False if light else cfg.get_bool("equalize", True),
        "blur": False if light else cfg.get_bool("blur", True),
        "width": args.width if args.width is not None else cfg.get_int("template_width"),
    }


def _observer(args: argparse.Namespace, cfg: ConfigManager) -> Optional[ArtifactObserver]:
    if args.debug_artifacts is not None:
        out_dir = Path(args.debug_artifacts) if args.debug_artifacts else get_artifacts_dir(cfg)
        return ArtifactObserver.in_dir(out_dir)
    if DEBUG_ARTIFACTS or cfg.get_bool("debug_artifacts", False):
        return ArtifactObserver.in_dir(get_artifacts_dir(cfg))
    return None


def run(args: argparse.Namespace, cfg: ConfigManager) -> int:
    opts = _resolve(args, cfg)
    store = AssetStore(args.assets or cfg.get("assets_dir") or Path.cwd())

    matcher = ImageMatcher(
        load_image(store, args.template),
        use_gray=opts["use_gray"],
        resize_width=opts["width"],
        equalize=opts["equalize"],
        blur=opts["blur"],
    )

    region = opts["region"]
    if args.screen:
        from .io.capture import ScreenCapture

        cap = ScreenCapture()
        try:
            # The capture is already limited to the region
            target = cap.grab(region)
        finally:
            cap.close()
        crop_region = None
    else:
        if not args.target:
            raise InvalidConfiguration("a target asset is required unless --screen is given")
        target = load_image(store, args.target)
        crop_region = region

    results = matcher.match(target, opts["precision"], crop_region, opts["filter"], _observer(args, cfg))

    for r in results:
        left, top = region.to_absolute(r) if (args.absolute and region) else (r.left, r.top)
        print(f"left: {left}, top: {top}, precision: {r.precision:.4f}")
    logger.info(
        "match: %s -> %d match(es), template %dx%d, precision>=%.3f",
        args.template, len(results), results.width, results.height, opts["precision"],
    )
    return 0 if len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = ConfigManager(args.config)
        setup_logging(cfg, args.log_level)
        return run(args, cfg)
    except ScreenFindError as e:
        logger.error("screenfind: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
