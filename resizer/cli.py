# resizer/cli.py
# Purpose: command-line front end - render one image to a target canvas and
# manage saved presets without the GUI.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from resizer.config import APP_NAME, LOGGER_NAME, STORAGE_PATH
from resizer.controllers.session_controller import ResizerSession
from resizer.models.enums import BackgroundMode, ExportFormat, FitMode
from resizer.storage.kv_store import JsonFileStore
from resizer.utils.logging_utils import build_logger, log_section

log = logging.getLogger(f"{LOGGER_NAME}.cli")

FORMAT_CHOICES = {"png": ExportFormat.PNG, "jpeg": ExportFormat.JPEG,
                  "jpg": ExportFormat.JPEG, "webp": ExportFormat.WEBP}


def _add_spec_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--width", type=float, help="Target width in pixels (1-8000)")
    ap.add_argument("--height", type=float, help="Target height in pixels (1-8000)")
    ap.add_argument("--format", choices=sorted(FORMAT_CHOICES), help="Output format")
    ap.add_argument("--fit", choices=[m.value for m in FitMode], help="fit = letterbox, fill = crop")
    ap.add_argument("--background", choices=[m.value for m in BackgroundMode])
    ap.add_argument("--color", help="Background color, e.g. #1a2b3c")


def _spec_changes(args: argparse.Namespace) -> dict:
    changes = {}
    if args.width is not None:
        changes["width"] = args.width
    if args.height is not None:
        changes["height"] = args.height
    if args.format:
        changes["format"] = FORMAT_CHOICES[args.format]
    if args.fit:
        changes["fit_mode"] = FitMode(args.fit)
    if args.background:
        changes["background_mode"] = BackgroundMode(args.background)
    if args.color:
        changes["background_color"] = args.color
        # a color on its own implies a solid background
        if not args.background:
            changes["background_mode"] = BackgroundMode.COLOR
    return changes


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="image-resizer",
                                 description=f"{APP_NAME}: fit an image into any canvas size.")
    ap.add_argument("--storage", type=Path, default=STORAGE_PATH,
                    help="Preset storage file (default: %(default)s)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("render", help="Render and export one image")
    rp.add_argument("-i", "--input", required=True, help="Path to source image")
    rp.add_argument("-o", "--outdir", required=True, help="Output directory")
    rp.add_argument("--preset", help="Apply a saved preset before the flags below")
    _add_spec_args(rp)

    pp = sub.add_parser("presets", help="List, save or delete presets")
    psub = pp.add_subparsers(dest="action", required=True)
    psub.add_parser("list", help="Show saved presets")
    sp = psub.add_parser("save", help="Save (or replace) a preset")
    sp.add_argument("name")
    _add_spec_args(sp)
    dp = psub.add_parser("delete", help="Delete a preset")
    dp.add_argument("name")
    return ap


# ---------------------------- commands ----------------------------
def _cmd_render(session: ResizerSession, args: argparse.Namespace) -> int:
    with log_section(f"RENDER {args.input}", log):
        if args.preset:
            preset = session.presets.get(args.preset)
            if preset is None:
                log.error("No preset named '%s'", args.preset)
                return 1
            session.apply_preset(preset)

        if not session.load_file(args.input):
            log.error("Could not load image: %s", args.input)
            return 1
        session.update(**_spec_changes(args))

        out = session.export_to(args.outdir)
        if out is None:
            log.error("Export failed for %s", args.input)
            return 1
        print(out)
        return 0


def _cmd_presets(session: ResizerSession, args: argparse.Namespace) -> int:
    if args.action == "list":
        for p in session.presets:
            print(f"{p.name}\t{p.width}x{p.height}\t{p.format.label}\t"
                  f"{p.fit_mode.value}\t{p.background_mode.value}\t{p.background_color}")
        return 0

    if args.action == "save":
        if not args.name.strip():
            log.error("Preset name must not be empty")
            return 1
        session.update(**_spec_changes(args))
        session.save_preset(args.name)
        return 0

    if session.presets.get(args.name) is None:
        log.warning("No preset named '%s'", args.name)
    session.delete_preset(args.name)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    build_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    session = ResizerSession(JsonFileStore(args.storage))
    if args.command == "render":
        return _cmd_render(session, args)
    return _cmd_presets(session, args)


if __name__ == "__main__":
    sys.exit(main())
