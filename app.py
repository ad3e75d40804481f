#!/usr/bin/env python
"""Main entry point for Mockfinity."""

import argparse
import logging
import sys

from mockfinity import Backend
from mockfinity.aspect import ASPECT_LABELS
from mockfinity.models import CATEGORY_EDIT, STATUS_SUCCESS
from mockfinity.remote import RemoteServiceError
from mockfinity.styles import SCENARIOS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Frame a product image and generate a marketing mockup.")
    parser.add_argument("source", help="path to the source image")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--scenario", choices=[s.id for s in SCENARIOS], help="mockup preset")
    group.add_argument("--prompt", help="free-form edit instruction")
    parser.add_argument("--ratio", choices=list(ASPECT_LABELS), help="output aspect ratio")
    parser.add_argument("--pan", nargs=2, type=float, metavar=("X", "Y"), help="pan in editor pixels")
    parser.add_argument("--zoom", type=float, help="zoom factor (0.5 - 3.0)")
    parser.add_argument("--rotate", type=int, default=0, help="rotation in degrees, a multiple of 90")
    parser.add_argument("--output", help="output directory")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        backend = Backend()
    except RemoteServiceError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.ratio:
            backend.set_aspect_ratio(args.ratio)
        if not backend.load_source(args.source):
            print(f"Not a readable image: {args.source}", file=sys.stderr)
            return 1

        if args.pan or args.zoom is not None or args.rotate:
            editor = backend.open_editor()
            if args.pan:
                editor.transform.pan(*args.pan)
            if args.zoom is not None:
                editor.zoom(args.zoom)
            if args.rotate:
                editor.transform.rotate(args.rotate)
            if not backend.save_edit():
                print("Could not render the framed image", file=sys.stderr)
                return 1

        if args.scenario:
            future = backend.generate_scenario(args.scenario)
        else:
            future = backend.generate(args.prompt, CATEGORY_EDIT)

        record = future.result() if future else None
        if record is None or record.status != STATUS_SUCCESS:
            print(record.error if record else "Nothing was submitted", file=sys.stderr)
            return 1

        path = backend.save_result(record.id, args.output)
        print(path)
        return 0 if path else 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        backend.shutdown()


if __name__ == "__main__":
    sys.exit(main())
