#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cursed composer: what does your name sound like?

Usage:
  composer [NAME] [OUT_PATH] [--mono] [--no-reverb]

Output:
  output.wav
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from namesynth import SAMPLE_RATE
from namesynth.buffer import PCMBuffer
from namesynth.composer import Plan, render_name
from namesynth.config import MONO, STEREO
from namesynth.errors import NameSynthError
from namesynth.theory import format_note

DEFAULT_NAME = "Mahler"
OUT_PATH = "output.wav"

_LOGGER = logging.getLogger("namesynth.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="composer", description="Turn a name into a short WAV file."
    )
    parser.add_argument("name", nargs="?", default=DEFAULT_NAME)
    parser.add_argument("out_path", nargs="?", default=OUT_PATH)
    parser.add_argument("--mono", action="store_true", help="Old-school mono sine render.")
    parser.add_argument("--no-reverb", action="store_true", help="Skip the comb reverb.")
    parser.add_argument("-q", "--quiet", action="store_true", help="No report.")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def report_lines(plan: Plan, buffer: PCMBuffer, out_path: str) -> List[str]:
    seconds = buffer.used / SAMPLE_RATE
    out_path = escape(out_path)
    return [
        "",
        "  [bold]CURSED COMPOSER[/bold]",
        "  ═══════════════",
        "",
        f"  Composing for: {escape(plan.name)}",
        f"  Key: {plan.key_name}",
        f"  Tempo: {plan.tempo} BPM",
        f"  Progression: {' '.join(plan.progression_names())}",
        f"  Duration: {seconds:.1f} seconds",
        f"  Scale: {plan.scale_name}",
        f"  Notes in scale: {' '.join(format_note(n) for n in plan.scale)}",
        "",
        f"  Wrote: {out_path}",
        f"  Play it:  aplay {out_path}",
        f"            or: ffplay -nodisp {out_path}",
        "",
        f"  Review: {plan.review}",
        "",
    ]


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = (logging.WARNING, logging.INFO, logging.DEBUG)[min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    profile = MONO if args.mono else STEREO
    if args.no_reverb:
        profile = replace(profile, reverb=False)

    try:
        plan, buffer = render_name(args.name, args.out_path, profile)
    except NameSynthError as exc:
        _LOGGER.debug("Render failed", exc_info=True)
        Console(stderr=True).print(f"[red]{exc.code}[/red]: {escape(str(exc))}", highlight=False)
        return 1

    if not args.quiet:
        console = Console()
        for line in report_lines(plan, buffer, args.out_path):
            console.print(line, highlight=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
