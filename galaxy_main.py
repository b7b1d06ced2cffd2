"""
Procedural Galaxy Simulation
============================

A real-time galaxy of ~1,000,000 stars. Each reset builds one of 13
morphologies; a synthetic force model keeps it rotating like a galaxy.

Controls:
    - SPACE / Left click / R: Generate a new galaxy
    - P: Pause/Resume simulation
    - H: Toggle help text
    - ESC: Quit

Usage:
    python galaxy_main.py                         # Random morphology, 1M stars
    python galaxy_main.py -n 250k                 # Fewer stars
    python galaxy_main.py -m barred_spiral        # Pin a morphology
    python galaxy_main.py --seed 42               # Reproducible generation
    python galaxy_main.py --list                  # List morphologies
"""

import argparse

from galaxy.generators import DESCRIPTIONS, GalaxyType, parse_morphology


STAR_SUFFIXES = {"k": 1_000, "m": 1_000_000}


def parse_number(value: str) -> int:
    """Star count, e.g. "250000", "250k" or "1.5m"."""
    value = value.strip().lower()
    scale = STAR_SUFFIXES.get(value[-1:])
    if scale is None:
        return int(value)
    return int(float(value[:-1]) * scale)


def print_morphologies():
    print("\nMorphologies:")
    for galaxy_type in GalaxyType:
        print(f"  {galaxy_type.value:<18} {DESCRIPTIONS[galaxy_type]}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Procedural galaxy simulation")
    parser.add_argument("--stars", "-n", type=str, help="Star budget (e.g., 100000, 100k, 1m)")
    parser.add_argument("--morphology", "-m", type=str, help="Pin a morphology (see --list)")
    parser.add_argument("--seed", type=int, help="Random seed for galaxy generation")
    parser.add_argument("--list", action="store_true", help="List morphologies")
    return parser


def parse_args(argv=None):
    """Parse and validate command-line options."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.stars is not None:
        try:
            args.stars = parse_number(args.stars)
        except ValueError:
            parser.error(f"invalid star count: {args.stars}")
        if args.stars <= 0:
            parser.error(f"star count must be positive, got {args.stars}")

    if args.morphology is not None:
        try:
            args.morphology = parse_morphology(args.morphology)
        except ValueError as e:
            parser.error(str(e))

    return args


def main(argv=None):
    args = parse_args(argv)

    if args.list:
        print_morphologies()
        return

    # Deferred so --list and --help work without a display
    from core.application import GalaxyApplication

    app = GalaxyApplication(star_count=args.stars, morphology=args.morphology, seed=args.seed)
    app.run()


if __name__ == "__main__":
    main()
