# Command-line entry point: lay out a bracket from a match file and print it

import argparse
import sys

import yaml

from bracket_layout.layout import BracketLayoutEngine
from bracket_layout.settings import SettingsError, configure_logging, load_settings


def load_matches(file_path):
    """Read a list of match records from a YAML or JSON file."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if isinstance(data, dict):
        data = data.get('matches', [])
    return data or []


def print_layout(result):
    layout = result.value
    if not result.ok:
        print("No bracket to display.")
    else:
        scaling = layout.scaling
        print(f"Scale: {scaling.scale_factor:.3f}  offset: ({scaling.offset_x:.1f}, {scaling.offset_y:.1f})")
        print(f"Shape: {layout.structure.bracket_shape}  strategy: {layout.strategy.strategy}")

        positions = {p.match_id: p for p in layout.positions}
        for round_index, round_matches in enumerate(layout.rounds):
            print(f"\nRound {round_index + 1}:")
            for match in round_matches:
                position = positions[match.id]
                print(f"  {match.id}: x={position.x:.1f} y={position.y:.1f} "
                      f"{position.width:.1f}x{position.height:.1f}")
        print(f"\nConnections: {len(layout.connections)}")

    for error in result.errors:
        print(f"Error: {error}")
    for warning in result.warnings:
        print(f"Warning: {warning}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Lay out a single-elimination bracket.")
    parser.add_argument("matches_file", help="YAML or JSON file with a list of matches")
    parser.add_argument("--width", type=float, help="Viewport width in pixels")
    parser.add_argument("--height", type=float, help="Viewport height in pixels")
    parser.add_argument("--config", help="Settings YAML file")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except SettingsError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2
    configure_logging(settings['log_level'])

    try:
        matches = load_matches(args.matches_file)
    except (OSError, yaml.YAMLError) as e:
        print(f"Could not read {args.matches_file}: {e}", file=sys.stderr)
        return 2

    container = dict(settings['default_container'])
    if args.width is not None:
        container['width'] = args.width
    if args.height is not None:
        container['height'] = args.height

    result = BracketLayoutEngine(settings).layout(matches, container)
    print_layout(result)
    return 0 if result.ok else 1


if __name__ == '__main__':
    sys.exit(main())
