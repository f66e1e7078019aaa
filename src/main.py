# Entry point of the application for printing a tournament's bracket plan

import argparse
import json
import sys
import yaml
from bracket_viewer.config import Config, load_config
from bracket_viewer.errors import BracketViewerError
from bracket_viewer.viewer import BracketsViewer


def load_data(file_path):
    # JSON is valid YAML, so one loader covers both formats
    with open(file_path, mode='r', encoding='utf-8') as file:
        return yaml.safe_load(file) or {}


def format_slot(slot):
    text = slot['name'] or slot['hint'] or 'TBD'
    if slot['origin']:
        if slot['origin_placement'] == 'after':
            text = f"{text} ({slot['origin']})"
        else:
            text = f"({slot['origin']}) {text}"
    return f"{text} [{slot['score'] or '-'}]"


def print_rounds(rounds, indent='  '):
    for round_plan in rounds:
        print(f"{indent}{round_plan['name']}")
        for match in round_plan['matches']:
            label = match['label'] or f"Match {match['number']}"
            slots = ' vs '.join(format_slot(slot) for slot in match['opponents'])
            print(f"{indent}  {label}: {slots} ({match['status_label']})")


def print_plan(plan):
    for stage in plan['stages']:
        print(f"\n--- {stage['name']} ({stage['type']}) ---")
        for group in stage.get('groups', []):
            print(f"\n{group['name']}")
            print_rounds(group['rounds'])
            print("  Ranking:")
            for row in group['ranking']['rows']:
                cells = {cell['column']: cell['value'] for cell in row}
                print(f"    {cells['rank']}. {cells['id']} - {cells['points']} pts "
                      f"({cells['wins']}W {cells['draws']}D {cells['losses']}L)")
        for bracket in stage.get('brackets', []):
            print(f"\n{bracket['bracket_type']}")
            print_rounds(bracket['rounds'])


def main(argv=None):
    parser = argparse.ArgumentParser(description='Print the bracket plan of tournament data.')
    parser.add_argument('data', help='Tournament data file (YAML or JSON)')
    parser.add_argument('--config', help='Viewer config file (YAML)')
    parser.add_argument('--json', action='store_true', help='Print the plan as JSON')
    args = parser.parse_args(argv)

    data = load_data(args.data)
    config = load_config(args.config) if args.config else Config()

    viewer = BracketsViewer()
    if data.get('participant_images'):
        viewer.set_participant_images(data['participant_images'])

    try:
        plan = viewer.render(data, config).to_dict()
    except BracketViewerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not plan['stages']:
        print("No stages loaded. Check the data file.")
        return 0

    if args.json:
        print(json.dumps(plan, indent=2))
    else:
        print_plan(plan)
    return 0


if __name__ == '__main__':
    sys.exit(main())
