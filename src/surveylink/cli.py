"""
Command line entry point.

    surveylink share survey.yaml --endpoint https://script.example/exec
    surveylink open 'https://forms.example.org/app?survey=...&endpoint=...'
    surveylink export survey.yaml responses.json -o out.csv
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

import yaml

from surveylink.config import load_settings
from surveylink.endpoint_store import YamlEndpointStore
from surveylink.export import export_filename, write_csv
from surveylink.serialization import (
    SurveySchemaError,
    load_survey_file,
    responses_from_json,
    survey_to_json,
)
from surveylink.share_link import LinkDecodeError, decode_share_link, encode_share_link


def _share(args, settings) -> int:
    survey = load_survey_file(args.survey_file)
    store = YamlEndpointStore(settings.endpoint_store_file)
    endpoint = args.endpoint or store.load()
    if not endpoint:
        print("No endpoint given and none saved; pass --endpoint.", file=sys.stderr)
        return 2
    if args.save_endpoint:
        store.save(endpoint)
    print(encode_share_link(survey, endpoint, args.base_url or settings.base_url))
    return 0


def _open(args, settings) -> int:
    try:
        survey, endpoint = decode_share_link(args.link)
    except LinkDecodeError as e:
        print(f"Could not open link: {e}", file=sys.stderr)
        return 1
    print("Endpoint:", endpoint)
    print(survey_to_json(survey))
    return 0


def _export(args, settings) -> int:
    survey = load_survey_file(args.survey_file)
    with open(args.responses_file, "r", encoding="utf-8") as f:
        responses = responses_from_json(f.read())
    if not responses:
        print("No responses to export.", file=sys.stderr)
        return 1
    path = write_csv(args.output or export_filename(survey), survey, responses)
    print(f"Wrote {len(responses)} response(s) to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="surveylink", description="Share surveys as links and export responses")
    parser.add_argument("--config", help="Path to surveylink.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    share = sub.add_parser("share", help="Print a shareable link for a survey file")
    share.add_argument("survey_file", help="Survey as .json or .yaml")
    share.add_argument("--endpoint", help="Submission endpoint URL (defaults to the saved one)")
    share.add_argument("--base-url", help="Location the link points at")
    share.add_argument("--save-endpoint", action="store_true", help="Remember the endpoint for next time")
    share.set_defaults(handler=_share)

    open_ = sub.add_parser("open", help="Decode a shareable link")
    open_.add_argument("link")
    open_.set_defaults(handler=_open)

    export = sub.add_parser("export", help="Write collected responses as CSV")
    export.add_argument("survey_file", help="Survey as .json or .yaml")
    export.add_argument("responses_file", help="JSON array of responses")
    export.add_argument("-o", "--output", help="CSV path (defaults to the survey title)")
    export.set_defaults(handler=_export)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    logging.basicConfig(
        level=logging.INFO if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.handler(args, settings)
    except (SurveySchemaError, json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Invalid survey: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
