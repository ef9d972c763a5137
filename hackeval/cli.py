"""CLI entrypoints for hackeval commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import yaml

from .config import ConfigError
from .logging import configure_logging
from .models import InvalidProjectError, Project
from .pipeline import EvaluationPipeline
from .questions import generate_score_followups


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hackeval",
        description="Analyse, score and mentor hackathon project submissions.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Directory containing .hackeval.yml, or the file itself (defaults to cwd).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyse a GitHub repository and print the analysis as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument("url", help="Repository URL, e.g. https://github.com/owner/repo")

    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate a project described in a YAML or JSON file.",
    )
    _add_verbose_option(evaluate_parser, suppress_default=True)
    evaluate_parser.add_argument("project_file", help="Path to a project .yml/.yaml/.json file.")
    evaluate_parser.add_argument(
        "--questions",
        action="store_true",
        help="Include judge questions and score follow-ups in the output.",
    )
    evaluate_parser.add_argument(
        "--mentorship",
        action="store_true",
        help="Include verification and mentorship advice in the output.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to config).")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (defaults to config).")

    return parser


def load_project_file(path: Path) -> Project:
    """Read a project record from YAML or JSON."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise InvalidProjectError(f"{path.name} must contain a mapping at the root")
    return Project.from_dict(data)


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=False))


def main(
    argv: list[str] | None = None,
    *,
    pipeline_factory: Callable[[str | None], EvaluationPipeline] | None = None,
) -> None:
    """CLI entrypoint for hackeval commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    factory = pipeline_factory or EvaluationPipeline.from_config
    try:
        pipeline = factory(args.config)
    except ConfigError as exc:
        parser.exit(1, f"hackeval: invalid configuration: {exc}\n")

    if pipeline.config.log_level:
        configure_logging(
            verbose=bool(args.verbose), log_file=log_file, level=pipeline.config.log_level
        )

    with pipeline:
        _dispatch(args, parser, pipeline)


def _dispatch(
    args: argparse.Namespace, parser: argparse.ArgumentParser, pipeline: EvaluationPipeline
) -> None:
    if args.command == "analyze":
        analysis = pipeline.analyze_repository(args.url)
        _print_json(analysis.to_dict())
    elif args.command == "evaluate":
        try:
            project = load_project_file(Path(args.project_file))
            evaluated = pipeline.run(project)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (InvalidProjectError, json.JSONDecodeError, yaml.YAMLError) as exc:
            parser.exit(1, f"hackeval evaluate failed: {exc}\n")
        output: Dict[str, Any] = {"project": evaluated.to_dict()}
        if args.questions:
            scores = evaluated.evaluation.scores if evaluated.evaluation is not None else {}
            output["questions"] = pipeline.generate_questions(evaluated)
            output["followups"] = generate_score_followups(evaluated, scores)
        if args.mentorship:
            output["mentorship"] = pipeline.generate_mentorship(evaluated).to_dict()
        _print_json(output)
    elif args.command == "serve":
        from .service.app import run_service

        service = pipeline.config.service
        run_service(
            host=args.host or service.host,
            port=args.port or service.port,
            pipeline=pipeline,
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
