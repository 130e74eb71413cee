"""Classify event envelopes from a JSON file and print the metrics as JSON."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from devmetrics.classifiers import build_default_classifier
from devmetrics.config import ClassifierConfig
from devmetrics.errors import EventDecodeError, VocabularyConfigError
from devmetrics.events import InMemoryMetricSink, decode_events, encode_metrics
from devmetrics.logging import configure_logging, get_logger, log_warning
from devmetrics.pipeline import process_events

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Classify the events in a file and print the resulting metrics.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the input or configuration is invalid
        or any event failed classification.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "events",
        type=Path,
        help="JSON file holding one event envelope or an array of envelopes",
    )
    parser.add_argument(
        "--vocabulary",
        type=Path,
        default=None,
        help="Optional YAML vocabulary extension (overrides "
        "DEVMETRICS_VOCABULARY_PATH)",
    )
    parser.add_argument(
        "--lenient-names",
        action="store_true",
        help="Log metric naming violations instead of failing",
    )
    args = parser.parse_args(argv)

    raw_level = os.environ.get("DEVMETRICS_LOG_LEVEL")
    _, rejected = configure_logging(raw_level)
    if rejected and raw_level:
        log_warning(logger, "DEVMETRICS_LOG_LEVEL=%s is invalid; using INFO", raw_level)

    try:
        config = ClassifierConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        return 1
    config = ClassifierConfig(
        log_level=config.log_level,
        vocabulary_path=args.vocabulary or config.vocabulary_path,
        strict_names=config.strict_names and not args.lenient_names,
    )

    events_path: Path = args.events
    try:
        events = decode_events(events_path.read_bytes())
    except OSError as exc:
        print(f"Cannot read {events_path}: {exc}")
        return 1
    except EventDecodeError as exc:
        print(f"Invalid event envelope in {events_path}: {exc}")
        return 1

    try:
        classifier = build_default_classifier(config)
    except VocabularyConfigError as exc:
        print(f"Invalid vocabulary configuration: {exc}")
        return 1

    sink = InMemoryMetricSink()
    summary = process_events(events, classifier, sink)
    print(encode_metrics(sink.metrics).decode("utf-8"))
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
