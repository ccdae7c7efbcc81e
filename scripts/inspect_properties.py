"""Inspect expanded priority and order-by property values.

Examples:
    python scripts/inspect_properties.py priority Normal+100
    python scripts/inspect_properties.py priority 2999
    python scripts/inspect_properties.py order-by -- "-Memory,Cores"
    python scripts/inspect_properties.py order-by 641
"""

import argparse
import re
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from store_properties.config.logging_config import (
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
)
from store_properties.config.settings import get_settings
from store_properties.domain.exceptions import StorePropertyError
from store_properties.services.ordering_keys import OrderingKeyList
from store_properties.services.priority_scale import (
    ceiling_of_bucket,
    format_priority,
    level_of,
    try_parse_priority,
)

logger = get_logger(__name__)

ENCODED_PATTERN = re.compile(r"-?[0-9]+")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Decode and encode job priority and order-by values"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs in JSON format",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    priority_parser = subparsers.add_parser(
        "priority", help="Show an expanded priority (text or 0-4000)"
    )
    priority_parser.add_argument("value", help='e.g. "Normal+100", "2999", "Highest"')

    order_by_parser = subparsers.add_parser(
        "order-by", help="Show an order-by list (text or encoded int)"
    )
    order_by_parser.add_argument("value", help='e.g. "-Memory,Cores" or 641')

    return parser.parse_args(argv)


def describe_priority(text: str) -> list[str] | None:
    result = try_parse_priority(text)
    if not result.ok:
        return None
    return [
        f"expanded: {result.value}",
        f"level:    {level_of(result.value).label}",
        f"text:     {format_priority(result.value)}",
        f"ceiling:  {ceiling_of_bucket(result.value)}",
    ]


def describe_order_by(text: str) -> list[str] | None:
    stripped = text.strip()
    if ENCODED_PATTERN.fullmatch(stripped):
        try:
            keys: OrderingKeyList | None = OrderingKeyList.from_int32(int(stripped))
        except StorePropertyError as e:
            logger.error("order_by_decode_failed", value=text, error=str(e))
            return None
    else:
        keys = OrderingKeyList.parse(text)
    if keys is None:
        return None
    return [
        f"text:    {keys or '(none)'}",
        f"encoded: {keys.to_int32()}",
        f"keys:    {len(keys)}",
    ]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level, json_logs=args.json_logs or settings.json_logs
    )

    bind_context(command=args.command)
    try:
        if args.command == "priority":
            lines = describe_priority(args.value)
        else:
            lines = describe_order_by(args.value)
    finally:
        clear_context()

    if lines is None:
        print(f"Unrecognized {args.command} value: {args.value!r}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
