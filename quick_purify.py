#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Quick Purify - purify one text from the command line
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from core.purification.errors import InvalidRequest
from core.purification.models import ContentType, Priority
from core.purification.pipeline import PurificationPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Purify legal text into a single language (Arabic or French)",
        epilog="""
Examples:
  %(prog)s "الشهود في القضية" --source ar --target fr
  echo "Les témoins Defined" | %(prog)s --target fr --content-type ui_label
  %(prog)s "Bonjour" --target fr --source fr --json
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'text',
        nargs='?',
        help='Text to purify (read from stdin when omitted)'
    )

    parser.add_argument(
        '-t', '--target',
        required=True,
        help='Target language code (ar, fr)'
    )

    parser.add_argument(
        '-s', '--source',
        help='Source language code (default: detect from script)'
    )

    parser.add_argument(
        '-c', '--content-type',
        choices=[c.value for c in ContentType],
        default=ContentType.CHAT_MESSAGE.value,
        help='Content type, selects the purity threshold (default: chat_message)'
    )

    parser.add_argument(
        '-p', '--priority',
        choices=[p.value for p in Priority],
        default=Priority.INTERACTIVE.value,
        help='Request priority, selects provider timeouts (default: interactive)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the full result as JSON'
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    text = args.text if args.text is not None else sys.stdin.read()

    try:
        pipeline = PurificationPipeline.from_settings()
        result = asyncio.run(pipeline.purify(
            text,
            args.target,
            source_language=args.source,
            content_type=args.content_type,
            priority=args.priority,
        ))
    except InvalidRequest as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(result.text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
