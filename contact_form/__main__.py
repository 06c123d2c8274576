"""Invoke the handler locally with an event read from a JSON file.

Usage::

    python -m contact_form event.json   # read the Lambda event from a file
    python -m contact_form -            # read it from stdin
"""

from __future__ import annotations

import asyncio
import json
import sys

from .config import ContactFormConfig
from .handler import ContactFormHandler
from .logging import setup_logging


def main() -> None:
    if len(sys.argv) != 2:
        print("Usage: python -m contact_form <event.json|->", file=sys.stderr)
        sys.exit(1)

    source = sys.argv[1]
    if source == "-":
        event = json.load(sys.stdin)
    else:
        with open(source, encoding="utf-8") as fh:
            event = json.load(fh)

    config = ContactFormConfig(log_json=False)
    setup_logging(json=config.log_json, level=config.log_level)
    response = asyncio.run(ContactFormHandler(config).handle(event))
    print(json.dumps(response, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
