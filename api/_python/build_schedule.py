#!/usr/bin/env python3
"""
Build a dose schedule from a JSON request file.

Usage: python3 build_schedule.py <request_file.json>

This script reads a schedule request (same camelCase payload as the
/api/schedule/generate endpoint) from a JSON file and outputs the generated
schedule as JSON to stdout. Logs go to stderr so stdout stays parseable.

Security: This script only reads from the specified JSON file and writes
to stdout. It does not accept any code or commands as input.
"""

import json
import logging
import os
import sys

# Import schedule modules (assumes api/_python is in path or script is run from there)
from schedule_api import generate_response


def main() -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("DOSEPLAN_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) != 2:
        print(json.dumps({"error": "Usage: build_schedule.py <request_file.json>"}))
        sys.exit(1)

    request_file = sys.argv[1]

    try:
        with open(request_file) as f:
            data = json.load(f)

        status_code, result = generate_response(data)
        print(json.dumps(result))
        if status_code != 200:
            sys.exit(1)

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
