#!/usr/bin/env python3
"""
Run a single storage action from the command line.

The option bag comes from --options (inline JSON) or --options-file.
Credentials missing from the bag are taken from AWS_ACCESS_KEY_ID and
AWS_SECRET_ACCESS_KEY (a .env file is honoured), so keys don't have to
be typed into shell history.

Usage:
    python scripts/run_action.py list_files --options '{"bucket": "media"}'
    python scripts/run_action.py put_object --options-file upload.json
"""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Add the project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from s3_actions.core.storage import actions
from s3_actions.core.storage.errors import ActionError, BackendError

ENV_CREDENTIALS = {
    "accessKeyId": "AWS_ACCESS_KEY_ID",
    "secretAccessKey": "AWS_SECRET_ACCESS_KEY",
}


def load_options(inline: str | None, path: str | None) -> dict:
    """Read the option bag and fill in credentials from the environment."""
    if path:
        with open(path, 'r', encoding='utf-8') as f:
            options = json.load(f)
    else:
        options = json.loads(inline or "{}")

    if not isinstance(options, dict):
        raise ValueError("Options must be a JSON object")

    for option, env_var in ENV_CREDENTIALS.items():
        if not options.get(option) and os.environ.get(env_var):
            options[option] = os.environ[env_var]

    return options


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Run an S3 storage action')
    parser.add_argument('action', choices=sorted(actions.ACTIONS), help='Action to run')
    parser.add_argument('--options', help='Option bag as a JSON object')
    parser.add_argument('--options-file', help='Path to a JSON file holding the option bag')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else os.environ.get("LOG_LEVEL", "WARNING").upper(),
    )

    try:
        options = load_options(args.options, args.options_file)
    except (OSError, ValueError) as e:
        print(f"ERROR reading options: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        result = asyncio.run(actions.run_action(args.action, options))
    except ActionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    except BackendError as e:
        print(f"ERROR from storage backend: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


if __name__ == '__main__':
    main()
