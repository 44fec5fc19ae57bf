"""Runs assistant-style text through the directive engine against the local database.

Useful for checking what a model reply would do without going through the chat API:

    python scripts/apply_directives.py reply.txt
    echo 'CREATE_NOTE: {"title": "Idea", "content": "Try it"}' | python scripts/apply_directives.py -
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from calendar_assistant.core.config import get_settings
from calendar_assistant.core.logging_config import configure_logging
from calendar_assistant.database import crud
from calendar_assistant.database.store import SQLiteDataStore
from calendar_assistant.features.directives_service import DirectiveEngine

logger = logging.getLogger(__name__)


async def main_async() -> int:
    parser = argparse.ArgumentParser(description="Execute CREATE_/UPDATE_/DELETE_ directives from a text file.")
    parser.add_argument("source", help="Path to a text file, or '-' to read stdin.")
    parser.add_argument("--json", action="store_true", help="Print the action log as JSON after the response.")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    text = sys.stdin.read() if args.source == "-" else Path(args.source).read_text(encoding="utf-8")

    db_path = Path(settings.database_path).resolve()
    crud.initialize_database(db_path)
    conn = crud.connect(db_path)
    try:
        result = await DirectiveEngine(SQLiteDataStore(conn)).execute(text)
    finally:
        conn.close()

    print(result.response)
    if args.json:
        print(json.dumps([a.model_dump(mode="json") for a in result.actions], indent=2))
    return 1 if result.error else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main_async()))
