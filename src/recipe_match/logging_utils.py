# logging_utils.py
"""
Shared structured logging utilities for recipe_match.

Format (one line per log entry):
<RunId>|<Date>|<Time>|<Level>|<File:Line>|<Module.Func>|<ModulePurpose>|
<InvokingFunc>|<InvokingFuncPurpose>|<Detail>|<NextStep>|<Resolution>|<END>

Modules call get_logger() once at import time and pass the optional
context through `extra=`:

    logger.info(
        "Fetched %d recipes",
        n,
        extra={
            "invoking_func": "search_and_filter",
            "invoking_purpose": "Filter a bounded catalog page",
            "next_step": "Apply FilterCriteria",
            "resolution": "",
        },
    )
"""

from __future__ import annotations

import datetime
import logging
import uuid
from typing import Dict

RUN_ID: str = uuid.uuid4().hex[:8]


class StructuredFormatter(logging.Formatter):
    """
    Custom formatter that emits a single '|' separated line conforming
    to the log template above.
    """

    # High-level purposes by module name
    MODULE_PURPOSES: Dict[str, str] = {
        "config": "Load settings and create Supabase client from environment variables",
        "synonyms": "Ingredient synonym table (variant -> canonical name)",
        "normalizer": "Map ingredient tokens to canonical ingredient names",
        "caption_parser": "Extract canonical ingredients from free-text captions",
        "filters": "Conjunctive structured filter over recipe candidates",
        "scoring": "Ingredient-overlap relevance scoring",
        "preferences": "Build tag-frequency weights from favorited recipes",
        "recommender": "Rank candidates by preference weights",
        "repository": "Read recipe catalog and favorites snapshots",
        "csv_loader": "Load recipe catalog snapshots from CSV files",
        "captioning": "Caption food images and parse ingredients from captions",
        "service": "Match, filter and suggestion workflows over the catalog",
        "cli": "Command line entry point for recipe matching",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        """Format log record into structured pipe-delimited format."""
        dt = datetime.datetime.fromtimestamp(record.created)
        date_str = dt.strftime("%Y-%m-%d")
        time_str = dt.strftime("%H:%M:%S")

        run_id = getattr(record, "run_id", RUN_ID)

        level = record.levelname
        code_location = f"{record.filename}:{record.lineno}"
        func_name = record.funcName
        module_name = record.module
        module_purpose = self.MODULE_PURPOSES.get(module_name, "")

        # Optional extra context supplied via logger calls
        invoking_func = getattr(record, "invoking_func", "")
        invoking_purpose = getattr(record, "invoking_purpose", "")
        next_step = getattr(record, "next_step", "")
        resolution = getattr(record, "resolution", "")

        detail = record.getMessage()
        if record.exc_info:
            detail = f"{detail} | EXC={record.exc_info[1]!r}"

        return (
            f"{run_id}|{date_str}|{time_str}|{level}|{code_location}|"
            f"{module_name}.{func_name}|{module_purpose}|"
            f"{invoking_func}|{invoking_purpose}|"
            f"{detail}|{next_step}|{resolution}|<END>"
        )


def init_logging(level: int = logging.INFO) -> None:
    """
    Initialize root logger once with our StructuredFormatter.

    Call get_logger() from modules instead of calling logging.basicConfig()
    everywhere, so configuration stays central.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (REPL, notebooks, pytest) - avoid double handlers
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured with structured formatting."""
    init_logging()
    return logging.getLogger(name)
