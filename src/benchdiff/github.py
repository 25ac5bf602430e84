"""GitHub Actions plumbing -- step outputs and collapsible log groups.

Everything here is a no-op outside of Actions, so the CLI behaves the same
locally and in CI.
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("benchdiff.github")


def in_github_actions() -> bool:
    """True when running inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def set_output(name: str, value: str) -> bool:
    """Append a step output to ``$GITHUB_OUTPUT``.

    Multi-line values use the heredoc form with a random delimiter.

    Returns:
        True if the output was written, False when ``GITHUB_OUTPUT`` is unset.
    """
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set, skipping output %s", name)
        return False

    if "\n" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
        line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        line = f"{name}={value}\n"

    with Path(output_file).open("a", encoding="utf-8") as handle:
        handle.write(line)
    logger.debug("Set output %s", name)
    return True


@contextmanager
def log_group(title: str) -> Iterator[None]:
    """Wrap log output in a collapsible ``::group::`` when inside Actions."""
    grouped = in_github_actions()
    if grouped:
        sys.stdout.write(f"::group::{title}\n")
        sys.stdout.flush()
    try:
        yield
    finally:
        if grouped:
            sys.stdout.write("::endgroup::\n")
            sys.stdout.flush()
