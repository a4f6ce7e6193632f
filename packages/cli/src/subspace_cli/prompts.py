"""Line-buffered yes/no prompts used outside raw mode."""
from __future__ import annotations

import asyncio
import sys
from typing import IO

from .errors import PromptParseError

_YES = {"y", "yes"}
_NO = {"n", "no"}


def parse_yes_no(answer: str, question: str = "") -> bool:
    """Strict yes/no parse; anything else raises PromptParseError."""
    normalized = answer.strip().lower()
    if normalized in _YES:
        return True
    if normalized in _NO:
        return False
    raise PromptParseError(answer, question)


async def prompt_yes_no(
    question: str,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
) -> bool:
    """Print *question*, read one line and parse it. EOF counts as an invalid answer."""
    out = stdout or sys.stdout
    src = stdin or sys.stdin
    out.write(question)
    out.flush()
    loop = asyncio.get_running_loop()
    answer = await loop.run_in_executor(None, src.readline)
    return parse_yes_no(answer, question)
