from __future__ import annotations

import re
from typing import Any, Mapping

# A backslash escapes the next character; `<name>` is a placeholder.
_TOKEN_RE = re.compile(r"\\(.)|<([^>]+)>", re.DOTALL)


class UnresolvedPlaceholder(ValueError):
    def __init__(self, placeholder: str, text: str) -> None:
        super().__init__(f"No mapping to placeholder <{placeholder}> in: {text}")
        self.placeholder = placeholder
        self.text = text


def substitute(text: str, row: Mapping[str, Any] | None = None) -> str:
    """Expand `<name>` tokens in step text from an outline data row.

    Values are inserted literally, so a value that itself looks like a
    placeholder is not expanded again. `\\<name>` yields a literal `<name>`.
    """
    row = row or {}

    def replace(match: re.Match[str]) -> str:
        escaped, name = match.group(1), match.group(2)
        if escaped is not None:
            return escaped
        if name not in row:
            raise UnresolvedPlaceholder(name, text)
        return str(row[name])

    return _TOKEN_RE.sub(replace, text)
