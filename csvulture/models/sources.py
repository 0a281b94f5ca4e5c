"""Where delimited text comes from.

Users paste either a path or the data itself into the same text input. Rather
than spilling inline data to a temp file, the string is classified once into
a FilePath or an InlineText and each variant is read its own way.
"""

import os
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

TABULAR_SUFFIXES = (".csv", ".tsv", ".txt", ".dat")


class FilePath(BaseModel):
    kind: Literal["file"] = "file"
    path: Path


class InlineText(BaseModel):
    kind: Literal["inline"] = "inline"
    text: str

    def looks_like_path(self, delimiter: str) -> bool:
        """A single delimiter-free line ending in a tabular file suffix."""
        candidate = self.text.strip()
        if not candidate or "\n" in candidate or "\r" in candidate:
            return False
        if delimiter in candidate:
            return False
        return candidate.lower().endswith(TABULAR_SUFFIXES)


Source = Annotated[Union[FilePath, InlineText], Field(discriminator="kind")]


def classify_source(value: str) -> Union[FilePath, InlineText]:
    # os.path.isfile swallows the OSError/ValueError raised by long or NUL-bearing text
    if value and os.path.isfile(value):
        return FilePath(path=Path(value))
    return InlineText(text=value)
