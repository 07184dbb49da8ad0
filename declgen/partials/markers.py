"""Partial marker utilities for idempotent region replacement."""

from __future__ import annotations

from typing import List, Tuple

from ..errors import MarkerError

START_TOKEN = "[PARTIAL:START]"
STOP_TOKEN = "[PARTIAL:STOP]"


class PartialMarkers:
    """Wraps, validates and splices ``[PARTIAL:START]``/``[PARTIAL:STOP]`` regions.

    A marker is a whole line (indentation aside) holding the comment token and
    the marker token. Marker text inside other lines, such as documentation
    quoting the markers, is ordinary content.
    """

    def __init__(self, comment: str = "//") -> None:
        self.comment = comment

    @property
    def start(self) -> str:
        return f"{self.comment} {START_TOKEN}"

    @property
    def stop(self) -> str:
        return f"{self.comment} {STOP_TOKEN}"

    def wrap(self, body: str) -> str:
        """Place ``body`` between the marker lines; ``body`` is kept verbatim."""
        return f"{self.start}\n{body}{self.stop}\n"

    def marker_lines(self, text: str) -> List[int]:
        """Indexes of the lines in ``text`` that are start or stop markers."""
        return [
            index
            for index, line in enumerate(text.splitlines())
            if line.strip() in (self.start, self.stop)
        ]

    def validate(self, text: str) -> None:
        """Raise MarkerError unless ``text`` holds exactly one ordered marker pair."""
        self._region(text.splitlines(keepends=True))

    def has_region(self, text: str) -> bool:
        try:
            self.validate(text)
        except MarkerError:
            return False
        return True

    def extract(self, text: str) -> str:
        """Return the lines strictly between the two marker lines."""
        lines = text.splitlines(keepends=True)
        start, stop = self._region(lines)
        return "".join(lines[start + 1 : stop])

    def replace(self, existing: str, generated: str) -> str:
        """Swap the marker region of ``existing`` for the one in ``generated``.

        Lines outside the markers in ``existing`` are returned untouched. When
        ``existing`` has no valid region, ``generated`` is returned as is.
        """
        new_lines = generated.splitlines(keepends=True)
        new_start, new_stop = self._region(new_lines)
        if not self.has_region(existing):
            return generated
        old_lines = existing.splitlines(keepends=True)
        old_start, old_stop = self._region(old_lines)
        return "".join(
            old_lines[:old_start] + new_lines[new_start : new_stop + 1] + old_lines[old_stop + 1 :]
        )

    def _region(self, lines: List[str]) -> Tuple[int, int]:
        starts = [index for index, line in enumerate(lines) if line.strip() == self.start]
        stops = [index for index, line in enumerate(lines) if line.strip() == self.stop]
        if len(starts) != 1 or len(stops) != 1:
            raise MarkerError(
                f"expected one marker pair, found {len(starts)} start and {len(stops)} stop marker(s)"
            )
        if starts[0] > stops[0]:
            raise MarkerError("stop marker precedes start marker")
        return starts[0], stops[0]


__all__ = ["PartialMarkers", "START_TOKEN", "STOP_TOKEN"]
