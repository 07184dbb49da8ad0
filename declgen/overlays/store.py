"""Persistent store for documentation overlays."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import OverlayCorruptError
from ..logging import get_logger
from .model import DocOverlay


class OverlayStore:
    """Overlay records keyed by member identity, backed by a JSON object of records.

    Records that fail to parse are kept verbatim and written back unchanged on
    ``persist`` so a human can repair them. A store file that cannot be read at
    all is never overwritten.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._records: Dict[str, DocOverlay] = {}
        self._corrupt: Dict[str, Tuple[object, str]] = {}
        self._created: List[str] = []
        self._load_errors: List[OverlayCorruptError] = []
        self._dirty = False
        self._writable = True
        self.logger = get_logger("overlays")
        if self._path is not None:
            self._load(self._path)

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def created(self) -> List[str]:
        """Identities whose default overlay was synthesized since loading."""
        return list(self._created)

    @property
    def load_errors(self) -> List[OverlayCorruptError]:
        return list(self._load_errors)

    def get(self, identity: str) -> Optional[DocOverlay]:
        corrupt = self._corrupt.get(identity)
        if corrupt is not None:
            raw, reason = corrupt
            raise OverlayCorruptError(identity, reason, raw)
        return self._records.get(identity)

    def adopt(self, identity: str, overlay: DocOverlay) -> None:
        """Associate a synthesized default overlay with ``identity``.

        Identities holding a corrupt record are left alone; the record is kept
        for repair and the default only lives for the current run.
        """
        if identity in self._records or identity in self._corrupt:
            return
        self._records[identity] = overlay
        self._created.append(identity)
        self._dirty = True

    def put(self, identity: str, overlay: DocOverlay) -> None:
        """Store an edited overlay, replacing any corrupt record for the identity."""
        self._records[identity] = overlay
        self._corrupt.pop(identity, None)
        self._dirty = True

    def identities(self) -> List[str]:
        return sorted(set(self._records) | set(self._corrupt))

    def orphans(self, known: Iterable[str]) -> List[str]:
        """Identities with a stored record but no matching structural member."""
        keep = set(known)
        return [identity for identity in self.identities() if identity not in keep]

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        if not self._writable:
            self.logger.warning(
                "Not writing overlays to %s: the existing file could not be read", self._path
            )
            return
        overlays: Dict[str, object] = {}
        for identity, (raw, _reason) in self._corrupt.items():
            overlays[identity] = raw
        for identity, overlay in self._records.items():
            if identity in self._corrupt:
                continue
            overlays[identity] = overlay.save()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(overlays, indent=2, sort_keys=True) + "\n", encoding="utf-8"
        )
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            self._reject_file(path, f"unreadable store: {exc}")
            return
        if not isinstance(data, dict):
            self._reject_file(path, "expected an object mapping member identities to records")
            return
        for identity, raw in data.items():
            try:
                self._records[identity] = DocOverlay.from_json(identity, raw)
            except ValueError as exc:
                self._corrupt[identity] = (raw, str(exc))
        self.logger.debug(
            "Loaded %d overlay(s) from %s (%d corrupt)",
            len(self._records),
            path,
            len(self._corrupt),
        )

    def _reject_file(self, path: Path, reason: str) -> None:
        self._writable = False
        self._load_errors.append(OverlayCorruptError(str(path), reason))


__all__ = ["OverlayStore"]
