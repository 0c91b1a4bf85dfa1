"""A small JSON document store persisted on disk (id -> document)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """Key-by-id documents kept in one JSON snapshot plus a write-ahead journal.

    Every ``put``/``delete`` is appended to ``<stem>.journal.jsonl`` immediately, so a
    crash between flushes loses nothing: the journal is replayed on load.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        # Example: media.json -> media.journal.jsonl
        self._journal_path = self._path.with_name(f"{self._path.stem}.journal.jsonl")
        self._data: dict[str, dict[str, Any]] = {}
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Load snapshot and replay the journal (no-op if already loaded)."""

        if self._loaded:
            return
        self._data = {}
        if self._path.exists():
            text = self._path.read_text(encoding="utf-8").strip()
            if text:
                try:
                    data = json.loads(text)
                except json.JSONDecodeError:
                    # Snapshot corrupted: keep a backup and start fresh
                    backup = self._path.with_suffix(self._path.suffix + ".broken")
                    backup.write_text(text, encoding="utf-8")
                    logger.warning("Corrupted store %s backed up to %s", self._path, backup)
                    data = {}
                if isinstance(data, dict):
                    self._data = {k: v for k, v in data.items() if isinstance(v, dict)}

        self._replay_journal()
        self._loaded = True

    def get(self, doc_id: str) -> dict[str, Any] | None:
        self.load()
        return self._data.get(doc_id)

    def put(self, doc_id: str, doc: dict[str, Any]) -> None:
        self.load()
        self._data[doc_id] = doc
        self._append_journal({"op": "put", "k": doc_id, "v": doc})

    def delete(self, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""

        self.load()
        if doc_id not in self._data:
            return False
        del self._data[doc_id]
        self._append_journal({"op": "delete", "k": doc_id})
        return True

    def values(self) -> list[dict[str, Any]]:
        self.load()
        return list(self._data.values())

    def __iter__(self) -> Iterator[str]:
        self.load()
        return iter(list(self._data))

    def __len__(self) -> int:
        self.load()
        return len(self._data)

    def flush(self) -> None:
        """Persist the full snapshot (atomic-ish) and clear the journal."""

        self.load()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)
        self._clear_journal()

    def _append_journal(self, record: dict[str, Any]) -> None:
        self._journal_path.parent.mkdir(parents=True, exist_ok=True)
        with self._journal_path.open("a", encoding="utf-8", newline="\n") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def _replay_journal(self) -> None:
        if not self._journal_path.exists():
            return
        with self._journal_path.open("r", encoding="utf-8") as f:
            for line in f:
                s = line.strip()
                if not s:
                    continue
                try:
                    rec = json.loads(s)
                except json.JSONDecodeError:
                    # ignore a torn tail line
                    continue
                k = rec.get("k")
                if not isinstance(k, str):
                    continue
                if rec.get("op") == "delete":
                    self._data.pop(k, None)
                elif isinstance(rec.get("v"), dict):
                    self._data[k] = rec["v"]

    def _clear_journal(self) -> None:
        if self._journal_path.exists():
            self._journal_path.unlink()
