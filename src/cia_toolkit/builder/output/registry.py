"""
Module: builder.output.registry

Purpose:
    On-disk artifact store for generated papers. Each build gets its own
    timestamped directory holding the PDF, the DOCX and paper.json; a
    papers.jsonl index (one record per paper) is appended under an
    exclusive file lock so concurrent builds never interleave records.

Key Functions:
    - open_index: Open the index under a shared or exclusive lock
    - append_index_record: Append one record to the index
    - make_paper_id: Timestamped slug for a paper

Key Classes:
    - PaperRecord: One index entry
    - PaperRegistry: save / list_papers / purge_expired
    - RegistryError: Artifact write or index failure

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - builder.controller: Persists build results
    - cia_toolkit.cli: list and purge commands
"""

from __future__ import annotations

import json
import logging
import re
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import IO, Any, Dict, Iterator, List, Mapping, Optional

import portalocker

from cia_toolkit.core.models import Header
from cia_toolkit.core.utils import deserialize_header, serialize_header

logger = logging.getLogger(__name__)

INDEX_NAME = "papers.jsonl"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
SLUG_RE = re.compile(r"[^a-z0-9]+")


class RegistryError(Exception):
    """Artifact or index could not be written."""
    pass


# ─────────────────────────────────────────────────────────────────────────────
# Index file access
# ─────────────────────────────────────────────────────────────────────────────

@contextmanager
def open_index(path: Path, mode: str, *, shared: bool = False) -> Iterator[IO[str]]:
    """
    Open the index holding a portalocker lock for the duration.

    Readers take a shared lock, anything that writes takes an exclusive one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open(mode, encoding="utf-8") as handle:
        portalocker.lock(handle, portalocker.LOCK_SH if shared else portalocker.LOCK_EX)
        try:
            yield handle
        finally:
            portalocker.unlock(handle)


def _index_line(record: Mapping[str, Any]) -> str:
    return json.dumps(dict(record), ensure_ascii=False) + "\n"


def append_index_record(path: Path, record: Mapping[str, Any]) -> None:
    """Append one JSON line to the index under an exclusive lock."""
    with open_index(path, "a") as handle:
        handle.write(_index_line(record))
    logger.debug(f"Indexed {record.get('paper_id', '?')} in {path.name}")


def _read_index(handle: IO[str], source: Path) -> List[Dict[str, Any]]:
    """Decode index lines; a corrupt line is logged and left out."""
    records = []
    for lineno, line in enumerate(handle.read().splitlines(), start=1):
        if line.strip():
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping corrupt line {lineno} in {source.name}: {e.msg}")
    return records


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────

def _slug(text: str) -> str:
    return SLUG_RE.sub("_", text.lower()).strip("_") or "paper"


def make_paper_id(header: Header, now: Optional[datetime] = None) -> str:
    """
    Timestamped paper id.

    Example:
        >>> make_paper_id(header, datetime(2026, 2, 18, 10, 30, 45))
        '20260218-103045__ccs336__cia2'
    """
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return f"{timestamp}__{_slug(header.course_code)}__cia{_slug(header.assessment_index)}"


@dataclass(frozen=True)
class PaperRecord:
    """
    One registry index entry.

    Attributes:
        paper_id: Directory name under the registry root
        header: Paper header
        created_at: Local time the artifacts were written
        pdf_path / docx_path: Artifact paths
    """
    paper_id: str
    header: Header
    created_at: datetime
    pdf_path: Path
    docx_path: Path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paper_id": self.paper_id,
            "header": serialize_header(self.header),
            "created_at": self.created_at.isoformat(),
            "pdf_path": str(self.pdf_path),
            "docx_path": str(self.docx_path),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PaperRecord:
        return cls(
            paper_id=data["paper_id"],
            header=deserialize_header(data["header"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            pdf_path=Path(data["pdf_path"]),
            docx_path=Path(data["docx_path"]),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

class PaperRegistry:
    """
    Artifact directories plus a locked JSONL index.

    Layout:
        <root>/papers.jsonl
        <root>/<paper_id>/<name>.pdf
        <root>/<paper_id>/<name>.docx
        <root>/<paper_id>/paper.json
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_NAME

    def allocate_id(self, header: Header, now: Optional[datetime] = None) -> str:
        """Paper id that does not collide with an existing directory."""
        base = make_paper_id(header, now)
        paper_id = base
        counter = 1
        while (self.root / paper_id).exists():
            paper_id = f"{base}({counter})"
            counter += 1
        return paper_id

    def save(
        self,
        paper_id: str,
        header: Header,
        name: str,
        pdf_bytes: bytes,
        docx_bytes: bytes,
        metadata: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> PaperRecord:
        """
        Write both artifacts and paper.json, then append the index record.

        Files are written to a hidden staging directory that is renamed
        into place only when every write succeeded; nothing partial is
        left behind on failure.

        Raises:
            RegistryError: If the directory exists or a write fails
        """
        final_dir = self.root / paper_id
        staging = self.root / f".{paper_id}.partial"
        if final_dir.exists():
            raise RegistryError(f"Artifact directory already exists: {final_dir}")

        try:
            staging.mkdir(parents=True, exist_ok=False)
            (staging / f"{name}.pdf").write_bytes(pdf_bytes)
            (staging / f"{name}.docx").write_bytes(docx_bytes)
            with open(staging / "paper.json", "w", encoding="utf-8") as f:
                json.dump(dict(metadata), f, indent=2, ensure_ascii=False)
            staging.rename(final_dir)
        except OSError as e:
            shutil.rmtree(staging, ignore_errors=True)
            raise RegistryError(f"Failed to write artifacts for {paper_id}: {e}") from e

        record = PaperRecord(
            paper_id=paper_id,
            header=header,
            created_at=now or datetime.now(),
            pdf_path=final_dir / f"{name}.pdf",
            docx_path=final_dir / f"{name}.docx",
        )
        try:
            append_index_record(self.index_path, record.to_dict())
        except OSError as e:
            shutil.rmtree(final_dir, ignore_errors=True)
            raise RegistryError(f"Failed to update index for {paper_id}: {e}") from e

        logger.info(f"Saved {paper_id} to {final_dir}")
        return record

    def list_papers(self) -> List[PaperRecord]:
        """All indexed papers, newest first."""
        if not self.index_path.exists():
            return []
        with open_index(self.index_path, "r", shared=True) as handle:
            records = _read_index(handle, self.index_path)
        papers = [PaperRecord.from_dict(r) for r in records]
        return sorted(papers, key=lambda p: (p.created_at, p.paper_id), reverse=True)

    def purge_expired(self, retention: timedelta, now: Optional[datetime] = None) -> List[str]:
        """
        Delete papers older than ``retention`` and rewrite the index.

        Returns:
            Ids of the removed papers, oldest first
        """
        if not self.index_path.exists():
            return []
        cutoff = (now or datetime.now()) - retention

        with open_index(self.index_path, "r+") as handle:
            records = _read_index(handle, self.index_path)
            expired = {
                r["paper_id"] for r in records
                if datetime.fromisoformat(r["created_at"]) < cutoff
            }
            if expired:
                handle.seek(0)
                handle.truncate()
                handle.writelines(_index_line(r) for r in records if r["paper_id"] not in expired)

        removed = sorted(expired)
        for paper_id in removed:
            shutil.rmtree(self.root / paper_id, ignore_errors=True)
            logger.info(f"Purged {paper_id}")
        return removed
