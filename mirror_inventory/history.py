"""
First-use dates mined from the git history of the approved-packages manifest.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from tqdm import tqdm

from .identity import normalize
from .interfaces import HistorySource
from .models import Revision
from .time_utils import to_date_string


logger = logging.getLogger(__name__)


DEFAULT_MANIFEST = "requirements.txt"
DEFAULT_GIT_TIMEOUT = 60

# Longer operators first so "===" is not cut at "==".
CONSTRAINT_OPERATORS = ("===", "==", "~=", "!=", "<=", ">=", "<", ">", "@")
_OPERATOR_RE = re.compile("|".join(re.escape(op) for op in CONSTRAINT_OPERATORS))

_HISTORY_ERRORS = (subprocess.SubprocessError, OSError, UnicodeDecodeError)


def extract_manifest_keys(content: str) -> Set[str]:
    """Return the normalized package keys named in requirements-file text.

    Comments, blank lines and option lines (``-r``, ``-e``, ``--index-url``...)
    are skipped. Environment markers, extras and version constraints are
    dropped before normalizing.
    """
    keys: Set[str] = set()
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        token = line.split()[0]
        token = token.split(";", 1)[0]
        token = token.split("[", 1)[0]
        token = _OPERATOR_RE.split(token, 1)[0]
        key = normalize(token)
        if key:
            keys.add(key)
    return keys


def build_first_use_index(revisions: Iterable[Tuple[str, Iterable[str]]]) -> Dict[str, str]:
    """Fold ``(date, keys)`` pairs, oldest first, into key -> earliest date."""
    index: Dict[str, str] = {}
    for date, keys in revisions:
        for key in keys:
            if key and key not in index:
                index[key] = date
    return index


class GitHistorySource(HistorySource):
    """History source backed by the ``git`` command line."""

    def __init__(self, repo_path: Path, timeout: float = DEFAULT_GIT_TIMEOUT, git: str = "git") -> None:
        self.repo_path = Path(repo_path)
        self.timeout = timeout
        self.git = git

    def _run(self, *args: str) -> str:
        cmd = [self.git, "-C", str(self.repo_path), *args]
        result = subprocess.run(
            cmd,
            capture_output=True,
            check=True,
            timeout=self.timeout,
        )
        return result.stdout.decode("utf-8", errors="replace")

    def list_revisions(self, manifest_path: str) -> List[Revision]:
        output = self._run(
            "log",
            "--reverse",
            "--format=%H%x09%aI",
            "--",
            _git_path(manifest_path),
        )
        revisions = []
        for line in output.splitlines():
            if not line.strip():
                continue
            revision_id, _, timestamp = line.partition("\t")
            revisions.append(Revision(revision_id=revision_id.strip(), date=to_date_string(timestamp)))
        return revisions

    def read_file(self, revision: Revision, manifest_path: str) -> str:
        return self._run("show", f"{revision.revision_id}:{_git_path(manifest_path)}")


def _git_path(manifest_path: str) -> str:
    return str(manifest_path).replace("\\", "/")


def mine_first_use(
    repo_path: Optional[Path],
    manifest_path: str = DEFAULT_MANIFEST,
    extract_keys: Callable[[str], Iterable[str]] = extract_manifest_keys,
    source: Optional[HistorySource] = None,
    timeout: float = DEFAULT_GIT_TIMEOUT,
    show_progress: bool = False,
) -> Dict[str, str]:
    """Map each normalized package key to the date it first appeared.

    A missing repository yields an empty index. Failures never propagate:
    if the revision list cannot be read the index is empty, and a revision
    whose content cannot be read is skipped.
    """
    if repo_path is None or not Path(repo_path).exists():
        logger.debug("History repository %s not present, skipping first-use dates", repo_path)
        return {}

    if source is None:
        source = GitHistorySource(Path(repo_path), timeout=timeout)

    try:
        revisions = list(source.list_revisions(manifest_path))
    except _HISTORY_ERRORS as e:
        logger.warning("Could not list history of %s in %s: %s", manifest_path, repo_path, e)
        return {}

    snapshots: List[Tuple[str, Set[str]]] = []

    logger.info("Scanning %d revisions of %s", len(revisions), manifest_path)
    for revision in tqdm(revisions, desc="Mining history", disable=not show_progress):
        try:
            content = source.read_file(revision, manifest_path)
        except _HISTORY_ERRORS as e:
            logger.warning("Could not read %s at %s: %s", manifest_path, revision.revision_id, e)
            continue
        snapshots.append((revision.date, set(extract_keys(content))))

    index = build_first_use_index(snapshots)

    logger.info("Found first-use dates for %d packages", len(index))
    return index
