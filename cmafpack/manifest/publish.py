"""Atomic manifest publication

Every manifest is staged next to its destination and only then moved
into place with os.replace, so a reader sees either the previous file
or the complete new one. Master manifests are published last.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Tuple

from ..config import DASH_MPD_NAME, HLS_MASTER_NAME, MEDIA_PLAYLIST_NAME
from ..exceptions import ManifestWriteError
from ..models import ManifestSet

logger = logging.getLogger(__name__)

MANIFEST_MODE = 0o644

def stage_text(target: Path, text: str) -> Path:
    """Write text to a hidden temporary file beside target"""
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        os.chmod(tmp, MANIFEST_MODE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return tmp

def publish_manifests(video_root: Path, manifests: ManifestSet) -> Dict[str, Path]:
    """
    Stage and publish all manifests of a job.

    Returns:
        Dict[str, Path]: Published paths keyed "hls" and "dash"

    Raises:
        ManifestWriteError: If any manifest cannot be staged or published
    """
    hls_path = video_root / HLS_MASTER_NAME
    dash_path = video_root / DASH_MPD_NAME
    targets: List[Tuple[Path, str]] = [
        (video_root / name / MEDIA_PLAYLIST_NAME, text)
        for name, text in manifests.media_playlists
    ]
    targets.append((dash_path, manifests.dash_mpd))
    targets.append((hls_path, manifests.hls_master))

    staged: List[Tuple[Path, Path]] = []
    try:
        for target, text in targets:
            staged.append((stage_text(target, text), target))
        for tmp, target in staged:
            os.replace(tmp, target)
            logger.debug("Published %s", target)
    except OSError as e:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        logger.error("Failed to publish manifests in %s: %s", video_root, e)
        raise ManifestWriteError(f"Failed to publish manifests: {e}", module="publish") from e

    logger.info("Published %s and %s", hls_path, dash_path)
    return {"hls": hls_path, "dash": dash_path}
