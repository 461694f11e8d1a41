from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path

import pandas as pd

from ..models.export_bundle import Artifact, ArtifactKind, ExportBundle

"""Saving an ExportBundle to disk (zip archive or loose files)."""

__all__ = [
    "artifact_bytes",
    "write_bundle",
]

logger = logging.getLogger(__name__)


def artifact_bytes(artifact: Artifact) -> bytes:
    """Serialized file content of one artifact."""
    if artifact.kind is ArtifactKind.TEXT:
        return (artifact.text or "").encode("utf-8")
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, records in (artifact.sheets or {}).items():
            df = pd.DataFrame(records, columns=artifact.columns)
            df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def write_bundle(bundle: ExportBundle, output_directory: Path, archive: bool = True) -> list[Path]:
    """Write the bundle into output_directory.

    archive=True writes a single zip named after the country and platform;
    otherwise every artifact becomes its own file.

    Returns:
        Paths written
    """
    output_directory.mkdir(parents=True, exist_ok=True)
    if archive:
        target = output_directory / bundle.archive_name
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for artifact in bundle.artifacts:
                zf.writestr(artifact.name, artifact_bytes(artifact))
        logger.info(f"wrote archive {target} ({len(bundle.artifacts)} artifacts)")
        return [target]
    written: list[Path] = []
    for artifact in bundle.artifacts:
        target = output_directory / artifact.name
        target.write_bytes(artifact_bytes(artifact))
        written.append(target)
    logger.info(f"wrote {len(written)} files to {output_directory}")
    return written
