"""Domain models for the list compiler.

Catalog / taxonomy structures built from the workbook, the definition text
blocks, the iField ImportRow schema, and the export bundle.
"""

from .catalog import Bucket, CatalogEntry, CatalogList, CategoryNode, HeaderGroup, Taxonomy
from .definition import DefinitionBlock
from .export_bundle import Artifact, ArtifactKind, ExportBundle, TargetPlatform
from .import_row import IMPORT_COLUMNS, ImportRow
from .issue_record import IssueRecord

__all__ = [
    # Catalog models
    "Bucket",
    "CatalogEntry",
    "CatalogList",
    "CategoryNode",
    "HeaderGroup",
    "Taxonomy",
    # Output models
    "DefinitionBlock",
    "ImportRow",
    "IMPORT_COLUMNS",
    "Artifact",
    "ArtifactKind",
    "ExportBundle",
    "TargetPlatform",
    "IssueRecord",
]
