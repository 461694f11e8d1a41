"""Brand and category list compiler.

Turns a market catalog workbook into list-definition text for the
Dimensions scripting tool, or into flat import tables for iField.
"""

__version__ = "0.1.0"
