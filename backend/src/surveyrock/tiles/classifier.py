"""Field classification for measure eligibility."""

from surveyrock.tiles.types import DatabaseField

# Substrings of type names that mark a column as numeric
NUMERIC_TYPE_MARKERS = (
    "int",
    "integer",
    "number",
    "float",
    "double",
    "decimal",
    "numeric",
    "bigint",
    "smallint",
    "real",
)


def is_numeric(field: DatabaseField | None) -> bool:
    """Return True if the field can be used as an aggregation target."""
    if field is None or not field.type:
        return False
    type_name = field.type.lower()
    return any(marker in type_name for marker in NUMERIC_TYPE_MARKERS)
