"""
Type mapping utilities for normalizing native source types into field types.
"""

from typing import Dict

from extract_query.core.models import FieldType


class TypeMapper:
    """Maps database, file and API native types to query field types."""

    # Names already in the field type vocabulary
    COMMON_TYPE_MAP: Dict[str, str] = {
        "string": FieldType.STRING.value,
        "number": FieldType.NUMBER.value,
        "decimal": FieldType.DECIMAL.value,
        "date": FieldType.DATE.value,
        "boolean": FieldType.BOOLEAN.value,
    }

    DATABASE_TYPE_MAP: Dict[str, str] = {
        "varchar": "string",
        "nvarchar": "string",
        "char": "string",
        "nchar": "string",
        "text": "string",
        "uuid": "string",
        "integer": "number",
        "int": "number",
        "bigint": "number",
        "smallint": "number",
        "tinyint": "number",
        "serial": "number",
        "real": "number",
        "float": "number",
        "double precision": "number",
        "decimal": "decimal",
        "numeric": "decimal",
        "money": "decimal",
        "date": "date",
        "datetime": "date",
        "datetime2": "date",
        "timestamp": "date",
        "timestamptz": "date",
        "boolean": "boolean",
        "bool": "boolean",
        "bit": "boolean",
    }

    FILE_TYPE_MAP: Dict[str, str] = {
        "str": "string",
        "object": "string",
        "int64": "number",
        "int32": "number",
        "float64": "number",
        "float32": "number",
        "datetime64": "date",
        "bool": "boolean",
    }

    API_TYPE_MAP: Dict[str, str] = {
        "integer": "number",
        "float": "number",
        "double": "number",
        "datetime": "date",
        "date-time": "date",
        "timestamp": "date",
        "bool": "boolean",
    }

    @classmethod
    def normalize_type(cls, native_type: str, source_kind: str = "common") -> str:
        """
        Normalize a native type name to a field type.

        Args:
            native_type: Source-specific type string (e.g. "varchar(50)")
            source_kind: Source kind (database, file, api, common)

        Returns:
            Normalized type string. Unknown types pass through lower-cased
            so the field type set stays open.
        """
        key = native_type.strip().lower()
        # Drop length/precision suffixes: varchar(50), numeric(10,2)
        if "(" in key:
            key = key.split("(", 1)[0].strip()

        if key in cls.COMMON_TYPE_MAP:
            return cls.COMMON_TYPE_MAP[key]
        return cls._get_type_map(source_kind).get(key, key)

    @classmethod
    def _get_type_map(cls, source_kind: str) -> Dict[str, str]:
        """Get the appropriate type map for a source kind."""
        if source_kind == "database":
            return cls.DATABASE_TYPE_MAP
        elif source_kind == "file":
            return cls.FILE_TYPE_MAP
        elif source_kind == "api":
            return cls.API_TYPE_MAP
        else:
            return cls.COMMON_TYPE_MAP
