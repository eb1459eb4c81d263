"""
Data source registry shapes.

These describe externally registered data sources (databases, flat files,
APIs). The engine only reads table metadata from them; connection details
are carried for completeness and never used to connect.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, model_validator

from extract_query.core.models import WireModel, utc_now


class DataSourceType(str, Enum):
    DATABASE = "database"
    FILE = "file"
    API = "api"


class DataSourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"
    CONFIGURING = "configuring"


DEFAULT_PORTS: Dict[str, int] = {
    "postgresql": 5432,
    "mysql": 3306,
    "sqlserver": 1433,
}

DEFAULT_SCHEMAS: Dict[str, str] = {
    "postgresql": "public",
    "mysql": "default",
    "sqlserver": "dbo",
}


class DatabaseConfig(WireModel):
    """Connection settings for a relational database source."""
    kind: Literal["database"] = "database"
    type: Literal["postgresql", "mysql", "sqlserver"] = "postgresql"
    host: str = ""
    port: Optional[int] = None
    database: str = ""
    schema_name: Optional[str] = Field(default=None, alias="schema")
    username: str = ""
    password: str = Field(default="", repr=False)

    @model_validator(mode="after")
    def apply_defaults(self) -> "DatabaseConfig":
        """Fill port and schema from the database type when omitted."""
        if self.port is None:
            self.port = DEFAULT_PORTS[self.type]
        if self.schema_name is None:
            self.schema_name = DEFAULT_SCHEMAS[self.type]
        return self


class FileConfig(WireModel):
    """Location and parsing settings for a flat file source."""
    kind: Literal["file"] = "file"
    type: Literal["csv", "json", "xml"] = "csv"
    location: str = ""
    delimiter: Optional[str] = ","
    encoding: str = "UTF-8"
    has_header: bool = True


class ApiAuthentication(WireModel):
    type: Literal["basic", "bearer", "oauth2"] = "bearer"
    credentials: Dict[str, str] = Field(default_factory=dict, repr=False)


class ApiConfig(WireModel):
    """Endpoint settings for an HTTP API source."""
    kind: Literal["api"] = "api"
    url: str = ""
    method: Literal["GET", "POST", "PUT", "PATCH"] = "GET"
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: int = 30
    authentication: Optional[ApiAuthentication] = None


ConnectionConfig = Annotated[
    Union[DatabaseConfig, FileConfig, ApiConfig],
    Field(discriminator="kind"),
]


class FieldMetadata(WireModel):
    name: str
    type: str
    nullable: bool = True
    description: Optional[str] = None


class TableMetadata(WireModel):
    name: str
    schema_name: Optional[str] = Field(default=None, alias="schema")
    fields: List[FieldMetadata] = Field(default_factory=list)


class SourceMetadata(WireModel):
    tables: List[TableMetadata] = Field(default_factory=list)
    last_sync: Optional[datetime] = None
    total_records: Optional[int] = None


class DataSource(WireModel):
    """
    A registered data source as provided by the data source registry.

    `type` must agree with the `kind` tag of `connection_details`.
    """

    id: str
    name: str
    description: Optional[str] = None
    type: DataSourceType
    status: DataSourceStatus = DataSourceStatus.ACTIVE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_test_at: Optional[datetime] = None
    connection_details: ConnectionConfig
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)

    @model_validator(mode="after")
    def validate_connection_kind(self) -> "DataSource":
        """Ensure the connection config variant matches the source type."""
        if self.connection_details.kind != self.type.value:
            raise ValueError(
                f"Data source '{self.id}' has type '{self.type.value}' but "
                f"'{self.connection_details.kind}' connection details"
            )
        return self
