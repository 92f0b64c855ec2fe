"""SQL requests accepted by the statement executor."""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from sqlquest.exceptions import ConfigurationError


class SqlRequest(BaseModel):
    """A batch of SQL to render, split and execute.

    Exactly one of ``text`` and ``file_path`` provides the SQL. A relative
    ``file_path`` is resolved under the quest's SQL directory.
    """

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    file_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("file_path", "file", "filePath"))
    view: Optional[Dict[str, Any]] = None
    split: bool = True
    params: Optional[Union[List[Any], Dict[str, Any]]] = None

    @model_validator(mode='after')
    def validate_source(self):
        """Require exactly one SQL source."""
        if (self.text is None) == (self.file_path is None):
            raise ValueError("A SQL request needs exactly one of 'text' or 'file_path'")
        return self

    @classmethod
    def coerce(cls, request: Union["SqlRequest", str, Mapping[str, Any]]) -> "SqlRequest":
        """Accept raw SQL text, a mapping or a request.

        Raises:
            ConfigurationError: If the request is malformed.
        """
        if isinstance(request, cls):
            return request
        if isinstance(request, str):
            return cls(text=request)
        if isinstance(request, Mapping):
            try:
                return cls(**request)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid SQL request: {e}") from e
        raise ConfigurationError(f"Unsupported SQL request type: {type(request).__name__}")

    def resolve_path(self, sql_dir: Path) -> Path:
        path = Path(self.file_path)
        return path if path.is_absolute() else sql_dir / path

    def load_text(self, sql_dir: Path) -> str:
        """Return the request's SQL text, reading ``file_path`` if needed.

        Raises:
            ConfigurationError: If the SQL file cannot be read.
        """
        if self.text is not None:
            return self.text
        path = self.resolve_path(sql_dir)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            raise ConfigurationError(f"SQL file '{path}' not found")
        except OSError as e:
            raise ConfigurationError(f"Could not read SQL file '{path}': {e}") from e
