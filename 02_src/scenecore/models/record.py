"""Record-class marker for data access."""

import dataclasses
import re
from typing import Any, ClassVar, Mapping

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class ActiveRecord:
    """
    Base for record classes. Subclasses are dataclasses.

    ``IS_ACTIVE_RECORD`` lets ``Scene.query`` tell a record class apart from a
    view function.
    """

    IS_ACTIVE_RECORD: ClassVar[bool] = True
    __tablename__: ClassVar[str | None] = None
    primary_key: ClassVar[str] = "id"

    @classmethod
    def table_name(cls) -> str:
        """Explicit ``__tablename__`` or the snake_case class name."""
        return cls.__tablename__ or _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ActiveRecord":
        names = cls.field_names()
        return cls(**{name: row[name] for name in names if name in row.keys()})

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)

    def primary_key_value(self) -> Any:
        return getattr(self, self.primary_key)


def is_active_record(value: Any) -> bool:
    """True when ``value`` identifies itself as a record class."""
    return getattr(value, "IS_ACTIVE_RECORD", False) is True


def table_name(record_class: type[ActiveRecord]) -> str:
    return record_class.table_name()
