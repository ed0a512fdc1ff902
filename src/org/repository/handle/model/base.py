from sqlalchemy import String, orm

from typing_extensions import Annotated

str256 = Annotated[str, 256]


class Base(orm.DeclarativeBase):
    type_annotation_map = {
        str256: String(256),
    }
