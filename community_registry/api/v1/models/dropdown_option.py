from sqlalchemy import Column, Integer, Text

from community_registry.core.db import Base


class DropdownOptionMixin:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, unique=True)


class City(DropdownOptionMixin, Base):
    __tablename__ = "cities"


class State(DropdownOptionMixin, Base):
    __tablename__ = "states"


class NativePlace(DropdownOptionMixin, Base):
    __tablename__ = "native_places"


# Catalog key (as sent by clients) -> model
OPTION_MODELS = {
    "cities": City,
    "states": State,
    "native_places": NativePlace,
}
