"""Values that fill template placeholders."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone, tzinfo
from typing import ClassVar, Union

from barstatus.formatting.unit import Unit


@dataclass(frozen=True)
class Metadata:
    """Presentation details carried by a value."""

    instance: str | None = None
    underline: bool = False
    italic: bool = False

    def is_default(self) -> bool:
        return self == Metadata()


@dataclass(frozen=True)
class TextValue:
    text: str
    type_name: ClassVar[str] = "Text"


@dataclass(frozen=True)
class IconValue:
    icon: str
    type_name: ClassVar[str] = "Icon"


@dataclass(frozen=True)
class NumberValue:
    val: float
    unit: Unit
    type_name: ClassVar[str] = "Number"


@dataclass(frozen=True)
class DatetimeValue:
    moment: datetime
    tz: tzinfo | None = None
    type_name: ClassVar[str] = "Datetime"


@dataclass(frozen=True)
class FlagValue:
    type_name: ClassVar[str] = "Flag"


ValueInner = Union[TextValue, IconValue, NumberValue, DatetimeValue, FlagValue]


@dataclass(frozen=True)
class Value:
    """A placeholder value together with its metadata."""

    inner: ValueInner
    metadata: Metadata = field(default_factory=Metadata)

    @classmethod
    def text(cls, text: str) -> Value:
        return cls(TextValue(text))

    @classmethod
    def icon(cls, icon: str) -> Value:
        return cls(IconValue(icon))

    @classmethod
    def flag(cls) -> Value:
        return cls(FlagValue())

    @classmethod
    def datetime(cls, moment: datetime, tz: tzinfo | None = None) -> Value:
        """A point in time; a naive moment is taken to be in UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        else:
            moment = moment.astimezone(timezone.utc)
        return cls(DatetimeValue(moment, tz))

    @classmethod
    def number_unit(cls, val: float, unit: Unit) -> Value:
        return cls(NumberValue(float(val), unit))

    @classmethod
    def bytes(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.BYTES)

    @classmethod
    def bits(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.BITS)

    @classmethod
    def percents(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.PERCENTS)

    @classmethod
    def degrees(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.DEGREES)

    @classmethod
    def seconds(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.SECONDS)

    @classmethod
    def watts(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.WATTS)

    @classmethod
    def hertz(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.HERTZ)

    @classmethod
    def number(cls, val: float) -> Value:
        return cls.number_unit(val, Unit.NONE)

    def with_instance(self, instance: str) -> Value:
        return replace(self, metadata=replace(self.metadata, instance=instance))

    def underline(self, val: bool) -> Value:
        return replace(self, metadata=replace(self.metadata, underline=val))

    def italic(self, val: bool) -> Value:
        return replace(self, metadata=replace(self.metadata, italic=val))