from typing import ClassVar, Protocol, runtime_checkable

from pydantic import ConfigDict


@runtime_checkable
class DataclassType(Protocol):
    # Checking for this attribute is the most reliable way to recognize a
    # dataclass instance.
    __dataclass_fields__: ClassVar[dict]

    def asdict(self) -> dict:
        return vars(self)


_CONFIG = ConfigDict(extra="forbid", arbitrary_types_allowed=True)
