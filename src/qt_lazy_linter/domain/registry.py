"""Check registry: name -> factory, severity level and fix-its."""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from qt_lazy_linter.domain.entities import FixItDescriptor
from qt_lazy_linter.domain.exceptions import (
    DuplicateFixItError,
    DuplicateNameError,
    UnknownCheckError,
)

if TYPE_CHECKING:
    from qt_lazy_linter.domain.config import RunConfiguration
    from qt_lazy_linter.use_cases.checks.base import CheckBase
    from qt_lazy_linter.use_cases.context import AnalysisContext

CheckFactory = Callable[[str, "AnalysisContext"], "CheckBase"]

_CHECK_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9_]+)*$")

ALL_CHECKS = "all"


class CheckLevel(IntEnum):
    """Severity level; lower levels are safer and run by default."""

    LEVEL0 = 0
    LEVEL1 = 1
    LEVEL2 = 2
    LEVEL3 = 3
    HIDDEN = 4

    @classmethod
    def parse(cls, value: object) -> "CheckLevel":
        """Accept 0-4, "level2" or "hidden"."""
        if isinstance(value, CheckLevel):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        text = str(value).strip().lower()
        if text == "hidden":
            return cls.HIDDEN
        if text.startswith("level"):
            text = text[len("level"):]
        return cls(int(text))


@dataclass(frozen=True)
class CheckDescriptor:
    """Immutable registration record of one check."""

    name: str
    level: CheckLevel
    factory: CheckFactory
    fixits: tuple[FixItDescriptor, ...] = ()
    description: str = ""

    def fixit(self, fixit_id: int) -> Optional[FixItDescriptor]:
        return next((f for f in self.fixits if f.id == fixit_id), None)

    @classmethod
    def build(
        cls,
        name: str,
        level: CheckLevel,
        factory: CheckFactory,
        fixits: Iterable[tuple[int, str]] = (),
        description: str = "",
    ) -> "CheckDescriptor":
        """Create a descriptor, binding each (id, flag_name) fix-it to the check."""
        return cls(
            name=name,
            level=level,
            factory=factory,
            fixits=tuple(FixItDescriptor(fixit_id, flag, name) for fixit_id, flag in fixits),
            description=description,
        )


@dataclass
class CheckRegistry:
    """
    Table of known checks.

    Registration order is preserved and is the dispatch order of the
    traversal engine. Nothing is ever unregistered.
    """

    _checks: dict[str, CheckDescriptor] = field(default_factory=dict)
    _fixits_by_flag: dict[str, FixItDescriptor] = field(default_factory=dict)

    def register(self, descriptor: CheckDescriptor) -> None:
        if not _CHECK_NAME_RE.match(descriptor.name):
            raise ValueError(f"Check name '{descriptor.name}' must be lowercase-hyphenated")
        if descriptor.name in self._checks:
            raise DuplicateNameError(descriptor.name)

        seen_ids: set[int] = set()
        for fixit in descriptor.fixits:
            if fixit.owning_check != descriptor.name:
                raise DuplicateFixItError(
                    f"Fix-it '{fixit.flag_name}' belongs to '{fixit.owning_check}', not '{descriptor.name}'"
                )
            if fixit.id in seen_ids:
                raise DuplicateFixItError(f"Fix-it id {fixit.id} repeated in '{descriptor.name}'")
            if fixit.flag_name in self._fixits_by_flag:
                raise DuplicateFixItError(f"Fix-it flag '{fixit.flag_name}' is already registered")
            seen_ids.add(fixit.id)

        self._checks[descriptor.name] = descriptor
        for fixit in descriptor.fixits:
            self._fixits_by_flag[fixit.flag_name] = fixit

    def lookup(self, name: str) -> Optional[CheckDescriptor]:
        return self._checks.get(name)

    def get(self, name: str) -> CheckDescriptor:
        descriptor = self._checks.get(name)
        if descriptor is None:
            raise UnknownCheckError(name)
        return descriptor

    def all_names(self) -> list[str]:
        """Alphabetical, for deterministic listings."""
        return sorted(self._checks)

    def descriptors(self) -> list[CheckDescriptor]:
        return list(self._checks.values())

    def fixit_for_flag(self, flag_name: str) -> Optional[FixItDescriptor]:
        return self._fixits_by_flag.get(flag_name)

    def select(self, config: "RunConfiguration") -> list[CheckDescriptor]:
        """Descriptors enabled for a run, in registration order."""
        if config.checks:
            if ALL_CHECKS in config.checks:
                wanted = set(self._checks)
            else:
                for name in config.checks:
                    self.get(name)
                wanted = set(config.checks)
        else:
            # Hidden checks only run when named.
            wanted = {
                name
                for name, d in self._checks.items()
                if d.level <= config.max_level and d.level is not CheckLevel.HIDDEN
            }

        wanted.difference_update(config.disabled_checks)
        return [d for name, d in self._checks.items() if name in wanted]

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks
