"""Player-facing actions and the targeting contract."""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Targetable(Protocol):
    """Marker for anything that may be the object of a targeted action."""

    name: str


class UsableAction:
    """An action that can be performed when its allowed predicate holds."""

    def __init__(
        self,
        name: str,
        owner: Any,
        *,
        allowed: Callable[[], bool] | None = None,
        perform: Callable[[], None] | None = None,
    ) -> None:
        self.name = name
        self.owner = owner
        self._allowed = allowed
        self._perform = perform

    def is_allowed(self) -> bool:
        if self._allowed is None:
            return True
        return bool(self._allowed())

    def perform(self) -> None:
        if self._perform is None:
            raise NotImplementedError(f"{self.name} has no perform callback")
        self._perform()

    def __str__(self) -> str:
        return f"{self.name} ({getattr(self.owner, 'name', self.owner)})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TargetAction(UsableAction):
    """An action that needs a target chosen from ``find_targets()`` before it runs."""

    def __init__(
        self,
        name: str,
        owner: Any,
        *,
        targets: Callable[[], Sequence[Targetable]],
        allowed: Callable[[], bool] | None = None,
        perform: Callable[[Targetable], None] | None = None,
    ) -> None:
        super().__init__(name, owner, allowed=allowed)
        self._targets = targets
        self._perform_on = perform

    def find_targets(self) -> list[Targetable]:
        return list(self._targets() or ())

    def perform(self, target: Targetable | None = None) -> None:  # type: ignore[override]
        if target is None:
            raise ValueError(f"{self.name} requires a target")
        if self._perform_on is None:
            raise NotImplementedError(f"{self.name} has no perform callback")
        self._perform_on(target)
