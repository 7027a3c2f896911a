"""
panel_engine/geometry_store.py -- Authoritative in-memory state of mounted panels.

The store owns every live ``PanelInstance`` of the current section, keyed
by panel id.  Each instance carries its immutable template ``PanelConfig``
and a separate mutable ``PanelGeometry``; the drag controller and the
split layout mutate the geometry, and ``snapshot()`` reads it back.  The
rendered surface is an opaque ``handle`` the store never looks at.

Layout operations are best-effort: operations on an id that is not
tracked return ``OpResult.NOT_FOUND`` and change nothing.  Creating a
panel whose id is already tracked is the one hard error
(``DuplicatePanelError``).

Rendering layers subscribe with ``add_listener()`` and receive
``panel_added``, ``panel_removed``, ``geometry_changed`` and
``visibility_changed`` callbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Protocol

from panel_engine.errors import DuplicatePanelError
from panel_engine.models import PanelSnapshot
from panel_engine.templates import PanelConfig

logger = logging.getLogger(__name__)


class OpResult(Enum):
    """Outcome of a best-effort panel operation."""

    OK = "ok"
    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return self is OpResult.OK


@dataclass
class PanelGeometry:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


def clamp(value: int, low: int, high: int) -> int:
    """Clamp *value* into ``[low, high]``; *low* wins if the range is empty."""
    return max(low, min(high, value))


def clamp_geometry(
    geometry: PanelGeometry, container_width: int, container_height: int
) -> PanelGeometry:
    """Return *geometry* shrunk and shifted to fit inside the container."""
    width = clamp(geometry.width, 0, max(0, container_width))
    height = clamp(geometry.height, 0, max(0, container_height))
    x = clamp(geometry.x, 0, container_width - width)
    y = clamp(geometry.y, 0, container_height - height)
    return PanelGeometry(x, y, width, height)


@dataclass
class PanelInstance:
    """A live, mounted panel."""

    config: PanelConfig
    geometry: PanelGeometry
    visible: bool = True
    z_order: int = 0
    container: Any = None
    handle: Any = None
    on_drag_end: Callable[[], None] | None = field(default=None, repr=False)

    @property
    def id(self) -> str:
        return self.config.id

    @property
    def title(self) -> str:
        return self.config.title

    def to_snapshot(self) -> PanelSnapshot:
        g = self.geometry
        return PanelSnapshot(
            id=self.config.id,
            title=self.config.title,
            x=g.x,
            y=g.y,
            width=g.width,
            height=g.height,
            hidden=not self.visible,
        )


class StoreListener(Protocol):
    def panel_added(self, instance: PanelInstance) -> None: ...

    def panel_removed(self, instance: PanelInstance) -> None: ...

    def geometry_changed(self, instance: PanelInstance) -> None: ...

    def visibility_changed(self, instance: PanelInstance) -> None: ...


class PanelGeometryStore:
    """Keyed collection of live panels for one layout container."""

    def __init__(self) -> None:
        self._panels: dict[str, PanelInstance] = {}
        self._listeners: list[StoreListener] = []
        self._container_size: tuple[int, int] | None = None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: StoreListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str, instance: PanelInstance) -> None:
        for listener in list(self._listeners):
            callback = getattr(listener, event, None)
            if callback is not None:
                callback(instance)

    # ------------------------------------------------------------------
    # Container size
    # ------------------------------------------------------------------

    @property
    def container_size(self) -> tuple[int, int] | None:
        return self._container_size

    def set_container_size(self, width: int, height: int) -> None:
        self._container_size = (max(0, int(width)), max(0, int(height)))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __contains__(self, panel_id: object) -> bool:
        return panel_id in self._panels

    def __len__(self) -> int:
        return len(self._panels)

    def __iter__(self) -> Iterator[PanelInstance]:
        return iter(list(self._panels.values()))

    def get(self, panel_id: str) -> PanelInstance | None:
        return self._panels.get(panel_id)

    def panel_ids(self) -> list[str]:
        return list(self._panels)

    def is_visible(self, panel_id: str) -> bool:
        instance = self._panels.get(panel_id)
        return bool(instance and instance.visible)

    # ------------------------------------------------------------------
    # Create / remove
    # ------------------------------------------------------------------

    def create_panel(
        self,
        config: PanelConfig,
        container: Any = None,
        handle: Any = None,
        on_drag_end: Callable[[], None] | None = None,
    ) -> PanelInstance:
        """Materialise a panel at *config*'s default geometry.

        Raises
        ------
        DuplicatePanelError
            If a panel with the same id is already tracked.
        """
        if config.id in self._panels:
            raise DuplicatePanelError(config.id)

        instance = PanelInstance(
            config=config,
            geometry=PanelGeometry(
                max(0, config.x), max(0, config.y), max(0, config.width), max(0, config.height)
            ),
            visible=not config.hidden,
            container=container,
            handle=handle,
            on_drag_end=on_drag_end,
        )
        self._panels[config.id] = instance
        logger.debug("Created panel %s at %s", config.id, instance.geometry.as_tuple())
        self._notify("panel_added", instance)
        return instance

    def remove_panel(self, panel_id: str) -> OpResult:
        instance = self._panels.pop(panel_id, None)
        if instance is None:
            logger.debug("remove_panel: unknown panel %s", panel_id)
            return OpResult.NOT_FOUND
        self._notify("panel_removed", instance)
        return OpResult.OK

    def clear_all(self, container: Any = None) -> int:
        """Remove every panel (only those mounted in *container* if given).

        Returns the number of panels removed.
        """
        doomed = [
            pid for pid, inst in self._panels.items()
            if container is None or inst.container is container
        ]
        for pid in doomed:
            self.remove_panel(pid)
        return len(doomed)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def show(self, panel_id: str) -> OpResult:
        return self._set_visible(panel_id, True)

    def hide(self, panel_id: str) -> OpResult:
        return self._set_visible(panel_id, False)

    def toggle(self, panel_id: str) -> OpResult:
        instance = self._panels.get(panel_id)
        if instance is None:
            return OpResult.NOT_FOUND
        return self._set_visible(panel_id, not instance.visible)

    def _set_visible(self, panel_id: str, visible: bool) -> OpResult:
        instance = self._panels.get(panel_id)
        if instance is None:
            logger.debug("Visibility change on unknown panel %s ignored", panel_id)
            return OpResult.NOT_FOUND
        if instance.visible != visible:
            instance.visible = visible
            self._notify("visibility_changed", instance)
        return OpResult.OK

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def set_geometry(
        self,
        panel_id: str,
        x: int | None = None,
        y: int | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> OpResult:
        """Overwrite any subset of a panel's geometry."""
        instance = self._panels.get(panel_id)
        if instance is None:
            return OpResult.NOT_FOUND
        g = instance.geometry
        new = PanelGeometry(
            g.x if x is None else max(0, int(x)),
            g.y if y is None else max(0, int(y)),
            g.width if width is None else max(0, int(width)),
            g.height if height is None else max(0, int(height)),
        )
        if new != g:
            instance.geometry = new
            self._notify("geometry_changed", instance)
        return OpResult.OK

    def move(self, panel_id: str, x: int, y: int) -> OpResult:
        return self.set_geometry(panel_id, x=x, y=y)

    def resize(self, panel_id: str, width: int, height: int) -> OpResult:
        return self.set_geometry(panel_id, width=width, height=height)

    def clamp_all(self, container_width: int, container_height: int) -> None:
        """Pull every panel back inside a container of the given size."""
        self.set_container_size(container_width, container_height)
        for instance in list(self._panels.values()):
            fitted = clamp_geometry(instance.geometry, container_width, container_height)
            self.set_geometry(instance.id, *fitted.as_tuple())

    # ------------------------------------------------------------------
    # Stacking order
    # ------------------------------------------------------------------

    def highest_z_order(self) -> int:
        highest = 0
        for instance in self._panels.values():
            highest = max(highest, instance.z_order)
        return highest

    def raise_panel(self, panel_id: str) -> OpResult:
        """Put the panel above every other tracked panel."""
        instance = self._panels.get(panel_id)
        if instance is None:
            return OpResult.NOT_FOUND
        instance.z_order = self.highest_z_order() + 1
        self._notify("geometry_changed", instance)
        return OpResult.OK

    # ------------------------------------------------------------------
    # Snapshot / restore
    # ------------------------------------------------------------------

    def snapshot(self) -> list[PanelSnapshot]:
        """Read the live geometry of every panel, in creation order.

        The returned records are fresh immutable copies, so a caller can
        persist them while the store keeps changing.
        """
        return [instance.to_snapshot() for instance in self._panels.values()]

    def restore(self, state: Iterable[PanelSnapshot | dict], container: Any = None) -> int:
        """Overwrite geometry of tracked panels from *state*.

        Entries whose id is not tracked (or not mounted in *container*, when
        given) are dropped.  When the container size is known the restored
        geometry is clamped to it.  Returns the number of panels updated.
        """
        restored = 0
        for entry in state:
            snap = entry if isinstance(entry, PanelSnapshot) else PanelSnapshot.model_validate(entry)
            instance = self._panels.get(snap.id)
            if instance is None:
                continue
            if container is not None and instance.container is not container:
                continue
            geometry = PanelGeometry(snap.x, snap.y, snap.width, snap.height)
            if self._container_size is not None:
                geometry = clamp_geometry(geometry, *self._container_size)
            self.set_geometry(snap.id, *geometry.as_tuple())
            restored += 1
        return restored
