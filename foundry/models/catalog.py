"""Catalog data model: the immutable set of devices the dashboard works on."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .device import DeviceBundle, Review


@dataclass(frozen=True)
class Catalog:
    """Ordered device collection plus a lookup by device id.

    Both views share the same bundles. Build it with ``from_bundles``; the
    catalog is never mutated afterwards.
    """
    devices: tuple[DeviceBundle, ...]
    registry: Mapping[str, DeviceBundle]

    @classmethod
    def from_bundles(cls, bundles: Iterable[DeviceBundle]) -> "Catalog":
        """Build a catalog preserving the given order.

        Args:
            bundles: Device bundles with unique ids

        Returns:
            A new Catalog
        """
        devices = tuple(bundles)
        registry = MappingProxyType({device.id: device for device in devices})
        return cls(devices=devices, registry=registry)

    @classmethod
    def empty(cls) -> "Catalog":
        """Return a catalog with no devices."""
        return cls.from_bundles(())

    def get(self, device_id: str) -> DeviceBundle | None:
        """Look up a device by id."""
        return self.registry.get(device_id)

    def __len__(self) -> int:
        return len(self.devices)

    def __iter__(self) -> Iterator[DeviceBundle]:
        return iter(self.devices)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self.registry


@dataclass(frozen=True)
class ReviewEntry:
    """A review joined with the device it belongs to."""
    device_id: str
    device_name: str
    review: Review
