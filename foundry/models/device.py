"""Device-related data models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


# perf[game_id][wattage] = fps
PerfTable = Mapping[str, Mapping[int, float]]


class MetricKind(Enum):
    """Which performance table an FPS lookup reads from."""
    AVERAGE = "avg"
    ONE_PERCENT_LOW = "p1"


@dataclass(frozen=True)
class ScreenSpec:
    """Display panel of a handheld."""
    size: float  # inches
    resolution: str  # "1920×1080"
    refresh: int  # Hz
    panel_type: str  # "IPS", "OLED"


@dataclass(frozen=True)
class DeviceSpecs:
    """Headline specifications shown on device cards and the compare table."""
    id: str
    name: str
    soc: str
    cpu_cores: int
    igpu: str
    gpu_cores: int
    battery_wh: float | None
    screen: ScreenSpec
    memory: str
    storage: str
    weight: int | None = None  # grams
    price: float | None = None  # USD
    memory_options: tuple[int, ...] | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Processor:
    """SoC descriptor."""
    name: str
    arch: str
    cores: int
    threads: int
    tdp: str  # free text, e.g. "9–30W"
    igpu_model: str
    process: str  # "4nm"


@dataclass(frozen=True)
class IGPU:
    """Integrated GPU descriptor."""
    name: str
    arch: str
    cores: int
    max_freq: int  # MHz
    mem_type: str
    notes: str | None = None


@dataclass(frozen=True)
class GameOption:
    """A benchmarked game preset and its display label."""
    id: str  # "cyberpunk1080pLow"
    label: str  # "Cyberpunk 2077 — 1080p Low (FSR2)"


@dataclass(frozen=True)
class Review:
    """A published review of a device."""
    source: str
    summary: str
    url: str | None = None
    date: str | None = None  # ISO date, "2025-07-21"
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()
    rating: float | None = None  # 0-10 scale
    title: str | None = None

    @property
    def heading(self) -> str:
        """Title when present, otherwise the source name."""
        return self.title or self.source


def freeze_perf_table(table: Mapping[str, Mapping[int, float]]) -> PerfTable:
    """Return a read-only copy of a two-level performance table."""
    return MappingProxyType({
        game_id: MappingProxyType(dict(by_watt))
        for game_id, by_watt in table.items()
    })


@dataclass(frozen=True)
class DeviceBundle:
    """Self-contained catalog record for one handheld.

    ``games`` only lists games this device has measured data for, but a listed
    game may still miss some wattages: performance tables are sparse.
    The wattage axis is normalized to a sorted, deduplicated tuple on
    construction.
    """
    id: str
    specs: DeviceSpecs
    cpu: Processor
    igpu: IGPU
    games: tuple[GameOption, ...] = ()
    wattages: tuple[int, ...] = ()
    perf_avg: PerfTable = field(default_factory=lambda: MappingProxyType({}))
    perf_p1: PerfTable = field(default_factory=lambda: MappingProxyType({}))
    reviews: tuple[Review, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "games", tuple(self.games))
        object.__setattr__(self, "wattages", tuple(sorted(set(self.wattages))))
        object.__setattr__(self, "perf_avg", freeze_perf_table(self.perf_avg))
        object.__setattr__(self, "perf_p1", freeze_perf_table(self.perf_p1))
        object.__setattr__(self, "reviews", tuple(self.reviews))

    @property
    def name(self) -> str:
        """Display name of the device."""
        return self.specs.name

    def perf_table(self, kind: MetricKind) -> PerfTable:
        """Return the performance table for the given metric kind."""
        if kind is MetricKind.ONE_PERCENT_LOW:
            return self.perf_p1
        return self.perf_avg
