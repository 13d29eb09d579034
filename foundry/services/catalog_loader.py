"""Catalog loading and validation.

The engines assume a well-formed catalog. This module is where that is
enforced: it parses the JSON document (bundled, on disk, or served over
HTTP), checks required fields and unique ids, and builds the immutable
Catalog.

Document format::

    {"version": 1, "devices": [{"id": "...", "specs": {...}, "cpu": {...},
      "igpu": {...}, "games": [...], "wattages": [...],
      "perfAvg": {"game": {"15": 56}}, "perfP1": {...}, "reviews": [...]}]}
"""

import json
import math
from importlib import resources
from pathlib import Path
from typing import Any

import structlog

from ..models.catalog import Catalog
from ..models.device import (
    IGPU,
    DeviceBundle,
    DeviceSpecs,
    GameOption,
    Processor,
    Review,
    ScreenSpec,
)
from .errors import CatalogError, FileSystemError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

SUPPORTED_VERSIONS = (1,)
BUNDLED_SOURCE = "bundled"


class _Reader:
    """Typed field access on one JSON object, raising CatalogError."""

    def __init__(self, data: Any, source: str, device_id: str | None, path: str) -> None:
        if not isinstance(data, dict):
            raise CatalogError(
                f"Expected an object at '{path}'",
                source=source, device_id=device_id, field=path,
            )
        self.data = data
        self.source = source
        self.device_id = device_id
        self.path = path

    def _fail(self, key: str, problem: str) -> CatalogError:
        field = f"{self.path}.{key}" if self.path else key
        return CatalogError(
            f"Field '{field}' {problem}",
            source=self.source, device_id=self.device_id, field=field,
        )

    def child(self, key: str) -> "_Reader":
        if key not in self.data:
            raise self._fail(key, "is required")
        path = f"{self.path}.{key}" if self.path else key
        return _Reader(self.data[key], self.source, self.device_id, path)

    def string(self, key: str, required: bool = True) -> str | None:
        value = self.data.get(key)
        if value is None:
            if required:
                raise self._fail(key, "is required")
            return None
        if not isinstance(value, str):
            raise self._fail(key, "must be a string")
        return value

    def number(self, key: str, required: bool = True) -> float | None:
        value = self.data.get(key)
        if value is None:
            if required:
                raise self._fail(key, "is required")
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._fail(key, "must be a number")
        if isinstance(value, float) and not math.isfinite(value):
            raise self._fail(key, "must be a finite number")
        return value

    def integer(self, key: str, required: bool = True) -> int | None:
        value = self.number(key, required)
        if value is None:
            return None
        if value != int(value):
            raise self._fail(key, "must be a whole number")
        return int(value)

    def string_list(self, key: str) -> tuple[str, ...]:
        value = self.data.get(key) or []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise self._fail(key, "must be a list of strings")
        return tuple(value)

    def object_list(self, key: str) -> list["_Reader"]:
        value = self.data.get(key) or []
        if not isinstance(value, list):
            raise self._fail(key, "must be a list")
        path = f"{self.path}.{key}" if self.path else key
        return [
            _Reader(item, self.source, self.device_id, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]


def _parse_specs(r: _Reader, device_id: str) -> DeviceSpecs:
    screen = r.child("screen")
    memory_options_raw = r.data.get("memoryOptions")
    memory_options = None
    if memory_options_raw is not None:
        if not isinstance(memory_options_raw, list) or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in memory_options_raw
        ):
            raise r._fail("memoryOptions", "must be a list of integers")
        memory_options = tuple(memory_options_raw)

    return DeviceSpecs(
        id=r.string("id", required=False) or device_id,
        name=r.string("name"),
        soc=r.string("soc"),
        cpu_cores=r.integer("cpuCores"),
        igpu=r.string("igpu"),
        gpu_cores=r.integer("gpuCores"),
        battery_wh=r.number("batteryWh", required=False),
        screen=ScreenSpec(
            size=screen.number("size"),
            resolution=screen.string("res"),
            refresh=screen.integer("refresh"),
            panel_type=screen.string("type"),
        ),
        memory=r.string("memory"),
        storage=r.string("storage"),
        weight=r.integer("weight", required=False),
        price=r.number("price", required=False),
        memory_options=memory_options,
        notes=r.string("notes", required=False),
    )


def _parse_processor(r: _Reader) -> Processor:
    return Processor(
        name=r.string("name"),
        arch=r.string("arch"),
        cores=r.integer("cores"),
        threads=r.integer("threads"),
        tdp=r.string("tdp"),
        igpu_model=r.string("igpuModel"),
        process=r.string("process"),
    )


def _parse_igpu(r: _Reader) -> IGPU:
    return IGPU(
        name=r.string("name"),
        arch=r.string("arch"),
        cores=r.integer("cores"),
        max_freq=r.integer("maxFreq"),
        mem_type=r.string("memType"),
        notes=r.string("notes", required=False),
    )


def _parse_wattage_key(key: str, r: _Reader, field: str) -> int:
    """Wattage from a perf-table key; JSON object keys are always strings."""
    try:
        watt = int(key)
    except ValueError:
        raise r._fail(field, f"has a non-integer wattage key '{key}'") from None
    if watt <= 0:
        raise r._fail(field, f"has a non-positive wattage '{key}'")
    return watt


def _parse_wattage_item(value: Any, r: _Reader) -> int:
    """Wattage from the axis list: a whole JSON number, never a bool."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise r._fail("wattages", f"has a non-integer wattage '{value}'")
    if value <= 0:
        raise r._fail("wattages", f"has a non-positive wattage '{value}'")
    return value


def _parse_perf_table(r: _Reader, key: str) -> dict[str, dict[int, float]]:
    raw = r.data.get(key) or {}
    if not isinstance(raw, dict):
        raise r._fail(key, "must be an object of game id to wattage table")

    table: dict[str, dict[int, float]] = {}
    for game_id, by_watt in raw.items():
        field = f"{key}.{game_id}"
        if not isinstance(by_watt, dict):
            raise r._fail(field, "must be an object of wattage to FPS")
        row: dict[int, float] = {}
        for watt_key, fps in by_watt.items():
            watt = _parse_wattage_key(watt_key, r, field)
            valid = isinstance(fps, int | float) and not isinstance(fps, bool)
            if not valid or (isinstance(fps, float) and not math.isfinite(fps)) or fps < 0:
                raise r._fail(f"{field}.{watt_key}", "must be a finite non-negative number")
            row[watt] = fps
        table[game_id] = row
    return table


def _parse_review(r: _Reader) -> Review:
    rating = r.number("rating", required=False)
    return Review(
        source=r.string("source"),
        summary=r.string("summary"),
        url=r.string("url", required=False),
        date=r.string("date", required=False),
        pros=r.string_list("pros"),
        cons=r.string_list("cons"),
        rating=float(rating) if rating is not None else None,
        title=r.string("title", required=False),
    )


def parse_device(data: Any, source: str = BUNDLED_SOURCE) -> DeviceBundle:
    """Parse one device bundle from its JSON object.

    Raises:
        CatalogError: If a required field is missing or mistyped
    """
    r = _Reader(data, source, None, "")
    device_id = r.string("id")
    r.device_id = device_id

    wattages_raw = r.data.get("wattages") or []
    if not isinstance(wattages_raw, list):
        raise r._fail("wattages", "must be a list")

    return DeviceBundle(
        id=device_id,
        specs=_parse_specs(r.child("specs"), device_id),
        cpu=_parse_processor(r.child("cpu")),
        igpu=_parse_igpu(r.child("igpu")),
        games=tuple(
            GameOption(id=g.string("id"), label=g.string("label"))
            for g in r.object_list("games")
        ),
        wattages=tuple(_parse_wattage_item(w, r) for w in wattages_raw),
        perf_avg=_parse_perf_table(r, "perfAvg"),
        perf_p1=_parse_perf_table(r, "perfP1"),
        reviews=tuple(_parse_review(rv) for rv in r.object_list("reviews")),
    )


def parse_catalog(document: Any, source: str = BUNDLED_SOURCE) -> Catalog:
    """Validate a catalog document and build the Catalog.

    Args:
        document: Decoded JSON document
        source: Where the document came from, for error messages

    Returns:
        The immutable catalog, devices in document order

    Raises:
        CatalogError: On an unsupported version, malformed device or
            duplicate device id
    """
    if not isinstance(document, dict):
        raise CatalogError("Catalog document must be a JSON object", source=source)

    version = document.get("version", 1)
    if version not in SUPPORTED_VERSIONS:
        raise CatalogError(f"Unsupported catalog version: {version}", source=source, field="version")

    devices_raw = document.get("devices")
    if not isinstance(devices_raw, list):
        raise CatalogError("Catalog must contain a 'devices' list", source=source, field="devices")

    bundles: list[DeviceBundle] = []
    seen: set[str] = set()
    for item in devices_raw:
        bundle = parse_device(item, source)
        if bundle.id in seen:
            raise CatalogError(f"Duplicate device id '{bundle.id}'", source=source, device_id=bundle.id)
        seen.add(bundle.id)
        bundles.append(bundle)

    catalog = Catalog.from_bundles(bundles)
    log.info("Catalog loaded", source=source, devices=len(catalog))
    return catalog


def _decode(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError("Catalog is not valid JSON", source=source, original_error=e) from e


def load_bundled_catalog() -> Catalog:
    """Load the dataset shipped with the package."""
    text = resources.files("foundry.data").joinpath("catalog.json").read_text(encoding="utf-8")
    return parse_catalog(_decode(text, BUNDLED_SOURCE), BUNDLED_SOURCE)


def load_catalog_file(path: Path) -> Catalog:
    """Load a catalog from a JSON file.

    Raises:
        FileSystemError: If the file cannot be read
        CatalogError: If the content is not a valid catalog
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        log.error("Failed to read catalog file", path=str(path), error=str(e))
        raise FileSystemError("Could not read the catalog file.", original_error=e, path=str(path)) from e
    return parse_catalog(_decode(text, str(path)), str(path))


async def fetch_catalog(url: str, http_client: HttpClientService) -> Catalog:
    """Fetch and parse a catalog served over HTTP.

    Raises:
        httpx.HTTPError: On network failures (converted by the error service)
        CatalogError: If the response is not a valid catalog
    """
    response = await http_client.get(url)
    return parse_catalog(_decode(response.text, url), url)
