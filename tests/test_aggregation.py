"""Tests for the aggregation engine."""

import pytest
from hypothesis import given, settings, strategies as st

from foundry.models import MetricKind
from foundry.services.aggregation import (
    all_games,
    all_wattages,
    averaged_fps,
    default_wattage,
    devices_by_igpu,
    devices_by_processor,
    fps_lookup,
    game_options,
    perf_avg,
    perf_p1,
    soc_options,
    unique_igpus,
    unique_processors,
    unique_sorted,
    wattage_options,
)
from tests.factories import catalogs, make_device, socs


@pytest.fixture
def cyberpunk_pair():
    a = make_device(
        "a", soc="Ryzen Z1 Extreme",
        games=[("cyberpunk", "Cyberpunk 2077")],
        perf_avg={"cyberpunk": {30: 79, 15: 48}},
        perf_p1={"cyberpunk": {30: 66}},
    )
    b = make_device("b", soc="Ryzen Z1 Extreme", wattages=(10, 20, 30))
    return a, b


class TestUniqueSorted:

    @given(st.lists(st.integers()))
    def test_sorted_and_unique(self, values: list[int]) -> None:
        result = unique_sorted(values)
        assert result == sorted(result)
        assert len(result) == len(set(result))
        assert set(result) == set(values)

    @given(st.lists(st.integers()))
    def test_idempotent(self, values: list[int]) -> None:
        assert unique_sorted(unique_sorted(values)) == unique_sorted(values)

    def test_empty(self) -> None:
        assert unique_sorted([]) == []


class TestWattages:

    def test_union_of_axes(self) -> None:
        a = make_device("a", wattages=(10, 15, 25, 30))
        b = make_device("b", wattages=(10, 20, 30))
        assert all_wattages([a, b]) == [10, 15, 20, 25, 30]

    def test_device_axis_is_normalized(self) -> None:
        device = make_device("deck", wattages=(15, 5, 10, 10))
        assert device.wattages == (5, 10, 15)

    @given(catalogs())
    @settings(deadline=2000)
    def test_union_contains_every_axis(self, devices) -> None:
        result = all_wattages(devices)
        assert result == sorted(set(result))
        for device in devices:
            assert set(device.wattages) <= set(result)

    def test_options_format(self) -> None:
        device = make_device("a", wattages=(15, 10))
        assert wattage_options([device]) == [("10", "10W"), ("15", "15W")]

    @pytest.mark.parametrize(
        ("wattages", "expected"),
        [([10, 15, 25], 15), ([12], 12), ([], 10)],
    )
    def test_default_wattage(self, wattages: list[int], expected: int) -> None:
        assert default_wattage(wattages) == expected


class TestGames:

    def test_first_seen_label_wins(self) -> None:
        a = make_device("a", games=[("cyberpunk", "Cyberpunk 2077 (1080p Low)")])
        b = make_device("b", games=[("cyberpunk", "Cyberpunk 2077 (XeSS)"), ("fortnite", "Fortnite")])
        games = all_games([a, b])
        assert [g.id for g in games] == ["cyberpunk", "fortnite"]
        assert games[0].label == "Cyberpunk 2077 (1080p Low)"

    @given(catalogs())
    @settings(deadline=2000)
    def test_ids_unique(self, devices) -> None:
        ids = [g.id for g in all_games(devices)]
        assert len(ids) == len(set(ids))
        assert set(ids) == {g.id for d in devices for g in d.games}

    def test_game_options_are_value_label_pairs(self) -> None:
        device = make_device("a", games=[("eldenring", "Elden Ring")])
        assert game_options([device]) == [("eldenring", "Elden Ring")]


class TestFpsLookup:

    def test_present_value(self, cyberpunk_pair) -> None:
        a, _ = cyberpunk_pair
        assert fps_lookup(a, "cyberpunk", 30) == 79
        assert fps_lookup(a, "cyberpunk", 30, MetricKind.ONE_PERCENT_LOW) == 66
        assert perf_avg(a, "cyberpunk", 15) == 48
        assert perf_p1(a, "cyberpunk", 30) == 66

    @pytest.mark.parametrize(
        ("game_id", "wattage"),
        [("cyberpunk", 25), ("unknown", 30), (None, 30), ("cyberpunk", None)],
    )
    def test_missing_is_zero(self, cyberpunk_pair, game_id, wattage) -> None:
        a, _ = cyberpunk_pair
        assert fps_lookup(a, game_id, wattage) == 0

    def test_missing_device_is_zero(self) -> None:
        assert fps_lookup(None, "cyberpunk", 30) == 0

    def test_p1_missing_where_avg_present(self, cyberpunk_pair) -> None:
        a, _ = cyberpunk_pair
        assert perf_p1(a, "cyberpunk", 15) == 0

    @given(catalogs(max_size=3), st.sampled_from(["cyberpunk", "eldenring", "fortnite", "other"]),
           st.integers(min_value=0, max_value=70))
    @settings(deadline=2000)
    def test_total_and_non_negative(self, devices, game_id, wattage) -> None:
        for device in devices:
            for kind in MetricKind:
                assert fps_lookup(device, game_id, wattage, kind) >= 0


class TestGrouping:

    def test_exact_match_only(self) -> None:
        a = make_device("a", soc="Ryzen Z1 Extreme")
        b = make_device("b", soc="Ryzen Z1")
        assert devices_by_processor([a, b], "Ryzen Z1") == [b]
        assert devices_by_processor([a, b], "Ryzen") == []

    @given(catalogs(), socs)
    @settings(deadline=2000)
    def test_processor_group_is_subsequence(self, devices, soc: str) -> None:
        group = devices_by_processor(devices, soc)
        assert all(d.specs.soc == soc for d in group)
        assert [d.id for d in group] == [d.id for d in devices if d.specs.soc == soc]

    def test_igpu_group(self) -> None:
        a = make_device("a", igpu="RDNA3 (12 CUs)")
        b = make_device("b", igpu="RDNA2 (8 CUs)")
        assert devices_by_igpu([a, b], "RDNA2 (8 CUs)") == [b]

    def test_unique_descriptors_first_seen(self) -> None:
        a = make_device("a", soc="Ryzen Z1 Extreme", cpu_cores=8)
        b = make_device("b", soc="Ryzen Z1 Extreme", cpu_cores=6)
        c = make_device("c", soc="Ryzen 7 8840U", igpu="RDNA3 (12 CUs)")
        processors = unique_processors([a, b, c])
        assert [p.name for p in processors] == ["Ryzen Z1 Extreme", "Ryzen 7 8840U"]
        assert processors[0].cores == 8
        assert [g.name for g in unique_igpus([a, b, c])] == ["RDNA3 (12 CUs)"]

    def test_soc_options_lead_with_all(self) -> None:
        devices = [make_device("a", soc="Zeta"), make_device("b", soc="Alpha"), make_device("c", soc="Zeta")]
        assert soc_options(devices) == [("all", "All SoCs"), ("Alpha", "Alpha"), ("Zeta", "Zeta")]


class TestAveragedFps:

    def test_devices_without_data_are_excluded(self, cyberpunk_pair) -> None:
        assert averaged_fps(list(cyberpunk_pair), "cyberpunk", 30, MetricKind.AVERAGE) == 79

    def test_mean_of_present_values(self) -> None:
        a = make_device("a", perf_avg={"cyberpunk": {15: 40}})
        b = make_device("b", perf_avg={"cyberpunk": {15: 60}})
        assert averaged_fps([a, b], "cyberpunk", 15) == 50

    def test_empty_group_is_zero(self) -> None:
        assert averaged_fps([], "cyberpunk", 30) == 0

    def test_all_missing_is_zero(self, cyberpunk_pair) -> None:
        assert averaged_fps(list(cyberpunk_pair), "fortnite", 30) == 0

    @given(catalogs(max_size=5), st.sampled_from(["cyberpunk", "eldenring", "fortnite"]),
           st.integers(min_value=1, max_value=60))
    @settings(deadline=2000)
    def test_bounded_by_group_values(self, devices, game_id: str, wattage: int) -> None:
        values = [d.perf_avg[game_id][wattage] for d in devices
                  if wattage in d.perf_avg.get(game_id, {})]
        result = averaged_fps(devices, game_id, wattage)
        if values:
            assert min(values) - 1e-9 <= result <= max(values) + 1e-9
        else:
            assert result == 0
