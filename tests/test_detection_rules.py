"""
Test Suite for the per-reading detection rules: nighttime generation, zero
generation at peak, capacity exceeded and weather mismatch.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.detection import capacity, nighttime, weather_mismatch, zero_generation
from engine.enums import FindingType, Severity
from engine.window import ReadingWindow
from fakes import at, reading, unit


# nighttime

@pytest.mark.parametrize("hour", [19, 20, 23, 0, 3, 5])
def test_nighttime_flags_each_night_reading_above_tolerance(hour):
    r = reading(at(0, hour), 11)
    out = nighttime.detect(unit(), ReadingWindow([r]))
    assert len(out) == 1
    f = out[0]
    assert f.type is FindingType.NIGHTTIME_GENERATION
    assert f.severity is Severity.CRITICAL
    assert f.metadata.expected_value == 0
    assert f.metadata.actual_value == 11
    assert f.metadata.deviation == 100
    assert f.reading_ids == (r.id,)
    assert f.affected_period.start == f.affected_period.end == r.timestamp


@pytest.mark.parametrize("hour, energy", [(18, 500), (6, 50), (22, 10), (22, 0)])
def test_nighttime_ignores_day_hours_and_small_values(hour, energy):
    assert nighttime.detect(unit(), ReadingWindow([reading(at(0, hour), energy)])) == []


def test_nighttime_reports_newest_first():
    rs = [reading(at(0, 20), 50), reading(at(1, 20), 60)]
    out = nighttime.detect(unit(), ReadingWindow(rs))
    assert [f.metadata.actual_value for f in out] == [60, 50]


# zero generation at peak

@pytest.mark.parametrize("hour", [10, 12, 14])
def test_zero_generation_peak(hour):
    out = zero_generation.detect(unit(), ReadingWindow([reading(at(0, hour), 0)]))
    assert len(out) == 1
    f = out[0]
    assert f.type is FindingType.ZERO_GENERATION_CLEAR_SKY
    assert f.severity is Severity.CRITICAL
    assert f.metadata.expected_value == 200
    assert f.metadata.actual_value == 0
    assert f.metadata.deviation == 100


@pytest.mark.parametrize("hour, energy", [(9, 0), (15, 0), (12, 0.5)])
def test_zero_generation_ignores_outside_peak_or_nonzero(hour, energy):
    assert zero_generation.detect(unit(), ReadingWindow([reading(at(0, hour), energy)])) == []


# capacity exceeded

def test_capacity_exceeded_deviation_rounds():
    # 5000 W x 2 h = 10000 Wh; 12345 Wh is 23.45% over
    out = capacity.detect(unit(capacity_w=5000), ReadingWindow([reading(at(0, 12), 12345)]))
    assert len(out) == 1
    f = out[0]
    assert f.type is FindingType.ENERGY_EXCEEDING_THRESHOLD
    assert f.severity is Severity.CRITICAL
    assert f.metadata.expected_value == 10000
    assert f.metadata.deviation == 23
    assert "5000W" in f.metadata.threshold and "2h" in f.metadata.threshold


def test_capacity_uses_reading_interval():
    u = unit(capacity_w=1000)
    within = reading(at(0, 12), 900, interval=1.0)
    over = reading(at(0, 14), 1100, interval=1.0)
    out = capacity.detect(u, ReadingWindow([within, over]))
    assert [f.reading_ids for f in out] == [(over.id,)]
    assert out[0].metadata.deviation == 10


def test_capacity_at_limit_is_not_flagged():
    assert capacity.detect(unit(capacity_w=1000), ReadingWindow([reading(at(0, 12), 2000)])) == []


def test_capacity_skips_units_without_capacity():
    assert capacity.detect(unit(capacity_w=0), ReadingWindow([reading(at(0, 12), 1e6)])) == []


# weather mismatch

def test_high_generation_in_rain():
    r = reading(at(0, 13), 750, condition="rain", cloud_cover=70, precipitation=2.0)
    out = weather_mismatch.detect(unit(), ReadingWindow([r]))
    assert len(out) == 1
    f = out[0]
    assert f.type is FindingType.HIGH_GENERATION_BAD_WEATHER
    assert f.severity is Severity.WARNING
    assert f.metadata.expected_value == 500
    assert f.metadata.deviation == 50
    assert f.metadata.weather_score is not None
    assert "rain" in f.metadata.threshold


def test_high_generation_overcast_requires_dense_cloud():
    dense = reading(at(0, 13), 600, condition="overcast", cloud_cover=85)
    light = reading(at(0, 15), 600, condition="overcast", cloud_cover=80)
    out = weather_mismatch.detect(unit(), ReadingWindow([dense, light]))
    assert [f.reading_ids for f in out] == [(dense.id,)]


def test_low_generation_clear_sky_at_peak():
    r = reading(at(0, 11), 50, condition="clear", cloud_cover=5, irradiance=850)
    out = weather_mismatch.detect(unit(), ReadingWindow([r]))
    assert len(out) == 1
    f = out[0]
    assert f.type is FindingType.LOW_GENERATION_CLEAR_WEATHER
    assert f.metadata.expected_value == 200
    assert f.metadata.deviation == 75
    assert f.metadata.weather_score == 100


def test_low_generation_outside_peak_is_ignored():
    r = reading(at(0, 16), 50, condition="clear", cloud_cover=5)
    assert weather_mismatch.detect(unit(), ReadingWindow([r])) == []


def test_condition_derived_when_missing():
    r = reading(at(0, 12), 900, precipitation=1.5, cloud_cover=60)
    out = weather_mismatch.detect(unit(), ReadingWindow([r]))
    assert [f.type for f in out] == [FindingType.HIGH_GENERATION_BAD_WEATHER]


def test_weather_mismatch_ignores_readings_without_weather_or_at_night():
    rs = [reading(at(0, 12), 900), reading(at(0, 20), 900, condition="rain")]
    assert weather_mismatch.detect(unit(), ReadingWindow(rs)) == []


def test_single_bad_weather_reading_yields_exactly_one_finding():
    r = reading(at(0, 12), 700, condition="rain", cloud_cover=90, precipitation=3)
    w = ReadingWindow([r])
    out = weather_mismatch.detect(unit(), w)
    assert len(out) == 1
    assert nighttime.detect(unit(), w) == []
    assert zero_generation.detect(unit(), w) == []
    assert capacity.detect(unit(), w) == []


def test_capacity_scenario_one_kilowatt_unit():
    out = capacity.detect(unit(capacity_w=1000), ReadingWindow([reading(at(0, 12), 2500)]))
    assert len(out) == 1
    assert out[0].metadata.expected_value == 2000
    assert out[0].metadata.deviation == 25
