"""Tests for the simple and advanced fusion algorithms."""

import math

import pytest

from gnss_fusion.constellation import Constellation
from gnss_fusion.fusion import fuse_advanced, fuse_simple
from gnss_fusion.state import GlobalState, SatelliteInfo


def _fix(
    state,
    constellation,
    latitude=48.0,
    longitude=11.0,
    altitude=None,
    pdop=None,
    hdop=1.0,
    vdop=None,
    satellites=4,
):
    """Give *constellation* a fix with *satellites* in view and in use."""
    system = state[constellation]
    for prn in range(1, satellites + 1):
        system.satellites_info[prn] = SatelliteInfo(prn=prn)
        system.satellites_used.append(prn)
    system.latitude = latitude
    system.longitude = longitude
    system.altitude = altitude
    system.pdop = pdop
    system.hdop = hdop
    system.vdop = vdop
    return system


# ---------------------------------------------------------------------------
# Simple fusion
# ---------------------------------------------------------------------------


class TestFuseSimpleEligibility:
    def test_no_fix_without_constellations(self):
        state = GlobalState()
        assert fuse_simple(state) is None
        assert state.fused_position is None

    def test_requires_hdop(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, hdop=None)
        assert fuse_simple(state) is None

    def test_requires_position(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=None)
        assert fuse_simple(state) is None

    def test_requires_four_used_satellites(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, satellites=3)
        assert fuse_simple(state) is None

    def test_previous_result_replaced_by_no_fix(self):
        state = GlobalState()
        _fix(state, Constellation.GPS)
        assert fuse_simple(state) is not None
        state[Constellation.GPS].hdop = None
        assert fuse_simple(state) is None
        assert state.fused_position is None


class TestFuseSimpleSingle:
    def test_pass_through(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.5, longitude=11.5, altitude=500.0,
             hdop=1.5, vdop=2.0)
        fused = fuse_simple(state)
        assert fused.latitude == 48.5
        assert fused.longitude == 11.5
        assert fused.altitude == 500.0
        # max(1.5 * 2.0, 2.0) and max(2.0 * 2.0 * 1.5, 3.0)
        assert fused.horizontal_accuracy == pytest.approx(3.0)
        assert fused.vertical_accuracy == pytest.approx(6.0)
        assert fused.contributing_constellations == ["GPS"]
        assert state.fused_position is fused

    def test_nominal_accuracy_floor(self):
        state = GlobalState()
        _fix(state, Constellation.GLONASS, hdop=0.5)
        fused = fuse_simple(state)
        assert fused.horizontal_accuracy == pytest.approx(4.0)

    def test_vdop_defaults_from_hdop(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, hdop=2.0, vdop=None)
        fused = fuse_simple(state)
        # VDOP = 2.0 * 1.5 = 3.0 -> 3.0 * 2.0 * 1.5
        assert fused.vertical_accuracy == pytest.approx(9.0)

    def test_altitude_defaults_to_zero(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, altitude=None)
        assert fuse_simple(state).altitude == 0.0

    def test_one_metre_minimum(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, hdop=0.0)
        state[Constellation.GPS].accuracy = 0.2
        fused = fuse_simple(state)
        assert fused.horizontal_accuracy == pytest.approx(1.0)
        assert fused.vertical_accuracy == pytest.approx(1.0)


class TestFuseSimpleMultiple:
    def test_weighted_toward_better_constellation(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.0, longitude=11.0, hdop=0.9)
        _fix(state, Constellation.GLONASS, latitude=48.01, longitude=11.01, hdop=1.1)
        fused = fuse_simple(state)
        assert 48.0 < fused.latitude < 48.01
        assert 11.0 < fused.longitude < 11.01
        assert fused.latitude < 48.005
        assert fused.contributing_constellations == ["GPS", "GLONASS"]

    def test_weights(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=0.0, longitude=0.0, altitude=100.0, hdop=0.9, vdop=2.1)
        _fix(state, Constellation.GLONASS, latitude=1.0, longitude=2.0, altitude=200.0, hdop=1.1, vdop=1.4)
        fused = fuse_simple(state)
        # horizontal 2.0 and 4.4, vertical 6.3 and 8.4
        w1, w2 = 1 / 2.1, 1 / 4.5
        v1, v2 = 1 / 6.4, 1 / 8.5
        assert fused.latitude == pytest.approx(w2 / (w1 + w2))
        assert fused.longitude == pytest.approx(2 * w2 / (w1 + w2))
        assert fused.altitude == pytest.approx((100 * v1 + 200 * v2) / (v1 + v2))
        assert fused.horizontal_accuracy == pytest.approx((2.0 * w1 + 4.4 * w2) / (w1 + w2))
        assert fused.vertical_accuracy == pytest.approx((6.3 * v1 + 8.4 * v2) / (v1 + v2))

    def test_horizontal_floor_at_global_accuracy(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, hdop=1.0)
        _fix(state, Constellation.GALILEO, hdop=1.0)
        state[Constellation.GPS].accuracy = 0.5
        state[Constellation.GALILEO].accuracy = 0.5
        state.global_accuracy = 10.0
        state[Constellation.GPS].satellites_info.clear()
        state[Constellation.GALILEO].satellites_info.clear()
        fused = fuse_simple(state)
        assert fused.horizontal_accuracy == pytest.approx(10.0)
        assert fused.vertical_accuracy == pytest.approx(15.0)

    def test_contributing_order_is_canonical(self):
        state = GlobalState()
        _fix(state, Constellation.BEIDOU)
        _fix(state, Constellation.GPS)
        _fix(state, Constellation.GALILEO)
        assert fuse_simple(state).contributing_constellations == ["GPS", "GALILEO", "BEIDOU"]

    def test_does_not_mutate_constellations(self):
        state = GlobalState()
        _fix(state, Constellation.GPS)
        _fix(state, Constellation.GLONASS, latitude=48.1)
        before = {c: (s.latitude, s.hdop, s.vdop, s.altitude) for c, s in state.constellations.items()}
        fuse_simple(state)
        after = {c: (s.latitude, s.hdop, s.vdop, s.altitude) for c, s in state.constellations.items()}
        assert before == after

    def test_idempotent(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.0, altitude=10.0, hdop=0.9)
        _fix(state, Constellation.GLONASS, latitude=48.2, altitude=20.0, hdop=1.7)
        first = fuse_simple(state).to_dict()
        second = fuse_simple(state).to_dict()
        assert first == second


# ---------------------------------------------------------------------------
# Advanced fusion
# ---------------------------------------------------------------------------


class TestFuseAdvanced:
    def test_requires_pdop(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, pdop=None)
        assert fuse_advanced(state) is None
        assert fuse_simple(state) is not None

    def test_single_member(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.5, altitude=12.0, pdop=3.0, hdop=4.0, vdop=None)
        fused = fuse_advanced(state)
        assert fused.latitude == 48.5
        assert fused.altitude == 12.0
        # sqrt(4² + 3²) = 5; VDOP defaults to 3.0 * 0.8 = 2.4 -> sqrt(2.4² + 3²)
        assert fused.horizontal_accuracy == pytest.approx(5.0)
        assert fused.vertical_accuracy == pytest.approx(math.sqrt(2.4 ** 2 + 9.0))
        assert fused.contributing_constellations == ["GPS"]

    def test_single_member_floors(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, pdop=0.1, hdop=0.1, vdop=0.1)
        fused = fuse_advanced(state)
        # nominal accuracy 2.0; global accuracy with only GPS active is 2.0
        assert fused.horizontal_accuracy == pytest.approx(2.0)
        assert fused.vertical_accuracy == pytest.approx(3.0)

    def test_spread_accuracy(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=0.0, longitude=0.0, altitude=100.0,
             pdop=1.0, hdop=1.0, vdop=1.0)
        _fix(state, Constellation.GALILEO, latitude=0.001, longitude=0.0, altitude=110.0,
             pdop=1.0, hdop=1.0, vdop=1.0)
        state[Constellation.GALILEO].accuracy = 2.0
        fused = fuse_advanced(state)
        assert fused.latitude == pytest.approx(0.0005)
        assert fused.longitude == pytest.approx(0.0)
        assert fused.altitude == pytest.approx(105.0)
        assert fused.horizontal_accuracy == pytest.approx(0.0005 * 111000.0)
        assert fused.vertical_accuracy == pytest.approx(5.0)
        assert fused.contributing_constellations == ["GPS", "GALILEO"]

    def test_identical_fixes_fall_back_to_floors(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, altitude=50.0, pdop=1.2, hdop=0.9, vdop=2.1)
        _fix(state, Constellation.GLONASS, altitude=50.0, pdop=1.8, hdop=1.1, vdop=1.4)
        fused = fuse_advanced(state)
        floor = 1.0 / math.sqrt(1 / 4.0 + 1 / 16.0)
        assert fused.horizontal_accuracy == pytest.approx(floor)
        assert fused.vertical_accuracy == pytest.approx(1.5 * floor)

    @pytest.mark.parametrize("altitude", [545.4, 12.3, 100.7, 0.1])
    def test_equal_altitudes_use_horizontal_spread(self, altitude):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.0, altitude=altitude, pdop=1.2, hdop=0.9)
        _fix(state, Constellation.GLONASS, latitude=48.01, altitude=altitude, pdop=1.8, hdop=1.1)
        _fix(state, Constellation.GALILEO, latitude=48.02, altitude=altitude, pdop=1.5, hdop=1.0)
        fused = fuse_advanced(state)
        assert fused.altitude == altitude
        assert fused.horizontal_accuracy > 100.0
        assert fused.vertical_accuracy == pytest.approx(1.5 * fused.horizontal_accuracy)

    def test_one_metre_minimum(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, pdop=0.1, hdop=0.1)
        _fix(state, Constellation.GLONASS, pdop=0.1, hdop=0.1)
        state[Constellation.GPS].accuracy = 0.3
        state[Constellation.GLONASS].accuracy = 0.3
        fused = fuse_advanced(state)
        assert fused.horizontal_accuracy == pytest.approx(1.0)

    def test_idempotent(self):
        state = GlobalState()
        _fix(state, Constellation.GPS, latitude=48.0, altitude=10.0, pdop=1.2, hdop=0.9)
        _fix(state, Constellation.BEIDOU, latitude=48.001, altitude=14.0, pdop=1.5, hdop=0.8)
        first = fuse_advanced(state).to_dict()
        second = fuse_advanced(state).to_dict()
        assert first == second
