"""Unit tests for signal classification and the low-signal rule."""

import pytest

from signalwatch.models import SignalQuality
from signalwatch.services.signal_classifier import (
    SignalClassifier,
    SignalThresholds,
    parse_signal_value,
)


@pytest.fixture
def classifier() -> SignalClassifier:
    return SignalClassifier()


# =============================================================================
# classify
# =============================================================================


class TestClassify:
    @pytest.mark.parametrize(
        ("dbm", "expected"),
        [
            (-65, SignalQuality.EXCELLENT),
            (-80, SignalQuality.GOOD),
            (-95, SignalQuality.WEAK),
            (-120, SignalQuality.NO_SIGNAL),
        ],
    )
    def test_bands(self, classifier, dbm, expected):
        assert classifier.classify(dbm) == expected

    @pytest.mark.parametrize(
        ("dbm", "expected"),
        [
            (-70, SignalQuality.EXCELLENT),
            (-71, SignalQuality.GOOD),
            (-85, SignalQuality.GOOD),
            (-86, SignalQuality.WEAK),
            (-100, SignalQuality.WEAK),
            (-101, SignalQuality.NO_SIGNAL),
        ],
    )
    def test_lower_bounds_are_inclusive(self, classifier, dbm, expected):
        assert classifier.classify(dbm) == expected

    def test_fractional_mean_below_band_floor(self, classifier):
        assert classifier.classify(-100.5) == SignalQuality.NO_SIGNAL

    def test_quality_labels(self):
        assert str(SignalQuality.NO_SIGNAL) == "No Signal"
        assert SignalQuality.EXCELLENT.value == "Excellent"

    def test_custom_thresholds(self):
        classifier = SignalClassifier(
            SignalThresholds(excellent_min_dbm=-60, good_min_dbm=-75, weak_min_dbm=-90)
        )
        assert classifier.classify(-65) == SignalQuality.GOOD
        assert classifier.classify(-95) == SignalQuality.NO_SIGNAL


# =============================================================================
# is_low_signal
# =============================================================================


class TestIsLowSignal:
    def test_dbm_at_ceiling_is_low(self, classifier):
        assert classifier.is_low_signal(dbm=-100) is True

    def test_dbm_above_ceiling_is_not_low(self, classifier):
        assert classifier.is_low_signal(dbm=-99) is False

    def test_dbm_above_ceiling_with_low_level_is_low(self, classifier):
        assert classifier.is_low_signal(dbm=-99, level=1) is True

    def test_low_level_alone_is_low(self, classifier):
        assert classifier.is_low_signal(level=1) is True
        assert classifier.is_low_signal(level=0) is True

    def test_level_wins_regardless_of_dbm(self, classifier):
        assert classifier.is_low_signal(dbm=-60, level=1) is True

    def test_good_level_is_not_low(self, classifier):
        assert classifier.is_low_signal(level=2) is False

    def test_absent_values_are_not_low(self, classifier):
        assert classifier.is_low_signal(dbm=None, level=None) is False
        assert classifier.is_low_signal() is False

    @pytest.mark.parametrize("value", ["abc", "", "  ", True, float("nan"), [1]])
    def test_non_numeric_values_are_ignored(self, classifier, value):
        assert classifier.is_low_signal(dbm=value, level=value) is False

    def test_numeric_strings_are_parsed(self, classifier):
        assert classifier.is_low_signal(dbm="-110") is True
        assert classifier.is_low_signal(level="1") is True
        assert classifier.is_low_signal(dbm="-80", level="3") is False

    def test_custom_ceilings(self):
        classifier = SignalClassifier(
            SignalThresholds(low_signal_max_dbm=-90, low_signal_max_level=0)
        )
        assert classifier.is_low_signal(dbm=-95) is True
        assert classifier.is_low_signal(level=1) is False


class TestParseSignalValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (-105, -105),
            ("-105", -105),
            (" -99 ", -99),
            (-99.7, -99),
            ("-99.7", -99),
            (None, None),
            ("n/a", None),
            (False, None),
            (float("inf"), None),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_signal_value(raw) == expected


def test_thresholds_from_settings(settings):
    thresholds = SignalThresholds.from_settings(settings)
    assert thresholds == SignalThresholds()
