"""Unit tests for resolution classification."""

import pytest

from seedarr.naming.resolution import (
    HEIGHT_BANDS,
    WIDTH_BANDS,
    Resolution,
    classify_resolution,
    resolution_from_quality,
)


class TestClassifyResolution:
    """Test width/height to bucket mapping."""

    @pytest.mark.parametrize(
        "width,expected",
        [
            (3840, Resolution.UHD),
            (3820, Resolution.UHD),
            (4096, Resolution.UHD),
            (2560, Resolution.QHD),
            (1920, Resolution.FHD),
            (1915, Resolution.FHD),
            (1824, Resolution.FHD),
            (1823, Resolution.HD),
            (1280, Resolution.HD),
            (1260, Resolution.HD),
        ],
    )
    def test_width_bands(self, width, expected):
        """Widths slightly under nominal stay in their bucket."""
        assert classify_resolution(width) == expected

    def test_cropped_1080p_matches_full_frame(self):
        """1915 and 1920 share a bucket; 1280 is strictly lower."""
        assert classify_resolution(1915) == classify_resolution(1920)
        assert classify_resolution(1280) != classify_resolution(1920)
        assert classify_resolution(1280) == Resolution.HD

    def test_letterboxed_height_is_ignored_when_width_known(self):
        """A 2.40:1 1080p encode (1920x800) is still 1080p."""
        assert classify_resolution(1920, 800) == Resolution.FHD

    def test_sd_split_by_height(self):
        """720-wide SD uses height to tell PAL from NTSC."""
        assert classify_resolution(720, 576) == Resolution.PAL
        assert classify_resolution(720, 480) == Resolution.NTSC
        assert classify_resolution(720) == Resolution.NTSC

    def test_tiny_width_is_unknown(self):
        """Widths below the SD band are unknown."""
        assert classify_resolution(320, 240) == Resolution.UNKNOWN

    def test_height_fallback(self):
        """Height is used when width is missing."""
        assert classify_resolution(None, 2160) == Resolution.UHD
        assert classify_resolution(0, 1080) == Resolution.FHD
        assert classify_resolution(None, 1040) == Resolution.FHD
        assert classify_resolution(None, 720) == Resolution.HD

    def test_nothing_known(self):
        """No dimensions at all yields unknown."""
        assert classify_resolution(None, None) == Resolution.UNKNOWN

    def test_bands_do_not_overlap(self):
        """Lower bounds are strictly decreasing."""
        for bands in (WIDTH_BANDS, HEIGHT_BANDS):
            bounds = [bound for _, bound in bands]
            assert bounds == sorted(bounds, reverse=True)
            assert len(set(bounds)) == len(bounds)


class TestResolutionFromQuality:
    """Test quality name to resolution inference."""

    @pytest.mark.parametrize(
        "quality,expected",
        [
            ("Bluray-2160p", Resolution.UHD),
            ("WEBDL-1080p", Resolution.FHD),
            ("HDTV-720p", Resolution.HD),
            ("Remux-2160p", Resolution.UHD),
            ("DVD", None),
            (None, None),
        ],
    )
    def test_quality_names(self, quality, expected):
        assert resolution_from_quality(quality) == expected
