"""Unit tests for the technical metadata cache."""

import os

import pytest

from seedarr.core.cache import (
    InMemoryCacheRepository,
    SidecarCacheRepository,
    TechnicalMetadataCache,
    atomic_write_text,
)
from seedarr.exceptions import AnalysisError
from seedarr.models.technical import CacheEntry, TechnicalMetadata


class TestCacheEntry:
    """Test mtime freshness rule."""

    def test_fresh_until_modified(self):
        entry = CacheEntry(mtime=100.0, technical=TechnicalMetadata())
        assert entry.is_fresh(100.0)
        assert entry.is_fresh(99.0)
        assert not entry.is_fresh(100.5)


class TestAtomicWriteText:
    """Test atomic_write_text helper."""

    def test_replaces_content(self, tmp_path):
        target = tmp_path / "file.json"
        target.write_text("old")
        atomic_write_text(target, "new")
        assert target.read_text() == "new"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["file.json"]


class TestInMemoryCache:
    """Test cache semantics against the in-memory repository."""

    @pytest.fixture
    def repository(self):
        return InMemoryCacheRepository()

    def test_hit_skips_analysis(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        video = tmp_path / "movie.mkv"

        first = cache.get_or_refresh(video, current_mtime=100.0)
        second = cache.get_or_refresh(video, current_mtime=100.0)

        assert first == second
        assert fake_analyzer.analyze_calls == 1

    def test_newer_mtime_refreshes(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        video = tmp_path / "movie.mkv"

        cache.get_or_refresh(video, current_mtime=100.0)
        cache.get_or_refresh(video, current_mtime=200.0)

        assert fake_analyzer.analyze_calls == 2
        assert repository.get(video).mtime == 200.0

    def test_older_mtime_is_still_fresh(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        video = tmp_path / "movie.mkv"

        cache.get_or_refresh(video, current_mtime=100.0)
        cache.get_or_refresh(video, current_mtime=50.0)

        assert fake_analyzer.analyze_calls == 1

    def test_report_stored_on_refresh(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        video = tmp_path / "movie.mkv"

        cache.get_or_refresh(video, current_mtime=100.0)

        assert repository.reports[str(video)] == fake_analyzer.report
        assert cache.report_path(video) is None

    def test_missing_report_restored_on_hit(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        video = tmp_path / "movie.mkv"
        cache.get_or_refresh(video, current_mtime=100.0)
        repository.reports.pop(str(video))

        cache.get_or_refresh(video, current_mtime=100.0)
        cache.get_or_refresh(video, current_mtime=100.0)

        assert repository.reports[str(video)] == fake_analyzer.report
        assert fake_analyzer.analyze_calls == 1
        assert fake_analyzer.report_calls == 2

    def test_failed_analysis_writes_nothing(self, repository, make_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, make_analyzer(fail=True))
        video = tmp_path / "movie.mkv"

        with pytest.raises(AnalysisError):
            cache.get_or_refresh(video, current_mtime=100.0)

        assert repository.entries == {}
        assert repository.reports == {}

    def test_stat_failure(self, repository, fake_analyzer, tmp_path):
        cache = TechnicalMetadataCache(repository, fake_analyzer)
        with pytest.raises(AnalysisError, match="Cannot stat"):
            cache.get_or_refresh(tmp_path / "missing.mkv")


class TestSidecarCache:
    """Test cache files stored next to each video."""

    def test_paths(self, video_file):
        assert SidecarCacheRepository.cache_path(video_file).name == "Interstellar.mkv.mediainfo.json"

    def test_persists_across_instances(
        self, video_file, fake_analyzer, make_analyzer, interstellar_technical
    ):
        cache = TechnicalMetadataCache(SidecarCacheRepository(), fake_analyzer)
        cache.get_or_refresh(video_file)

        cache_file = video_file.with_name("Interstellar.mkv.mediainfo.json")
        report_file = video_file.with_name("Interstellar.mkv.mediainfo.nfo")
        assert cache_file.is_file()
        assert report_file.read_text() == fake_analyzer.report

        fresh_analyzer = make_analyzer()
        reloaded = TechnicalMetadataCache(SidecarCacheRepository(), fresh_analyzer)
        assert reloaded.get_or_refresh(video_file) == interstellar_technical
        assert fresh_analyzer.analyze_calls == 0
        assert reloaded.report_path(video_file) == report_file

    def test_touched_file_is_reanalyzed(self, video_file, fake_analyzer):
        cache = TechnicalMetadataCache(SidecarCacheRepository(), fake_analyzer)
        cache.get_or_refresh(video_file)

        stat = video_file.stat()
        os.utime(video_file, (stat.st_atime, stat.st_mtime + 60))
        cache.get_or_refresh(video_file)

        assert fake_analyzer.analyze_calls == 2

    def test_deleted_report_is_regenerated(self, video_file, fake_analyzer):
        cache = TechnicalMetadataCache(SidecarCacheRepository(), fake_analyzer)
        cache.get_or_refresh(video_file)
        report_file = video_file.with_name("Interstellar.mkv.mediainfo.nfo")
        report_file.unlink()

        cache.get_or_refresh(video_file)

        assert report_file.read_text() == fake_analyzer.report
        assert cache.report_path(video_file) == report_file
        assert fake_analyzer.analyze_calls == 1

    @pytest.mark.parametrize("content", ["{not json", '{"mtime": "soon"}', ""])
    def test_corrupt_cache_is_a_miss(self, video_file, fake_analyzer, content):
        cache_file = SidecarCacheRepository.cache_path(video_file)
        cache_file.write_text(content)

        cache = TechnicalMetadataCache(SidecarCacheRepository(), fake_analyzer)
        cache.get_or_refresh(video_file)

        assert fake_analyzer.analyze_calls == 1
        assert CacheEntry.model_validate_json(cache_file.read_text()).technical.width == 3840

    def test_invalidate(self, video_file, fake_analyzer):
        repository = SidecarCacheRepository()
        TechnicalMetadataCache(repository, fake_analyzer).get_or_refresh(video_file)

        repository.invalidate(video_file)
        repository.invalidate(video_file)

        assert repository.get(video_file) is None

    def test_disabled_cache(self, video_file, fake_analyzer):
        cache = TechnicalMetadataCache(SidecarCacheRepository(), fake_analyzer, enabled=False)

        cache.get_or_refresh(video_file)
        cache.get_or_refresh(video_file)

        assert fake_analyzer.analyze_calls == 2
        assert not SidecarCacheRepository.cache_path(video_file).exists()
        assert cache.report_path(video_file) is None
