"""Property-based tests for pipeline runs and error responses."""

from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from parodygen.config import Settings
from parodygen.models.errors import ErrorResponse, ExtractionError, ValidationError
from parodygen.models.pipeline import RunStage, RunState
from parodygen.pipeline.manager import PipelineManager
from parodygen.storage.retention import RetentionScheduler
from tests.conftest import URL_A, URL_B, URL_C, FakeClock, FakeToolkit, make_segment

pytestmark = pytest.mark.property

SOURCES = {
    URL_A: "dQw4w9WgXcQ.360p.mp4",
    URL_B: "9bZkp7q19f0.360p.mp4",
    URL_C: "kJQP7kiw5Fk.360p.mp4",
}


def _manager(tmp_path, toolkit):
    media = tmp_path / "media"
    cfg = Settings(
        media_dir=media,
        cache_dir=media / ".youtube_cache",
        temp_dir=media / ".temp_segments",
        output_dir=media / "output",
    )
    return PipelineManager(toolkit, RetentionScheduler(86400, clock=FakeClock()), cfg)


segment_specs = st.lists(
    st.tuples(
        st.sampled_from(sorted(SOURCES)),
        st.integers(min_value=0, max_value=500),
        st.integers(min_value=1, max_value=100),
    ),
    min_size=1,
    max_size=10,
)


class TestPipelineProperties:
    @given(specs=segment_specs)
    @settings(max_examples=30)
    def test_output_order_matches_request(self, tmp_path_factory, specs):
        manager = _manager(tmp_path_factory.mktemp("run"), FakeToolkit())
        segments = [
            make_segment(url, str(start), str(start + length)) for url, start, length in specs
        ]
        result = manager.generate(segments)

        expected = "".join(
            f"{SOURCES[url]} {start}+{length}\n" for url, start, length in specs
        )
        assert Path(result.output_path).read_text() == expected
        assert result.total_duration == sum(length for _, _, length in specs)

    @given(count=st.integers(min_value=1, max_value=10), data=st.data())
    @settings(max_examples=30)
    def test_any_extraction_failure_leaves_nothing(self, tmp_path_factory, count, data):
        failing = data.draw(st.integers(min_value=1, max_value=count))
        toolkit = FakeToolkit()
        toolkit.fail_extract_at = failing
        manager = _manager(tmp_path_factory.mktemp("run"), toolkit)

        with pytest.raises(ExtractionError):
            manager.generate([make_segment(URL_A, str(i), str(i + 1)) for i in range(count)])

        assert toolkit.extract_count == failing
        assert list(manager.output_dir.glob("*")) == []
        assert list(manager.settings.temp_dir.iterdir()) == []
        assert manager.scheduler.pending() == []

    @given(stage=st.sampled_from(list(RunStage)), progress=st.floats(min_value=0.0, max_value=1.0))
    @settings(max_examples=50)
    def test_run_state_accepts_every_stage(self, stage, progress):
        state = RunState(run_id="run", stage=stage, progress=progress)
        assert state.stage in RunStage
        assert 0 <= state.progress <= 1


class TestErrorProperties:
    @given(message=st.text(min_size=1, max_size=200))
    @settings(max_examples=50)
    def test_error_response_serializable(self, message):
        resp = ErrorResponse.from_exception(ValidationError(message))
        restored = ErrorResponse.model_validate_json(resp.model_dump_json())
        assert restored.message == message
        assert restored.error == message
        assert restored.component == "validation"
