"""Integration tests for restart orchestration and frame capture."""

import base64
import io
import logging

import pytest
from PIL import Image

from tilecollapse.core.config import AdjusterKind, ModelOptions
from tilecollapse.core.errors import ExhaustedAttemptsError, GenerationCancelledError
from tilecollapse.core.model import Model
from tilecollapse.generator import Generator, encode_constraint, encode_image


def test_first_attempt_solves(coast_definition, assert_adjacency):
    """A catalog that cannot contradict solves on the first attempt."""
    generator = Generator(coast_definition, ModelOptions(width=10, height=8))
    result = generator.generate(5)

    assert result.attempts == 1
    assert result.seed == 5
    assert result.model.is_fully_observed()
    assert_adjacency(result.model)


def test_exhausted_attempts(checkerboard_definition, caplog):
    """An unsatisfiable grid uses every restart, then raises."""
    options = ModelOptions(width=3, height=3, periodic=True)
    generator = Generator(checkerboard_definition, options, restarts=3)

    with caplog.at_level(logging.INFO, logger="tilecollapse"):
        with pytest.raises(ExhaustedAttemptsError, match="after 3 attempt") as exc:
            generator.generate(10)

    assert exc.value.attempts == 3
    assert exc.value.last_seed == 12
    assert "Attempt 1/3 failed (seed 10, status contradicted)" in caplog.text
    assert "Giving up after 3 attempt(s)" in caplog.text


def test_attempt_seed_drives_noise(open_definition):
    """Each attempt's model uses the attempt seed for its noise field."""
    options = ModelOptions(width=4, height=4, adjusters=(AdjusterKind.NOISE,))
    generator = Generator(open_definition, options)

    model = generator.build_model(17)
    assert model.options.noise.seed == 17
    assert generator.options.noise.seed == 0


def test_unobserved_success_counts_as_failure(open_definition, monkeypatch):
    """A run reporting success with unobserved cells is retried."""
    monkeypatch.setattr(Model, "is_fully_observed", lambda self: False)
    generator = Generator(open_definition, ModelOptions(width=2, height=2), restarts=2)

    with pytest.raises(ExhaustedAttemptsError):
        generator.generate(0)


def test_cancellation_stops_generation(open_definition):
    """Cancelling ends generation instead of consuming restarts."""
    generator = Generator(open_definition, ModelOptions(width=3, height=3), restarts=5)

    with pytest.raises(GenerationCancelledError) as exc:
        generator.generate(0, should_cancel=lambda: True)

    assert exc.value.attempts == 1


def test_step_limit_commits(open_definition):
    """A step limit still yields a fully observed grid."""
    options = ModelOptions(width=3, height=3, adjusters=())
    result = Generator(open_definition, options, limit=2).generate(1)

    assert result.model.decisions == 2
    assert result.model.is_fully_observed()


# =============================================================================
# Frames
# =============================================================================


def test_frames_cover_every_step(open_definition):
    """Frames start at step 0 and end with every cell resolved."""
    options = ModelOptions(width=3, height=3, adjusters=())
    result = Generator(open_definition, options).generate(2)

    frames = result.frames
    assert len(frames) == 11
    assert frames[0]["step"] == 0
    assert frames[0]["observed"] == 0
    assert base64.b64decode(frames[0]["constraint"]) == bytes([255] * 9)
    assert frames[-1]["step"] == 9
    assert frames[-1]["observed"] == 9
    assert base64.b64decode(frames[-1]["constraint"]) == bytes(9)


def test_frame_limit(open_definition):
    options = ModelOptions(width=3, height=3, adjusters=())

    assert len(Generator(open_definition, options, frame_limit=3).generate(2).frames) == 3
    assert Generator(open_definition, options, frame_limit=0).generate(2).frames == []


def _decode_frame_image(uri):
    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    return Image.open(io.BytesIO(base64.b64decode(uri[len(prefix):])))


def test_frames_without_bitmaps_have_no_image(open_definition):
    options = ModelOptions(width=3, height=3, adjusters=())
    frames = Generator(open_definition, options).generate(2).frames
    assert all("image" not in frame for frame in frames)


def test_frames_carry_rendered_images(coast_bitmap_definition):
    """Each frame shows the grid after its step; the last one shows the result."""
    options = ModelOptions(width=4, height=3, adjusters=())
    result = Generator(coast_bitmap_definition, options).generate(5)

    for frame in result.frames:
        with _decode_frame_image(frame["image"]) as img:
            assert img.size == (4 * 2, 3 * 2)
    assert result.frames[-1]["image"] == encode_image(result.model)
    assert result.frames[-1]["observed"] == 12


def test_final_frame_appended_when_recording_stops_early(coast_bitmap_definition):
    options = ModelOptions(width=4, height=3, adjusters=())
    result = Generator(coast_bitmap_definition, options, frame_limit=2).generate(5)

    assert len(result.frames) == 3
    assert result.frames[-1]["image"] == encode_image(result.model)
    assert base64.b64decode(result.frames[-1]["constraint"]) == bytes(12)


def test_final_frame_recorded_without_step_frames(coast_bitmap_definition):
    options = ModelOptions(width=4, height=3, adjusters=())
    result = Generator(coast_bitmap_definition, options, frame_limit=0).generate(5)

    assert len(result.frames) == 1
    assert result.frames[0]["image"] == encode_image(result.model)



def test_default_frame_limit(open_definition):
    generator = Generator(open_definition, ModelOptions(width=6, height=5))
    assert generator.frame_limit == 50


def test_encode_constraint():
    """Cells with at most one tile encode as 0, others scale with remaining tiles."""
    encoded = encode_constraint([0, 1, 2, 5], tile_count=5)
    assert list(base64.b64decode(encoded)) == [0, 0, 64, 255]


def test_encode_constraint_single_tile_catalog():
    assert list(base64.b64decode(encode_constraint([1, 1], tile_count=1))) == [0, 0]


# =============================================================================
# Coherence
# =============================================================================


def test_coherence_keeps_shares_near_weights(open_definition):
    """With coherence on, tile shares stay near their weight-proportional targets."""
    options = ModelOptions(width=12, height=12, adjusters=(AdjusterKind.COHERENCE,))
    result = Generator(open_definition, options).generate(4)

    tracker = result.model.coherence_tracker
    shares = tracker.shares()
    assert tracker.decisions == 144
    assert abs(shares[0] - 0.25) <= tracker.tolerance + 0.02
