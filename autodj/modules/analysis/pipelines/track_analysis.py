"""
Track Analysis Pipeline - Build an enriched Track from analyzer output.

Input comes from the external analysis producer: spectral frames,
detected tempo and key, duration and title/path metadata.
Output is an immutable Track with energy and mix points filled in.

Primitives -> Tasks -> Pipelines
"""

import time
from typing import Optional, Sequence, Union

from autodj.common.logging import get_logger, format_bpm, format_time
from autodj.common.primitives.frames import mean_energy
from autodj.core.config import get_settings
from autodj.core.errors import MixPointDetectionError
from autodj.core.models import SpectralFrame, Track, frames_from_rows
from autodj.modules.analysis.tasks import MixPointDetectionTask
from autodj.modules.config import MixPointConfig

logger = get_logger(__name__)

FrameInput = Union[SpectralFrame, Sequence[float]]


def _as_frames(frames: Optional[Sequence[FrameInput]]) -> tuple:
    if frames is None or len(frames) == 0:
        return ()
    if all(isinstance(f, SpectralFrame) for f in frames):
        return tuple(frames)
    return frames_from_rows([f.as_row() if isinstance(f, SpectralFrame) else f for f in frames])


class TrackAnalysisPipeline:
    """
    Enrich analyzer output into a Track.

    Usage:
        pipeline = TrackAnalysisPipeline()
        track = pipeline.run("Song", "/music/song.mp3", bpm=124.0,
                             duration_sec=312.4, key="8A", frames=rows)
    """

    def __init__(
        self,
        config: Optional[MixPointConfig] = None,
        frame_interval_sec: Optional[float] = None,
    ):
        self.mix_point_task = MixPointDetectionTask(config)
        self.frame_interval_sec = (
            frame_interval_sec if frame_interval_sec is not None
            else get_settings().frame_interval_sec
        )

    def run(
        self,
        title: str,
        path: str = "",
        bpm: float = 0.0,
        duration_sec: float = 0.0,
        key: Optional[str] = None,
        frames: Optional[Sequence[FrameInput]] = None,
    ) -> Track:
        """
        Analyze one track.

        Mix points are clamped so that 0 <= mix_in <= mix_out <= duration.
        When the producer could not report a duration, the last frame's
        timestamp is used instead.

        Raises:
            ValidationError: invalid frames, tempo or duration
            MixPointDetectionError: mix point task failed unexpectedly
        """
        start = time.time()
        spectral_frames = _as_frames(frames)

        if duration_sec <= 0 and spectral_frames:
            duration_sec = spectral_frames[-1].time_sec

        track = Track(
            title=title,
            path=path,
            bpm=bpm,
            duration_sec=duration_sec,
            key=key,
            frames=spectral_frames,
            frame_interval_sec=self.frame_interval_sec,
        )

        result = self.mix_point_task.execute_timed(track)
        if not result.success:
            raise MixPointDetectionError(
                "Mix point detection failed",
                data={"title": title, "path": path, "error": result.error},
            )

        duration = track.duration_sec
        mix_in = min(max(0.0, result.mix_in_point), duration)
        mix_out = min(max(result.mix_out_point, mix_in), duration)

        enriched = Track(
            title=track.title,
            path=track.path,
            bpm=track.bpm,
            duration_sec=duration,
            key=track.key,
            energy=mean_energy(track.frame_matrix),
            frames=track.frames,
            mix_in_point=mix_in,
            mix_out_point=mix_out,
            frame_interval_sec=track.frame_interval_sec,
        )
        # Reuse the matrix built for detection
        enriched.__dict__['frame_matrix'] = track.frame_matrix

        logger.debug(
            f"Analyzed '{title}': {format_bpm(track.bpm)}, key={track.key or '?'}, "
            f"mix {format_time(mix_in)} -> {format_time(mix_out)}",
            data={
                **enriched.to_dict(),
                "n_beats": result.n_beats,
                "analysis_time_sec": round(time.time() - start, 4),
            },
        )
        return enriched


def analyze_track(
    title: str,
    path: str = "",
    bpm: float = 0.0,
    duration_sec: float = 0.0,
    key: Optional[str] = None,
    frames: Optional[Sequence[FrameInput]] = None,
    config: Optional[MixPointConfig] = None,
) -> Track:
    """Convenience wrapper around TrackAnalysisPipeline.run()."""
    return TrackAnalysisPipeline(config).run(
        title, path=path, bpm=bpm, duration_sec=duration_sec, key=key, frames=frames,
    )
