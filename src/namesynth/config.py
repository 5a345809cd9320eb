from dataclasses import dataclass

from namesynth import MONO_MAX_SECONDS, SAMPLE_RATE, STEREO_MAX_SECONDS

ENVELOPES = ("adsr", "ar")


@dataclass(frozen=True)
class RenderProfile:
    """
    How a piece gets rendered: channel count, voice gain, length cap,
    envelope flavour and whether the comb reverb runs before export.
    """

    channels: int = 2
    amp_scale: float = 10000.0
    max_seconds: int = STEREO_MAX_SECONDS
    envelope: str = "adsr"
    reverb: bool = True

    def __post_init__(self) -> None:
        if self.channels not in (1, 2):
            raise ValueError(f"channels must be 1 or 2, got {self.channels}")
        if self.envelope not in ENVELOPES:
            raise ValueError(f"Unknown envelope: {self.envelope}")
        if self.max_seconds <= 0:
            raise ValueError(f"max_seconds must be positive, got {self.max_seconds}")

    @property
    def max_frames(self) -> int:
        return int(self.max_seconds * SAMPLE_RATE)


STEREO = RenderProfile()
MONO = RenderProfile(
    channels=1,
    amp_scale=8000.0,
    max_seconds=MONO_MAX_SECONDS,
    envelope="ar",
    reverb=False,
)
