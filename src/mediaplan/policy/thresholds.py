"""Decision thresholds for classification and planning.

Every empirically tuned number used by the classifiers and planners lives
here so tests can assert on the policy directly.
"""

SD_MAX_HEIGHT = 576
"""Tallest frame height treated as standard definition (PAL 576i/p).

SD content gets software encoding, BT.601 color and telecine checks.
"""

INTERLACED_PCT_THRESHOLD = 80
"""Percentage of interlaced frames above which a title is deinterlaced.

Progressive sources with noisy or mis-flagged frames routinely show a
minority of "interlaced" detections, so only a large majority counts.
Operator documentation quotes a 5% threshold; the executed decision is
80%. The mismatch is unresolved and recorded in DESIGN.md.
"""

TELECINE_REPEATED_PCT_THRESHOLD = 10
"""Repeated-field percentage above which 3:2 pulldown is assumed.

Clean 3:2 pulldown repeats two fields every five frames (40%).
"""

CROP_ALIGNMENT = 16
"""Crop width and height are rounded down to this macroblock size."""

MAX_CHAPTERS_PER_EPISODE = 6
"""Largest chapter grouping tried when detecting episodes."""

EPISODE_MIN_SECONDS = 900.0
"""Shortest plausible mean episode length (15 minutes)."""

EPISODE_MAX_SECONDS = 2100.0
"""Longest plausible mean episode length (35 minutes)."""

AUTO_SPLIT_MIN_SECONDS = 3600.0
"""Series files longer than this are split by chapters in auto mode."""

STDDEV_TIE_TOLERANCE = 1e-6
"""Standard deviations closer than this are treated as equal."""

INTERLACE_WINDOW_START = 0.10
"""Fraction of the title skipped before interlace sampling (logos, bumpers)."""

INTERLACE_FRAME_COUNT = 200
"""Frames analysed for interlace classification."""

TELECINE_FRAME_COUNT = 500
"""Frames analysed for telecine classification."""

CROP_SAMPLE_POINTS: tuple[float, ...] = (0.25, 0.50, 0.75)
"""Fractions of the title duration at which crop is sampled."""

DEFAULT_BIT_DEPTH = 8
"""Bit depth assumed when the probe cannot determine one."""

HARDWARE_MAX_BIT_DEPTH = 10
"""Deepest output the hardware encoders in use accept."""
