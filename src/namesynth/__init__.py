# -*- coding: utf-8 -*-
"""
NameSynth

Turns a name into a short piece of music and renders it offline
into a 16-bit PCM WAV file.

Features:
  - Voices:
      - Piano: bright additive partials with a slightly detuned shimmer
      - Pad: chorused fundamental for the chord bed
      - Bass: saturated sub-heavy partials
      - Warm: plain sine + two harmonics (mono mode)
  - ADSR envelope
  - Constant-power panning
  - Multi-tap comb reverb
"""

# ===== Global Session Settings =====
SAMPLE_RATE = 44100
BITS_PER_SAMPLE = 16

STEREO_MAX_SECONDS = 45
MONO_MAX_SECONDS = 30
STEREO_MAX_FRAMES = SAMPLE_RATE * STEREO_MAX_SECONDS
MONO_MAX_FRAMES = SAMPLE_RATE * MONO_MAX_SECONDS

__version__ = "0.2.0"
