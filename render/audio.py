"""Silent PCM WAV track sized to the planned runtime."""

from __future__ import annotations

import io
import wave


SAMPLE_RATE = 44100
CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit linear PCM
WAV_HEADER_BYTES = 44


def silence_data_length(duration_sec: int, *, sample_rate: int = SAMPLE_RATE) -> int:
    return int(duration_sec) * int(sample_rate) * SAMPLE_WIDTH * CHANNELS


def generate_silence_wav(duration_sec: int, *, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Return a RIFF/WAVE buffer: 44-byte PCM header followed by zero-valued samples.

    The header's RIFF size and data-chunk size match the zero fill exactly, which the
    concat/mux step relies on to honour the track length.
    """
    if int(duration_sec) != duration_sec or duration_sec < 1:
        raise ValueError("duration_sec must be a positive integer")
    if sample_rate < 1:
        raise ValueError("sample_rate must be positive")

    frames = int(duration_sec) * int(sample_rate)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(CHANNELS)
        wav_file.setsampwidth(SAMPLE_WIDTH)
        wav_file.setframerate(int(sample_rate))
        wav_file.setnframes(frames)
        wav_file.writeframes(bytes(silence_data_length(duration_sec, sample_rate=sample_rate)))
    return buffer.getvalue()
