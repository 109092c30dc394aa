"""
Roastify Voice Module
=====================
Plays Happy's voice through pygame.

Gemini's TTS hands back raw PCM (16-bit, mono, 24kHz). pygame's music
player wants a real file, so the PCM is wrapped in a WAV header in memory
first - nothing touches the disk.

There is exactly ONE playback resource (pygame.mixer.music). Playing a new
clip replaces whatever was playing, so two clips never overlap.
"""

import asyncio
import io
from typing import Optional

import pygame
from pydub import AudioSegment

# Gemini TTS output format
PCM_SAMPLE_RATE = 24000
PCM_SAMPLE_WIDTH = 2  # bytes (16-bit)
PCM_CHANNELS = 1

POLL_INTERVAL = 1 / 30  # check for end-of-playback at ~30fps


def pcm_to_wav(pcm: bytes,
               sample_rate: int = PCM_SAMPLE_RATE,
               sample_width: int = PCM_SAMPLE_WIDTH,
               channels: int = PCM_CHANNELS) -> bytes:
    """Wrap raw PCM samples in a WAV container."""
    segment = AudioSegment(
        data=pcm,
        sample_width=sample_width,
        frame_rate=sample_rate,
        channels=channels,
    )
    buffer = io.BytesIO()
    segment.export(buffer, format="wav")
    return buffer.getvalue()


class HappyVoice:
    """
    Owns the single audio playback handle.
    """

    def __init__(self, enabled: bool = True):
        """
        Args:
            enabled: False to run text-only (e.g. --mute or no sound card)
        """
        self.enabled = enabled
        self._mixer_ready = False
        self._playback_id = 0

    def _init_mixer(self) -> bool:
        """Lazy initialization of the pygame mixer. Returns False if audio is unavailable."""
        if self._mixer_ready:
            return True
        if not self.enabled:
            return False

        try:
            pygame.mixer.init(frequency=PCM_SAMPLE_RATE, size=-16, channels=PCM_CHANNELS)
            self._mixer_ready = True
            print("🔊 Audio initialized.")
        except pygame.error as e:
            # No audio device - Happy goes text-only for the rest of the session
            print(f"⚠️  Audio unavailable ({e}). Happy will stay silent.")
            self.enabled = False

        return self._mixer_ready

    async def play(self, pcm: bytes) -> bool:
        """
        Play a clip to completion.

        If another clip starts while this one is playing, this one is
        replaced and the call returns early.

        Args:
            pcm: Raw 16-bit mono 24kHz PCM from the TTS model

        Returns:
            True if the clip played to the end, False if it was skipped or replaced
        """
        if not pcm or not self._init_mixer():
            return False

        self._playback_id += 1
        my_id = self._playback_id

        pygame.mixer.music.stop()
        pygame.mixer.music.load(io.BytesIO(pcm_to_wav(pcm)), "wav")
        pygame.mixer.music.play()

        while pygame.mixer.music.get_busy():
            if self._playback_id != my_id:
                return False
            await asyncio.sleep(POLL_INTERVAL)

        return self._playback_id == my_id

    def stop(self):
        """Stop whatever is playing."""
        self._playback_id += 1
        if self._mixer_ready:
            pygame.mixer.music.stop()

    def shutdown(self):
        """Release the mixer."""
        self.stop()
        if self._mixer_ready:
            pygame.mixer.quit()
            self._mixer_ready = False


def describe_clip(pcm: Optional[bytes]) -> str:
    """Human-friendly clip length, e.g. '2.4s'."""
    if not pcm:
        return "0.0s"
    seconds = len(pcm) / (PCM_SAMPLE_RATE * PCM_SAMPLE_WIDTH * PCM_CHANNELS)
    return f"{seconds:.1f}s"
