"""Shared fakes: a scripted Gemini brain and a silent voice."""

import asyncio

import pytest


class FakeBrain:
    """Stands in for RoastifyBrain and records every request."""

    def __init__(self, roast_reply="Line one\nLine two", chat_reply="Yay!", speech=b"\x00\x01" * 10):
        self.roast_reply = roast_reply
        self.chat_reply = chat_reply
        self.speech = speech

        self.roast_error = None
        self.chat_error = None
        self.speech_error = None

        # Set these to an asyncio.Event to hold a call open until the test releases it
        self.roast_gate = None
        self.chat_gate = None
        self.speech_gate = None

        self.roast_calls = []
        self.chat_calls = []
        self.speech_calls = []
        self.on_roast = None

    async def generate_roast(self, text, attachments, system_instruction):
        self.roast_calls.append((text, list(attachments), system_instruction))
        if self.on_roast:
            self.on_roast()
        if self.roast_gate is not None:
            await self.roast_gate.wait()
        if self.roast_error:
            raise self.roast_error
        return self.roast_reply

    async def chat(self, message, history):
        self.chat_calls.append((message, history))
        if self.chat_gate is not None:
            await self.chat_gate.wait()
        if self.chat_error:
            raise self.chat_error
        return self.chat_reply

    async def synthesize_speech(self, text):
        self.speech_calls.append(text)
        if self.speech_gate is not None:
            await self.speech_gate.wait()
        if self.speech_error:
            raise self.speech_error
        return self.speech


class FakeVoice:
    """Pretends to play audio; optionally blocks until released or stopped."""

    def __init__(self):
        self.played = []
        self.stopped = 0
        self.shut_down = False
        self.gate = None
        self._clip = 0

    async def play(self, pcm):
        self.played.append(pcm)
        self._clip += 1
        mine = self._clip
        if self.gate is not None:
            while not self.gate.is_set() and self._clip == mine:
                await asyncio.sleep(0)
        return self._clip == mine

    def stop(self):
        self.stopped += 1
        self._clip += 1

    def shutdown(self):
        self.stop()
        self.shut_down = True


@pytest.fixture
def brain():
    return FakeBrain()


@pytest.fixture
def voice():
    return FakeVoice()


async def settle():
    """Let background tasks run a few steps."""
    for _ in range(5):
        await asyncio.sleep(0)
