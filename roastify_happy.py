"""
Roastify Happy Module
=====================
Happy is the friendly sidekick: a small chat window with a voice.

States:
    CLOSED          -> chat window hidden (transcript is kept)
    OPEN_IDLE       -> window open, waiting for the user
    AWAITING_REPLY  -> a message is with Gemini, new sends are ignored

Speaking is a separate flag, NOT a state: Happy can still be talking while
the user types the next message. Every reply is spoken in the background.

The transcript is append-only. The first time the window opens Happy says
hello, exactly once per session.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from roastify_brain import RoastifyBrain
from roastify_state import RoastifyStore
from roastify_voice import HappyVoice, describe_clip


WELCOME_MESSAGE = "Hi, I am Happy! How can I be helpful today?"
SPEECHLESS_RESPONSE = "I'm happy but speechless!"
GLITCH_RESPONSE = "I'm having a little glitch, but I'm still happy!"

# Gemini calls the assistant side of the conversation "model"
API_ROLES = {"user": "user", "assistant": "model"}


class HappyState(Enum):
    """Where the chat window is in its lifecycle."""
    CLOSED = "closed"
    OPEN_IDLE = "open_idle"
    AWAITING_REPLY = "awaiting_reply"


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "assistant"
    text: str


def project_history(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """Turn the transcript into Gemini's role-tagged history shape."""
    return [
        {"role": API_ROLES[m.role], "parts": [{"text": m.text}]}
        for m in messages
    ]


class HappyChat:
    """
    Companion chat orchestrator: transcript, state machine and voice.
    """

    def __init__(self, brain: RoastifyBrain, voice: HappyVoice, store: RoastifyStore = None):
        """
        Args:
            brain: Anything with async chat(message, history) and synthesize_speech(text)
            voice: Anything with async play(pcm) -> bool and stop()
            store: Optional app state store to publish changes to
        """
        self.brain = brain
        self.voice = voice
        self.store = store

        self._messages: List[ChatMessage] = []
        self._visible = False
        self._awaiting_reply = False
        self._speech_id = 0
        self._is_speaking = False
        self._speech_tasks: Set[asyncio.Task] = set()
        self.draft = ""

    # ========== STATE ==========

    @property
    def state(self) -> HappyState:
        if not self._visible:
            return HappyState.CLOSED
        if self._awaiting_reply:
            return HappyState.AWAITING_REPLY
        return HappyState.OPEN_IDLE

    @property
    def is_open(self) -> bool:
        return self._visible

    @property
    def is_awaiting_reply(self) -> bool:
        return self._awaiting_reply

    @property
    def is_speaking(self) -> bool:
        return self._is_speaking

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    # ========== WINDOW ==========

    def open(self):
        """
        Open the chat window. On the very first open Happy greets the user
        (text + voice). Must be called from inside the running event loop.
        """
        self._visible = True

        if not self._messages:
            self._append(ChatMessage("assistant", WELCOME_MESSAGE))
            self._speak_in_background(WELCOME_MESSAGE)

        self._publish()

    def close(self):
        """Hide the window. The transcript survives for the next open."""
        self._visible = False
        self._publish()

    def toggle(self):
        if self._visible:
            self.close()
        else:
            self.open()

    # ========== CONVERSATION ==========

    async def send(self, user_text: str) -> Optional[str]:
        """
        Send a message to Happy and wait for the reply.

        No-op (returns None) for blank text, a closed window, or while a
        previous reply is still on its way.

        Returns:
            Happy's reply (or the glitch fallback)
        """
        if not user_text or not user_text.strip():
            return None
        if not self._visible:
            return None
        if self._awaiting_reply:
            print("   ⏳ Happy is still typing...")
            return None

        history = project_history(self._messages)

        self._append(ChatMessage("user", user_text))
        self.draft = ""
        self._awaiting_reply = True
        self._publish()

        try:
            reply = await self.brain.chat(user_text, history)
            reply = reply or SPEECHLESS_RESPONSE
        except Exception as e:
            print(f"⚠️  Chat failed: {e}")
            reply = GLITCH_RESPONSE
        finally:
            self._awaiting_reply = False

        self._append(ChatMessage("assistant", reply))
        print(f"😊 Happy: \"{reply[:60]}{'...' if len(reply) > 60 else ''}\"")
        self._publish()

        self._speak_in_background(reply)
        return reply

    # ========== VOICE ==========

    async def speak(self, text: str) -> bool:
        """
        Say something out loud.

        A synthesis failure only skips the audio, the text is already on
        screen. A newer speak() replaces this one, even when the newer one
        ends up with nothing to say: the old clip is stopped either way.

        Returns:
            True if the audio played to the end
        """
        self._speech_id += 1
        my_id = self._speech_id
        self._set_speaking(True)

        try:
            try:
                audio = await self.brain.synthesize_speech(text)
            except Exception as e:
                print(f"   ⚠️ Speech generation failed: {e}")
                audio = None

            if my_id != self._speech_id:
                return False
            if not audio:
                # The newest speak() owns the speaker, even when it is silent
                self.voice.stop()
                return False

            print(f"🗣️  Happy: {describe_clip(audio)} of audio")
            return await self.voice.play(audio)

        except Exception as e:
            print(f"   ⚠️ Playback failed: {e}")
            return False

        finally:
            # Only the newest speak() gets to end the speaking state
            if my_id == self._speech_id:
                self._set_speaking(False)

    def hush(self):
        """
        Cut Happy off: speech still waiting on synthesis is dropped and the
        current clip stops.
        """
        self._speech_id += 1
        self.voice.stop()
        self._set_speaking(False)

    def _speak_in_background(self, text: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self.speak(text))
        self._speech_tasks.add(task)
        task.add_done_callback(self._speech_tasks.discard)
        return task

    async def wait_for_speech(self):
        """Wait for every queued or playing speech task to finish."""
        while self._speech_tasks:
            await asyncio.gather(*list(self._speech_tasks))

    # ========== INTERNALS ==========

    def _append(self, message: ChatMessage):
        self._messages.append(message)

    def _set_speaking(self, speaking: bool):
        self._is_speaking = speaking
        self._publish()

    def _publish(self):
        if self.store is None:
            return
        self.store.update(
            happy_visible=self._visible,
            happy_state=self.state.value,
            happy_messages=tuple((m.role, m.text) for m in self._messages),
            happy_draft=self.draft,
            is_speaking=self._is_speaking,
        )
