"""
Roastify Brain Module (google-genai SDK)
========================================
The one and only door to Gemini. Three capabilities:
- Roast generation (text + inline images/audio/video, single turn)
- Chat with Happy (multi-turn, history supplied by the caller)
- Speech synthesis for Happy's voice

The brain is deliberately thin: it builds SDK requests and hands back raw
results. It does NOT decide what to show when Gemini misbehaves - errors
propagate to the orchestrators, which own the in-character fallbacks.

All calls go through the async client (client.aio) so nothing blocks the
event loop while Gemini thinks.
"""

import base64
import os
from typing import Any, Dict, List, Optional, Sequence

from google import genai
from google.genai import types

from roastify_collector import EncodedAttachment


DEFAULT_ROAST_MODEL = "gemini-2.5-flash"
DEFAULT_CHAT_MODEL = "gemini-3-flash-preview"
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Puck"  # Puck is the most energetic of the prebuilt voices

# High temperature keeps roasts varied - nobody wants the same joke twice
ROAST_TEMPERATURE = 0.9

HAPPY_SYSTEM_INSTRUCTION = (
    "Your name is Happy. You are a friendly, simple, and helpful AI assistant. "
    "You talk in simple and understandable words. You should be cheerful and supportive. "
    "You are slightly eccentric and funny. If the user asks for a roast, tell them to use "
    "the main Roastify tool, but you can give a very tiny, harmless 'happy' roast if they insist."
)

SPEECH_STYLE_PREFIX = "Say this in a funny, high-pitched, and cheerful way: "


def split_data_uri(data_uri: str) -> bytes:
    """
    Pull the raw bytes back out of a data:<mime>;base64,<payload> URI.
    A bare base64 string (no header) is accepted too.
    """
    payload = data_uri.split(",", 1)[1] if data_uri.startswith("data:") else data_uri
    return base64.b64decode(payload)


def build_roast_parts(text: str, attachments: Sequence[EncodedAttachment]) -> List[types.Part]:
    """Text first, then one inline part per attachment, in order."""
    parts = [types.Part(text=text)]
    for attachment in attachments:
        parts.append(types.Part.from_bytes(
            data=split_data_uri(attachment.data),
            mime_type=attachment.mime_type
        ))
    return parts


class RoastifyBrain:
    """
    Gemini-powered brain for both the roast comedian and Happy.
    """

    def __init__(self,
                 api_key: str = None,
                 roast_model: str = None,
                 chat_model: str = None,
                 tts_model: str = None,
                 voice_name: str = None):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key (defaults to GEMINI_API_KEY, then GOOGLE_API_KEY)
            roast_model: Model for roasts (defaults to ROASTIFY_ROAST_MODEL or gemini-2.5-flash)
            chat_model: Model for Happy's chat (defaults to ROASTIFY_CHAT_MODEL)
            tts_model: Model for Happy's voice (defaults to ROASTIFY_TTS_MODEL)
            voice_name: Prebuilt voice for Happy (defaults to ROASTIFY_VOICE or Puck)
        """
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")

        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY not set. "
                "Get one from https://aistudio.google.com/apikey"
            )

        self.roast_model = roast_model or os.getenv("ROASTIFY_ROAST_MODEL", DEFAULT_ROAST_MODEL)
        self.chat_model = chat_model or os.getenv("ROASTIFY_CHAT_MODEL", DEFAULT_CHAT_MODEL)
        self.tts_model = tts_model or os.getenv("ROASTIFY_TTS_MODEL", DEFAULT_TTS_MODEL)
        self.voice_name = voice_name or os.getenv("ROASTIFY_VOICE", DEFAULT_VOICE)

        self.client = genai.Client(api_key=self.api_key)

        print("🧠 Roastify brain initialized")
        print(f"   🔥 Roasts: {self.roast_model}")
        print(f"   😊 Happy:  {self.chat_model}")
        print(f"   🗣️  Voice:  {self.tts_model} ({self.voice_name})")

    async def generate_roast(self,
                             text: str,
                             attachments: Sequence[EncodedAttachment],
                             system_instruction: str) -> Optional[str]:
        """
        Single-turn roast request.

        Args:
            text: What the user typed (or the "roast what you see" placeholder)
            attachments: Encoded media, sent as inline parts after the text
            system_instruction: The comedian's brief for this roast

        Returns:
            The raw generated text (may be None or empty)
        """
        response = await self.client.aio.models.generate_content(
            model=self.roast_model,
            contents=[types.Content(role="user", parts=build_roast_parts(text, attachments))],
            config=types.GenerateContentConfig(
                system_instruction=system_instruction,
                temperature=ROAST_TEMPERATURE,
            )
        )
        return response.text

    async def chat(self, message: str, history: List[Dict[str, Any]]) -> Optional[str]:
        """
        Send one message to Happy with the prior transcript as context.

        Args:
            message: The new user message (current turn)
            history: Everything said before it, as role-tagged contents

        Returns:
            Happy's reply text (may be None or empty)
        """
        chat = self.client.aio.chats.create(
            model=self.chat_model,
            config=types.GenerateContentConfig(
                system_instruction=HAPPY_SYSTEM_INSTRUCTION,
            ),
            history=history
        )
        response = await chat.send_message(message)
        return response.text

    async def synthesize_speech(self, text: str) -> Optional[bytes]:
        """
        Turn text into Happy's voice.

        Returns:
            Raw PCM audio (16-bit mono, 24kHz) or None if Gemini sent nothing back
        """
        response = await self.client.aio.models.generate_content(
            model=self.tts_model,
            contents=SPEECH_STYLE_PREFIX + text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(
                            voice_name=self.voice_name,
                        )
                    )
                ),
            )
        )

        try:
            data = response.candidates[0].content.parts[0].inline_data.data
        except (AttributeError, IndexError, TypeError):
            return None

        if not data:
            return None
        if isinstance(data, str):
            # Some transports hand the payload back still base64-encoded
            return base64.b64decode(data)
        return data
