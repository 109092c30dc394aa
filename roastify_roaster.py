"""
Roastify Roaster Module
=======================
The roast orchestrator: text + attachments + options in, 2-3 lines out.

Lifecycle of a roast:
1. Nothing to roast (no text, no files)? Do nothing. Not even a network call.
2. Already roasting? Do nothing - one roast at a time.
3. Wipe the previous roast straight away (stale jokes never linger)
4. Encode all attachments concurrently, wait for every one of them
5. Ask Gemini, with the comedian's brief as the system instruction
6. Keep the first 3 non-blank lines

Whatever Gemini does, the caller ALWAYS gets something displayable back.
"""

from typing import List, Optional, Sequence

from roastify_brain import RoastifyBrain
from roastify_collector import Attachment, encode_all
from roastify_options import Mood, PRESET_PROMPTS, RoastOptions
from roastify_state import RoastifyStore


MAX_ROAST_LINES = 3

DEFAULT_ROAST_PROMPT = "Roast me based on what you see/hear."

# In-character fallbacks
STUNNED_RESPONSE = "I'm too stunned by your presence to even roast you. Try again."
BROKEN_FUNNY_BONE = "My funny bone is broken. (API Error)"

MOOD_DIRECTIVES = {
    Mood.NUCLEAR_ROAST: "The mood is \"Nuclear Roast\": be extremely savage but still within safety guidelines.",
    Mood.CUTE_FUNNY: "The mood is \"Cute Funny\": be lighthearted and \"aww\" inducing but still a roast.",
}


def build_roast_instruction(options: RoastOptions) -> str:
    """Build the comedian's system instruction for one roast."""
    instruction = f"""You are a witty, intelligent, and creative roast comedian named ROASTIFY.
Your job is to generate funny, clever, and playful roasts based on the user's input.
Rules:
- Keep roasts humorous, sarcastic, and creative.
- Focus on personality traits, habits, or situations instead of sensitive topics.
- Make the roast sound smart and original, not generic insults.
- Use modern humor and internet-style comedy.
- Keep each roast 1-2 sentences long.
- Output EXACTLY 2-3 unique roast lines, one per line.
- Respond in the language: {options.language.value}.
- CRITICAL: The roasts MUST be highly relatable to Indian society, culture, stereotypes (harmless), and daily life (e.g., engineering students, overprotective parents, street food, traffic, wedding culture, etc.).
- Consider the user's context: Gender: {options.gender}, Age: {options.age_group}, Mood: {options.mood.value}."""

    directive = MOOD_DIRECTIVES.get(options.mood)
    if directive:
        instruction += f"\n- {directive}"

    return instruction


def parse_roast_lines(raw_text: Optional[str], limit: int = MAX_ROAST_LINES) -> List[str]:
    """
    Split a raw model reply into display lines.
    Blank lines are dropped, order is kept, at most `limit` lines survive.
    """
    if not raw_text:
        return []
    lines = [line.strip() for line in raw_text.splitlines() if line.strip()]
    return lines[:limit]


class RoastOrchestrator:
    """
    Turns user input into a RoastResult, one roast at a time.
    """

    def __init__(self, brain: RoastifyBrain, store: RoastifyStore = None):
        """
        Args:
            brain: Anything with an async generate_roast(text, attachments, system_instruction)
            store: Optional app state store to publish results to
        """
        self.brain = brain
        self.store = store
        self._results: List[str] = []
        self._is_generating = False

    @property
    def results(self) -> List[str]:
        return list(self._results)

    @property
    def is_generating(self) -> bool:
        return self._is_generating

    async def generate_roast(self,
                             text: Optional[str],
                             attachments: Sequence[Attachment],
                             options: RoastOptions) -> List[str]:
        """
        Generate a fresh roast.

        Args:
            text: What to roast (may be empty if there are attachments)
            attachments: Files to roast
            options: Mood/language/gender/age snapshot

        Returns:
            The new RoastResult (0-3 lines). If the call was a no-op, the
            current result is returned untouched.
        """
        text = (text or "").strip()
        if not text and not attachments:
            return self.results

        if self._is_generating:
            print("   ⏳ Already cooking a roast - hang on...")
            return self.results

        self._set(is_generating=True, results=[])

        try:
            print(f"🔥 Roasting ({options.mood.value}, {options.language.value})...")
            if attachments:
                print(f"   📎 With {len(attachments)} attachment(s)")

            encoded = await encode_all(attachments)
            raw = await self.brain.generate_roast(
                text or DEFAULT_ROAST_PROMPT,
                encoded,
                build_roast_instruction(options)
            )
            lines = parse_roast_lines(raw) or [STUNNED_RESPONSE]

        except Exception as e:
            print(f"⚠️  Roast generation failed: {e}")
            lines = [BROKEN_FUNNY_BONE]

        finally:
            self._is_generating = False

        self._set(is_generating=False, results=lines)
        return self.results

    async def generate_from_preset(self,
                                   index: int,
                                   attachments: Sequence[Attachment],
                                   options: RoastOptions) -> List[str]:
        """
        Roast using one of the preset prompts.

        Raises:
            IndexError: if there's no preset at that position
        """
        if not 0 <= index < len(PRESET_PROMPTS):
            raise IndexError(f"No preset #{index + 1} (have {len(PRESET_PROMPTS)})")
        return await self.generate_roast(PRESET_PROMPTS[index], attachments, options)

    def clear_results(self):
        """Forget the current roast. Purely local, no network."""
        self._set(results=[])

    def _set(self, results: List[str] = None, is_generating: bool = None):
        if results is not None:
            self._results = list(results)
        if is_generating is not None:
            self._is_generating = is_generating

        if self.store is not None:
            self.store.update(
                roasts=tuple(self._results),
                is_generating=self._is_generating,
            )
