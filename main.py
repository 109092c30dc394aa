#!/usr/bin/env python3
"""
Roastify - AI Roast Comedian
============================
A terminal roast club with:
1. Gemini-powered roasts from text, images, audio and video
2. Nine moods and thirteen languages
3. Happy, a cheerful sidekick you can chat with (and who talks back out loud)

Usage:
    python3 main.py                                        # Defaults
    python3 main.py --mood "Nuclear Roast" --language Hindi
    python3 main.py selfie.jpg                             # Attach a file up front
    python3 main.py --mute                                 # No audio

Commands (type /help inside the app):
    <text>              Roast it (or chat with Happy while the chat is open)
    /roast [text]       Roast the text and/or the attached files
    /preset <n>         Roast with one of the preset prompts
    /attach <path...>   Attach image/audio/video files
    /files              List attachments
    /remove <n>         Remove attachment number n
    /mood, /lang, /gender, /age <value>
    /clear              Clear the current roast
    /happy              Open/close the chat with Happy
    /quit               Leave the club
"""

import asyncio
import shlex
import sys
from typing import List

from dotenv import load_dotenv

load_dotenv()

from roastify_options import (
    AGE_GROUPS,
    GENDERS,
    LANGUAGES,
    MOODS,
    PRESET_PROMPTS,
    parse_language,
    parse_mood,
    parse_options_from_args,
)
from roastify_state import AppState, RoastifyStore
from roastify_collector import InputCollector
from roastify_brain import RoastifyBrain
from roastify_roaster import RoastOrchestrator
from roastify_happy import HappyChat
from roastify_voice import HappyVoice


HELP_TEXT = """
   Commands:
     <text>              Roast it (or talk to Happy while the chat is open)
     /roast [text]       Roast text and/or attached files
     /preset [n]         List presets, or roast with preset n
     /attach <path...>   Attach image/audio/video files
     /files              List attachments
     /remove <n>         Remove attachment n
     /mood [value]       Show or set mood
     /lang [value]       Show or set language
     /gender [value]     Show or set gender
     /age [value]        Show or set age group
     /clear              Clear the current roast
     /happy              Open/close the chat with Happy
     /help               This list
     /quit               Leave the club
"""


class RoastifyApp:
    """
    The terminal front-end. Owns the store and wires commands to the
    orchestrators - it never calls Gemini itself.
    """

    def __init__(self, args, brain: RoastifyBrain = None, voice: HappyVoice = None):
        print("=" * 60)
        print("  🔥 ROASTIFY - AI Roast Comedian")
        print("  Initializing...")
        print("=" * 60)
        print()

        self.store = RoastifyStore(AppState(options=args.options))
        self.store.subscribe(self._render)

        self.collector = InputCollector(store=self.store)
        self.brain = brain or RoastifyBrain()
        self.voice = voice or HappyVoice(enabled=not args.mute)
        self.roaster = RoastOrchestrator(self.brain, store=self.store)
        self.happy = HappyChat(self.brain, self.voice, store=self.store)

        if args.mute:
            print("   🔇 Muted: Happy will only type")

        if args.files:
            self.collector.accept_paths(args.files)

        print()
        self._show_options()
        print()

    # ========== RENDERING ==========

    def _render(self, old: AppState, new: AppState):
        """Print whatever changed in a way that makes sense on a terminal."""
        if new.is_generating and not old.is_generating:
            print("   🎤 The comedian is warming up...")

        if new.roasts != old.roasts and new.roasts:
            print()
            for i, line in enumerate(new.roasts, 1):
                print(f"   🔥 {i}. {line}")
            print()

        if new.happy_visible != old.happy_visible:
            if new.happy_visible:
                print("😊 Happy's chat is open. Anything you type goes to Happy (/happy to close).")
                self._show_transcript(new)
            else:
                print("😊 Happy's chat is closed. Back to roasting.")

        if new.happy_state == "awaiting_reply" and old.happy_state != "awaiting_reply":
            print("   💬 Happy is typing...")

        if new.is_speaking and not old.is_speaking:
            print("   🗣️  Happy is speaking...")

    def _show_transcript(self, state: AppState):
        for role, text in state.happy_messages:
            who = "😊 Happy" if role == "assistant" else "🙂 You"
            print(f"   {who}: {text}")

    def _show_options(self):
        options = self.store.state.options
        print(f"   Mood: {options.mood.value} | Language: {options.language.value} | "
              f"Gender: {options.gender} | Age: {options.age_group}")

    def _show_files(self):
        attachments = self.collector.attachments
        if not attachments:
            print("   📎 No attachments")
            return
        for i, attachment in enumerate(attachments, 1):
            print(f"   📎 {i}. {self.collector.describe(attachment)}")

    # ========== COMMANDS ==========

    async def handle_line(self, line: str) -> bool:
        """
        Handle one line of input.

        Returns:
            False when the user wants to leave
        """
        line = line.strip()
        if not line:
            return True

        if not line.startswith("/"):
            if self.happy.is_open:
                await self.happy.send(line)
            else:
                await self._roast(line)
            return True

        try:
            parts = shlex.split(line)
        except ValueError:
            parts = line.split()
        command, args = parts[0].lower(), parts[1:]

        if command in ("/quit", "/exit", "/q"):
            return False
        elif command == "/help":
            print(HELP_TEXT)
        elif command == "/roast":
            await self._roast(" ".join(args))
        elif command == "/preset":
            await self._preset(args)
        elif command == "/attach":
            if args:
                self.collector.accept_paths(args)
            else:
                print("   Usage: /attach <path> [path...]")
        elif command == "/files":
            self._show_files()
        elif command == "/remove":
            self._remove(args)
        elif command == "/clear":
            self.roaster.clear_results()
            print("   🧹 Roast cleared")
        elif command == "/happy":
            self.happy.toggle()
        elif command in ("/mood", "/lang", "/language", "/gender", "/age"):
            self._set_option(command, " ".join(args))
        else:
            print(f"   ❓ Unknown command {command} (try /help)")

        return True

    async def _roast(self, text: str):
        self.store.update(input_text=text)
        if not text.strip() and not len(self.collector):
            print("   Give me something to roast: type some text or /attach a file.")
            return
        await self.roaster.generate_roast(
            text, self.collector.attachments, self.store.state.options
        )

    async def _preset(self, args: List[str]):
        if not args:
            for i, prompt in enumerate(PRESET_PROMPTS, 1):
                print(f"   {i}. {prompt}")
            return
        try:
            index = int(args[0]) - 1
            if 0 <= index < len(PRESET_PROMPTS):
                self.store.update(input_text=PRESET_PROMPTS[index])
            await self.roaster.generate_from_preset(
                index, self.collector.attachments, self.store.state.options
            )
        except (ValueError, IndexError) as e:
            print(f"   ⚠️ {e}")

    def _remove(self, args: List[str]):
        if not args:
            print("   Usage: /remove <n>")
            return
        try:
            self.collector.remove_attachment(int(args[0]) - 1)
        except (ValueError, IndexError) as e:
            print(f"   ⚠️ {e}")

    def _set_option(self, command: str, value: str):
        options = self.store.state.options
        if not value:
            choices = {
                "/mood": MOODS,
                "/lang": LANGUAGES,
                "/language": LANGUAGES,
                "/gender": GENDERS,
                "/age": AGE_GROUPS,
            }[command]
            self._show_options()
            print(f"   Choices: {', '.join(choices)}")
            return

        try:
            if command == "/mood":
                options = options.with_changes(mood=parse_mood(value))
            elif command in ("/lang", "/language"):
                options = options.with_changes(language=parse_language(value))
            elif command == "/gender":
                options = options.with_changes(gender=value)
            else:
                options = options.with_changes(age_group=value)
        except ValueError as e:
            print(f"   ⚠️ {e}")
            return

        self.store.update(options=options)
        self._show_options()

    # ========== MAIN LOOP ==========

    async def run(self):
        """Main input loop."""
        print("🎭 The stage is yours. Type something to get roasted, /happy to meet Happy, /help for more.")
        print()

        try:
            while True:
                prompt = "happy> " if self.happy.is_open else "roast> "
                # input() runs in a worker thread so Happy can keep talking meanwhile
                line = await asyncio.to_thread(input, prompt)
                if not await self.handle_line(line):
                    break

        except (KeyboardInterrupt, EOFError):
            print()

        finally:
            print("\n👋 Leaving the club...")
            self.happy.hush()
            await self.happy.wait_for_speech()
            self.collector.clear()
            self.voice.shutdown()


async def main(argv: List[str] = None):
    """Entry point."""
    args = parse_options_from_args(argv)
    app = RoastifyApp(args)
    await app.run()


def cli():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    cli()
