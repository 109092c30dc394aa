"""
Roastify Options Module
=======================
Everything the user can tune about a roast:

MOOD:
- Nine flavours, from "Funny" all the way to "Nuclear Roast"
- "Nuclear Roast" and "Cute Funny" carry their own extra directive

LANGUAGE:
- Thirteen Indian languages (English included)

CONTEXT:
- Gender and age group are free-form, the lists below are only suggestions

Options are snapshotted into an immutable RoastOptions at request time,
so changing the sidebar mid-roast never leaks into an in-flight request.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional
import argparse


class Mood(Enum):
    """How hard the roast should hit."""
    FUNNY = "Funny"
    VERY_FUNNY = "Very Funny"
    SARCASTIC = "Sarcastic"
    CUTE_FUNNY = "Cute Funny"
    RELATABLE_FUNNY = "Relatable Funny"
    SAVAGE_FUNNY = "Savage Funny"
    ROASTING_FUNNY = "Roasting Funny"
    RUDE_FUNNY = "Rude Funny"
    NUCLEAR_ROAST = "Nuclear Roast"


class Language(Enum):
    """Languages the roast comedian can perform in."""
    ENGLISH = "English"
    HINDI = "Hindi"
    BENGALI = "Bengali"
    TELUGU = "Telugu"
    MARATHI = "Marathi"
    TAMIL = "Tamil"
    URDU = "Urdu"
    GUJARATI = "Gujarati"
    KANNADA = "Kannada"
    MALAYALAM = "Malayalam"
    PUNJABI = "Punjabi"
    SANSKRIT = "Sanskrit"
    BHOJPURI = "Bhojpuri"


MOODS: List[str] = [m.value for m in Mood]
LANGUAGES: List[str] = [lang.value for lang in Language]

GENDERS = ["Not Specified", "Male", "Female", "Non-binary"]
AGE_GROUPS = ["Child", "Teenager", "Adult", "Senior"]

# One-tap prompts for people who can't think of anything to get roasted about
PRESET_PROMPTS = [
    "Roast my typical Indian wedding outfit.",
    "What do you think of my 'Sharma ji ka beta' complex?",
    "Roast my obsession with street food and bargaining.",
    "Tell me why my engineering degree is just a piece of paper.",
    "Roast my LinkedIn bio: 'Passionate about chai and coding'.",
]


@dataclass(frozen=True)
class RoastOptions:
    """Snapshot of the roast settings taken when a roast is requested."""
    mood: Mood = Mood.ROASTING_FUNNY
    language: Language = Language.ENGLISH
    gender: str = "Not Specified"
    age_group: str = "Adult"

    def with_changes(self, **changes) -> "RoastOptions":
        """Return a new snapshot with some fields swapped out."""
        return replace(self, **changes)


def parse_mood(value: str) -> Mood:
    """
    Look up a mood by its display name (case-insensitive).

    Raises:
        ValueError: if the name isn't one of the nine moods
    """
    for mood in Mood:
        if mood.value.lower() == value.strip().lower():
            return mood
    raise ValueError(f"Unknown mood '{value}'. Pick one of: {', '.join(MOODS)}")


def parse_language(value: str) -> Language:
    """Look up a language by its display name (case-insensitive)."""
    for language in Language:
        if language.value.lower() == value.strip().lower():
            return language
    raise ValueError(f"Unknown language '{value}'. Pick one of: {', '.join(LANGUAGES)}")


def build_arg_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser.

    Usage:
        python3 main.py                                   # Defaults
        python3 main.py --mood "Nuclear Roast" --language Hindi
        python3 main.py selfie.jpg rant.mp3               # Pre-attach files
        python3 main.py --mute                            # Text only, no voice
    """
    parser = argparse.ArgumentParser(
        description="Roastify - AI roast comedian with a happy little sidekick",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Moods:
  {', '.join(MOODS)}

Languages:
  {', '.join(LANGUAGES)}
        """
    )
    parser.add_argument(
        'files',
        nargs='*',
        help='Image, audio or video files to attach before starting'
    )
    parser.add_argument(
        '--mood',
        type=parse_mood,
        default=Mood.ROASTING_FUNNY,
        help='Roast mood (default: "Roasting Funny")'
    )
    parser.add_argument(
        '--language',
        type=parse_language,
        default=Language.ENGLISH,
        help='Roast language (default: English)'
    )
    parser.add_argument(
        '--gender',
        default="Not Specified",
        help=f'Gender context, e.g. {", ".join(GENDERS)}'
    )
    parser.add_argument(
        '--age',
        default="Adult",
        help=f'Age group context, e.g. {", ".join(AGE_GROUPS)}'
    )
    parser.add_argument(
        '--mute',
        action='store_true',
        help="Don't play Happy's voice (text only)"
    )
    return parser


def parse_options_from_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Namespace with `options` (RoastOptions), `files` and `mute`
    """
    args = build_arg_parser().parse_args(argv)
    args.options = RoastOptions(
        mood=args.mood,
        language=args.language,
        gender=args.gender,
        age_group=args.age,
    )
    return args
