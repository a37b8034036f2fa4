from __future__ import annotations
from typing import List, Optional, Sequence

from empathyai.models import DialogueMessage


def build_emotion_prompt(text: str, language_hint: Optional[str] = None) -> str:
    """
    Single emotion prompt shared by all providers.
    Keeping prompts here prevents prompt logic from getting scattered across the codebase.
    """
    hint = (
        f"The text is probably written in {language_hint} (BCP-47). Use that as a hint."
        if language_hint
        else "The text might be in any language; detect it yourself."
    )
    return f"""You are an emotion analyzer. Identify the predominant emotion behind the text below,
even when no explicit emotion words (like "happy", "sad", "angry") are used.
{hint}
Consider phrasing, implications and subtle cues.
If the text is purely factual, or a question without clear emotional tone, answer "neutral".

Text: {text}

Output STRICT JSON with exactly these keys:
- emotion (string: one English word, e.g. joy, sadness, anger, anxiety, loneliness, neutral)
- confidence (number between 0 and 1)

Output JSON only. No markdown. No extra keys.
"""


def build_response_prompt(user_text: str, emotion: str, language_code: str) -> str:
    return f"""You are an assistant that gives empathetic, clear answers to users, especially elderly users,
in their preferred language.

User's statement: {user_text}
Detected emotion (English term): {emotion}
Target language (BCP-47): {language_code}

Your ENTIRE response MUST be written in {language_code}.

Structure (make it sound natural in {language_code}):
1. Acknowledge the detected emotion, translated into {language_code}.
2. Briefly paraphrase or reference the key part of the user's statement.
3. Offer your empathetic remark, encouragement or clarification.

Rules:
- If the statement is a question or asks for information, give a clear helpful answer first, then add empathy if appropriate.
- If the emotion is neutral or unclear, or the statement is purely factual, focus on a clear, polite answer while still acknowledging the context.
- Tailor empathy to the emotion: joy -> share the happiness; sadness -> comfort and understanding;
  anger -> calm reassurance; anxiety -> soothing, grounding words; loneliness -> companionship.
- Keep it concise (1-3 sentences after the acknowledgement and paraphrase).
- One single paragraph.
- End with exactly one relevant emoji.

Output STRICT JSON with exactly one key:
- response (string)

Output JSON only. No markdown. No extra keys.
"""


def build_summary_prompt(messages: Sequence[DialogueMessage]) -> str:
    lines: List[str] = []
    for m in messages:
        text = " ".join(m.text.split())
        lines.append(f"{m.sender}: {text}")
    convo = "\n".join(lines).strip()

    return f"""You are summarizing a conversation between a user and an assistant.
Write a brief, neutral summary of the key topics discussed and any outcomes, if apparent.

Conversation (most recent last):
{convo}

Output STRICT JSON with exactly one key:
- summary (string)

Output JSON only. No markdown. No extra keys.
"""
