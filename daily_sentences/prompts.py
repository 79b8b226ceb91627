"""Prompt templates for daily sentence generation."""
from __future__ import annotations

from datetime import date

SYSTEM_PROMPT = (
    "You are a professional Chinese language teacher creating daily practice "
    "sentences for intermediate learners."
)

DAILY_SENTENCES_PROMPT = """\
Generate exactly {count} real-world Chinese sentences for Chinese language learners \
for {day_label}.

Requirements:
- Mix of difficulty levels (HSK 3-5)
- Practical, everyday situations
- Include workplace, daily life, cultural contexts
- Each sentence should be 8-20 characters
- Provide accurate pinyin with tone marks in "pronunciation"
- Natural English translations in "translation"

Return ONLY a valid JSON object in this exact format, with no other text and \
no code fences:
{{
  "sentences": [
    {{
      "text": "Chinese characters here",
      "pronunciation": "Accurate pinyin with tone marks",
      "translation": "Natural English translation",
      "context": "workplace|daily_life|cultural|social",
      "difficulty": "HSK3|HSK4|HSK5"
    }}
  ]
}}

Make sure each sentence is genuinely useful for learners and represents real \
Chinese usage.
"""


def format_day(day: date) -> str:
    """'Sunday, October 18, 2026'."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def build_messages(count: int, day: date) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": DAILY_SENTENCES_PROMPT.format(count=count, day_label=format_day(day)),
        },
    ]
