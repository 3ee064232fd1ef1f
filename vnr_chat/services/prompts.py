"""
PROMPT BUILDER
==============

Turns the fixed prompt texts from config plus the caller's input into the single
prompt string sent to the model. Pure functions, no state.

The template text is passed in as a variable rather than parsed as a template,
so the JSON example in the quiz prompt (full of curly braces) needs no escaping.
User text is embedded as is.
"""

from typing import Optional

from langchain_core.prompts import PromptTemplate

from config import PERSONA_PROMPT, QUIZ_PROMPT


CHAT_TEMPLATE = PromptTemplate.from_template("{persona}\n\nCâu hỏi: {question}\n\nTrả lời:")
QUIZ_TEMPLATE = PromptTemplate.from_template("{instructions}{topic_line}")


def build_chat_prompt(message: str, persona: str = PERSONA_PROMPT) -> str:
    """Persona instructions, then the user's question, then the answer cue."""
    return CHAT_TEMPLATE.format(persona=persona, question=message)


def build_quiz_prompt(topic: Optional[str] = None, instructions: str = QUIZ_PROMPT) -> str:
    """Quiz instructions, optionally narrowed to one topic."""
    topic_line = ""
    if topic and topic.strip():
        topic_line = f"\n\nChủ đề của câu hỏi: {topic.strip()}"
    return QUIZ_TEMPLATE.format(instructions=instructions, topic_line=topic_line)
