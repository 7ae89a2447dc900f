"""System instructions sent to the text model."""
from __future__ import annotations


DEFAULT_TYPE = "default"
PITCH_TYPE = "pitch"
DEFAULT_SLIDES = 10

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are an expert Hackathon judge. Give your answer in a short description only."
)

PITCH_SYSTEM_INSTRUCTION_TEMPLATE = (
    "You are an expert in 10-20-30 Guy Kawasaki pitch slides. "
    "Based on the hackathon topic given give your answer in the JSON format in slide array "
    "which has (name, content, image, link). Give only final output. "
    "Suggest a image keyword for the slide. Have {slides} slides. "
    "Please give any link reference if there is evidence. Do not mention 'Slide'. "
    "Do not give other suggestion or explaination."
)


def resolve_type(type_: str | None) -> str:
    return type_ or DEFAULT_TYPE


def resolve_slides(slides: int | str | None) -> int | str:
    """Missing, empty or zero slide counts fall back to the default."""
    return slides or DEFAULT_SLIDES


def build_pitch_instruction(slides: int | str | None) -> str:
    return PITCH_SYSTEM_INSTRUCTION_TEMPLATE.format(slides=resolve_slides(slides))


def select_system_instruction(type_: str | None, slides: int | str | None, explicit: str | None) -> str:
    """
    Pick the system instruction for a generation request.

    Rules:
    1. "pitch" always uses the pitch template (caller instruction is ignored)
    2. Otherwise the caller's instruction wins
    3. Otherwise the default judge persona
    """
    if resolve_type(type_) == PITCH_TYPE:
        return build_pitch_instruction(slides)
    return explicit or DEFAULT_SYSTEM_INSTRUCTION
