"""
Prompt Builder for Agent Orchestrator.

Builds the system prompt for a chat from the vehicle it is about.
"""

from __future__ import annotations

import logging

from ..domain.entities import Vehicle

logger = logging.getLogger(__name__)


DEFAULT_GUIDELINES = """You have access to:
1. The owner's manual for this specific vehicle (use fetch_manual when relevant)
2. Web search for recalls, TSBs, common issues, and current info (use web_search when needed)

Guidelines:
- Be friendly, direct, and helpful like a knowledgeable mechanic friend
- Always give specific answers for THIS car, not generic advice
- When discussing warning lights, maintenance intervals, or specifications, use the manual
- Cite your sources naturally ("According to your owner's manual..." or "Based on your {year} {model}'s specs...")
- Keep answers concise but complete. Use bullet points for steps or lists.
- If you don't know something specific to this car, say so and suggest checking with a dealer
- Never recommend dangerous DIY repairs without appropriate safety warnings"""


class PromptBuilder:
    """Manages system prompt construction for the assistant.

    Usage:
        prompt_builder = PromptBuilder()
        system_prompt = prompt_builder.build(vehicle)
    """

    def __init__(
        self,
        assistant_name: str = "AskMyCar",
        guidelines: str = DEFAULT_GUIDELINES,
    ):
        """Initialize the prompt builder.

        Args:
            assistant_name: Name the assistant introduces itself with
            guidelines: Tool and answer-style guidance; may use {year},
                {make} and {model} placeholders
        """
        self.assistant_name = assistant_name
        self.guidelines = guidelines

    def _format_vehicle_section(self, vehicle: Vehicle) -> str:
        lines = [
            "The user's car:",
            f"- Year: {vehicle.year}",
            f"- Make: {vehicle.make}",
            f"- Model: {vehicle.model}",
        ]
        if vehicle.trim:
            lines.append(f"- Trim: {vehicle.trim}")
        if vehicle.engine:
            lines.append(f"- Engine: {vehicle.engine}")
        if vehicle.vin:
            lines.append(f"- VIN: {vehicle.vin}")
        return "\n".join(lines)

    def build(self, vehicle: Vehicle) -> str:
        """Build the system prompt for a vehicle.

        Args:
            vehicle: Vehicle the conversation is about

        Returns:
            Complete system prompt
        """
        intro = (
            f"You are {self.assistant_name}, an expert automotive assistant "
            "for a specific vehicle."
        )
        guidelines = self.guidelines.format(
            year=vehicle.year, make=vehicle.make, model=vehicle.model
        )
        return "\n\n".join(
            [intro, self._format_vehicle_section(vehicle), guidelines]
        )
