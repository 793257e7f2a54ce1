import asyncio
import json
import logging
from typing import List, Optional

import litellm
from pydantic import ValidationError

from fukimori_engine.application.ports.dialogue_generator import (
    DialogueGenerationContext,
    DialogueGenerationResponse,
    IDialogueGenerator,
)
from fukimori_engine.infrastructure.config.settings import LLMSettings, settings as app_settings

logger = logging.getLogger(__name__)

MAX_RETRIES = 3

RESPONSE_FORMAT_INSTRUCTIONS = (
    "Reply ONLY with a JSON object with the keys: "
    "\"dialogue\" (what you say), \"emotion\" (one word, e.g. happy, excited, annoyed, angry, love, neutral), "
    "\"action\" (what you do while speaking), \"thought_bubble\" (optional inner thought), "
    "\"panel_description\" (one sentence describing the manga panel) and "
    "\"choices\" (two to four short things the player could say next)."
)


class LitellmDialogueGenerator(IDialogueGenerator):
    """
    Voices NPCs through LiteLLM, so any provider LiteLLM supports
    (DeepSeek, OpenAI, local models via Ollama, ...) can be used.
    """
    def __init__(self, llm_settings: Optional[LLMSettings] = None):
        self._settings = llm_settings or app_settings.llm
        litellm.drop_params = True
        logger.info("Dialogue generator using model %s (API base: %s)",
                    self._settings.model_name, self._settings.api_base or "default")

    async def _get_llm_response(self, messages: List[dict]) -> str:
        for attempt in range(MAX_RETRIES):
            try:
                response = await litellm.acompletion(
                    model=self._settings.model_name,
                    messages=messages,
                    temperature=self._settings.temperature,
                    max_tokens=self._settings.max_tokens,
                    api_key=self._settings.api_key or None,
                    api_base=self._settings.api_base,
                )
                return response.choices[0].message.content.strip()
            except (litellm.APIConnectionError, litellm.Timeout, litellm.ServiceUnavailableError) as e:
                logger.warning("LLM call failed on attempt %d/%d: %s", attempt + 1, MAX_RETRIES, e)
                if attempt + 1 == MAX_RETRIES:
                    raise
                await asyncio.sleep(1)
        return "Sorry, I lost my train of thought."

    def _build_messages(self, context: DialogueGenerationContext) -> List[dict]:
        system_message = (
            f"You are {context.character_name}, a student or staff member at Fukimori High, a Japanese high school.\n"
            f"{context.personality_prompt}\n"
            f"How you feel about the player: {context.relationship_summary}.\n"
            f"The player is known as '{context.player_title}'. Toward them you are {context.attitude_shift} "
            f"and {context.dialogue_modifier}.\n"
            "Stay in character and keep your answer short.\n"
            f"{RESPONSE_FORMAT_INSTRUCTIONS}"
        )

        situation = [
            f"Location: {context.location_name}. {context.location_description}".strip(),
            f"Others present: {', '.join(context.characters_present) or 'nobody'} (the mood is {context.group_dynamics}).",
        ]
        if context.relevant_memories:
            situation.append(f"Things you remember:\n{context.relevant_memories}")
        situation.append(f"The player says: \"{context.player_input}\"")

        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": "\n".join(situation)},
        ]

    @staticmethod
    def parse_response(raw_content: str) -> DialogueGenerationResponse:
        """
        Parses the model's JSON reply. Anything that is not a valid reply is
        used verbatim as a neutral line of dialogue.
        """
        content = raw_content.strip()
        if content.startswith("```"):
            content = content.strip("`")
            if content.startswith("json"):
                content = content[len("json"):]
        try:
            data = json.loads(content)
            if isinstance(data, dict):
                return DialogueGenerationResponse.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.debug("Model reply was not valid JSON dialogue: %s", e)
        return DialogueGenerationResponse(dialogue=raw_content.strip(), emotion="neutral")

    async def generate_dialogue(self, context: DialogueGenerationContext) -> DialogueGenerationResponse:
        messages = self._build_messages(context)
        return self.parse_response(await self._get_llm_response(messages))
