from typing import List

from fukimori_engine.application.ports.dialogue_generator import (
    DialogueGenerationContext,
    DialogueGenerationResponse,
    IDialogueGenerator,
)


class MockDialogueGenerator(IDialogueGenerator):
    """
    A canned dialogue generator for tests and for playing without an API key.
    Override `emotion` or `canned_dialogue` to steer a scenario.
    """
    def __init__(self, emotion: str = "happy"):
        self.emotion = emotion
        self.canned_dialogue = "{character_name} hears you say '{player_input}'. This is a mock response."
        self.received_contexts: List[DialogueGenerationContext] = []

    async def generate_dialogue(self, context: DialogueGenerationContext) -> DialogueGenerationResponse:
        self.received_contexts.append(context)
        return DialogueGenerationResponse(
            dialogue=self.canned_dialogue.format(
                character_name=context.character_name,
                player_input=context.player_input,
            ),
            emotion=self.emotion,
            action="looks at you",
            panel_description=f"{context.character_name} in the {context.location_name}",
            choices=["Keep talking", "Say goodbye"],
        )
