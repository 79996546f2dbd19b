"""Canned answers used when the network path fails."""

from collections.abc import Mapping

from chat_cache.entities import ServiceCategory

FALLBACK_MODEL_LABEL = "fallback"

DEFAULT_FALLBACKS: dict[ServiceCategory, str] = {
    ServiceCategory.CODE: (
        "**Code Assistant Ready!**\n\n"
        "I'm having a temporary connection issue with my main models, but I can still help with:\n\n"
        "• **Code Generation**: describe what you want to build\n"
        "• **Debugging**: share your code and the error you see\n"
        "• **Architecture**: plan your project structure\n\n"
        "What coding task should we start with?"
    ),
    ServiceCategory.CREATIVE: (
        "**Creative Engine Ready!**\n\n"
        "My main models are briefly unavailable, but we can still work on:\n\n"
        "• **Writing**: stories, articles, marketing copy\n"
        "• **Brainstorming**: ideas for projects and content\n"
        "• **Design Concepts**: UI/UX ideas and layouts\n\n"
        "What creative project are you working on?"
    ),
    ServiceCategory.KNOWLEDGE: (
        "**Knowledge Assistant Ready!**\n\n"
        "I couldn't reach my research models just now. I can still help with:\n\n"
        "• **Learning**: breaking down complex topics\n"
        "• **Problem Solving**: step-by-step approaches\n"
        "• **Best Practices**: common industry standards\n\n"
        "What would you like to explore?"
    ),
    ServiceCategory.GENERAL: (
        "**Ready to Help!**\n\n"
        "I'm having trouble reaching my models right now. Meanwhile I can help with:\n\n"
        "• **Questions**: short answers on everyday topics\n"
        "• **Planning**: organizing your thoughts and projects\n"
        "• **Learning**: explaining concepts in simple terms\n\n"
        "How can I help?"
    ),
    ServiceCategory.AUTO: (
        "**Assistant Ready!**\n\n"
        "The connection to my models was interrupted. Try asking again in a moment, or narrow it down to:\n\n"
        "• **Coding** questions\n"
        "• **Writing** and brainstorming\n"
        "• **Explanations** of a specific topic\n\n"
        "What would you like to do?"
    ),
}


class FallbackPolicy:
    """Category-specific degraded answers, labeled so callers can tell them apart."""

    def __init__(
        self,
        messages: Mapping[ServiceCategory, str],
        model_label: str = FALLBACK_MODEL_LABEL,
    ) -> None:
        if ServiceCategory.GENERAL not in messages:
            raise ValueError("Fallback messages must include the general category")
        self._messages = dict(messages)
        self._model_label = model_label

    @classmethod
    def default(cls) -> "FallbackPolicy":
        return cls(DEFAULT_FALLBACKS)

    @property
    def model_label(self) -> str:
        return self._model_label

    def message_for(self, category: ServiceCategory) -> str:
        return self._messages.get(ServiceCategory(category), self._messages[ServiceCategory.GENERAL])
