"""Per-category model and persona profiles."""

from dataclasses import dataclass

from chat_cache.entities import ServiceCategory


@dataclass(frozen=True)
class CategoryProfile:
    """Model and system prompt for one category."""

    model: str
    system_prompt: str


DEFAULT_PROFILES: dict[ServiceCategory, CategoryProfile] = {
    ServiceCategory.AUTO: CategoryProfile(
        model="qwen/qwen-2.5-72b-instruct:free",
        system_prompt="You are a helpful, accurate and engaging AI assistant.",
    ),
    ServiceCategory.CODE: CategoryProfile(
        model="deepseek/deepseek-coder",
        system_prompt=(
            "You are an expert programming assistant. Write clean, efficient, "
            "well-documented code and explain it briefly."
        ),
    ),
    ServiceCategory.CREATIVE: CategoryProfile(
        model="anthropic/claude-3.5-sonnet",
        system_prompt="You are a creative writing partner. Produce original, engaging content.",
    ),
    ServiceCategory.KNOWLEDGE: CategoryProfile(
        model="google/gemini-pro-1.5",
        system_prompt="You provide accurate, well-researched explanations and cite sources when possible.",
    ),
    ServiceCategory.GENERAL: CategoryProfile(
        model="qwen/qwen-2.5-72b-instruct:free",
        system_prompt="You are a friendly assistant. Engage naturally and be genuinely useful.",
    ),
}


def profile_for(
    category: ServiceCategory,
    profiles: dict[ServiceCategory, CategoryProfile] | None = None,
) -> CategoryProfile:
    """Profile of ``category``, falling back to the auto profile."""
    profiles = profiles or DEFAULT_PROFILES
    return profiles.get(category) or profiles.get(ServiceCategory.AUTO) or DEFAULT_PROFILES[ServiceCategory.AUTO]
