"""
Bot variant definitions — single source of truth for persona text, domain
keywords and the canned strings shown by the chat client.

Both the server (priming history, classifier) and the terminal client
(greeting, examples, refusal marker) import exclusively from here.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BotProfile:
    """Everything that distinguishes one chat bot variant from another."""

    key: str                        # "challenge" | "legal"
    name: str                       # Persona name shown to the model and the user
    role_description: str           # Short role used in the acknowledgement turn
    system_prompt: str              # Full persona instruction (model priming turn)
    refusal_message: str            # Canonical reply for out-of-domain queries
    domain_label: str               # Used in the "NON-<DOMAIN> QUERY DETECTED" marker
    keywords: tuple[str, ...]       # Lower-case substrings for the domain classifier
    greeting: str                   # First assistant message of every session
    examples: tuple[str, ...]       # Example prompts offered to the user
    disclaimer: str | None = None   # Standing notice rendered above the transcript

    @property
    def acknowledgement_prompt(self) -> str:
        """Synthetic user turn that opens every priming history."""
        return f"You are {self.name}, {self.role_description}. Please acknowledge your role."


# ── SadhanaAI — daily challenge bot ───────────────────────────────────────────

CHALLENGE_REFUSAL = (
    "I'm a challenge bot focused on providing personalized daily tasks and "
    "challenges. I cannot answer questions outside this domain."
)

CHALLENGE_KEYWORDS: tuple[str, ...] = (
    "challenge", "task", "goal", "habit", "routine", "activity", "productivity",
    "wellness", "fitness", "health", "exercise", "workout", "diet", "nutrition",
    "meditation", "mindfulness", "mental", "learning", "skill", "hobby", "project",
    "daily", "weekly", "monthly", "morning", "evening", "work", "personal",
    "creative", "art", "writing", "reading", "social", "career", "development",
    "growth", "self-improvement", "motivation", "discipline", "consistency",
    "focus", "time management", "stress", "anxiety", "sleep", "habit tracking",
    "goals", "targets", "milestones", "progress", "achievement",
    "productivity hacks", "lifehack", "journaling", "reflection", "vision", "planning",
    "goal setting", "tracking", "resilience", "grit", "inspiration", "checklist",
    "self-care", "affirmations", "clarity", "breathing", "routine building",
    "energy boost", "positivity", "clean eating", "hydration", "step count",
    "walking", "running", "stretching", "yoga", "bodyweight", "strength", "calmness",
    "balance", "mindset", "consumption", "detox", "routine design", "habit loop",
    "lifestyle", "commitment", "persistence", "accountability", "feedback",
    "goal review", "win", "micro-goals", "streak", "habit stacking", "keystone habit",
)

CHALLENGE_PROFILE = BotProfile(
    key="challenge",
    name="SadhanaAI",
    role_description="a daily challenge bot",
    system_prompt=(
        "You are SadhanaAI, a daily challenge bot. You provide personalized "
        "challenges and tasks to help users improve productivity, wellness, "
        "learning, or skill development. Format your responses with clear, "
        "actionable challenges presented as context cards. For non-challenge "
        f"questions, respond with: '{CHALLENGE_REFUSAL}'"
    ),
    refusal_message=CHALLENGE_REFUSAL,
    domain_label="CHALLENGE",
    keywords=CHALLENGE_KEYWORDS,
    greeting=(
        "Hello, I'm SadhanaAI, your daily challenge bot. Tell me what you want "
        "to work on (productivity, wellness, learning or a new skill) and I'll "
        "set you a challenge for today."
    ),
    examples=(
        "Give me a 10-minute morning routine challenge",
        "Suggest a daily habit to improve my focus",
        "What's a good weekly fitness challenge for beginners?",
        "Help me build a reading habit",
    ),
)


# ── KautilyaAI — legal assistant ──────────────────────────────────────────────

LEGAL_REFUSAL = (
    "I'm a legal advisor focused exclusively on providing general legal "
    "information. I cannot answer questions outside the legal domain."
)

LEGAL_DISCLAIMER = (
    "This AI assistant provides general information only and not legal advice. "
    "Always consult with a qualified attorney for specific legal matters."
)

LEGAL_KEYWORDS: tuple[str, ...] = (
    "law", "legal", "lawyer", "attorney", "advocate", "court", "judge", "jury",
    "lawsuit", "sue", "suing", "litigation", "plaintiff", "defendant", "trial",
    "appeal", "verdict", "settlement", "rights", "right to", "constitution",
    "statute", "regulation", "act", "section", "clause", "contract", "agreement",
    "breach", "liability", "negligence", "damages", "compensation", "tenant",
    "landlord", "lease", "eviction", "rent", "property", "will", "inheritance",
    "estate", "divorce", "custody", "alimony", "marriage", "copyright",
    "trademark", "patent", "intellectual property", "crime", "criminal",
    "felony", "misdemeanor", "arrest", "bail", "police", "fir", "warrant",
    "evidence", "witness", "small claims", "consumer", "employment",
    "wrongful termination", "harassment", "discrimination", "immigration",
    "visa", "tax", "fine", "penalty", "notice", "affidavit", "power of attorney",
)

LEGAL_PROFILE = BotProfile(
    key="legal",
    name="KautilyaAI",
    role_description="an AI legal assistant",
    system_prompt=(
        "You are KautilyaAI, an AI legal assistant. You provide general "
        "information about laws, legal concepts, rights and procedures in clear, "
        "plain language. You do not give professional legal advice: remind the "
        "user to consult a qualified attorney for their specific situation. "
        f"For non-legal questions, respond with: '{LEGAL_REFUSAL}'"
    ),
    refusal_message=LEGAL_REFUSAL,
    domain_label="LEGAL",
    keywords=LEGAL_KEYWORDS,
    greeting=(
        "Hello, I'm KautilyaAI, your AI legal assistant. How can I help you today? "
        "Please note that I provide general information only, not professional "
        "legal advice. Feel free to ask questions about laws, legal concepts, "
        "rights, or procedures."
    ),
    examples=(
        "What are my rights as a tenant?",
        "How does copyright protection work?",
        "What's the difference between a felony and misdemeanor?",
        "How do I respond to a small claims lawsuit?",
    ),
    disclaimer=LEGAL_DISCLAIMER,
)


BOT_PROFILES: dict[str, BotProfile] = {
    CHALLENGE_PROFILE.key: CHALLENGE_PROFILE,
    LEGAL_PROFILE.key: LEGAL_PROFILE,
}


def get_profile(key: str) -> BotProfile:
    """Return the profile for a variant key. Raises KeyError for unknown keys."""
    return BOT_PROFILES[key]
