"""PersonaChat — persona-primed Gemini chat bots (SadhanaAI, KautilyaAI)."""

__version__ = "1.0.0"
