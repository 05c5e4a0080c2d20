"""Canned replies used when every Gemini model is unavailable."""

STATIC_MODEL = "static-fallback"

_WHAT_IS = (
    "🌍 The PanAfrican AI Summit is an annual event that started in 2025 with the "
    "mission to \"Bridge Africa's AI Divide.\" It brings together AI innovators from "
    "across Africa to collaborate on solutions tailored to the continent's unique "
    "challenges and opportunities!"
)

_MISSION = (
    "🎯 The summit aims to accelerate Africa's AI ecosystem by fostering collaboration, "
    "knowledge sharing, and innovation across the continent while ensuring ethical and "
    "inclusive AI development that addresses Africa-specific needs."
)

_PARTICIPATION = (
    "🤝 The summit welcomes researchers, startups, policymakers, students, and investors "
    "from all African regions! Participation is open to anyone interested in advancing AI "
    "in Africa. The event features sessions in multiple languages including English, "
    "French, Arabic, Swahili, and Portuguese."
)

_PILLARS = """🔬 The summit focuses on 5 key pillars:
1. AI Research & Development
2. AI Education & Capacity Building
3. AI Policy & Governance
4. AI Entrepreneurship & Investment
5. AI for Social Good"""

_CONTACT = (
    "📧 For more information, you can visit the official website or contact the "
    "organizers at info@panafricanaisummit.africa"
)

_GREETING = (
    "🤖 Hello! I'm PanAI Sage, your guide to the PanAfrican AI Summit. I'm here to answer "
    "questions about the summit's mission, pillars, participation, and initiatives. "
    "What would you like to know about? 🌍"
)

# (all of, any of) keyword groups; first matching rule wins
RULES: list[tuple[tuple[str, ...], tuple[str, ...], str]] = [
    (("what is", "panafrican ai summit"), (), _WHAT_IS),
    ((), ("mission", "purpose"), _MISSION),
    ((), ("participat", "join", "attend"), _PARTICIPATION),
    ((), ("pillar", "focus"), _PILLARS),
    ((), ("contact", "website"), _CONTACT),
]


def static_response(message: str) -> str:
    """Pick a canned reply by keyword match against the user message."""
    lowered = message.lower()
    for required, any_of, reply in RULES:
        if required and not all(k in lowered for k in required):
            continue
        if any_of and not any(k in lowered for k in any_of):
            continue
        return reply
    return _GREETING
