"""
Langchain Prompt Templates
Defines the itinerary generation prompt and its parameter lookups
"""

from langchain_core.prompts import PromptTemplate

from travelbook.schemas.travel_schemas import AIItineraryRequest, BudgetLevel, GroupType, TravelStyle

# ============================================
# Parameter lookups
# ============================================

BUDGET_TEXT = {
    BudgetLevel.BUDGET: "alacsony (hostel, street food)",
    BudgetLevel.MODERATE: "közepes (3-4* hotel, éttermek)",
    BudgetLevel.PREMIUM: "prémium (4-5* hotel, minőségi programok)",
    BudgetLevel.LUXURY: "luxus (5* hotel, privát sofőr, exkluzív)",
}

STYLE_TEXT = {
    TravelStyle.RELAXED: "nyugodt, pihentető",
    TravelStyle.BALANCED: "egyensúly a programok és pihenés közt",
    TravelStyle.ADVENTUROUS: "pörgős, kalandos, aktív",
    TravelStyle.LUXURY: "kényeztető, exkluzív",
}

GROUP_TEXT = {
    GroupType.SOLO: "egyedül utazó",
    GroupType.COUPLE: "pár",
    GroupType.FAMILY: "család gyerekekkel",
    GroupType.FRIENDS: "baráti társaság",
    GroupType.BUSINESS: "üzleti út",
}

# ============================================
# Itinerary Prompt
# ============================================

ITINERARY_PROMPT = PromptTemplate(
    input_variables=["duration", "destination", "country", "style", "group", "budget", "interests", "extra"],
    template="""
Te egy profi utazásszervező AI vagy.
Készíts egy {duration} napos útitervet ide: {destination} ({country}).

PARAMÉTEREK:
- Stílus: {style}
- Társaság: {group}
- Költségkeret: {budget}
- Érdeklődés: {interests}
{extra}

ELVÁRÁSOK:
1. PÉNZNEM: A költségeket mindig a helyi pénznemben és HUF-ban is becsüld meg.
2. NYELV: Magyar.
3. PROGRAMOK: Legyenek logikusak (földrajzi közelség).
4. NAPOK: Pontosan {duration} napot adj vissza, 1-től sorszámozva.
5. ÉTKEZÉSEK: Minden naphoz pontosan egy reggeli (breakfast), egy ebéd (lunch) és egy vacsora (dinner).
6. VALID JSON: A válaszodnak tökéletesen illeszkednie kell a lenti JSON sémához.

JSON SÉMA:
{{
  "title": "Kreatív cím",
  "summary": "Rövid leírás",
  "days": [
    {{
      "day": 1,
      "title": "Nap címe",
      "description": "Leírás",
      "morning": {{ "activity": "...", "description": "...", "duration": "...", "location": "...", "tips": "..." }},
      "afternoon": {{ "activity": "...", "description": "...", "duration": "...", "location": "...", "cost": "..." }},
      "evening": {{ "activity": "...", "description": "...", "duration": "...", "location": "..." }},
      "accommodation": {{ "name": "...", "type": "...", "priceRange": "..." }},
      "meals": [
        {{ "type": "breakfast", "recommendation": "...", "cuisine": "...", "priceRange": "..." }},
        {{ "type": "lunch", "recommendation": "...", "cuisine": "...", "priceRange": "..." }},
        {{ "type": "dinner", "recommendation": "...", "cuisine": "...", "priceRange": "..." }}
      ]
    }}
  ],
  "estimatedBudget": {{ "min": 0, "max": 0, "currency": "HUF" }},
  "tips": ["Tipp 1", "Tipp 2"],
  "bestTimeToVisit": "..."
}}
"""
)


def build_prompt(request: AIItineraryRequest) -> str:
    """
    Render the itinerary prompt for a request.

    Interests and special requirements go into the prompt verbatim; enum
    values without a description fall back to their raw value.
    """
    extra = f"- Extra kérés: {request.special_requirements}" if request.special_requirements else ""
    return ITINERARY_PROMPT.format(
        duration=request.duration,
        destination=request.destination,
        country=request.country,
        style=STYLE_TEXT.get(request.travel_style, request.travel_style.value),
        group=GROUP_TEXT.get(request.group_type, request.group_type.value),
        budget=BUDGET_TEXT.get(request.budget, request.budget.value),
        interests=", ".join(request.interests),
        extra=extra,
    )
