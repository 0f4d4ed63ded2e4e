"""
Travelbook Service
Travel packages, bookings and AI-generated itineraries.

travelbook/
├── main.py        # FastAPI app, lifespan, error handlers
├── config.py      # Settings from the environment
├── context.py     # AppContext wiring of stores, clients and services
├── exceptions.py  # Domain errors with HTTP status codes
├── api/           # Routers: auth, packages, bookings, itineraries, admin
├── interfaces/    # Document store (MongoDB), session store (Redis), JSON codec
├── llm/           # Prompt, provider clients, generator, planner
├── schemas/       # Pydantic models
├── services/      # Domain services and the booking workflow
└── utils/         # Hungarian formatting and small helpers
"""

__version__ = "1.0.0"
