# Review Insight - AI Review Scoring for Places
# =============================================
# Fetches a place's public reviews, samples them, asks an LLM for a
# factor score and an emotion profile, and stores the result.
#
# ARCHITECTURE LAYERS:
# - Presentation:   FastAPI endpoints and the batch CLI
# - Application:    Use cases and orchestration (no business rules)
# - Domain:         Pure business logic (no external dependencies)
# - Infrastructure: External services (Google Places, LLM, SQLite, Excel)
