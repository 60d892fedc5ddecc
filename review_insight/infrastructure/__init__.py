# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - places/: Google Places API client (place details, search)
# - llm/: OpenRouter text generation and review analysis prompts
# - persistence/: SQLite store and review cache
# - importer/: Excel/CSV place lists for batch runs
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
