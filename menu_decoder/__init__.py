"""Menu photo analysis service: Gemini extraction + Pexels enrichment."""
