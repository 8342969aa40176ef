"""Prompts for the Gemini extraction call."""

MENU_EXTRACTION_PROMPT = """
Analyze this restaurant menu image and extract all dishes. For each dish, provide:
1. Dish name
2. Price (if visible)
3. A detailed description (2-3 sentences explaining what it is)
4. Main ingredients (list 4-7 key ingredients)

Return the response as a valid JSON array with this exact structure:

[
  {
    "name": "Dish Name",
    "price": "$XX.XX" or null,
    "description": "Detailed description of the dish",
    "ingredients": ["ingredient1", "ingredient2", "ingredient3", "ingredient4"]
  }
]

⚠️ Return ONLY the JSON array.
⚠️ No text, no markdown, no code fences.
"""
