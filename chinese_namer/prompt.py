from .models import NameCandidate


def build_prompt(candidate: NameCandidate) -> str:
    """Render the single user message sent to the model. Pure and deterministic."""
    return f"""Create 3 Chinese names for the English name "{candidate}".

REQUIREMENTS:
1. Each name has 2-3 Chinese characters
2. Each name carries an auspicious, positive meaning
3. The name sounds harmonious and echoes the pronunciation of "{candidate}" where possible
4. The name is suitable for a foreigner to use in daily life

Respond strictly in this JSON format:
{{
  "names": [
    {{
      "chineseName": "Chinese characters",
      "pinyin": "pinyin with tone marks",
      "chineseMeaning": "meaning explained in Chinese",
      "englishMeaning": "meaning explained in English"
    }}
  ]
}}

Return only the JSON object. Do not add any explanation, markdown or other text."""
