"""Claude API integration for grocery list and inventory cleanup.

Two single-shot calls: reorganizing a free-text grocery list by category, and
normalizing raw ingredient lines into structured inventory records.
"""

import json
import logging
import re

from anthropic import Anthropic

from .config import get_settings

logger = logging.getLogger(__name__)

# Initialize Anthropic client
settings = get_settings()
client = Anthropic(api_key=settings.anthropic_api_key)

GROCERY_SYSTEM_PROMPT = (
    "You are a helpful assistant that organizes grocery lists. "
    "Keep the output clean and well-formatted."
)

GROCERY_PROMPT = """Please organize this grocery list by category (e.g., Produce, Meat, Dairy, etc.) and combine similar items.
Also, standardize measurements and remove duplicates.
Format the response as a clean, organized list with category headers.
Respond with the list only.

Ingredients:
{ingredients}"""

INVENTORY_SYSTEM_PROMPT = (
    "You are a helpful assistant that processes and organizes ingredients. "
    "You respond with JSON only."
)

INVENTORY_PROMPT = """Please process this list of ingredients and:
1. Remove duplicates
2. Combine similar items
3. Standardize measurements
4. Categorize items (e.g., Produce, Meat, Dairy, etc.)

Ingredients:
{ingredients}

Return a JSON array like this, and nothing else:
[
  {{"name": "item name", "quantity": 1, "unit": "standardized unit", "category": "category name"}}
]"""


class GroceryListOrganizerError(Exception):
    """Raised when the language model call fails or returns unusable output."""

    pass


# =============================================================================
# Response Helpers
# =============================================================================


def _extract_text_from_response(response) -> str:
    """Extract text content from Claude response."""
    for block in response.content:
        if hasattr(block, "text"):
            return block.text
    block_types = [type(b).__name__ for b in response.content]
    logger.warning(f"No text in response, block types: {block_types}")
    return ""


def _complete(system: str, prompt: str, max_tokens: int = 2048) -> str:
    try:
        response = client.messages.create(
            model=settings.anthropic_model,
            max_tokens=max_tokens,
            timeout=60.0,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
    except Exception as e:
        logger.exception(f"Claude API error: {e}")
        raise GroceryListOrganizerError("Language model request failed") from e

    logger.debug(
        f"Claude usage: {response.usage.input_tokens} in, "
        f"{response.usage.output_tokens} out"
    )
    return _extract_text_from_response(response).strip()


def parse_json_array(text: str) -> list:
    """Parse a JSON array out of a model reply, tolerating code fences."""
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fenced:
        text = fenced.group(1)
    text = text.strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("["), text.rfind("]")
        if start == -1 or end <= start:
            raise GroceryListOrganizerError("Model reply contained no JSON array")
        try:
            data = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise GroceryListOrganizerError("Model reply was not valid JSON") from e

    # {"items": [...]} is also accepted
    if isinstance(data, dict):
        data = next((v for v in data.values() if isinstance(v, list)), None)
    if not isinstance(data, list):
        raise GroceryListOrganizerError("Model reply was not a JSON array")
    return data


# =============================================================================
# Public API
# =============================================================================


def organize_grocery_list(lines: list[str]) -> str:
    """Merge, deduplicate and categorize grocery list lines.

    Args:
        lines: Existing list lines followed by newly added ingredient lines.

    Returns:
        The organized list as text.
    """
    prompt = GROCERY_PROMPT.format(ingredients="\n".join(lines))
    organized = _complete(GROCERY_SYSTEM_PROMPT, prompt)
    if not organized:
        raise GroceryListOrganizerError("Model returned an empty grocery list")
    logger.info(f"Organized grocery list from {len(lines)} lines")
    return organized


def process_inventory_ingredients(ingredients: list[str]) -> list[dict]:
    """Normalize raw ingredient lines into inventory records.

    Returns:
        List of dicts with name, quantity, unit and category. Entries without
        a name are dropped; a non-numeric quantity becomes None.
    """
    prompt = INVENTORY_PROMPT.format(ingredients="\n".join(ingredients))
    raw_items = parse_json_array(_complete(INVENTORY_SYSTEM_PROMPT, prompt))

    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not str(raw.get("name") or "").strip():
            continue
        quantity = raw.get("quantity")
        try:
            quantity = float(quantity) if quantity is not None else None
        except (ValueError, TypeError):
            quantity = None
        items.append({
            "name": str(raw["name"]).strip(),
            "quantity": quantity,
            "unit": (str(raw.get("unit") or "").strip() or None),
            "category": (str(raw.get("category") or "").strip() or None),
        })

    logger.info(f"Processed {len(ingredients)} ingredient lines into {len(items)} items")
    return items
