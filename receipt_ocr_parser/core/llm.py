"""
LLM-based refinement supporting multiple providers (OpenAI, Anthropic, Azure OpenAI).

The LLM re-derives the same fields as the local parser with broader world
knowledge. Callers keep the local result as a fallback when this fails.
"""

import json
from enum import Enum
from typing import Dict

from .config import RefinementConfig
from .errors import RefinementError
from .models import ReceiptData


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    AZURE_OPENAI = "azure-openai"


# Default models for each provider
DEFAULT_MODELS = {
    LLMProvider.ANTHROPIC: "claude-3-5-haiku-20241022",
    LLMProvider.OPENAI: "gpt-4o",
    LLMProvider.AZURE_OPENAI: "gpt-4o",
}

SYSTEM_PROMPT = ("You are a precise receipt data extraction expert. "
                 "Always return clean, valid JSON only.")

PROMPT_TEMPLATE = """You are an expert receipt OCR parser. The following text comes from very noisy mobile OCR (random line breaks, missing spaces, character errors like 0/O, S/5, etc.). Your task is to extract exactly these fields and return ONLY a valid JSON object.

Extract:
1. Vendor/Store name - the business name at the top or most prominent
2. Total amount - the final amount due/paid (look for words like Total, Amount Due, Balance Due, Paid, Cash, Card, SUBTOTAL + TAX if separate)
3. Tax/VAT amount - look for Tax, VAT, GST, HST, Sales Tax, MWST, IVA, TVA, BTW, etc.
4. Date - any recognizable date, prefer the transaction/purchase date
5. Currency - the ISO 4217 currency code (e.g. USD, GBP, EUR, CAD)

Rules:
- Currency: look for symbols ($, EUR, GBP signs) or codes. If none is found, infer it from the address, city, country or phone number format.
- Date format: $ / USD / US-style English -> MM/DD/YYYY; other currencies or languages -> DD/MM/YYYY. If ambiguous, prefer the format that makes the date valid.
- Clean numbers: remove letters stuck to numbers (e.g. "12O.50" -> 120.50). In EUR/GBP contexts a comma is the decimal separator; with $ it separates thousands.
- If total is not explicitly labeled, use the largest amount near the bottom.
- Return numbers as plain decimals (e.g. 42.90), never with currency symbols or thousands separators.
- If uncertain or missing, use null.

Return ONLY this JSON (no trailing commas, no comments, no explanations):
{{
  "vendor": "string or null",
  "total": number or null,
  "tax": number or null,
  "date": "MM/DD/YYYY" or "DD/MM/YYYY" or null,
  "currency": "ISO_CODE" or null
}}

OCR Text (very messy - tolerate noise):
{ocr_text}"""

# Truncate to keep requests small; receipts rarely need more
MAX_PROMPT_TEXT = 4000

# Lazy import clients, keyed by (provider, api_key)
_clients = {}


def _get_anthropic_client(config: RefinementConfig):
    """Get or create Anthropic client (lazy initialization)."""
    key = ("anthropic", config.api_key)
    if key not in _clients:
        import anthropic
        _clients[key] = anthropic.Anthropic(api_key=config.api_key)
    return _clients[key]


def _get_openai_client(config: RefinementConfig):
    """Get or create OpenAI client (lazy initialization)."""
    key = ("openai", config.api_key)
    if key not in _clients:
        import openai
        _clients[key] = openai.OpenAI(api_key=config.api_key)
    return _clients[key]


def _get_azure_openai_client(config: RefinementConfig):
    """Get or create Azure OpenAI client (lazy initialization)."""
    key = ("azure", config.api_key, config.azure_endpoint)
    if key not in _clients:
        import openai
        _clients[key] = openai.AzureOpenAI(
            api_key=config.api_key,
            api_version=config.azure_api_version,
            azure_endpoint=config.azure_endpoint,
        )
    return _clients[key]


def _call_anthropic(prompt: str, model: str, config: RefinementConfig) -> str:
    """Call Anthropic API."""
    client = _get_anthropic_client(config)
    response = client.messages.create(
        model=model,
        max_tokens=300,
        temperature=0.0,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": prompt}]
    )
    return response.content[0].text.strip()


def _call_openai_compatible(client, prompt: str, model: str) -> str:
    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        max_tokens=300,
        temperature=0.0,
        top_p=1,
        response_format={"type": "json_object"}
    )
    content = response.choices[0].message.content
    if not content:
        raise RefinementError("No content in response")
    return content.strip()


def _call_openai(prompt: str, model: str, config: RefinementConfig) -> str:
    """Call OpenAI API."""
    return _call_openai_compatible(_get_openai_client(config), prompt, model)


def _call_azure_openai(prompt: str, model: str, config: RefinementConfig) -> str:
    """Call Azure OpenAI API."""
    return _call_openai_compatible(_get_azure_openai_client(config), prompt, model)


def call_llm(prompt: str, config: RefinementConfig) -> str:
    """Send a prompt to the configured provider and return the raw reply text."""
    model = config.model or DEFAULT_MODELS[LLMProvider(config.provider)]
    if config.provider == LLMProvider.ANTHROPIC:
        return _call_anthropic(prompt, model, config)
    if config.provider == LLMProvider.OPENAI:
        return _call_openai(prompt, model, config)
    if config.provider == LLMProvider.AZURE_OPENAI:
        return _call_azure_openai(prompt, model, config)
    raise RefinementError(f"Unsupported LLM provider: {config.provider}")


def parse_llm_json(response_text: str) -> Dict:
    """
    Parse the JSON object in an LLM reply.

    Markdown code fences around the object are tolerated.
    """
    text = response_text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        result = json.loads(text)
    except json.JSONDecodeError as e:
        raise RefinementError(f"Failed to parse JSON response: {e}") from e
    if not isinstance(result, dict):
        raise RefinementError("Failed to parse JSON response: expected an object")
    return result


def refine_receipt(ocr_text: str, config: RefinementConfig) -> ReceiptData:
    """
    Extract vendor, total, tax, date and currency from receipt text using an LLM.

    Args:
        ocr_text: Full OCR text from receipt
        config: Provider, model and credentials

    Returns:
        ReceiptData built from the LLM reply, carrying the original text

    Raises:
        RefinementError: if refinement is not configured, the API call fails
            or the reply is not a JSON object
    """
    if not config.is_configured:
        raise RefinementError("LLM refinement is not configured")

    prompt = PROMPT_TEMPLATE.format(ocr_text=ocr_text[:MAX_PROMPT_TEXT])
    try:
        response_text = call_llm(prompt, config)
    except RefinementError:
        raise
    except Exception as e:
        raise RefinementError(f"LLM refinement failed: {e}") from e

    return ReceiptData.from_refinement(parse_llm_json(response_text), raw_text=ocr_text)
