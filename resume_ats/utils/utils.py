import os
import json
from dotenv import load_dotenv
import requests

load_dotenv()

OLLAMA = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
LLM_MODEL = os.getenv("LLM_MODEL", "llama3.1:8b")
OLLAMA_TIMEOUT = float(os.getenv("OLLAMA_TIMEOUT", "120"))


def ollama_generate(prompt: str, model: str = None, temperature: float = 0.2, json_mode: bool = False) -> str:
    model = model or LLM_MODEL
    url = f"{OLLAMA}/api/generate"
    payload = {
        "model": model,
        "prompt": prompt,
        "options": {"temperature": temperature},
        "stream": False  # one JSON body, not NDJSON chunks
    }
    if json_mode:
        payload["format"] = "json"
    resp = requests.post(url, json=payload, timeout=OLLAMA_TIMEOUT)
    resp.raise_for_status()
    return resp.json().get("response", "") or ""


def safe_json(s: str, fallback: dict):
    try:
        # heuristics to find JSON inside
        start = s.find("{")
        end = s.rfind("}")
        if start >= 0 and end >= 0:
            return json.loads(s[start:end+1])
        return fallback
    except (ValueError, AttributeError):
        return fallback


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
