"""companion_stream.config.defaults
=================================

Central place for small, stable default values used across the package and
the CLI. These defaults can be overridden via the external config file,
environment variables or explicit overrides, but provide sensible fallbacks
for local development and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Backends ----
SUPPORTED_BACKENDS = ("ollama", "openai")

OLLAMA_DEFAULT_MODEL = "llama3.2"
OLLAMA_DEFAULT_BASE_URL = "http://localhost:11434"
OLLAMA_CHAT_PATH = "/api/chat"
OLLAMA_GENERATE_PATH = "/api/generate"
OLLAMA_MODELS_PATH = "/api/tags"

OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_CHAT_PATH = "/v1/chat/completions"
OPENAI_GENERATE_PATH = "/v1/completions"
OPENAI_MODELS_PATH = "/v1/models"

# Backend -> (chat, generate, model listing) paths below base_url.
BACKEND_PATHS = {
    "ollama": (OLLAMA_CHAT_PATH, OLLAMA_GENERATE_PATH, OLLAMA_MODELS_PATH),
    "openai": (OPENAI_CHAT_PATH, OPENAI_GENERATE_PATH, OPENAI_MODELS_PATH),
}

# ---- Exchange ----
# Seconds to wait for each read of the response body.
DEFAULT_HTTP_TIMEOUT = 10.0
# Bytes requested per read of the response body.
DEFAULT_BUFFER_SIZE = 1024
# Most recent conversation messages sent with each turn (system prompt excluded).
DEFAULT_MAX_MESSAGES = 20
# Longest user input accepted by the CLI, in characters.
DEFAULT_MAX_INPUT_LENGTH = 512
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

# ---- Terminal ----
DEFAULT_TERM_COLOR = "green"
# Used when a configured colour name is not recognized.
FALLBACK_TERM_COLOR = "bright_magenta"

TERM_COLORS = {
    "black": "\033[30m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bright_white": "\033[97m",
}

# Waiting indicator: prompt text, cycled characters and frame interval.
SPINNER_PROMPT = "*AI is thinking*>"
SPINNER_FRAMES = "~!.-@"
SPINNER_INTERVAL_SECONDS = 0.1

# ---- CLI ----
CLI_DEFAULT_BACKEND = "ollama"
