"""Module-level constants for the vault tagger MCP server."""

from pathlib import Path

# Configuration
CONFIG_PATH = Path(__file__).parent.parent / "tagger.yaml"
CONFIG_ENV_VAR = "VAULT_TAGGER_CONFIG"

# Tag generation
MAX_ATTEMPTS = 2
MAX_INPUT_CHARS = 4_000
RETRY_DELAY_SECONDS = 1.0
REQUEST_TIMEOUT_SECONDS = 30.0
AI_TEMPERATURE = 0.3

# Frontmatter
FRONTMATTER_DELIMITER = "---"

# Defaults mirrored into TaggerSettings
DEFAULT_MAX_TAGS = 5
DEFAULT_MAX_WORDS_PER_TAG = 2
DEFAULT_TEMPLATE = "---\ntitle: {{title}}\ndate: {{date}}\ntags:\n{{tags}}\n---"
DEFAULT_PROMPT = (
    "Generate {{max_tags}} relevant tags for this text. "
    "Each tag should have no more than {{max_words}} words. "
    "Return only the tags as a comma-separated list, "
    "without explanations or additional text."
)
SYSTEM_PROMPT = (
    "You are a helpful assistant that generates tags for documents. "
    "Return only the tags as requested, no other text."
)

# Provider endpoints
OPENAI_URL = "https://api.openai.com/v1/chat/completions"
MISTRAL_URL = "https://api.mistral.ai/v1/chat/completions"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models"
OLLAMA_HOST = "http://localhost:11434"

# Logging
LOG_LEVEL = "INFO"
