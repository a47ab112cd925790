"""
Provider defaults

Central location for per-family endpoints, default models, request defaults
and the environment variable names the resolver reads.
"""

# Default endpoints per provider family
DEFAULT_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "claude": "https://api.anthropic.com",
    "gemini": "https://generativelanguage.googleapis.com",
    "xai": "https://api.x.ai/v1",
    "ollama": "http://localhost:11434",
}

# Default models per provider family
DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "claude": "claude-3-5-sonnet-20241022",
    "gemini": "gemini-2.0-flash-exp",
    "xai": "grok-2-1212",
    "ollama": "llama3.3",
}

# Environment variables per provider family: (api key, base url, default model)
PROVIDER_ENV_VARS = {
    "openai": ("OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_DEFAULT_MODEL"),
    "claude": ("CLAUDE_API_KEY", "CLAUDE_BASE_URL", "CLAUDE_DEFAULT_MODEL"),
    "gemini": ("GEMINI_API_KEY", "GEMINI_BASE_URL", "GEMINI_DEFAULT_MODEL"),
    "xai": ("XAI_API_KEY", "XAI_BASE_URL", "XAI_DEFAULT_MODEL"),
    "ollama": (None, "OLLAMA_BASE_URL", "OLLAMA_DEFAULT_MODEL"),
}

# Secondary credential names accepted when the primary one is unset
FALLBACK_API_KEY_ENV_VARS = {
    "claude": ("ANTHROPIC_API_KEY",),
}

# Providers that run without a credential
KEYLESS_PROVIDERS = frozenset({"ollama"})

# Credential values that front-ends commonly leak when a field is unset
INVALID_API_KEY_VALUES = frozenset({"undefined", "null"})

# Request defaults
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000
DEFAULT_RESPONSES_MAX_OUTPUT_TOKENS = 100000

# Claude extended thinking budgets
CLAUDE_DEFAULT_THINKING_BUDGET = 4096
CLAUDE_MIN_THINKING_BUDGET = 1024

# Output bounds beyond which a reasoning request is flagged
OPENAI_MAX_REASONING_TOKENS = 100000
CLAUDE_MAX_OUTPUT_TOKENS = 200000
GEMINI_MAX_OUTPUT_TOKENS = 1000000
GROK_MAX_OUTPUT_TOKENS = 131072

# Smallest context window that leaves room for a local model's reasoning
OLLAMA_MIN_REASONING_CONTEXT = 8192

# Any other Gemini finish reason terminates the candidate
GEMINI_UNSPECIFIED_FINISH_REASON = "FINISH_REASON_UNSPECIFIED"

# Upstream error codes that name a single rejected request field
UNSUPPORTED_PARAMETER_CODES = frozenset({"unsupported_value", "unsupported_parameter"})

# Environment variables for model keyword overrides
MODEL_KEYWORDS_JSON_ENV_VAR = "CHATBRIDGE_MODEL_KEYWORDS_JSON"
MODEL_KEYWORDS_FILE_ENV_VAR = "CHATBRIDGE_MODEL_KEYWORDS_FILE"
