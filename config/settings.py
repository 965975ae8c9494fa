"""
Runtime settings for SiteCraft, read from the environment.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# LLM endpoint
CLAUDE_API_KEY = os.getenv("CLAUDE_API_KEY")
CLAUDE_API_URL = os.getenv("CLAUDE_API_URL", "https://api.anthropic.com/v1/messages")
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-3-opus-20240229")
CLAUDE_MAX_TOKENS = int(os.getenv("CLAUDE_MAX_TOKENS", "4000"))
ANTHROPIC_VERSION = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
GENERATION_TIMEOUT = int(os.getenv("GENERATION_TIMEOUT", "180"))  # seconds

# Simulated deployment
DEPLOY_DELAY_SECONDS = float(os.getenv("DEPLOY_DELAY_SECONDS", "3"))

# Rate limiting
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "10"))  # requests per window
RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))  # seconds

# Preview rendering
PREVIEW_TIMEOUT = int(os.getenv("PREVIEW_TIMEOUT", "30"))  # seconds

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "sitecraft.log")
