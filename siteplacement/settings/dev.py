from .base import *
from pathlib import Path
from dotenv import load_dotenv

# Load .env.dev into process env for local development only.
load_dotenv(Path(BASE_DIR) / ".env.dev")


DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver"]
