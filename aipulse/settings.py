import os
from dotenv import load_dotenv

# Carrega variáveis do .env
load_dotenv(override=True)

# Diretório de trabalho do agente (contém data/ e config/)
ROOT_DIR = os.path.abspath(os.getenv("AIPULSE_ROOT", os.getcwd()))

DATA_DIR = os.path.join(ROOT_DIR, "data")
CONFIG_DIR = os.path.join(ROOT_DIR, "config")

SNAPSHOT_PATH = os.path.join(DATA_DIR, "current.json")
SESSION_PATH = os.path.join(DATA_DIR, "session.json")
WHITELIST_PATH = os.path.join(CONFIG_DIR, "whitelist.json")

# relative to ROOT_DIR, as written in the agent prompt
SNAPSHOT_REL_PATH = "data/current.json"
WHITELIST_REL_PATH = "config/whitelist.json"

AGENT_MODEL = os.getenv("AGENT_MODEL", "claude-haiku-4-5-20251001")
ALLOWED_TOOLS = ["WebFetch", "Read", "Write"]

COLLECT_INTERVAL_MINUTES = int(os.getenv("COLLECT_INTERVAL_MINUTES", "360"))

# Se vazio, o reader busca o snapshot relativo à própria URL base
SNAPSHOT_URL = os.getenv("SNAPSHOT_URL") or None
SNAPSHOT_TIMEOUT = 10

DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Asia/Tokyo")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
