from pathlib import Path


# Repository root (src/platform/constant -> root)
BASE_DIR = Path(__file__).resolve().parents[3]

LOG_DIR = BASE_DIR / 'logs'

# Local development database; production points DATABASE_URL at PostgreSQL
DEFAULT_SQLITE_PATH = BASE_DIR / 'coach_booking.db'

ENV_FILE = BASE_DIR / '.env'
ENV_EXAMPLE_FILE = BASE_DIR / '.env.example'
