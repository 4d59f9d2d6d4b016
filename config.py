import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cafes.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Who can log a visit
VISITORS = [v.strip() for v in os.getenv("CAFE_VISITORS", "Eleanor,Hannah,Anna").split(",") if v.strip()]

# Stats
TOP_CAFES_LIMIT = 10
TOP_CAFES_MIN_VISITS = 2

# Geo
EARTH_RADIUS_KM = 6371.0
NEAREST_LIMIT = 10

# Autocomplete (fuzzywuzzy scores are 0-100)
SEARCH_LIMIT = 10
SEARCH_THRESHOLD = 70
