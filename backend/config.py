import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list; '*' allows any origin
    CORS_ALLOWED_ORIGINS = os.environ.get(
        'CORS_ALLOWED_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000',
    )
    # Phase timers (seconds)
    ASSIGNMENT_DURATION_SEC = int(os.environ.get('ASSIGNMENT_DURATION_SEC', '15'))
    PROFILE_CREATION_DURATION_SEC = int(os.environ.get('PROFILE_CREATION_DURATION_SEC', '90'))
    SABOTAGE_DURATION_SEC = int(os.environ.get('SABOTAGE_DURATION_SEC', '60'))
    CHAT_DURATION_SEC = int(os.environ.get('CHAT_DURATION_SEC', '120'))
    DECISION_DURATION_SEC = int(os.environ.get('DECISION_DURATION_SEC', '30'))
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    TOTAL_ROUNDS = int(os.environ.get('TOTAL_ROUNDS', '3'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    SABOTAGE_LIMIT = int(os.environ.get('SABOTAGE_LIMIT', '3'))
    # Points
    AGREE_POINTS = int(os.environ.get('AGREE_POINTS', '1000'))
    SABOTAGE_POINTS = int(os.environ.get('SABOTAGE_POINTS', '250'))
    VOTE_POINTS = int(os.environ.get('VOTE_POINTS', '200'))
    # Photo search provider (Pexels). Without a key searches return no results.
    PEXELS_API_KEY = os.environ.get('PEXELS_API_KEY')
    IMAGE_SEARCH_URL = os.environ.get('IMAGE_SEARCH_URL', 'https://api.pexels.com/v1/search')
    IMAGE_SEARCH_PAGE_SIZE = int(os.environ.get('IMAGE_SEARCH_PAGE_SIZE', '15'))
    IMAGE_SEARCH_TIMEOUT_SEC = float(os.environ.get('IMAGE_SEARCH_TIMEOUT_SEC', '10'))
    # Optional: heartbeat interval for clock worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
