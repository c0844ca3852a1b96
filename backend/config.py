import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'typing_game.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Seconds allowed per word, by level
    EASY_SECONDS = int(os.environ.get('EASY_SECONDS', '5'))
    NORMAL_SECONDS = int(os.environ.get('NORMAL_SECONDS', '3'))
    HARD_SECONDS = int(os.environ.get('HARD_SECONDS', '2'))
    # Local history slot (one JSON file per directory)
    LOCAL_HISTORY_DIR = os.environ.get('LOCAL_HISTORY_DIR') or os.path.join(BASE_DIR, 'history')
    LOCAL_HISTORY_LIMIT = int(os.environ.get('LOCAL_HISTORY_LIMIT', '50'))
    # Retrieve limits
    SCORES_DEFAULT_LIMIT = int(os.environ.get('SCORES_DEFAULT_LIMIT', '50'))
    SCORES_MAX_LIMIT = int(os.environ.get('SCORES_MAX_LIMIT', '1000'))
    # Optional: forward finished rounds to a score service. Empty disables.
    SCORE_SERVICE_URL = os.environ.get('SCORE_SERVICE_URL', '')
    REMOTE_TIMEOUT_SEC = float(os.environ.get('REMOTE_TIMEOUT_SEC', '5'))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')