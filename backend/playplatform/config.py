import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///playplatform.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Browser clients allowed to talk to the API and the socket (comma separated)
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:4000,http://127.0.0.1:4000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
    # Rows returned by /api/games/<slug>/leaderboard when no limit is given
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '10'))
    # Lifetime of the signed token a client presents when joining a score topic
    PLAYER_TOKEN_MAX_AGE_SEC = int(os.environ.get('PLAYER_TOKEN_MAX_AGE_SEC', '86400'))
