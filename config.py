import os


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///carpark.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # how many spaces the car park is seeded with
    TOTAL_SPACES = int(os.environ.get("CARPARK_TOTAL_SPACES", 20))

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    TOTAL_SPACES = 20
    LOG_LEVEL = "WARNING"
