import os

# Must be set before anything imports rendezvous.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-token-secret")
