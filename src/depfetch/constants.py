APP_NAME = "depfetch"

UNKNOWN_COMMIT_SHA = "unknown"
