import os

SETTINGS_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env=None) -> str:
    # APP_ENV selects the settings module; anything unknown runs as development
    env = (env or os.getenv("APP_ENV", "development")).strip().lower()
    return SETTINGS_MODULES.get(env, "config.development")
