import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).parent / "data" / "default_game_config.json"

config_path = Path(os.getenv("GAME_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))
config_overrides_path = os.getenv("GAME_CONFIG_OVERRIDES_PATH")
token_data_path = os.getenv("TOKEN_DATA_PATH")
log_level = os.getenv("LOG_LEVEL", "INFO").upper()

if __name__ == "__main__":
    print(config_path, config_overrides_path, token_data_path, log_level)
