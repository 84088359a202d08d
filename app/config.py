from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Persistence
    save_path: str = "goals.txt"  # Default file for save/load when the caller gives none
    save_dir: str = "."  # HTTP-supplied save paths resolve under this directory
    replay_notifications_on_load: bool = False  # True = rebuild Player via add_points (legacy)

    # Scoring
    points_per_level: int = 1000  # change for more/less grind

    # Engine bootstrap
    seed_demo_goals: bool = True  # Start the process-wide engine with the three demo goals

    # Auth
    api_key: str | None = None  # QUEST_API_KEY; unset = endpoints are open

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "QUEST_", "extra": "ignore"}


settings = Settings()
