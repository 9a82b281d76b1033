import json
import os
import pathlib
from dataclasses import dataclass, field


@dataclass
class DatabaseConfig:
    host: str = "localhost"
    port: int = 5432
    name: str = "crafting"
    user: str = "crafting"
    password: str = ""
    schema: str = "public"
    min_pool_size: int = 2
    max_pool_size: int = 10

    @property
    def conninfo(self) -> str:
        return (
            f"host={self.host} port={self.port} "
            f"dbname={self.name} user={self.user} password={self.password} "
            f"options=-csearch_path={self.schema}"
        )


@dataclass
class AppConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        db_data = data.get("database", {})
        return cls(
            database=DatabaseConfig(**db_data),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    @classmethod
    def load(cls) -> "AppConfig":
        config_path = os.environ.get("CONFIG_FILE", "/run/secrets/config.json")
        path = pathlib.Path(config_path)

        if path.exists():
            with open(path) as f:
                data = json.load(f)
            return cls.from_dict(data)

        print(f"Warning: Config file not found at {config_path}")
        return cls()
