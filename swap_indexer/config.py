from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from solders.pubkey import Pubkey

RAYDIUM_AMM_V4_PROGRAM_ID = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="SWI_", extra="allow")

    # Solana endpoints
    sol_ws_url: str = "wss://api.mainnet-beta.solana.com"
    sol_rpc_url: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"

    # Program whose instructions are decoded
    program_id: str = RAYDIUM_AMM_V4_PROGRAM_ID

    # Stop after this many slots past the first observed one
    slot_window: int = 100

    # Transaction fetch
    fetch_timeout_sec: float = 30.0
    fetch_retries: int = 2
    fetch_backoff_sec: float = 0.5

    # Persistence: 'jsonl' | 'database'
    sink: str = "jsonl"
    events_path: str = "swap_events.json"
    database_url: str = "sqlite+pysqlite:///swap_events.db"

    # Logging
    log_level: str = "INFO"

    @field_validator("fetch_timeout_sec", "fetch_retries", "fetch_backoff_sec", "slot_window", mode="before")
    @classmethod
    def _empty_str_to_default(cls, v, info):
        if v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("program_id")
    @classmethod
    def _valid_pubkey(cls, v: str) -> str:
        try:
            Pubkey.from_string(v)
        except ValueError as e:
            raise ValueError(f"program_id is not a valid base58 pubkey: {v!r}") from e
        return v

    @field_validator("slot_window")
    @classmethod
    def _positive_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("slot_window must be positive")
        return v

    @field_validator("sink")
    @classmethod
    def _known_sink(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("jsonl", "database"):
            raise ValueError(f"unknown sink {v!r}; expected 'jsonl' or 'database'")
        return v

    def program_pubkey(self) -> Pubkey:
        return Pubkey.from_string(self.program_id)
