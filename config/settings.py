from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "Energy Market Gateway"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"

    # Browser frontend origin(s) allowed by CORS
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Ledger REST gateway in front of the peer network
    LEDGER_GATEWAY_URL: str = "http://localhost:7080"
    LEDGER_CHANNEL: str = "testchannel"
    LEDGER_CHAINCODE: str = "property"

    # Identity used for every ledger call; looked up in the wallet per call
    LEDGER_IDENTITY: str = "appUser"
    WALLET_PATH: str = "wallet"

    LEDGER_CONNECT_TIMEOUT_SECONDS: float = 5.0
    LEDGER_CALL_TIMEOUT_SECONDS: float = 30.0

    # Live order book push channel
    ORDER_BOOK_PUSH_INTERVAL_SECONDS: float = 5.0
    ORDER_BOOK_QUEUE_SIZE: int = 8

    TRADE_TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"


settings = Settings()
